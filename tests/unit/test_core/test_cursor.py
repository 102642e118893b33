"""Unit tests for cursor encoding and decoding."""
from __future__ import annotations

import base64
import json
from datetime import UTC, date, datetime, time
from decimal import Decimal
from uuid import UUID

import pytest
from sqlalchemy import column

from keyset_pagination.core.exceptions import MalformedCursorError
from keyset_pagination.core.pagination.cursor import CursorCodec
from keyset_pagination.core.pagination.ordering import (
    Direction,
    Order,
    PhysicalColumn,
    SortKey,
)


def make_order(*names: str) -> Order:
    return Order(
        tuple(SortKey(PhysicalColumn(f"t.{name}", column(name)), Direction.ASC) for name in names)
    )


@pytest.mark.unit
class TestCursorCodec:
    """Tests for CursorCodec encode/decode."""

    def test_encode_reads_labels_in_order(self):
        """Values are taken by sort key label, in sort key order."""
        order = make_order("title", "id")

        encoded = CursorCodec.encode({"t_id": 7, "t_title": "b"}, order)

        decoded_json = base64.urlsafe_b64decode(encoded.encode()).decode()
        assert json.loads(decoded_json) == ["b", 7]

    def test_missing_value_encodes_as_null(self):
        order = make_order("title", "id")

        encoded = CursorCodec.encode({"t_id": 7}, order)

        assert CursorCodec.decode(encoded, order) == [None, 7]

    @pytest.mark.parametrize(
        "value",
        [
            "foo|bar",
            'quote " and, comma ] bracket',
            "",
            0,
            -1.5,
            True,
            None,
            datetime(2021, 3, 1, 12, 30, tzinfo=UTC),
            datetime(2021, 3, 1),
            date(2021, 3, 1),
            time(8, 15),
            Decimal("10.50"),
            UUID("12345678-1234-5678-1234-567812345678"),
            b"\x00\xffbinary",
            {"$t": "datetime", "v": "not a tag"},
            [1, "two"],
        ],
    )
    def test_roundtrip_preserves_value_and_type(self, value):
        order = make_order("value")

        decoded = CursorCodec.decode(CursorCodec.encode({"t_value": value}, order), order)

        assert decoded == [value]
        assert type(decoded[0]) is type(value)

    def test_cursor_is_url_safe(self):
        order = make_order("value")

        encoded = CursorCodec.encode({"t_value": "???>>>~~~" * 5}, order)

        assert "+" not in encoded
        assert "/" not in encoded

    def test_decode_without_order_skips_length_check(self):
        cursor = CursorCodec.encode_values(["a", 1, 2])

        assert CursorCodec.decode(cursor) == ["a", 1, 2]


@pytest.mark.unit
class TestMalformedCursors:
    """Every decoding failure is reported as MalformedCursorError."""

    @pytest.mark.parametrize(
        "cursor",
        [
            "",
            "!!!not-base64!!!",
            base64.urlsafe_b64encode(b"not json").decode(),
            base64.urlsafe_b64encode(b'{"v": 1}').decode(),
            CursorCodec.encode_values([{"$t": "unknown", "v": 1}]),
            CursorCodec.encode_values([{"$t": "datetime", "v": "yesterday"}]),
            CursorCodec.encode_values([{"no": "tag"}]),
        ],
    )
    def test_invalid_cursor(self, cursor):
        with pytest.raises(MalformedCursorError) as exc_info:
            CursorCodec.decode(cursor)

        assert exc_info.value.cursor == cursor

    def test_non_string_cursor(self):
        with pytest.raises(MalformedCursorError):
            CursorCodec.decode(None)  # type: ignore[arg-type]

    def test_length_mismatch(self):
        cursor = CursorCodec.encode_values(["a", 1])

        with pytest.raises(MalformedCursorError, match="expected 3 values, found 2"):
            CursorCodec.decode(cursor, make_order("a", "b", "id"))

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            CursorCodec.decode("")
