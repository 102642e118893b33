"""Cursor encoding and decoding for pagination.

Cursors are opaque strings that encode the position of one row under one
``Order``: the row's value for every sort key, in order. The next query
feeds those values into a boundary predicate to seek past the row.

The cursor format is:
1. JSON array with one entry per sort key
2. Base64 URL-safe encoded for use in URLs and query parameters

Values JSON cannot represent losslessly are tagged:

    ["B", {"$t": "datetime", "v": "2021-03-01T00:00:00+00:00"}, 2]

Because the array is real JSON, no value can corrupt its neighbours: a
string containing ``|``, ``,``, ``"`` or ``]`` is escaped by the JSON
encoder rather than split on.
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from keyset_pagination.core.exceptions import MalformedCursorError

if TYPE_CHECKING:
    from collections.abc import Callable

    from keyset_pagination.core.pagination.ordering import Order

TAG = "$t"

_DECODERS: dict[str, Callable[[Any], Any]] = {
    "datetime": datetime.fromisoformat,
    "date": date.fromisoformat,
    "time": time.fromisoformat,
    "decimal": Decimal,
    "uuid": UUID,
    "bytes": lambda value: base64.b64decode(value, validate=True),
    "json": lambda value: value,
}


class CursorCodec:
    """Encode and decode pagination cursors.

    Usage:
        # Encoding a raw result row
        cursor = CursorCodec.encode({"f_title": "b", "f_id": 2}, order)

        # Decoding back to sort key values
        CursorCodec.decode(cursor, order)  # ["b", 2]
    """

    @staticmethod
    def encode(row: Mapping[str, Any], order: Order) -> str:
        """Encode the position of ``row`` under ``order``.

        Args:
            row: Raw result row keyed by sort key label
            order: Canonical order of the paginator

        Returns:
            URL-safe base64 encoded string
        """
        values = [CursorCodec.serialize_value(row.get(sort_key.label)) for sort_key in order]
        return CursorCodec.encode_values(values)

    @staticmethod
    def encode_values(values: list[Any]) -> str:
        """Encode already-serialized values into a token."""
        json_str = json.dumps(values, separators=(",", ":"))
        return base64.urlsafe_b64encode(json_str.encode()).decode()

    @staticmethod
    def decode(cursor: str, order: Order | None = None) -> list[Any]:
        """Decode a cursor string to sort key values.

        Args:
            cursor: URL-safe base64 encoded cursor string
            order: When given, the number of values must match its length

        Returns:
            One value per sort key, with tagged values restored

        Raises:
            MalformedCursorError: If cursor is invalid, corrupted or was
                produced for an order of a different length
        """
        if not isinstance(cursor, str) or not cursor:
            raise MalformedCursorError(str(cursor), "cursor must be a non-empty string")

        try:
            json_str = base64.urlsafe_b64decode(cursor.encode("ascii")).decode()
            payload = json.loads(json_str)
        except (ValueError, binascii.Error) as e:
            raise MalformedCursorError(cursor, str(e)) from e

        if not isinstance(payload, list):
            raise MalformedCursorError(cursor, "payload is not an array")
        if order is not None and len(payload) != len(order):
            raise MalformedCursorError(
                cursor,
                f"expected {len(order)} values, found {len(payload)}",
            )

        try:
            return [CursorCodec.deserialize_value(value) for value in payload]
        except (KeyError, TypeError, ValueError, ArithmeticError) as e:
            raise MalformedCursorError(cursor, f"invalid value: {e}") from e

    @staticmethod
    def serialize_value(value: Any) -> Any:
        """Convert a column value to a JSON-compatible, type-preserving form.

        Handles datetime, date, time, Decimal, UUID and bytes by tagging them.
        Dicts and lists (JSON columns) are tagged too, so a stored object can
        never be mistaken for a tag.
        """
        # datetime is a date subclass, check it first
        if isinstance(value, datetime):
            return {TAG: "datetime", "v": value.isoformat()}
        if isinstance(value, date):
            return {TAG: "date", "v": value.isoformat()}
        if isinstance(value, time):
            return {TAG: "time", "v": value.isoformat()}
        if isinstance(value, Decimal):
            return {TAG: "decimal", "v": str(value)}
        if isinstance(value, UUID):
            return {TAG: "uuid", "v": str(value)}
        if isinstance(value, bytes | bytearray | memoryview):
            return {TAG: "bytes", "v": base64.b64encode(bytes(value)).decode()}
        if isinstance(value, dict | list | tuple):
            return {TAG: "json", "v": value}
        return value

    @staticmethod
    def deserialize_value(value: Any) -> Any:
        """Inverse of ``serialize_value``."""
        if isinstance(value, dict):
            return _DECODERS[value[TAG]](value["v"])
        return value


__all__ = ["CursorCodec"]
