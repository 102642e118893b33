"""Boundary predicates for keyset pagination.

Instead of OFFSET, a page is selected with a WHERE clause that keeps only
rows strictly after (or before) the cursor position under the paginator's
order. For an order like

    priority DESC, due_date ASC, id ASC

and a cursor at ``(p, d, i)``, the ``after`` predicate is

    priority <= :_after_0 AND (
        priority < :_after_0 OR (
            due_date >= :_after_1 AND (
                due_date > :_after_1 OR id > :_after_2
            )
        )
    )

Each level keeps rows that are strictly past the cursor on that column, and
defers rows tied on it to the next column; rows strictly before the cursor on
it fail the outer non-strict guard. The last column is the unique discriminant
and uses the strict comparator only, so the cursor row itself is never returned.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, bindparam, or_
from sqlalchemy.types import NullType

from keyset_pagination.core.database.filters import StatementFilter
from keyset_pagination.core.pagination.cursor import CursorCodec

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select

    from keyset_pagination.core.pagination.ordering import Order, SortKey


class Boundary(StrEnum):
    """Which side of the cursor a predicate keeps."""

    AFTER = "after"
    BEFORE = "before"


def build_boundary_predicate(
    order: Order,
    position: Sequence[Any],
    boundary: Boundary,
) -> ColumnElement[bool]:
    """Compile a decoded cursor position into a WHERE clause.

    Directions are always taken from ``order`` as the paginator defined it,
    never from the (possibly reversed) ORDER BY of a backward page.

    Args:
        order: Canonical order of the paginator
        position: One value per sort key (``CursorCodec.decode`` output)
        boundary: Keep rows after or before the position

    Returns:
        Boolean SQL expression
    """
    if len(position) != len(order):
        msg = f"Position has {len(position)} values, order has {len(order)} keys"
        raise ValueError(msg)
    return _compile(order, position, Boundary(boundary), 0)


def _compile(
    order: Order,
    position: Sequence[Any],
    boundary: Boundary,
    index: int,
) -> ColumnElement[bool]:
    sort_key = order[index]
    expression = sort_key.expression
    value = _bind(sort_key, position[index], f"_{boundary.value}_{index}")

    # ">" when moving forward on an ascending column or backward on a
    # descending one, "<" otherwise
    greater = (boundary is Boundary.AFTER) != sort_key.direction.is_descending
    strict = expression > value if greater else expression < value

    if index == len(order) - 1:
        return strict

    inclusive = expression >= value if greater else expression <= value
    return and_(inclusive, or_(strict, _compile(order, position, boundary, index + 1)))


def _bind(sort_key: SortKey, value: Any, name: str) -> Any:
    column_type = getattr(sort_key.expression, "type", None)
    if column_type is None or isinstance(column_type, NullType):
        # Raw expressions carry no type; infer it from the value
        return bindparam(name, value)
    return bindparam(name, value, type_=column_type)


class CursorFilter(StatementFilter):
    """Apply one cursor boundary to a SQLAlchemy query.

    Applying an ``after`` filter and a ``before`` filter to the same
    statement conjoins them, selecting the open interval between the two
    cursors.

    Example:
        stmt = CursorFilter(after_cursor, order, Boundary.AFTER).apply(stmt)
        stmt = CursorFilter(before_cursor, order, Boundary.BEFORE).apply(stmt)

    Raises:
        MalformedCursorError: On construction, if the cursor does not decode
            to one value per sort key
    """

    def __init__(self, cursor: str, order: Order, boundary: Boundary) -> None:
        self.cursor = cursor
        self.order = order
        self.boundary = Boundary(boundary)
        self.position = CursorCodec.decode(cursor, order)

    def predicate(self) -> ColumnElement[bool]:
        return build_boundary_predicate(self.order, self.position, self.boundary)

    def apply(self, statement: Select[Any]) -> Select[Any]:
        return statement.where(self.predicate())


__all__ = [
    "Boundary",
    "CursorFilter",
    "build_boundary_predicate",
]
