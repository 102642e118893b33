"""Single-query page fetches.

One page costs one round trip. The statement is ordered (reversed for
backward pages), bounded by the ``after`` / ``before`` predicates and limited
to ``page_size + 1`` rows; the extra row only signals that more data exists
and is never returned.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from keyset_pagination.core.database.filters import Limit, OrderBy, SelectSortKeys
from keyset_pagination.core.pagination.filters import Boundary, CursorFilter
from keyset_pagination.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from keyset_pagination.core.pagination.ordering import Order
    from keyset_pagination.core.pagination.schemas import PageOptions

_lazy = get_lazy_logger(__name__)


@dataclass(slots=True, frozen=True)
class FetchedRow:
    """A node and the raw sort values it was fetched with."""

    node: Any
    row: Mapping[str, Any]


@dataclass(slots=True, frozen=True)
class FetchResult:
    """Rows of one page with their navigation flags."""

    rows: list[FetchedRow]
    has_next_page: bool
    has_previous_page: bool


class PageExecutor:
    """Run the page query for an ``Order`` and a page window.

    Flags follow the cursor the caller came from:

    - forward (``first``): ``has_next_page`` is whether the extra row came
      back, ``has_previous_page`` is whether ``after`` was given.
    - backward (``last``): ``has_previous_page`` is whether the extra row
      came back, ``has_next_page`` is whether ``before`` was given.

    Backward rows are returned in the reversed sort order they were fetched
    in, nearest the ``before`` cursor first.
    """

    @staticmethod
    def build_statement(
        statement: Select[Any],
        order: Order,
        options: PageOptions,
    ) -> Select[Any]:
        """Compose the page query without executing it.

        Raises:
            MalformedCursorError: If ``after`` or ``before`` does not decode
        """
        stmt = OrderBy(order.reversed() if options.is_backward else order).apply(statement)
        # Boundaries always use the paginator's own directions
        if options.after is not None:
            stmt = CursorFilter(options.after, order, Boundary.AFTER).apply(stmt)
        if options.before is not None:
            stmt = CursorFilter(options.before, order, Boundary.BEFORE).apply(stmt)
        stmt = SelectSortKeys(order).apply(stmt)
        return Limit(options.page_size + 1).apply(stmt)

    async def fetch(
        self,
        session: AsyncSession,
        statement: Select[Any],
        order: Order,
        options: PageOptions,
    ) -> FetchResult:
        """Fetch one page.

        Args:
            session: Database session
            statement: Base statement (filters and joins, no pagination)
            order: Canonical order of the paginator
            options: Validated page window

        Returns:
            At most ``options.page_size`` rows and the navigation flags
        """
        base_width = len(statement.column_descriptions)
        stmt = self.build_statement(statement, order, options)
        _lazy.debug(lambda: f"page query: {stmt}")

        result = await session.execute(stmt)
        # Joined eager loads of collections repeat the parent row per child
        raw_rows = result.unique().all()

        size = options.page_size
        more = len(raw_rows) > size
        raw_rows = raw_rows[:size]

        rows = [
            FetchedRow(
                node=row[0] if base_width == 1 else tuple(row[:base_width]),
                row=row._mapping,
            )
            for row in raw_rows
        ]

        if options.is_backward:
            has_next, has_previous = options.before is not None, more
        else:
            has_next, has_previous = more, options.after is not None

        _lazy.debug(
            lambda: f"page fetch: size={size} backward={options.is_backward} -> {len(rows)} rows, "
            f"has_next={has_next}, has_previous={has_previous}"
        )
        return FetchResult(rows=rows, has_next_page=has_next, has_previous_page=has_previous)


__all__ = ["FetchResult", "FetchedRow", "PageExecutor"]
