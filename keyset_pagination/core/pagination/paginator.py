"""Cursor paginator over a SQLAlchemy ``Select``.

The paginator owns everything that is fixed for a query: the base statement,
its canonical ``Order`` and the virtual columns. Every ``page()`` call only
varies the window, so one paginator can serve any number of pages, in either
direction, from any cursor it produced.

Example:
    f = aliased(Widget, name="f")
    o = aliased(Owner, name="o")
    stmt = select(f).join(o, f.owner)

    paginator = CursorPaginator(session, stmt, {"o.name": "ASC", "code": "DESC"})
    page = await paginator.page(first=20)
    older = await paginator.page(first=20, after=page.end_cursor)
    total = await page.total_count()
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select

from keyset_pagination.core.database.inspection import StatementInspector
from keyset_pagination.core.exceptions import InvalidPageOptionsError
from keyset_pagination.core.pagination.cursor import CursorCodec
from keyset_pagination.core.pagination.executor import PageExecutor
from keyset_pagination.core.pagination.ordering import Direction, Order, OrderNormalizer
from keyset_pagination.core.pagination.page import Edge, Page
from keyset_pagination.core.pagination.schemas import PageOptions
from keyset_pagination.core.settings import get_pagination_settings
from keyset_pagination.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from keyset_pagination.core.pagination.ordering import VirtualColumnMap
    from keyset_pagination.core.settings import PaginationSettings

_lazy = get_lazy_logger(__name__)


class CursorPaginator[T]:
    """Keyset pagination for one statement and one ordering.

    Args:
        session: Session the page and count queries run on
        statement: Base ``Select``; any ORDER BY on it is replaced
        order: Names mapped to directions, in precedence order. Bare names
            are columns of the primary entity, ``alias.column`` names are
            columns of joined aliases, and names present in ``virtual`` are
            virtual columns. The primary key is appended as tie-breaker.
        virtual: Virtual column names mapped to SQL expressions
        settings: Overrides the process-wide ``PaginationSettings``

    Raises:
        UnknownColumnError: In strict mode, for an unresolvable order name

    Note:
        An ``AsyncSession`` runs one query at a time. Tasks that page
        concurrently need their own session.
    """

    def __init__(
        self,
        session: AsyncSession,
        statement: Select[Any],
        order: Mapping[str, str | Direction] | None = None,
        virtual: VirtualColumnMap | None = None,
        *,
        settings: PaginationSettings | None = None,
    ) -> None:
        self.session = session
        self.statement = statement
        self.virtual = dict(virtual or {})
        self.settings = settings or get_pagination_settings()
        self._executor = PageExecutor()

        normalizer = OrderNormalizer(
            StatementInspector(statement),
            strict=self.settings.strict_columns,
            discriminant_fallback=self.settings.discriminant_fallback,
        )
        self._order = normalizer.normalize(order, self.virtual)
        _lazy.debug(lambda: f"paginator order: {self._order.as_dict()}")

    @property
    def order(self) -> Order:
        """Canonical order, ending with the discriminant column."""
        return self._order

    async def page(
        self,
        options: PageOptions | None = None,
        *,
        first: int | None = None,
        last: int | None = None,
        after: str | None = None,
        before: str | None = None,
    ) -> Page[T]:
        """Fetch one page.

        Pass either a ``PageOptions`` or the window as keywords.

        Raises:
            InvalidPageOptionsError: If the window is invalid or exceeds
                ``max_page_size``
            MalformedCursorError: If ``after`` or ``before`` does not decode
        """
        if options is None:
            options = PageOptions.parse(first=first, last=last, after=after, before=before)
        self._check_size(options)

        result = await self._executor.fetch(self.session, self.statement, self._order, options)
        edges: list[Edge[T]] = [
            Edge(node=fetched.node, row=fetched.row, order=self._order) for fetched in result.rows
        ]
        return Page(
            edges=edges,
            has_next_page=result.has_next_page,
            has_previous_page=result.has_previous_page,
            page_size=options.page_size,
            counter=self.count,
        )

    def cursor(self, row: Mapping[str, Any]) -> str:
        """Encode a raw row (keyed by sort key label) as a cursor."""
        return CursorCodec.encode(row, self._order)

    async def count(self) -> int:
        """Count rows of the base statement, ignoring ordering and window."""
        subquery = self.statement.order_by(None).subquery()
        count_stmt = select(func.count()).select_from(subquery)
        total = (await self.session.execute(count_stmt)).scalar_one()
        _lazy.debug(lambda: f"paginator count -> {total}")
        return total

    def _check_size(self, options: PageOptions) -> None:
        max_size = self.settings.max_page_size
        if max_size is not None and options.page_size > max_size:
            raise InvalidPageOptionsError(
                f"Page size {options.page_size} exceeds maximum {max_size}",
                page_size=options.page_size,
                max_page_size=max_size,
            )


__all__ = ["CursorPaginator"]
