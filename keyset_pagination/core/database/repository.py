"""Minimal generic repository with keyset pagination.

Provides a one-call way to page through a model with filters, joins and
virtual columns. For anything else, build the statement yourself and hand it
to ``CursorPaginator``; this is a convenience, not a cage.

Example:
    from keyset_pagination import BaseRepository

    class WidgetRepository(BaseRepository[Widget]):
        async def page_for_owner(self, session, owner_id, cursor=None):
            return await self.find_with_pagination(
                session,
                where={"owner_id": owner_id},
                order={"timestamp": "DESC"},
                pagination={"first": 20, "after": cursor},
            )

    repo = WidgetRepository(Widget)
    page = await repo.find_with_pagination(
        session,
        alias="f",
        builder=lambda stmt, f: stmt.join(o, f.owner),
        order={"o.name": "ASC", "code": "DESC"},
    )
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.orm import aliased, lazyload

from keyset_pagination.core.pagination.paginator import CursorPaginator
from keyset_pagination.core.settings import get_pagination_settings
from keyset_pagination.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from keyset_pagination.core.pagination.ordering import Direction, VirtualColumnMap
    from keyset_pagination.core.pagination.page import Page
    from keyset_pagination.core.settings import PaginationSettings

    StatementBuilder = Callable[[Select[Any], Any], Select[Any] | None]


class BaseRepository[T]:
    """Generic repository exposing keyset pagination for one model.

    Provides:
        - paginate(session, statement, ...) -> Page[T]
        - find_with_pagination(session, where, order, pagination, ...) -> Page[T]

    Session is always explicit - no hidden state.
    """

    __slots__ = ("model", "settings", "_lazy")

    def __init__(self, model: type[T], *, settings: PaginationSettings | None = None) -> None:
        """Initialize repository with model class.

        Args:
            model: SQLAlchemy model class (e.g., Widget)
            settings: Overrides the process-wide ``PaginationSettings``
        """
        self.model = model
        self.settings = settings or get_pagination_settings()
        # Lazy logger for DEBUG (zero overhead when DEBUG disabled)
        self._lazy = get_lazy_logger(f"repository.{model.__name__}")

    async def paginate(
        self,
        session: AsyncSession,
        statement: Select[Any] | None = None,
        *,
        order: Mapping[str, str | Direction] | None = None,
        virtual: VirtualColumnMap | None = None,
        first: int | None = None,
        last: int | None = None,
        after: str | None = None,
        before: str | None = None,
    ) -> Page[T]:
        """Fetch one page of ``statement`` (default ``select(model)``).

        Args:
            session: Database session
            statement: Base statement with filters and joins applied
            order: Names mapped to directions
            virtual: Virtual column names mapped to SQL expressions
            first: Forward page size
            last: Backward page size
            after: Cursor to page forward from
            before: Cursor to page backward from

        Returns:
            The requested page
        """
        if statement is None:
            statement = select(self.model)
        paginator: CursorPaginator[T] = CursorPaginator(
            session, statement, order, virtual, settings=self.settings
        )
        page = await paginator.page(first=first, last=last, after=after, before=before)

        self._lazy.debug(
            lambda: f"db.paginate: {self.model.__name__}(first={first}, last={last}) -> "
            f"{len(page)} items, has_next={page.has_next_page}, has_prev={page.has_previous_page}"
        )
        return page

    async def find_with_pagination(
        self,
        session: AsyncSession,
        *,
        where: Mapping[str, Any] | Sequence[ColumnElement[bool]] | None = None,
        order: Mapping[str, str | Direction] | None = None,
        pagination: Mapping[str, Any] | None = None,
        virtual: VirtualColumnMap | None = None,
        alias: str | None = None,
        builder: StatementBuilder | None = None,
        load_eager: bool = True,
    ) -> Page[T]:
        """Build a statement for the model and fetch one page of it.

        Args:
            session: Database session
            where: Equality filters by attribute name, or SQL expressions
            order: Names mapped to directions
            pagination: ``first``, ``last``, ``after`` and ``before``.
                Defaults to ``first=settings.default_page_size``. When both
                sizes are given, ``last`` wins.
            virtual: Virtual column names mapped to SQL expressions
            alias: SQL alias for the model (``"f"`` for ``f.code``)
            builder: ``builder(statement, entity)`` may return a modified
                statement, typically adding joins
            load_eager: Apply relationship eager loading configured on the
                model. ``False`` loads every relationship lazily.

        Returns:
            The requested page
        """
        entity: Any = aliased(self.model, name=alias) if alias else self.model
        stmt = select(entity)

        if isinstance(where, Mapping):
            stmt = stmt.filter_by(**where)
        elif where:
            stmt = stmt.where(*where)

        if builder is not None:
            built = builder(stmt, entity)
            if built is not None:
                stmt = built

        if not load_eager:
            stmt = stmt.options(lazyload("*"))

        window = dict(pagination or {})
        if window.get("last") is not None:
            window.pop("first", None)
        elif window.get("first") is None:
            window["first"] = self.settings.default_page_size

        return await self.paginate(
            session,
            stmt,
            order=order,
            virtual=virtual,
            first=window.get("first"),
            last=window.get("last"),
            after=window.get("after"),
            before=window.get("before"),
        )


__all__ = ["BaseRepository"]
