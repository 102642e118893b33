"""Page and edge model returned by ``CursorPaginator.page()``.

A ``Page`` is the runtime result of one fetch: the ORM nodes, their raw sort
values and the navigation flags. Cursors are computed lazily per edge, so a
caller that only reads ``nodes`` never pays for encoding. To send a page over
the wire, convert it to one of the pydantic schemas:

    connection = await page.to_connection(include_total=True)
    rest = connection.to_cursor_page()
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any

from keyset_pagination.core.pagination.cursor import CursorCodec
from keyset_pagination.core.pagination.ordering import Order
from keyset_pagination.core.pagination.schemas import Connection, ConnectionEdge, PageInfo


@dataclass(eq=False)
class Edge[T]:
    """One row of a page.

    Attributes:
        node: The mapped entity (or tuple of selected columns)
        row: Raw result row keyed by sort key label
        order: Order the cursor is encoded for
    """

    node: T
    row: Mapping[str, Any] = field(repr=False)
    order: Order = field(repr=False)

    @cached_property
    def cursor(self) -> str:
        """Opaque position of this row, computed on first access."""
        return CursorCodec.encode(self.row, self.order)


@dataclass(eq=False)
class Page[T]:
    """A window of rows plus navigation metadata.

    Attributes:
        edges: Rows in the order they were fetched. Backward pages are in
            reversed sort order (nearest the ``before`` cursor first).
        has_next_page: More rows exist past the end of the window
        has_previous_page: More rows exist before the start of the window
        page_size: Requested size (``first`` or ``last``)

    Example:
        page = await paginator.page(first=20)
        for edge in page.edges:
            print(edge.node, edge.cursor)
        if page.has_next_page:
            page = await paginator.page(first=20, after=page.end_cursor)
    """

    edges: Sequence[Edge[T]]
    has_next_page: bool
    has_previous_page: bool
    page_size: int
    counter: Callable[[], Awaitable[int]] = field(repr=False)

    def __len__(self) -> int:
        return len(self.edges)

    def __iter__(self) -> Iterator[Edge[T]]:
        return iter(self.edges)

    @property
    def nodes(self) -> list[T]:
        return [edge.node for edge in self.edges]

    @property
    def start_cursor(self) -> str | None:
        return self.edges[0].cursor if self.edges else None

    @property
    def end_cursor(self) -> str | None:
        return self.edges[-1].cursor if self.edges else None

    @property
    def page_info(self) -> PageInfo:
        """Navigation metadata without the total count."""
        return PageInfo(
            has_previous_page=self.has_previous_page,
            has_next_page=self.has_next_page,
            start_cursor=self.start_cursor,
            end_cursor=self.end_cursor,
        )

    async def total_count(self) -> int:
        """Count every row of the base query, ignoring the page window.

        Issues a separate query each time it is awaited.
        """
        return await self.counter()

    async def to_connection(self, *, include_total: bool = False) -> Connection[T]:
        """Build the Relay-style response.

        Args:
            include_total: Run the count query and fill ``total_count``
        """
        page_info = self.page_info
        if include_total:
            page_info = page_info.model_copy(update={"total_count": await self.total_count()})
        return Connection(
            edges=[ConnectionEdge(node=edge.node, cursor=edge.cursor) for edge in self.edges],
            page_info=page_info,
        )


__all__ = ["Edge", "Page"]
