"""Pagination request and response schemas.

This module provides the validated page window a caller asks for
(``PageOptions``) and two serializable response styles built from a
``Page``:

1. GraphQL Connection Pattern (Relay specification):
   - Edges with cursors and nodes
   - PageInfo with navigation metadata

2. Simple REST Style:
   - Just items, cursors, and has_more flag

Both styles carry the same cursors produced by ``CursorCodec``.
"""

from __future__ import annotations

from typing import Any, Generic, Self, TypeVar

from pydantic import (
    BaseModel,
    Field,
    PositiveInt,
    ValidationError,
    field_validator,
    model_validator,
)

from keyset_pagination.core.exceptions import InvalidPageOptionsError

T = TypeVar("T")


class PageOptions(BaseModel):
    """A page window.

    Exactly one of ``first`` (forward) or ``last`` (backward) is required.
    ``after`` and ``before`` are optional and may be combined to bound the
    window on both sides. An empty cursor string counts as no cursor.

    Example:
        PageOptions(first=20)
        PageOptions(first=20, after=page.end_cursor)
        PageOptions(last=20, before=page.start_cursor)

    Raises:
        InvalidPageOptionsError: If the options do not form a valid window
    """

    first: PositiveInt | None = Field(default=None, description="Page size, forward")
    last: PositiveInt | None = Field(default=None, description="Page size, backward")
    after: str | None = Field(default=None, description="Return rows after this cursor")
    before: str | None = Field(default=None, description="Return rows before this cursor")

    model_config = {"frozen": True}

    def __init__(self, **values: Any) -> None:
        try:
            super().__init__(**values)
        except ValidationError as e:
            errors = "; ".join(error["msg"] for error in e.errors())
            raise InvalidPageOptionsError(
                f"Invalid page options: {errors}",
                first=values.get("first"),
                last=values.get("last"),
            ) from e

    @field_validator("after", "before", mode="before")
    @classmethod
    def _empty_cursor_is_absent(cls, value: Any) -> Any:
        return None if value == "" else value

    @model_validator(mode="after")
    def _require_one_size(self) -> Self:
        if self.first is not None and self.last is not None:
            msg = "first and last are mutually exclusive"
            raise ValueError(msg)
        if self.first is None and self.last is None:
            msg = "one of first or last is required"
            raise ValueError(msg)
        return self

    @classmethod
    def parse(cls, **values: Any) -> PageOptions:
        """Validate keyword options.

        Raises:
            InvalidPageOptionsError: If the options do not form a valid window
        """
        return cls(**values)

    @property
    def page_size(self) -> int:
        return self.first if self.first is not None else self.last  # type: ignore[return-value]

    @property
    def is_backward(self) -> bool:
        return self.last is not None


class PageInfo(BaseModel):
    """Pagination metadata following GraphQL Relay specification.

    Attributes:
        has_previous_page: Whether there are items before the current page
        has_next_page: Whether there are items after the current page
        start_cursor: Cursor of the first item in this page
        end_cursor: Cursor of the last item in this page
        total_count: Total number of items (optional, costs a second query)
    """

    has_previous_page: bool = Field(
        description="Whether previous items exist"
    )
    has_next_page: bool = Field(
        description="Whether more items exist"
    )
    start_cursor: str | None = Field(
        default=None,
        description="Cursor of the first item",
    )
    end_cursor: str | None = Field(
        default=None,
        description="Cursor of the last item",
    )
    total_count: int | None = Field(
        default=None,
        description="Total count (optional)",
    )


class ConnectionEdge(BaseModel, Generic[T]):
    """Edge wrapper for paginated items (Relay pattern)."""

    node: T = Field(description="The data item")
    cursor: str = Field(description="Cursor for this item")

    model_config = {"arbitrary_types_allowed": True}


class Connection(BaseModel, Generic[T]):
    """GraphQL Connection pattern for cursor pagination.

    Client navigation:
        # First page
        GET /posts?first=10

        # Next page (using end_cursor from previous response)
        GET /posts?first=10&after=WyJCIiwiYSIsMV0=

        # Previous page (using start_cursor)
        GET /posts?last=10&before=WyJCIiwiYSIsMV0=
    """

    edges: list[ConnectionEdge[T]] = Field(
        default_factory=list,
        description="List of edges (items with cursors)",
    )
    page_info: PageInfo = Field(
        description="Pagination metadata",
    )

    model_config = {"arbitrary_types_allowed": True}

    @property
    def nodes(self) -> list[T]:
        return [edge.node for edge in self.edges]

    def to_cursor_page(self) -> CursorPage[T]:
        """Convert to simple REST-style pagination."""
        return CursorPage(
            items=self.nodes,
            next_cursor=self.page_info.end_cursor if self.page_info.has_next_page else None,
            prev_cursor=self.page_info.start_cursor if self.page_info.has_previous_page else None,
            has_more=self.page_info.has_next_page,
            total_count=self.page_info.total_count,
        )


class CursorPage(BaseModel, Generic[T]):
    """Simple REST-style cursor pagination response.

    Attributes:
        items: List of data items
        next_cursor: Cursor for the next page (None if no more)
        prev_cursor: Cursor for the previous page (None if at start)
        has_more: Whether more items exist after this page
        total_count: Total count (optional)
    """

    items: list[T] = Field(
        default_factory=list,
        description="List of items",
    )
    next_cursor: str | None = Field(
        default=None,
        description="Cursor to fetch next page",
    )
    prev_cursor: str | None = Field(
        default=None,
        description="Cursor to fetch previous page",
    )
    has_more: bool = Field(
        default=False,
        description="Whether more items exist",
    )
    total_count: int | None = Field(
        default=None,
        description="Total count (optional)",
    )

    model_config = {"arbitrary_types_allowed": True}


__all__ = [
    "Connection",
    "ConnectionEdge",
    "CursorPage",
    "PageInfo",
    "PageOptions",
]
