"""Keyset (cursor) pagination for SQLAlchemy.

Example:
    from keyset_pagination import CursorPaginator

    paginator = CursorPaginator(session, select(f).join(o, f.owner), {"o.name": "ASC"})
    page = await paginator.page(first=20)
    next_page = await paginator.page(first=20, after=page.end_cursor)
"""

from keyset_pagination.core.database.repository import BaseRepository
from keyset_pagination.core.exceptions import (
    InvalidPageOptionsError,
    MalformedCursorError,
    PaginationError,
    UnknownColumnError,
)
from keyset_pagination.core.pagination import (
    Connection,
    CursorCodec,
    CursorPage,
    CursorPaginator,
    Direction,
    Edge,
    Order,
    Page,
    PageInfo,
    PageOptions,
)
from keyset_pagination.core.settings import PaginationSettings, get_pagination_settings

__version__ = "0.1.0"

__all__ = [
    "BaseRepository",
    "Connection",
    "CursorCodec",
    "CursorPage",
    "CursorPaginator",
    "Direction",
    "Edge",
    "InvalidPageOptionsError",
    "MalformedCursorError",
    "Order",
    "Page",
    "PageInfo",
    "PageOptions",
    "PaginationError",
    "PaginationSettings",
    "UnknownColumnError",
    "__version__",
    "get_pagination_settings",
]
