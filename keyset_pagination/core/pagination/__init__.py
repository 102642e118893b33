"""Cursor-based (keyset) pagination over SQLAlchemy statements.

This module provides cursor-based pagination that is:
- Stable: Results don't shift when rows are inserted between pages
- Performant: Uses indexed seeks instead of OFFSET scans
- Bidirectional: ``first``/``after`` forward, ``last``/``before`` backward

Usage:
    paginator = CursorPaginator(session, select(f).join(o, f.owner), {"o.name": "ASC"})
    page = await paginator.page(first=50)
    page = await paginator.page(first=50, after=page.end_cursor)

GraphQL Connection Style:
    connection = await page.to_connection(include_total=True)

Simple REST Style:
    rest = (await page.to_connection()).to_cursor_page()

The cursor encodes the sort key values needed to seek past a row.
Cursors are opaque base64 strings that clients pass back unchanged.
"""

from keyset_pagination.core.pagination.cursor import CursorCodec
from keyset_pagination.core.pagination.executor import FetchResult, PageExecutor
from keyset_pagination.core.pagination.filters import (
    Boundary,
    CursorFilter,
    build_boundary_predicate,
)
from keyset_pagination.core.pagination.ordering import (
    Direction,
    Order,
    OrderNormalizer,
    PhysicalColumn,
    RawExpression,
    SortKey,
)
from keyset_pagination.core.pagination.page import Edge, Page
from keyset_pagination.core.pagination.paginator import CursorPaginator
from keyset_pagination.core.pagination.schemas import (
    Connection,
    ConnectionEdge,
    CursorPage,
    PageInfo,
    PageOptions,
)

__all__ = [
    # Predicates
    "Boundary",
    # GraphQL-style schemas
    "Connection",
    "ConnectionEdge",
    # Cursor utilities
    "CursorCodec",
    "CursorFilter",
    # REST-style schema
    "CursorPage",
    # Engine
    "CursorPaginator",
    "Direction",
    "Edge",
    "FetchResult",
    "Order",
    "OrderNormalizer",
    "Page",
    "PageExecutor",
    "PageInfo",
    "PageOptions",
    "PhysicalColumn",
    "RawExpression",
    "SortKey",
    "build_boundary_predicate",
]
