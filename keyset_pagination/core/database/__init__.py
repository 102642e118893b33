"""Core database package: statement inspection, filters and repository.

Repository:
    - BaseRepository[T]: keyset pagination for one model with explicit
      session passing

Statement Filters:
    - OrderBy: Replace ordering with a canonical ``Order``
    - SelectSortKeys: Select the raw sort key values alongside the entity
    - Limit: Row limit

Inspection:
    - StatementInspector: Resolve ordering names against a ``Select``
    - escape_identifier: Quote a dotted identifier
"""

from keyset_pagination.core.database.filters import (
    Limit,
    OrderBy,
    SelectSortKeys,
    StatementFilter,
)
from keyset_pagination.core.database.inspection import (
    ResolvedColumn,
    StatementInspector,
    escape_identifier,
)
from keyset_pagination.core.database.repository import BaseRepository

__all__ = [
    "BaseRepository",
    "Limit",
    "OrderBy",
    "ResolvedColumn",
    "SelectSortKeys",
    "StatementFilter",
    "StatementInspector",
    "escape_identifier",
]
