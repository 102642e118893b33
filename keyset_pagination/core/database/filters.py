"""Query filtering utilities for SQLAlchemy.

These filters work directly with SQLAlchemy statements without hiding the
query. Each one takes a ``Select`` and returns a new ``Select``; statements
are generative, so the input is never mutated and a base statement can be
shared between concurrent page requests.

Usage:
    from keyset_pagination.core.database.filters import Limit, OrderBy

    stmt = OrderBy(order).apply(stmt)
    stmt = Limit(51).apply(stmt)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sqlalchemy import Select

    from keyset_pagination.core.pagination.ordering import Order


class StatementFilter(ABC):
    """Base class for statement filters.

    All filters implement `apply()` which returns a modified statement.
    """

    @abstractmethod
    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply filter to statement.

        Args:
            statement: SQLAlchemy select statement

        Returns:
            Modified select statement
        """
        ...


class OrderBy(StatementFilter):
    """Replace the statement's ordering with an ``Order``.

    Any ORDER BY already present on the statement is discarded first, so
    the sort keys of the order are the only ordering applied.

    Example:
        stmt = OrderBy(order).apply(stmt)            # forward
        stmt = OrderBy(order.reversed()).apply(stmt)  # backward
    """

    def __init__(self, order: Order):
        self.order = order

    def apply(self, statement: Select[Any]) -> Select[Any]:
        return statement.order_by(None).order_by(*self.order.clauses())


class SelectSortKeys(StatementFilter):
    """Add one labelled column per sort key to the selected columns.

    The labels (``SortKey.label``) are how cursors read a row's raw sort
    values back out of the result, independently of the mapped entity.
    """

    def __init__(self, order: Order):
        self.order = order

    def apply(self, statement: Select[Any]) -> Select[Any]:
        return statement.add_columns(
            *(sort_key.expression.label(sort_key.label) for sort_key in self.order)
        )


class Limit(StatementFilter):
    """Row limit."""

    def __init__(self, limit: int):
        if limit < 1:
            msg = "limit must be positive"
            raise ValueError(msg)
        self.limit = limit

    def apply(self, statement: Select[Any]) -> Select[Any]:
        return statement.limit(self.limit)


__all__ = [
    "Limit",
    "OrderBy",
    "SelectSortKeys",
    "StatementFilter",
]
