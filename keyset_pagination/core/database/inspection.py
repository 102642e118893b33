"""SQLAlchemy statement inspection utilities for column resolution.

These utilities use SQLAlchemy's inspection API to map the names a caller
uses in an ordering (``"title"``, ``"p.created_at"``) to column expressions
of a ``Select`` statement, without executing anything.

Resolution rules:
    - A bare name is looked up on the statement's primary entity, first as a
      mapped attribute key, then as a database column name.
    - A qualified name (``alias.column``) is looked up on the FROM element
      (table, alias or join side) whose SQL name is ``alias``.
    - Anything else can be rendered as an escaped literal column.

Example:
    >>> p = aliased(Post, name="p")
    >>> inspector = StatementInspector(select(p).join(p.author.of_type(a)))
    >>> inspector.base_alias
    'p'
    >>> inspector.resolve_property("created_at")
    ResolvedColumn(expression=<...p.created_at>, name='created_at')
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import Join, literal_column
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapper

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, FromClause, Select


@dataclass(frozen=True, slots=True, eq=False)
class ResolvedColumn:
    """A column expression together with its database column name."""

    expression: Any
    name: str


def escape_identifier(name: str) -> str:
    """Quote a possibly dotted identifier.

    Pre-existing double quotes are stripped before each part is wrapped,
    so caller input cannot terminate the quoted identifier early.

    Example:
        >>> escape_identifier("o.name")
        '"o"."name"'
        >>> escape_identifier('"o"."name"')
        '"o"."name"'
    """
    return ".".join(f'"{part}"' for part in name.replace('"', "").split("."))


class StatementInspector:
    """Resolve ordering names against a ``Select`` statement.

    The first entry of ``statement.column_descriptions`` is the primary
    entity: an ORM mapped class, an ``aliased()`` class, or a Core table.
    """

    def __init__(self, statement: Select[Any]) -> None:
        descriptions = statement.column_descriptions
        if not descriptions:
            msg = "Cannot paginate a statement without selected columns"
            raise ValueError(msg)

        self.statement = statement
        self.entity = descriptions[0]["expr"]

        info = sa_inspect(self.entity, raiseerr=False)
        if isinstance(info, Mapper):
            self.mapper: Mapper[Any] | None = info
            self.selectable: FromClause | None = info.local_table
            self.base_alias = info.local_table.name
        elif info is not None and getattr(info, "is_aliased_class", False):
            self.mapper = info.mapper
            self.selectable = info.selectable
            self.base_alias = info.name
        else:
            # Core statement: select(table) or select(table.c.x, ...)
            self.mapper = None
            self.selectable = getattr(self.entity, "table", self.entity)
            self.base_alias = getattr(self.selectable, "name", None) or "anon"

    def resolve_property(self, name: str) -> ResolvedColumn | None:
        """Resolve a bare name on the primary entity.

        Args:
            name: Mapped attribute key or database column name

        Returns:
            The bound column expression, or None when nothing matches
        """
        if self.mapper is not None:
            attrs = self.mapper.column_attrs
            if name in attrs:
                column_name = getattr(attrs[name].columns[0], "name", None) or name
                return ResolvedColumn(getattr(self.entity, name), column_name)
            for prop in attrs:
                if any(getattr(col, "name", None) == name for col in prop.columns):
                    return ResolvedColumn(getattr(self.entity, prop.key), name)
            return None

        columns = getattr(self.selectable, "c", None)
        if columns is not None and name in columns:
            return ResolvedColumn(columns[name], columns[name].name)
        return None

    def resolve_qualified(self, alias: str, column: str) -> ResolvedColumn | None:
        """Resolve ``alias.column`` against the statement's FROM list.

        Args:
            alias: SQL name of a table or alias present in the statement
            column: Database column name

        Returns:
            The column of the matching FROM element, or None
        """
        from_ = self._find_from(alias)
        if from_ is None or column not in from_.c:
            return None
        return ResolvedColumn(from_.c[column], column)

    def primary_key_column(self) -> str | None:
        """Database name of the primary entity's first primary key column."""
        if self.mapper is not None:
            return self.mapper.primary_key[0].name if self.mapper.primary_key else None

        primary_key = getattr(self.selectable, "primary_key", None)
        if primary_key is None:
            return None
        for column in primary_key.columns:
            return column.name
        return None

    def literal(self, name: str) -> ColumnElement[Any]:
        """Render ``name`` as an escaped literal column reference."""
        return literal_column(escape_identifier(name))

    def _find_from(self, alias: str) -> FromClause | None:
        stack: list[Any] = list(self.statement.get_final_froms())
        while stack:
            from_ = stack.pop()
            if isinstance(from_, Join):
                stack.extend((from_.left, from_.right))
                continue
            if getattr(from_, "name", None) == alias:
                return from_
        return None


__all__ = [
    "ResolvedColumn",
    "StatementInspector",
    "escape_identifier",
]
