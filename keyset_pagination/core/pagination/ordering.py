"""Canonical sort orders for keyset pagination.

A caller describes an ordering as a mapping of names to directions:

    {"o.name": "DESC", "title": "ASC", "_deleted": "ASC"}

``OrderNormalizer`` turns that into an ``Order``: an immutable sequence of
``SortKey`` whose column references are already resolved against the
statement. Each reference is either a ``PhysicalColumn`` (a mapped or
joined column) or a ``RawExpression`` (a virtual column backed by SQL
text). The primary key of the statement's primary entity is appended last
so that every row has a distinct position, which is what makes a cursor
point at exactly one row.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import ColumnElement, literal_column

from keyset_pagination.core.exceptions import UnknownColumnError

if TYPE_CHECKING:
    from sqlalchemy import UnaryExpression

    from keyset_pagination.core.database.inspection import StatementInspector

logger = logging.getLogger(__name__)

VirtualColumnMap = Mapping[str, "str | ColumnElement[Any]"]


class Direction(StrEnum):
    """Sort direction. Parsing is case-insensitive (``"asc"`` == ``ASC``)."""

    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def _missing_(cls, value: object) -> Direction | None:
        if isinstance(value, str):
            upper = value.upper()
            for member in cls:
                if member.value == upper:
                    return member
        return None

    @property
    def is_descending(self) -> bool:
        return self is Direction.DESC

    def reversed(self) -> Direction:
        return Direction.ASC if self is Direction.DESC else Direction.DESC


@dataclass(frozen=True, slots=True, eq=False)
class PhysicalColumn:
    """A column of a table or alias in the statement.

    Attributes:
        key: Qualified name, ``alias.column``
        expression: Bound SQLAlchemy column expression
    """

    key: str
    expression: Any


@dataclass(frozen=True, slots=True, eq=False)
class RawExpression:
    """A virtual column backed by a SQL expression.

    The expression is inlined verbatim into ORDER BY, the selected columns
    and every boundary predicate.

    Attributes:
        key: The virtual column name
        expression: SQL expression (``literal_column`` for raw text)
    """

    key: str
    expression: ColumnElement[Any]


ColumnRef = PhysicalColumn | RawExpression


@dataclass(frozen=True, slots=True, eq=False)
class SortKey:
    """One column of an ``Order`` and its direction."""

    column: ColumnRef
    direction: Direction

    @property
    def key(self) -> str:
        return self.column.key

    @property
    def expression(self) -> Any:
        return self.column.expression

    @property
    def label(self) -> str:
        """Name of the selected column carrying this key's raw value."""
        return self.column.key.replace(".", "_")

    @property
    def is_virtual(self) -> bool:
        return isinstance(self.column, RawExpression)

    def clause(self) -> UnaryExpression[Any]:
        """ORDER BY clause for this key."""
        if self.direction.is_descending:
            return self.expression.desc()
        return self.expression.asc()

    def reversed(self) -> SortKey:
        return SortKey(self.column, self.direction.reversed())


@dataclass(frozen=True, slots=True)
class Order:
    """Immutable, ordered sequence of sort keys.

    Keys are unique and the sequence is never empty; the final entry is the
    discriminant (tie-breaker) column.
    """

    sort_keys: tuple[SortKey, ...]

    def __post_init__(self) -> None:
        if not self.sort_keys:
            msg = "An order needs at least one sort key"
            raise ValueError(msg)
        keys = [sort_key.key for sort_key in self.sort_keys]
        if len(set(keys)) != len(keys):
            msg = f"Duplicate sort keys in order: {keys}"
            raise ValueError(msg)

    def __iter__(self) -> Iterator[SortKey]:
        return iter(self.sort_keys)

    def __len__(self) -> int:
        return len(self.sort_keys)

    def __getitem__(self, index: int) -> SortKey:
        return self.sort_keys[index]

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(sort_key.key for sort_key in self.sort_keys)

    @property
    def discriminant(self) -> SortKey:
        return self.sort_keys[-1]

    def reversed(self) -> Order:
        """Same columns with every direction inverted (backward paging)."""
        return Order(tuple(sort_key.reversed() for sort_key in self.sort_keys))

    def clauses(self) -> list[UnaryExpression[Any]]:
        return [sort_key.clause() for sort_key in self.sort_keys]

    def as_dict(self) -> dict[str, Direction]:
        return {sort_key.key: sort_key.direction for sort_key in self.sort_keys}


class OrderNormalizer:
    """Build the canonical ``Order`` for a statement.

    Args:
        inspector: Metadata access for the statement being paginated
        strict: Raise ``UnknownColumnError`` for unresolvable bare names
            instead of treating them as columns of the base alias
        discriminant_fallback: Tie-breaker column when no primary key is mapped

    Example:
        normalizer = OrderNormalizer(StatementInspector(select(f)))
        order = normalizer.normalize({"o.name": "ASC", "title": "DESC"})
        order.as_dict()
        # {"o.name": ASC, "f.title": DESC, "f.id": ASC}
    """

    def __init__(
        self,
        inspector: StatementInspector,
        *,
        strict: bool = False,
        discriminant_fallback: str = "id",
    ) -> None:
        self.inspector = inspector
        self.strict = strict
        self.discriminant_fallback = discriminant_fallback

    def normalize(
        self,
        order: Mapping[str, str | Direction] | None = None,
        virtual: VirtualColumnMap | None = None,
    ) -> Order:
        """Resolve ``order`` and append the discriminant.

        Args:
            order: Column or virtual-column names mapped to directions, in
                precedence order
            virtual: Virtual column names mapped to SQL expressions

        Returns:
            Canonical order ending with a unique column
        """
        virtual = virtual or {}
        sort_keys: dict[str, SortKey] = {}
        for name, direction in (order or {}).items():
            column = self.resolve(name, virtual)
            sort_keys.setdefault(column.key, SortKey(column, Direction(direction)))

        discriminant = self.resolve(
            self.inspector.primary_key_column() or self.discriminant_fallback,
            virtual,
        )
        if discriminant.key not in sort_keys:
            sort_keys[discriminant.key] = SortKey(discriminant, Direction.ASC)

        return Order(tuple(sort_keys.values()))

    def resolve(self, name: str, virtual: VirtualColumnMap) -> ColumnRef:
        """Resolve one ordering name to a column reference."""
        if name in virtual:
            expression = virtual[name]
            if isinstance(expression, str):
                expression = literal_column(expression)
            return RawExpression(name, expression)

        if "." in name:
            qualified = name.replace('"', "")
            alias, _, column_name = qualified.rpartition(".")
            resolved = self.inspector.resolve_qualified(alias, column_name)
            if resolved is None:
                return PhysicalColumn(qualified, self.inspector.literal(qualified))
            return PhysicalColumn(qualified, resolved.expression)

        base = self.inspector.base_alias
        resolved = self.inspector.resolve_property(name)
        if resolved is not None:
            return PhysicalColumn(f"{base}.{resolved.name}", resolved.expression)

        if self.strict:
            raise UnknownColumnError(name, base)

        logger.warning(
            "Ordering column %r is not mapped on %r; using it as a literal column",
            name,
            base,
        )
        return PhysicalColumn(f"{base}.{name}", self.inspector.literal(f"{base}.{name}"))


__all__ = [
    "ColumnRef",
    "Direction",
    "Order",
    "OrderNormalizer",
    "PhysicalColumn",
    "RawExpression",
    "SortKey",
    "VirtualColumnMap",
]
