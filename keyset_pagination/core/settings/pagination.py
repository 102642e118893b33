"""Pagination settings for the keyset pagination engine.

This module provides configurable defaults for every paginator created in the
process. Having centralized pagination settings ensures consistency and allows
tuning page sizes and column resolution without code changes.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_PAGE_SIZE=100, PAGINATION_STRICT_COLUMNS=true
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        default_page_size: Page size used by ``find_with_pagination`` when the
            caller supplies neither ``first`` nor ``last``.
        max_page_size: Hard upper bound for ``first``/``last``. ``None``
            disables the bound.
        strict_columns: Raise ``UnknownColumnError`` for ordering names that
            do not resolve to a mapped property or column, instead of
            falling back to a literal column of the base alias.
        discriminant_fallback: Column used as the tie-breaker when the
            primary entity exposes no primary key.

    Example:
        settings = PaginationSettings(max_page_size=500)
        paginator = CursorPaginator(session, stmt, settings=settings)
    """

    default_page_size: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Default page size when neither first nor last is given",
    )
    max_page_size: int | None = Field(
        default=None,
        ge=1,
        description="Maximum allowed page size (None for no limit)",
    )
    strict_columns: bool = Field(
        default=False,
        description="Fail on ordering columns that cannot be resolved",
    )
    discriminant_fallback: str = Field(
        default="id",
        min_length=1,
        description="Tie-breaker column when no primary key is mapped",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
