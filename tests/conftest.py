"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: isolate cached settings between tests
    - Database Fixtures: SQLAlchemy engine, session, and seeded widgets
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Iterator
from datetime import datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from keyset_pagination.core.settings import clear_all_caches
from tests.models import Base, Owner, Widget

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop cached settings and PAGINATION_/LOG_ variables around each test."""
    monkeypatch.delenv("PAGINATION_DEFAULT_PAGE_SIZE", raising=False)
    monkeypatch.delenv("PAGINATION_MAX_PAGE_SIZE", raising=False)
    monkeypatch.delenv("PAGINATION_STRICT_COLUMNS", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_JSON", raising=False)
    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Create async SQLAlchemy engine with in-memory SQLite.

    Yields:
        Async SQLAlchemy engine connected to in-memory SQLite.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create async database session with automatic table creation and cleanup.

    Args:
        db_engine: Async SQLAlchemy engine fixture.

    Yields:
        Async database session for testing.
    """
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def widgets(db_session: AsyncSession) -> dict[str, Widget]:
    """Seed two owners and five widgets.

    Sorted by owner name then code the widgets read ``b, d, a, c, e``:

        code  owner  timestamp   deleted_at
        a     B      2021-04-01  -
        b     A      2021-03-01  -
        c     B      2021-02-01  -
        d     A      2021-01-01  -
        e     B      2020-12-01  2020-12-01

    Returns:
        Widgets keyed by code.
    """
    owner_a = Owner(id=1, name="A")
    owner_b = Owner(id=2, name="B")
    rows = [
        Widget(id=1, code="a", owner=owner_b, timestamp=datetime(2021, 4, 1)),
        Widget(id=2, code="b", owner=owner_a, timestamp=datetime(2021, 3, 1)),
        Widget(id=3, code="c", owner=owner_b, timestamp=datetime(2021, 2, 1)),
        Widget(id=4, code="d", owner=owner_a, timestamp=datetime(2021, 1, 1)),
        Widget(
            id=5,
            code="e",
            owner=owner_b,
            timestamp=datetime(2020, 12, 1),
            deleted_at=datetime(2020, 12, 1),
        ),
    ]
    db_session.add_all([owner_a, owner_b, *rows])
    await db_session.commit()
    return {widget.code: widget for widget in rows}
