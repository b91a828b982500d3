"""Shared test fixtures for async database, sessions, export files, and auth tokens."""

import csv
import io
import uuid
from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta

import jwt
import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from card_importer.core.config import Settings
from card_importer.lib.collection_import.headers import EXPECTED_HEADERS
from card_importer.models import Base

TEST_SECRET = "test-secret-key-not-for-production"


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key=TEST_SECRET,
        jwt_algorithm="HS256",
        functions_base_url="https://project.functions.test/functions/v1",
        functions_api_key="anon-key",
        _env_file=None,  # type: ignore[call-arg]
    )


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    session_factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def owner_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Factory for platform-style access tokens signed with the test secret."""

    def _make(subject: str | uuid.UUID, *, audience: str = "authenticated", expires_minutes: int = 30) -> str:
        payload = {
            "sub": str(subject),
            "aud": audience,
            "role": "authenticated",
            "exp": datetime.now(UTC) + timedelta(minutes=expires_minutes),
        }
        return jwt.encode(payload, TEST_SECRET, algorithm="HS256")

    return _make


def _export_row(**fields: str) -> dict[str, str]:
    row = dict.fromkeys(EXPECTED_HEADERS, "")
    row.update(
        {
            "Portfolio Name": "Main Binder",
            "Category": "Pokemon",
            "Grade": "Ungraded",
            "Card Condition": "Near Mint",
            "Quantity": "1",
            "Watchlist": "FALSE",
        }
    )
    row.update(fields)
    return row


def _export_csv(rows: list[dict[str, str]], headers: tuple[str, ...] = EXPECTED_HEADERS) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(headers), extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


@pytest.fixture
def export_row() -> Callable[..., dict[str, str]]:
    """Factory for raw export rows with every expected header present."""
    return _export_row


@pytest.fixture
def export_csv() -> Callable[..., str]:
    """Render rows as CSV text in export column order."""
    return _export_csv
