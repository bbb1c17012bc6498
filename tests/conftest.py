from __future__ import annotations

from datetime import datetime, timedelta, timezone
from random import Random
from typing import AsyncIterator, Iterator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import func, select

from tasting.api.dependencies import get_session
from tasting.api.main import app
from tasting.core.config import settings
from tasting.core.database import DatabaseManager
from tasting.core.security import create_access_token


class ScriptedRandom(Random):
    """Entropy source that spells out the given signatures in order."""

    def __init__(self, *signatures: str) -> None:
        super().__init__(0)
        self._characters = iter("".join(signatures))

    def choice(self, seq):
        return next(self._characters)


class TickingClock:
    """Deterministic clock advancing one minute per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 11, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(minutes=1)
        return self.current


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncIterator[DatabaseManager]:
    manager = DatabaseManager(url=f"sqlite+aiosqlite:///{tmp_path / 'tasting.db'}")
    await manager.initialize()
    await manager.create_all()
    try:
        yield manager
    finally:
        await manager.close()


@pytest_asyncio.fixture
async def session(database):
    async with database.session() as db_session:
        yield db_session


@pytest.fixture
def rng() -> Random:
    return Random(1234)


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def count_rows(database):
    async def _count(entity, *criteria) -> int:
        async with database.session() as db_session:
            statement = select(func.count()).select_from(entity)
            if criteria:
                statement = statement.where(*criteria)
            return await db_session.scalar(statement)

    return _count


@pytest_asyncio.fixture
async def client(database) -> AsyncIterator[httpx.AsyncClient]:
    async def _override_session():
        async with database.session() as db_session:
            yield db_session

    app.dependency_overrides[get_session] = _override_session
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
            yield http_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict:
    token = create_access_token("organizer", claims={"role": "admin", "name": "Organizer"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def api_key(monkeypatch) -> Iterator[str]:
    key = "test-admin-key"
    monkeypatch.setattr(settings, "ADMIN_API_KEYS", [key])
    yield key


@pytest.fixture
def scripted_random():
    return ScriptedRandom
