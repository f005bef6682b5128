import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import AsyncIterator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.models import Base, FeedbackItem, Source, Urgency, Category, TriageStatus  # noqa: E402

BASE_TIME = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)


@pytest.fixture()
def test_db_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture()
def app(test_db_url: str):
    from app.main import create_app
    return create_app(database_url=test_db_url, debug=True, create_all=True)


@pytest_asyncio.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac


@pytest_asyncio.fixture()
async def session(test_db_url: str) -> AsyncIterator[AsyncSession]:
    """A session on a fresh database, for calling the triage core directly."""
    engine = create_async_engine(test_db_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async_session = async_sessionmaker(engine, expire_on_commit=False)
    async with async_session() as s:
        yield s
    await engine.dispose()


@pytest.fixture()
def make_item(session: AsyncSession):
    """Insert a feedback row with explicit state, bypassing the ingestion rules."""
    counter = {"n": 0}

    async def _make(
        urgency=None,
        created_offset_minutes: int = 0,
        source: str = "discord",
        category=None,
        triage_status=None,
        triaged_at=None,
        resolved_at=None,
    ) -> FeedbackItem:
        counter["n"] += 1
        status = TriageStatus(triage_status) if triage_status else None
        item = FeedbackItem(
            source=Source(source),
            source_id=f"evt_{counter['n']}",
            author=f"user_{counter['n']}",
            content=f"feedback #{counter['n']}",
            created_at=BASE_TIME + timedelta(minutes=created_offset_minutes),
            urgency=Urgency(urgency) if urgency else None,
            category=Category(category) if category else None,
            triage_status=status,
            triaged_at=triaged_at or (BASE_TIME if status else None),
            resolved_at=resolved_at,
        )
        session.add(item)
        await session.commit()
        return item

    return _make


@pytest.fixture()
def base_time() -> datetime:
    return BASE_TIME
