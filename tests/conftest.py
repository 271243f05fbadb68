"""Pytest configuration and shared fixtures."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pricetracker.db.utils import init_db
from pricetracker.scrapers.platforms import detect_platform

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ============================================================================
# DATABASE
# ============================================================================

@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine shared across sessions of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        echo=False,
    )

    await init_db(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_db(session_factory):
    """Create an in-memory SQLite database session for testing."""
    async with session_factory() as session:
        yield session


# ============================================================================
# HTML FIXTURES
# ============================================================================

def read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def load_fixture():
    return read_fixture


# ============================================================================
# PROVIDER FAKES
# ============================================================================

class FakeProviderClient:
    """Stands in for BrightDataClient.

    pages maps a platform tag to the HTML returned by request_raw, or to
    an exception to raise. progress is the sequence of statuses reported
    by get_progress; the last one repeats once the list runs out.
    """

    def __init__(
        self,
        pages: Optional[Dict[str, Union[str, Exception]]] = None,
        progress: Optional[List[str]] = None,
        trigger_response: Optional[Dict[str, Any]] = None,
        snapshot: Any = None,
    ):
        self.pages = pages or {}
        self.progress = list(progress or ["ready"])
        self.trigger_response = (
            {"snapshot_id": "s_test"} if trigger_response is None else trigger_response
        )
        self.snapshot = snapshot if snapshot is not None else [{"title": "Snapshot item"}]
        self.calls: List[tuple] = []
        self.closed = False

    async def request_raw(self, url: str) -> str:
        self.calls.append(("request_raw", url))
        page = self.pages.get(detect_platform(url).value)
        if isinstance(page, Exception):
            raise page
        if page is None:
            raise AssertionError(f"unexpected raw request for {url}")
        return page

    async def trigger_dataset(self, dataset_id: str, url: str) -> Dict[str, Any]:
        self.calls.append(("trigger_dataset", dataset_id, url))
        return self.trigger_response

    async def get_progress(self, snapshot_id: str) -> Dict[str, Any]:
        self.calls.append(("get_progress", snapshot_id))
        status = self.progress.pop(0) if len(self.progress) > 1 else self.progress[0]
        return {"status": status}

    async def get_snapshot(self, snapshot_id: str) -> Any:
        self.calls.append(("get_snapshot", snapshot_id))
        return self.snapshot

    async def aclose(self) -> None:
        self.closed = True

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fake_sleep():
    return RecordingSleep()
