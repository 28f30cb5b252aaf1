"""pytest configuration and shared fixtures

Test infrastructure:
- a fresh SQLite database per test (tmp_path)
- FastAPI app driven through httpx AsyncClient / ASGITransport
- sample meeting fixtures
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from boardtime_api.app.core.config import settings
from boardtime_api.app.core.db import init_db
from boardtime_api.app.main import app
from boardtime_api.app.services.meeting_service import MeetingService


FUTURE_DEADLINE = "2099-12-31T23:59:00Z"
OPTION_DATES = [
    "2099-10-25T14:00:00Z",
    "2099-10-26T14:00:00Z",
    "2099-10-27T14:00:00Z",
]


# ===== Database =====


@pytest.fixture(autouse=True)
def test_db(tmp_path, monkeypatch):
    """Point the app at an empty database for every test.

    PBKDF2 rounds are lowered so that hashing does not dominate the
    run time.
    """
    db_path = tmp_path / "boardtime_test.db"
    monkeypatch.setattr(settings, "database_url", str(db_path))
    monkeypatch.setattr(settings, "password_iterations", 1_000)
    init_db()
    return db_path


# ===== Clock =====


@pytest.fixture
def before_deadline() -> datetime:
    return datetime(2099, 12, 31, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def after_deadline() -> datetime:
    return datetime(2100, 1, 1, 0, 0, tzinfo=timezone.utc)


# ===== Data =====


@pytest.fixture
async def meeting_id() -> str:
    """A meeting with three date options and an owner password of 'owner-pw'."""
    return await MeetingService.create_meeting(
        title="BoardTime Kickoff",
        description="First board game night",
        password="owner-pw",
        deadline=FUTURE_DEADLINE,
        date_options=OPTION_DATES,
    )


@pytest.fixture
async def option_ids(meeting_id: str) -> list[str]:
    """Option ids of ``meeting_id`` in chronological order."""
    meeting = await MeetingService.get_meeting(meeting_id)
    return [option.id for option in meeting.date_options]


# ===== HTTP client =====


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Async client bound to the FastAPI app (no network)."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
