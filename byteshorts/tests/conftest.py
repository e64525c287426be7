"""
Test configuration and fixtures
"""

import pytest
from typing import AsyncGenerator
from datetime import datetime, timedelta, timezone
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncEngine

from byteshorts.api.deps import get_engagement_service, get_overlay_config
from byteshorts.db.database import create_engine, drop_tables
from byteshorts.main import app
from byteshorts.schemas.video import Comment, NewVideo, VideoRecord
from byteshorts.services.engagement_service import EngagementService
from byteshorts.services.overlay_scheduler import OverlayConfig
from byteshorts.services.record_store import RecordStore


@pytest.fixture
def database_url(tmp_path) -> str:
    """File-backed SQLite database, so engines can be restarted"""
    return f"sqlite+aiosqlite:///{tmp_path / 'byteshorts-test.db'}"


@pytest.fixture
async def test_engine(database_url) -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with the schema in place"""
    engine = create_engine(database_url, echo=False)
    yield engine
    await drop_tables(engine)
    await engine.dispose()


@pytest.fixture
async def store(test_engine) -> RecordStore:
    record_store = RecordStore(test_engine)
    await record_store.create_schema()
    return record_store


@pytest.fixture
def service(store) -> EngagementService:
    return EngagementService(store, comment_max_length=200)


@pytest.fixture
def overlay_config() -> OverlayConfig:
    return OverlayConfig(lane_count=5, base_duration=6.0, jitter_range=4.0, per_entry_stagger=1.5)


@pytest.fixture
async def client(service, overlay_config) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with service dependency override"""
    app.dependency_overrides[get_engagement_service] = lambda: service
    app.dependency_overrides[get_overlay_config] = lambda: overlay_config

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://localhost") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def new_video() -> NewVideo:
    return NewVideo(
        title="Sunset over the bay",
        topic="Travel",
        media_ref="1700000000-sunset.mp4",
        author_id="u42",
        author_name="maya",
    )


@pytest.fixture
async def test_video(service, new_video) -> VideoRecord:
    """Create a published test video"""
    return await service.publish_video(new_video)


@pytest.fixture
def sample_comments():
    """Eight newest-first comments, c0 being the most recent"""
    base = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    return [
        Comment(
            id=f"c{i}",
            author_id=f"u{i}",
            author_name=f"viewer{i}",
            text=f"comment number {i}",
            timestamp=base - timedelta(seconds=i),
        )
        for i in range(8)
    ]
