"""
Record store - durable keyed storage of video records

Every mutating domain operation goes through `RecordStore.mutate`, which
holds a per-video lock for the whole read-modify-write and commits before
returning. Different videos never wait on each other's lock.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Callable, Dict, List
from uuid import uuid4

import structlog
from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from byteshorts.core.exceptions import EngagementValidationError, StorageError, VideoNotFoundError
from byteshorts.db.database import create_session_factory, create_tables
from byteshorts.models.video import Video
from byteshorts.schemas.video import VideoRecord

logger = structlog.get_logger()

# Only these fields are ever written back by `mutate`
MUTABLE_FIELDS = ("title", "topic", "views", "likes", "comments")

Mutation = Callable[[VideoRecord], VideoRecord]


def new_video_id() -> str:
    return f"v{uuid4().hex}"


def new_comment_id() -> str:
    return f"c{uuid4().hex}"


class KeyedLock:
    """Table of asyncio locks, one per key, dropped when nobody uses them"""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    def __len__(self):
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, key: str):
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
            self._users[key] = 0
        self._users[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]


def _serialize_comments(record: VideoRecord) -> list:
    return [comment.model_dump(mode="json") for comment in record.comments]


class RecordStore:
    """Video records persisted through SQLAlchemy, serialized per video id"""

    def __init__(self, engine: AsyncEngine, session_factory: async_sessionmaker = None):
        self._engine = engine
        self._session_factory = session_factory or create_session_factory(engine)
        self._locks = KeyedLock()

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def create_schema(self):
        await create_tables(self._engine)

    @asynccontextmanager
    async def _storage_errors(self, operation: str, video_id: str = None):
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(
                "Storage operation failed",
                operation=operation,
                video_id=video_id,
                error=str(e)
            )
            raise StorageError(f"Storage failure during {operation}", operation=operation) from e

    async def get_all(self) -> List[VideoRecord]:
        """Every stored record, oldest first"""
        async with self._storage_errors("get_all"):
            async with self._session_factory() as session:
                result = await session.execute(select(Video).order_by(Video.created_at, Video.id))
                return [VideoRecord.model_validate(row) for row in result.scalars().all()]

    async def get_by_id(self, video_id: str) -> VideoRecord:
        async with self._storage_errors("get_by_id", video_id):
            async with self._session_factory() as session:
                row = await session.get(Video, video_id)
                if row is None:
                    raise VideoNotFoundError(video_id)
                return VideoRecord.model_validate(row)

    async def count(self) -> int:
        async with self._storage_errors("count"):
            async with self._session_factory() as session:
                result = await session.execute(select(func.count()).select_from(Video))
                return result.scalar() or 0

    async def mutate(self, video_id: str, fn: Mutation) -> VideoRecord:
        """
        Apply `fn` to the current record and persist the result atomically

        Args:
            video_id: Video to mutate
            fn: Pure function from the current record to the new record

        Returns:
            The record as persisted

        Raises:
            VideoNotFoundError: No video with this id; nothing is written
            EngagementValidationError: `fn` produced negative counters
            StorageError: The transaction could not be committed
        """
        async with self._locks.hold(video_id):
            async with self._storage_errors("mutate", video_id):
                async with self._session_factory() as session:
                    async with session.begin():
                        row = await session.get(Video, video_id)
                        if row is None:
                            raise VideoNotFoundError(video_id)

                        current = VideoRecord.model_validate(row)
                        proposed = fn(current)

                        for counter in ("views", "likes"):
                            if getattr(proposed, counter) < 0:
                                raise EngagementValidationError(
                                    f"{counter} cannot be negative",
                                    field=counter,
                                    value=getattr(proposed, counter)
                                )

                        row.title = proposed.title
                        row.topic = proposed.topic
                        row.views = proposed.views
                        row.likes = proposed.likes
                        row.comments = _serialize_comments(proposed)

        return current.model_copy(update={field: getattr(proposed, field) for field in MUTABLE_FIELDS})

    async def insert(self, record: VideoRecord) -> VideoRecord:
        """Persist a new record under a freshly assigned id"""
        stored = record.model_copy(update={"id": new_video_id()})

        async with self._storage_errors("insert", stored.id):
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(Video(
                        id=stored.id,
                        title=stored.title,
                        topic=stored.topic,
                        media_ref=stored.media_ref,
                        author_id=stored.author_id,
                        author_name=stored.author_name,
                        views=stored.views,
                        likes=stored.likes,
                        comments=_serialize_comments(stored),
                        created_at=stored.created_at,
                    ))

        return stored

    async def remove(self, video_id: str) -> bool:
        """Delete a record with its comments; False when it did not exist"""
        async with self._locks.hold(video_id):
            async with self._storage_errors("remove", video_id):
                async with self._session_factory() as session:
                    async with session.begin():
                        result = await session.execute(delete(Video).where(Video.id == video_id))
                        return (result.rowcount or 0) > 0
