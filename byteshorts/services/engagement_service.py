"""
Engagement service layer - Business logic for videos, counters and comments
Every write is a single RecordStore.mutate call
"""

from datetime import datetime, timezone
from typing import List, Optional

import structlog

from byteshorts.core.config import settings
from byteshorts.core.exceptions import EngagementValidationError
from byteshorts.schemas.video import Comment, NewVideo, VideoRecord
from byteshorts.services.record_store import RecordStore, new_comment_id

logger = structlog.get_logger()

ANONYMOUS_AUTHOR = "Anonymous"

WELCOME_VIDEO = {
    "title": "Welcome to ByteShorts",
    "topic": "Life",
    "media_ref": "https://commondatastorage.googleapis.com/gtv-videos-bucket/sample/BigBuckBunny.mp4",
    "author_id": "u1",
    "author_name": "Admin",
}


def _required_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise EngagementValidationError(f"{field} cannot be empty", field=field)
    return value.strip()


class EngagementService:
    """Service for video engagement operations"""

    def __init__(self, store: RecordStore, comment_max_length: int = None):
        self.store = store
        if comment_max_length is None:
            comment_max_length = settings.COMMENT_MAX_LENGTH
        self.comment_max_length = comment_max_length

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_videos(self) -> List[VideoRecord]:
        return await self.store.get_all()

    async def get_video(self, video_id: str) -> VideoRecord:
        return await self.store.get_by_id(video_id)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def publish_video(self, data: NewVideo) -> VideoRecord:
        """Create a video with zeroed counters and no comments"""
        record = VideoRecord(
            title=_required_text(data.title, "title"),
            topic=data.topic.strip() if data.topic else None,
            media_ref=_required_text(data.media_ref, "media_ref"),
            author_id=data.author_id,
            author_name=data.author_name,
            created_at=datetime.now(timezone.utc),
        )
        video = await self.store.insert(record)
        logger.info("video_published", video_id=video.id, author_id=video.author_id)
        return video

    async def delete_video(self, video_id: str) -> bool:
        """Remove a video and all of its comments; False if already gone"""
        removed = await self.store.remove(video_id)
        logger.info("video_deleted", video_id=video_id, removed=removed)
        return removed

    async def seed_welcome_video(self) -> Optional[VideoRecord]:
        """Insert the welcome video into an empty store"""
        if await self.store.count() > 0:
            return None
        record = VideoRecord(views=1203, likes=56, **WELCOME_VIDEO)
        video = await self.store.insert(record)
        logger.info("welcome_video_seeded", video_id=video.id)
        return video

    # ------------------------------------------------------------------
    # Engagement
    # ------------------------------------------------------------------

    async def increment_view(self, video_id: str) -> VideoRecord:
        """
        Count one playback view

        Not idempotent: each call is a separate view event. Callers decide
        when a playback start counts.
        """
        video = await self.store.mutate(
            video_id, lambda r: r.model_copy(update={"views": r.views + 1})
        )
        logger.debug("view_counted", video_id=video_id, views=video.views)
        return video

    async def increment_like(self, video_id: str) -> VideoRecord:
        """
        Count one like

        Not idempotent and not tied to a user: repeated calls keep counting.
        """
        video = await self.store.mutate(
            video_id, lambda r: r.model_copy(update={"likes": r.likes + 1})
        )
        logger.debug("like_counted", video_id=video_id, likes=video.likes)
        return video

    async def add_comment(
        self,
        video_id: str,
        author_id: Optional[str],
        author_name: Optional[str],
        text: Optional[str]
    ) -> Comment:
        """Prepend a comment to the video's comment list and return it"""
        body = _required_text(text, "text")
        if len(body) > self.comment_max_length:
            raise EngagementValidationError(
                f"Comment cannot be longer than {self.comment_max_length} characters",
                field="text",
                value=len(body)
            )

        comment = Comment(
            id=new_comment_id(),
            author_id=author_id,
            author_name=author_name.strip() if author_name and author_name.strip() else ANONYMOUS_AUTHOR,
            text=body,
            timestamp=datetime.now(timezone.utc),
        )

        await self.store.mutate(
            video_id, lambda r: r.model_copy(update={"comments": [comment, *r.comments]})
        )
        logger.info("comment_added", video_id=video_id, comment_id=comment.id, author_id=author_id)
        return comment

    async def edit_metadata(
        self,
        video_id: str,
        title: Optional[str] = None,
        topic: Optional[str] = None
    ) -> VideoRecord:
        """Update title and/or topic; None leaves a field unchanged"""
        changes = {}
        if title is not None:
            changes["title"] = _required_text(title, "title")
        if topic is not None:
            changes["topic"] = _required_text(topic, "topic")

        video = await self.store.mutate(video_id, lambda r: r.model_copy(update=changes))
        logger.info("video_metadata_edited", video_id=video_id, fields=sorted(changes))
        return video
