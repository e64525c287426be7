"""
Pydantic schemas for videos, bullet comments and overlay events
"""

from pydantic import AfterValidator, BaseModel, Field, ConfigDict, field_validator
from typing import Annotated, Optional, List
from datetime import datetime, timezone


def _as_utc(value):
    # SQLite hands back naive datetimes
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


# ============================================================================
# DOMAIN RECORDS
# ============================================================================

class Comment(BaseModel):
    """A bullet comment, owned by its parent video"""
    id: str
    author_id: Optional[str] = None
    author_name: str = "Anonymous"
    text: str
    timestamp: UtcDatetime

    model_config = ConfigDict(frozen=True)


class VideoRecord(BaseModel):
    """Full persisted state of one video"""
    id: Optional[str] = None
    title: str
    topic: Optional[str] = None
    media_ref: str
    author_id: str
    author_name: str
    views: int = Field(default=0, ge=0)
    likes: int = Field(default=0, ge=0)
    created_at: UtcDatetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    comments: List[Comment] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @field_validator('views', 'likes', mode='before')
    @classmethod
    def default_missing_counter(cls, v):
        return 0 if v is None else v

    @field_validator('comments', mode='before')
    @classmethod
    def default_missing_comments(cls, v):
        return [] if v is None else v


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class NewVideo(BaseModel):
    """Schema for publishing a video"""
    title: str = Field(..., max_length=255, description="Video title")
    topic: Optional[str] = Field(None, max_length=100, description="Topic tag")
    media_ref: str = Field(..., max_length=500, description="Media URL or storage key")
    author_id: str = Field(..., max_length=64)
    author_name: str = Field(..., max_length=255)


class VideoMetadataUpdate(BaseModel):
    """Schema for editing video metadata; absent fields stay unchanged"""
    title: Optional[str] = Field(None, max_length=255)
    topic: Optional[str] = Field(None, max_length=100)


class CommentCreate(BaseModel):
    """Schema for posting a bullet comment"""
    author_id: Optional[str] = Field(None, max_length=64)
    author_name: Optional[str] = Field(None, max_length=255)
    text: str = Field(..., description="Comment text")


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class VideoResponse(BaseModel):
    """Video as served to clients, with a playable URL"""
    id: str
    title: str
    topic: Optional[str] = None
    url: str
    media_ref: str
    author_id: str
    author_name: str
    views: int
    likes: int
    created_at: datetime
    comments: List[Comment] = Field(default_factory=list)


class OverlayEvent(BaseModel):
    """One lane-assigned, timed rendering of a comment"""
    comment_id: str
    lane: int = Field(..., ge=0)
    start_delay: float = Field(..., ge=0)
    duration: float = Field(..., gt=0)
    text: str

    model_config = ConfigDict(frozen=True)


class OverlayWindow(BaseModel):
    """Overlay events for the backlog window active at a playback position"""
    video_id: str
    position: float
    offset: int
    period: float
    events: List[OverlayEvent] = Field(default_factory=list)
