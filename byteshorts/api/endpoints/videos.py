"""
Public API endpoints for short videos, engagement counters and bullet comments
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from byteshorts.api.deps import get_engagement_service, get_overlay_config
from byteshorts.core.config import settings
from byteshorts.schemas.video import (
    Comment,
    CommentCreate,
    NewVideo,
    OverlayWindow,
    VideoMetadataUpdate,
    VideoRecord,
    VideoResponse,
)
from byteshorts.services.engagement_service import EngagementService
from byteshorts.services.overlay_scheduler import OverlayConfig, schedule_at, window_offset

router = APIRouter()


def media_url(media_ref: str) -> str:
    """Playable URL for a media reference; bare keys live under MEDIA_BASE_URL"""
    if media_ref.startswith(("http://", "https://")):
        return media_ref
    return f"{settings.MEDIA_BASE_URL.rstrip('/')}/{media_ref.lstrip('/')}"


def to_response(video: VideoRecord) -> VideoResponse:
    return VideoResponse(url=media_url(video.media_ref), **video.model_dump())


@router.get("", response_model=List[VideoResponse])
async def list_videos(service: EngagementService = Depends(get_engagement_service)):
    """Get all videos with their comments"""
    return [to_response(video) for video in await service.list_videos()]


@router.post("", response_model=VideoResponse)
async def publish_video(
    video_data: NewVideo,
    service: EngagementService = Depends(get_engagement_service)
):
    """Publish a video that references already-uploaded media"""
    return to_response(await service.publish_video(video_data))


@router.get("/{video_id}", response_model=VideoResponse)
async def get_video(video_id: str, service: EngagementService = Depends(get_engagement_service)):
    return to_response(await service.get_video(video_id))


@router.put("/{video_id}", response_model=VideoResponse)
async def edit_video(
    video_id: str,
    update: VideoMetadataUpdate,
    service: EngagementService = Depends(get_engagement_service)
):
    """Edit title and/or topic"""
    video = await service.edit_metadata(video_id, title=update.title, topic=update.topic)
    return to_response(video)


@router.delete("/{video_id}")
async def delete_video(video_id: str, service: EngagementService = Depends(get_engagement_service)):
    deleted = await service.delete_video(video_id)
    return {
        "message": "Video deleted" if deleted else "Video already absent",
        "deleted": deleted
    }


@router.post("/{video_id}/view")
async def increment_video_view(video_id: str, service: EngagementService = Depends(get_engagement_service)):
    """
    Increment view count for a video
    Called when a user starts playback
    """
    video = await service.increment_view(video_id)
    return {"views": video.views}


@router.post("/{video_id}/like")
async def increment_video_like(video_id: str, service: EngagementService = Depends(get_engagement_service)):
    video = await service.increment_like(video_id)
    return {"likes": video.likes}


@router.post("/{video_id}/comments", response_model=Comment)
async def add_video_comment(
    video_id: str,
    comment_data: CommentCreate,
    service: EngagementService = Depends(get_engagement_service)
):
    """Add a bullet comment; it becomes the first entry of the comment list"""
    return await service.add_comment(
        video_id,
        author_id=comment_data.author_id,
        author_name=comment_data.author_name,
        text=comment_data.text
    )


@router.get("/{video_id}/overlay", response_model=OverlayWindow)
async def get_video_overlay(
    video_id: str,
    position: float = Query(0.0, ge=0, allow_inf_nan=False, description="Playback position in seconds"),
    seed: Optional[int] = Query(None, description="Seed for reproducible durations"),
    service: EngagementService = Depends(get_engagement_service),
    config: OverlayConfig = Depends(get_overlay_config)
):
    """Bullet comment overlay events for the window active at a playback position"""
    video = await service.get_video(video_id)
    return OverlayWindow(
        video_id=video.id,
        position=position,
        offset=window_offset(len(video.comments), position, config),
        period=config.period,
        events=schedule_at(video.comments, position, config, seed=seed),
    )
