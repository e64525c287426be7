"""
Dependency functions for API endpoints
"""

from fastapi import Request

from byteshorts.services.engagement_service import EngagementService
from byteshorts.services.overlay_scheduler import OverlayConfig


def get_engagement_service(request: Request) -> EngagementService:
    """Engagement service created during application start-up"""
    return request.app.state.engagement_service


def get_overlay_config(request: Request) -> OverlayConfig:
    return request.app.state.overlay_config
