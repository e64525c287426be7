"""
Services package - Business logic layer
"""

from byteshorts.services.record_store import RecordStore
from byteshorts.services.engagement_service import EngagementService

__all__ = [
    'RecordStore',
    'EngagementService'
]
