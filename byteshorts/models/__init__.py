"""
Database models for ByteShorts
"""

from .video import Video

__all__ = ['Video']
