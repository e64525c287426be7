"""
Pydantic schemas for records, requests and responses
"""

from .video import *
