"""
Custom exception classes for engagement operations and global error handling
"""

from typing import Optional, Dict, Any
from fastapi import status


class EngagementError(Exception):
    """Base exception for engagement-related errors"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class VideoNotFoundError(EngagementError):
    """Exception raised when a video id does not exist"""

    def __init__(self, video_id: str = None):
        if video_id:
            message = f"Video with ID {video_id} not found"
        else:
            message = "Video not found"

        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"video_id": video_id} if video_id else None
        )
        self.video_id = video_id


class EngagementValidationError(EngagementError):
    """Exception raised when input validation fails"""

    def __init__(self, message: str, field: str = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )
        self.field = field


class StorageError(EngagementError):
    """Exception raised when a durable write or read fails"""

    def __init__(self, message: str, operation: str = None):
        details = {"retryable": True}
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details
        )
        self.operation = operation


def create_error_response(error: EngagementError) -> dict:
    """
    Create a standardized error response from EngagementError

    Args:
        error: EngagementError instance

    Returns:
        Dictionary with error details in standardized format
    """
    response = {
        "message": error.message,
        "status": False,
        "error_type": error.__class__.__name__
    }

    if error.details:
        response["details"] = error.details

    return response
