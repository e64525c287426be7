"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings
from typing import List


COLLISION_POLICIES = ("stripe", "earliest_free")


class Settings(BaseSettings):
    """Application settings"""

    # Database - SQLite file through aiosqlite
    DATABASE_URL: str = "sqlite+aiosqlite:///./byteshorts.db"
    DATABASE_ECHO: bool = False

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Plain sqlite:// URLs need the async driver
        if self.DATABASE_URL.startswith("sqlite://"):
            self.DATABASE_URL = self.DATABASE_URL.replace("sqlite://", "sqlite+aiosqlite://", 1)

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"

    # Environment
    ENVIRONMENT: str = "development"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = False

    # Media references that are bare storage keys are served from here
    MEDIA_BASE_URL: str = "http://localhost:3001/uploads"

    # Insert the welcome video on start-up when the store is empty
    SEED_WELCOME_VIDEO: bool = True

    # Comments
    COMMENT_MAX_LENGTH: int = 500

    # Bullet comment overlay
    OVERLAY_LANE_COUNT: int = 5
    OVERLAY_BASE_DURATION: float = 6.0
    OVERLAY_JITTER_RANGE: float = 4.0
    OVERLAY_STAGGER: float = 1.5
    OVERLAY_COLLISION_POLICY: str = "stripe"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = True


# Create settings instance
settings = Settings()


def validate_settings(config: Settings = settings):
    """Validate critical application settings"""
    if not config.DATABASE_URL.startswith("sqlite+aiosqlite://"):
        raise ValueError(f"DATABASE_URL must be a SQLite URL, got '{config.DATABASE_URL}'")

    if config.OVERLAY_LANE_COUNT < 1:
        raise ValueError("OVERLAY_LANE_COUNT must be at least 1")

    if config.OVERLAY_BASE_DURATION <= 0:
        raise ValueError("OVERLAY_BASE_DURATION must be positive")

    if config.OVERLAY_JITTER_RANGE < 0 or config.OVERLAY_STAGGER < 0:
        raise ValueError("OVERLAY_JITTER_RANGE and OVERLAY_STAGGER must not be negative")

    if config.OVERLAY_COLLISION_POLICY not in COLLISION_POLICIES:
        raise ValueError(
            f"OVERLAY_COLLISION_POLICY must be one of {', '.join(COLLISION_POLICIES)}, "
            f"got '{config.OVERLAY_COLLISION_POLICY}'"
        )

    if config.COMMENT_MAX_LENGTH < 1:
        raise ValueError("COMMENT_MAX_LENGTH must be at least 1")


# Run validation
validate_settings()
