"""
Video model: one row per published video with its comments embedded
"""

from sqlalchemy import Column, String, Text, Integer, DateTime, JSON, Index
from sqlalchemy.sql import func

from byteshorts.db.database import Base


class Video(Base):
    """Published short video with engagement counters and bullet comments"""
    __tablename__ = "videos"

    id = Column(String(64), primary_key=True)

    # Metadata
    title = Column(String(255), nullable=False)
    topic = Column(String(100), nullable=True)
    media_ref = Column(String(500), nullable=False)

    # Author
    author_id = Column(String(64), nullable=False)
    author_name = Column(String(255), nullable=False)

    # Stats
    views = Column(Integer, default=0, nullable=True)
    likes = Column(Integer, default=0, nullable=True)

    # Newest-first list of comment dicts; NULL on legacy rows
    comments = Column(JSON, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index('ix_videos_created_at', 'created_at'),
    )

    def __repr__(self):
        return f"<Video(id={self.id}, title={self.title}, views={self.views}, likes={self.likes})>"
