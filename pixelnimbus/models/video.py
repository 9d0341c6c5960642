"""SQLAlchemy ORM model for uploaded videos."""
from __future__ import annotations

from sqlalchemy import JSON, BigInteger, Column, Float, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from pixelnimbus.database import Base
from .base import TimestampMixin, UUIDPrimaryKeyMixin


class Video(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "videos"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    public_id = Column(String(1024), nullable=False, unique=True)
    original_size = Column(BigInteger, nullable=False)
    compressed_size = Column(BigInteger, nullable=False)
    duration = Column(Float, nullable=False, default=0.0)
    # "metadata" is reserved on declarative classes.
    processing_metadata = Column("metadata", JSON, nullable=True)

    owner = relationship("User", back_populates="videos")


__all__ = ["Video"]
