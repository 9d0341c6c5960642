"""Account rows; videos hang off the owning user."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from pixelnimbus.database import Base
from .base import TimestampMixin, UUIDPrimaryKeyMixin


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(150), nullable=False, default="Anonymous")
    hashed_password = Column(String(255), nullable=False)
    last_active_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    videos = relationship("Video", back_populates="owner", cascade="all, delete-orphan")


__all__ = ["User"]
