"""Convenience exports for ORM models."""
from .user import User
from .video import Video

__all__ = ["User", "Video"]
