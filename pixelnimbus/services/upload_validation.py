"""Checks shared by the multipart upload endpoints."""
from __future__ import annotations

import os
from pathlib import Path

from fastapi import UploadFile


class UploadValidationError(ValueError):
    """Raised when an uploaded file or its form fields are rejected."""


def measure_upload(file: UploadFile) -> int:
    """Return the byte size of ``file`` without consuming it."""

    size = getattr(file, "size", None)
    if size is not None:
        return int(size)
    fileobj = file.file
    position = fileobj.tell()
    fileobj.seek(0, os.SEEK_END)
    size = fileobj.tell()
    fileobj.seek(position)
    return size


def file_extension(filename: str | None, default: str) -> str:
    """Lower-cased extension of ``filename`` without the dot, or ``default``."""

    suffix = Path(filename or "").suffix.lower().lstrip(".")
    if suffix and suffix.isalnum() and len(suffix) <= 10:
        return suffix
    return default


def format_megabytes(size: int) -> str:
    return f"{size / (1024 * 1024):.2f}MB"


__all__ = ["UploadValidationError", "measure_upload", "file_extension", "format_megabytes"]
