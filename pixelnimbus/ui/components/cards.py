"""Card components for dashboard listings."""
from __future__ import annotations

from datetime import datetime, timezone

from markupsafe import Markup, escape


def format_size(size: int | None) -> str:
    value = float(size or 0)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.2f} {unit}"
        value /= 1024
    return f"{value:.2f} GB"


def format_duration(seconds: float | None) -> str:
    total = float(seconds or 0)
    minutes = int(total // 60)
    remainder = round(total % 60)
    if remainder == 60:
        minutes, remainder = minutes + 1, 0
    return f"{minutes}:{remainder:02d}"


def relative_time(moment: datetime | None, *, now: datetime | None = None) -> str:
    if moment is None:
        return ""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    delta = (now or datetime.now(timezone.utc)) - moment
    seconds = max(int(delta.total_seconds()), 0)
    for span, label in ((86400, "day"), (3600, "hour"), (60, "minute")):
        if seconds >= span:
            count = seconds // span
            return f"{count} {label}{'s' if count != 1 else ''} ago"
    return "just now"


def video_card(video, *, source: str | None = None) -> Markup:
    """Render a single video summary with a delete control."""

    preview = (
        f'<video src="{escape(source)}" class="aspect-video w-full rounded-t-xl bg-black" preload="metadata" muted></video>'
        if source
        else '<div class="aspect-video w-full rounded-t-xl bg-gray-200"></div>'
    )
    return Markup(
        f"""
        <article class="rounded-xl border bg-white shadow-sm" data-video-id="{video.id}">
            {preview}
            <div class="space-y-2 p-4">
                <h3 class="text-lg font-semibold">{escape(video.title)}</h3>
                <p class="text-sm text-gray-600">{escape(video.description or "")}</p>
                <p class="text-xs text-gray-500">Uploaded {relative_time(video.created_at)} &middot; {format_duration(video.duration)}</p>
                <p class="text-xs text-gray-500">Original {format_size(video.original_size)} &rarr; Compressed {format_size(video.compressed_size)}</p>
                <button type="button" data-delete-video="{video.id}" class="rounded-lg border px-3 py-1 text-sm text-red-600 hover:bg-red-50">Delete</button>
            </div>
        </article>
        """
    )


__all__ = ["format_size", "format_duration", "relative_time", "video_card"]
