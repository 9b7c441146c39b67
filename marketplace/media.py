"""
Media reference classification shared by the mapper, the carousel and the admin stats.
"""
import enum
from urllib.parse import urlparse

from pydantic import BaseModel

VIDEO_EXTENSIONS = (".mp4", ".webm", ".mov", ".m4v", ".ogv")
PLACEHOLDER_IMAGE = "/static/placeholder.webp"


class MediaKind(str, enum.Enum):
    IMAGE = "image"
    VIDEO = "video"


class MediaItem(BaseModel):
    url: str
    kind: MediaKind

    @property
    def is_video(self) -> bool:
        return self.kind == MediaKind.VIDEO


def is_video_url(url: str | None) -> bool:
    """Classify a media reference by its path extension or a /video/ path segment."""
    if not url:
        return False
    path = urlparse(url).path.lower()
    return path.endswith(VIDEO_EXTENSIONS) or "/video/" in path


def resolve_media_url(url: str | None) -> str:
    """Return a renderable URL, substituting the placeholder for malformed references."""
    if not url or not url.strip():
        return PLACEHOLDER_IMAGE
    parsed = urlparse(url.strip())
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return url.strip()
    if not parsed.scheme and parsed.path.startswith("/"):
        return url.strip()
    return PLACEHOLDER_IMAGE


def to_media_items(urls: list[str]) -> list[MediaItem]:
    items = []
    for url in urls:
        resolved = resolve_media_url(url)
        kind = MediaKind.VIDEO if is_video_url(resolved) else MediaKind.IMAGE
        items.append(MediaItem(url=resolved, kind=kind))
    return items
