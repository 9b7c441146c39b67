"""
Media storage client and batch uploads.
"""
import logging
import os
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote

from fastapi.concurrency import run_in_threadpool

from marketplace.config import config
from marketplace.schemas.response import UploadLine

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_PREFIXES = ("image/", "video/")
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class StorageError(Exception):
    """Raised when a media object cannot be stored or removed."""


@dataclass
class MediaUpload:
    filename: str
    content_type: str
    payload: bytes


class LocalMediaStorage:
    """Stores media objects on disk and serves them under ``base_url``."""

    def __init__(self, root: str = config.MEDIA_ROOT, base_url: str = config.MEDIA_BASE_URL):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    def _path_for(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents:
            raise StorageError(f"Refusing to touch path outside media root: {path}")
        return target

    def _write(self, path: str, payload: bytes) -> None:
        target = self._path_for(path)
        if target.exists():
            raise StorageError(f"Object already exists: {path}")
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as f:
            f.write(payload)

    async def upload(self, path: str, payload: bytes, content_type: str) -> str:
        if not content_type.startswith(ALLOWED_CONTENT_PREFIXES):
            raise StorageError(f"Unsupported content type: {content_type}")
        if len(payload) > config.MAX_UPLOAD_BYTES:
            raise StorageError(f"File too large: {len(payload)} bytes")
        try:
            await run_in_threadpool(self._write, path, payload)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")
        return self.public_url(path)

    def path_from_url(self, url: str) -> str | None:
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            return None
        return unquote(url[len(prefix):])

    async def remove(self, url: str) -> None:
        path = self.path_from_url(url)
        if path is None:
            raise StorageError(f"Not a stored media URL: {url}")
        try:
            await run_in_threadpool(os.remove, self._path_for(path))
        except OSError as e:
            raise StorageError(f"Failed to remove {path}: {e}")


def object_path(profile_id: str, filename: str) -> str:
    stem, ext = os.path.splitext(filename)
    safe_stem = _UNSAFE_CHARS.sub("-", stem).strip("-") or "file"
    return f"{profile_id}/{uuid.uuid4().hex[:8]}-{safe_stem}{ext.lower()}"


async def upload_batch(
    storage: LocalMediaStorage, profile_id: str, files: list[MediaUpload]
) -> list[UploadLine]:
    """Upload every file independently; a failed file never aborts the batch."""
    results = []
    for upload in files:
        try:
            url = await storage.upload(
                object_path(profile_id, upload.filename),
                upload.payload,
                upload.content_type,
            )
        except StorageError as e:
            logger.error(f"Upload of {upload.filename} for {profile_id} failed: {e}")
            results.append(UploadLine(filename=upload.filename, success=False, error=str(e)))
            continue
        results.append(UploadLine(filename=upload.filename, success=True, url=url))
    return results
