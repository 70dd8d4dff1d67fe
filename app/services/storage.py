"""Local media storage for uploaded recordings."""

from __future__ import annotations

import logging
import secrets
import time
from pathlib import Path, PurePosixPath

from fastapi.concurrency import run_in_threadpool

from app.config.settings import MediaConfig, settings

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "webm"


class StorageError(RuntimeError):
    """Raised when a media file cannot be written or removed."""


def _extension_from_mime(mime_type: str | None, default: str = DEFAULT_EXTENSION) -> str:
    """Return the MIME subtype without parameters, e.g. ``webm;codecs=opus`` -> ``webm``."""

    if not mime_type or "/" not in mime_type:
        return default
    subtype = mime_type.split("/", 1)[1]
    subtype = subtype.split(";", 1)[0].strip().lower()
    return subtype or default


def new_media_filename(mime_type: str | None, default_extension: str = DEFAULT_EXTENSION) -> str:
    """Return a collision-resistant ``{hex}-{millis}.{ext}`` name for an upload."""

    identifier = secrets.token_hex(16)
    millis = time.time_ns() // 1_000_000
    return f"{identifier}-{millis}.{_extension_from_mime(mime_type, default_extension)}"


class MediaStorage:
    """Write and remove media files below a fixed root directory.

    Returned paths are relative to the root and always use ``/`` so stored
    records stay valid when the root moves between hosts.
    """

    def __init__(self, config: MediaConfig | None = None) -> None:
        self._config = config or settings.media
        self.root = Path(self._config.root)

    @property
    def audio_dir(self) -> str:
        return self._config.audio_dir

    @property
    def video_dir(self) -> str:
        return self._config.video_dir

    def absolute_path(self, relative_path: str) -> Path:
        """Resolve a stored relative path, refusing anything outside the root."""

        root = self.root.resolve()
        candidate = (root / PurePosixPath(relative_path)).resolve()
        if candidate != root and root not in candidate.parents:
            raise StorageError(f"Path escapes media root: {relative_path}")
        return candidate

    async def save(self, directory: str, data: bytes, *, content_type: str | None) -> str:
        """Persist ``data`` under ``directory`` and return its relative path."""

        filename = new_media_filename(content_type, self._config.default_extension)
        relative = PurePosixPath(directory) / filename
        target = self.root / directory / filename

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        try:
            await run_in_threadpool(_write)
        except OSError as exc:
            raise StorageError(f"Failed to store media file: {exc}") from exc

        logger.info("Saved media file %s (%d bytes)", relative.as_posix(), len(data))
        return relative.as_posix()

    async def delete(self, relative_path: str) -> bool:
        """Remove a stored file; returns False when it was already gone."""

        target = self.absolute_path(relative_path)

        def _remove() -> bool:
            try:
                target.unlink()
            except FileNotFoundError:
                return False
            return True

        try:
            return await run_in_threadpool(_remove)
        except OSError as exc:
            raise StorageError(f"Failed to delete media file: {exc}") from exc


def get_media_storage() -> MediaStorage:
    """Return a media storage bound to the configured root."""
    return MediaStorage(settings.media)


__all__ = [
    "DEFAULT_EXTENSION",
    "MediaStorage",
    "StorageError",
    "get_media_storage",
    "new_media_filename",
]
