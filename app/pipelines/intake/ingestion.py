"""Request ingestion helpers (Stage 01 of the intake pipeline)."""

from __future__ import annotations

import logging
import mimetypes
from typing import Final

from starlette.datastructures import FormData, UploadFile

from app.services.storage import MediaStorage, StorageError
from app.utils.errors import PersistenceError, UnsupportedMediaError, ValidationError

from .types import MediaPart, StoredMedia, UploadSubmission

logger = logging.getLogger("app.services.intake_pipeline")

VOICE_FIELD: Final[str] = "voice"
VIDEO_FIELD: Final[str] = "video"


def resolve_content_type(content_type: str | None, filename: str | None) -> str | None:
    """Fall back to the filename when the client did not declare a content type."""

    if content_type and content_type != "application/octet-stream":
        return content_type
    if filename:
        guessed_type, _ = mimetypes.guess_type(filename)
        if guessed_type:
            return guessed_type
    return content_type or None


async def build_submission(form: FormData) -> UploadSubmission:
    """Read every uploaded part of a multipart form into an :class:`UploadSubmission`."""

    parts: list[MediaPart] = []
    for field_name, value in form.multi_items():
        if not isinstance(value, UploadFile):
            continue
        data = await value.read()
        await value.close()
        parts.append(
            MediaPart(
                field_name=field_name,
                data=data,
                content_type=resolve_content_type(value.content_type, value.filename),
                filename=value.filename,
            )
        )

    latitude = form.get("latitude")
    longitude = form.get("longitude")
    return UploadSubmission(
        parts=tuple(parts),
        latitude=latitude if isinstance(latitude, str) else None,
        longitude=longitude if isinstance(longitude, str) else None,
    )


def classify_part(field_name: str, storage: MediaStorage) -> str:
    """Return the storage directory for an upload field."""

    if field_name == VOICE_FIELD:
        return storage.audio_dir
    if field_name == VIDEO_FIELD:
        return storage.video_dir
    raise UnsupportedMediaError(f"Unsupported file field: {field_name}")


async def receive(submission: UploadSubmission, storage: MediaStorage) -> StoredMedia:
    """Validate the submission and write its media below the media root.

    Nothing is written unless a non-empty voice part is present. Files stay on
    disk even if a later stage or the case insert fails.
    """

    accepted: dict[str, tuple[str, MediaPart]] = {}
    rejected: list[str] = []
    for part in submission.parts:
        try:
            directory = classify_part(part.field_name, storage)
        except UnsupportedMediaError as exc:
            logger.warning("Skipping upload part field=%s: %s", part.field_name, exc)
            rejected.append(part.field_name)
            continue
        if part.field_name in accepted:
            logger.warning("Ignoring extra upload part field=%s", part.field_name)
            continue
        accepted[part.field_name] = (directory, part)

    voice = accepted.get(VOICE_FIELD)
    if voice is None or not voice[1].data:
        raise ValidationError()

    directory, part = voice
    try:
        voice_path = await storage.save(directory, part.data, content_type=part.content_type)
    except StorageError as exc:
        logger.exception("Could not store voice recording")
        raise PersistenceError(str(exc)) from exc

    video_path = None
    video = accepted.get(VIDEO_FIELD)
    if video is not None and video[1].data:
        directory, part = video
        try:
            video_path = await storage.save(directory, part.data, content_type=part.content_type)
        except StorageError:
            logger.exception("Could not store video recording; continuing without it")

    logger.info("Received submission voice=%s video=%s rejected=%s", voice_path, video_path, rejected)
    return StoredMedia(voice_path=voice_path, video_path=video_path, rejected=tuple(rejected))


__all__ = [
    "VIDEO_FIELD",
    "VOICE_FIELD",
    "build_submission",
    "classify_part",
    "receive",
    "resolve_content_type",
]
