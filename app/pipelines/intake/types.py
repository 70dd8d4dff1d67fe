"""Typed containers shared across the intake pipeline.

These live in their own module so ingestion, the inference stages and the
assembler can import them without circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from app.services.transcribe import TranscriptionResult


@dataclass(frozen=True)
class MediaPart:
    """One binary part of a multipart submission."""

    field_name: str
    data: bytes
    content_type: str | None = None
    filename: str | None = None


@dataclass(frozen=True)
class UploadSubmission:
    """A caller-provided emergency report before anything is stored."""

    parts: tuple[MediaPart, ...] = ()
    latitude: str | None = None
    longitude: str | None = None


@dataclass(frozen=True)
class StoredMedia:
    """Relative media paths written by the receiver."""

    voice_path: str
    video_path: str | None = None
    rejected: tuple[str, ...] = field(default=())


class Transcriber(Protocol):
    async def transcribe_file(self, audio_path) -> TranscriptionResult: ...


class CompletionClient(Protocol):
    async def invoke(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str | None: ...


__all__ = [
    "CompletionClient",
    "MediaPart",
    "StoredMedia",
    "Transcriber",
    "UploadSubmission",
]
