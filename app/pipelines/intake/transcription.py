"""Transcription stage (Stage 02) of the intake pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

from app.utils.errors import TranscriptionError

from .types import Transcriber

logger = logging.getLogger("app.services.intake_pipeline")


async def transcribe(audio_path: str | Path, service: Transcriber) -> str:
    """Return the English transcript of a stored recording."""

    try:
        result = await service.transcribe_file(audio_path)
    except TranscriptionError:
        raise
    except Exception as exc:
        raise TranscriptionError(f"Transcription service error: {exc}") from exc

    logger.info("Transcript for %s: %s", audio_path, result.transcript)
    return result.transcript


__all__ = ["transcribe"]
