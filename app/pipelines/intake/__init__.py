"""Emergency intake pipeline package.

Modules are organised by the order in which `POST /upload` executes:

1. `ingestion` – read the multipart form, validate it and store the media.
2. `transcription` – turn the stored recording into English text.
3. `severity` – ask the completion model for a 1-10 rating.
4. `summarization` – ask the completion model for a short label.
5. `assembler` – merge results with their fallbacks and insert the case.

`stages.run_stage` is the single place where stage failures are absorbed.
"""

from .assembler import (
    DEFAULT_TEXT,
    FALLBACK_TRANSCRIPT,
    SUMMARY_FALLBACK_CHARS,
    IntakePipeline,
    assemble,
)
from .ingestion import build_submission, classify_part, receive, resolve_content_type
from .parsing import Defaulted, Parsed, parse_coordinate, parse_severity
from .severity import score_severity
from .stages import run_stage
from .summarization import summarize
from .transcription import transcribe
from .types import MediaPart, StoredMedia, UploadSubmission

__all__ = [
    "DEFAULT_TEXT",
    "FALLBACK_TRANSCRIPT",
    "SUMMARY_FALLBACK_CHARS",
    "IntakePipeline",
    "MediaPart",
    "StoredMedia",
    "UploadSubmission",
    "Defaulted",
    "Parsed",
    "assemble",
    "build_submission",
    "classify_part",
    "parse_coordinate",
    "parse_severity",
    "receive",
    "resolve_content_type",
    "run_stage",
    "score_severity",
    "summarize",
    "transcribe",
]
