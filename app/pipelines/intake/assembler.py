"""Record assembly and persistence (Stage 05) of the intake pipeline.

``IntakePipeline.ingest`` is the whole request flow: receive the media,
run the three inference stages through :func:`run_stage`, merge their
results with the documented fallbacks and insert one case row. Only the
receiver's validation and the final insert can fail the request.
"""

from __future__ import annotations

import asyncio
import logging

from app.config.settings import PipelineConfig, settings
from app.services.case_repository import CaseDocument, CaseRepository
from app.services.storage import MediaStorage
from app.telemetry import increment_cases_created
from app.views.cases import CaseResponse

from .ingestion import receive
from .parsing import DEFAULT_SEVERITY, Defaulted, parse_coordinate
from .severity import score_severity
from .stages import run_stage
from .summarization import summarize
from .transcription import transcribe
from .types import CompletionClient, StoredMedia, Transcriber, UploadSubmission

logger = logging.getLogger("app.services.intake_pipeline")
transcript_logger = logging.getLogger("app.logs.transcript")

FALLBACK_TRANSCRIPT = "Unknown emergency"
DEFAULT_TEXT = "Emergency call"
SUMMARY_FALLBACK_CHARS = 50


def assemble(
    media: StoredMedia,
    score: float,
    label: str,
    latitude: float,
    longitude: float,
) -> CaseDocument:
    """Build the document to insert; every field is always present."""

    return CaseDocument(
        voice=media.voice_path,
        video=media.video_path,
        text=label or DEFAULT_TEXT,
        latitude=float(latitude),
        longitude=float(longitude),
        score=float(score),
    )


def _coordinate(raw: str | None, axis: str) -> float:
    parsed = parse_coordinate(raw)
    if isinstance(parsed, Defaulted):
        logger.info("Defaulting %s to %s (%s)", axis, parsed.value, parsed.reason)
    return parsed.value


class IntakePipeline:
    """Per-request orchestration of one emergency submission."""

    def __init__(
        self,
        *,
        storage: MediaStorage,
        transcriber: Transcriber,
        completion_client: CompletionClient,
        repository: CaseRepository,
        config: PipelineConfig | None = None,
    ) -> None:
        self._storage = storage
        self._transcriber = transcriber
        self._completion_client = completion_client
        self._repository = repository
        self._config = config or settings.pipeline

    async def ingest(self, submission: UploadSubmission) -> CaseResponse:
        media = await receive(submission, self._storage)
        latitude = _coordinate(submission.latitude, "latitude")
        longitude = _coordinate(submission.longitude, "longitude")

        audio_path = self._storage.absolute_path(media.voice_path)
        transcript = await run_stage(
            "transcription",
            lambda: transcribe(audio_path, self._transcriber),
            FALLBACK_TRANSCRIPT,
            timeout=self._config.transcription_timeout_seconds,
        )
        transcript_logger.info("voice=%s | text=%s", media.voice_path, transcript)

        score, label = await self._describe(transcript)

        document = assemble(media, score, label, latitude, longitude)
        record = await self._repository.create(document)
        increment_cases_created()
        logger.info(
            "Saved case id=%s score=%s text=%s coords=(%s, %s)",
            record.id,
            document.score,
            document.text,
            document.latitude,
            document.longitude,
        )
        return CaseResponse.from_record(record)

    async def _describe(self, transcript: str) -> tuple[float, str]:
        """Run severity and summarization against the same fixed transcript."""

        timeout = self._config.completion_timeout_seconds
        max_chars = self._config.max_prompt_chars

        severity_stage = run_stage(
            "severity",
            lambda: score_severity(transcript, self._completion_client, max_prompt_chars=max_chars),
            DEFAULT_SEVERITY,
            timeout=timeout,
        )
        summary_stage = run_stage(
            "summarization",
            lambda: summarize(transcript, self._completion_client, max_prompt_chars=max_chars),
            transcript[:SUMMARY_FALLBACK_CHARS],
            timeout=timeout,
        )

        if self._config.concurrent_stages:
            score, label = await asyncio.gather(severity_stage, summary_stage)
        else:
            score = await severity_stage
            label = await summary_stage
        return score, label


__all__ = [
    "DEFAULT_TEXT",
    "FALLBACK_TRANSCRIPT",
    "IntakePipeline",
    "SUMMARY_FALLBACK_CHARS",
    "assemble",
]
