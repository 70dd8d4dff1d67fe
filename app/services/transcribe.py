"""Amazon Transcribe integration helpers using Streaming API."""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
import tempfile
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from amazon_transcribe.client import TranscribeStreamingClient
from amazon_transcribe.handlers import TranscriptResultStreamHandler
from amazon_transcribe.model import TranscriptEvent
from fastapi.concurrency import run_in_threadpool

from app.config.settings import AwsConfig, TranscribeConfig, settings
from app.utils.errors import TranscriptionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscriptionResult:
    """Structured transcription outcome returned to the pipeline."""

    transcript: str
    language_code: str | None = None


class TranscribeService:
    """High-level facade for streaming stored recordings to Amazon Transcribe."""

    def __init__(
        self,
        config: TranscribeConfig | None = None,
        aws: AwsConfig | None = None,
    ) -> None:
        self._config = config or settings.transcribe
        aws = aws or settings.aws

        # Ensure credentials are available to the SDK
        if aws.access_key:
            os.environ["AWS_ACCESS_KEY_ID"] = aws.access_key
        if aws.secret_key:
            os.environ["AWS_SECRET_ACCESS_KEY"] = aws.secret_key

        self._client = TranscribeStreamingClient(region=self._config.region)

    async def transcribe_file(self, audio_path: str | Path) -> TranscriptionResult:
        """Read a stored recording and return its English transcript."""

        path = Path(audio_path)
        try:
            audio_bytes = await run_in_threadpool(path.read_bytes)
        except FileNotFoundError as exc:
            raise TranscriptionError(f"Audio file not found: {path}") from exc
        except OSError as exc:
            raise TranscriptionError(f"Could not read audio file {path}: {exc}") from exc

        return await self.transcribe_bytes(audio_bytes)

    async def transcribe_bytes(self, audio_bytes: bytes) -> TranscriptionResult:
        """Stream audio to Transcribe and return the full transcript."""

        if not audio_bytes:
            raise TranscriptionError("The uploaded audio file is empty.")

        pcm_data = await self._convert_to_pcm(audio_bytes)

        try:
            stream = await self._client.start_stream_transcription(
                language_code=self._config.language_code,
                media_sample_rate_hz=self._config.media_sample_rate_hz,
                media_encoding=self._config.media_encoding,
            )
        except Exception as exc:
            raise TranscriptionError(f"Could not start transcription stream: {exc}") from exc

        handler = _SimpleTranscriptHandler(stream.output_stream)

        async def write_chunks():
            chunk_size = self._config.chunk_size
            bytes_per_sec = self._config.media_sample_rate_hz * 2  # 16-bit = 2 bytes
            sleep_time = chunk_size / bytes_per_sec if self._config.realtime_pacing else 0

            logger.info(
                "Starting stream. Total bytes: %d. Chunk size: %d. Sleep: %.4fs",
                len(pcm_data),
                chunk_size,
                sleep_time,
            )

            for i in range(0, len(pcm_data), chunk_size):
                chunk = pcm_data[i : i + chunk_size]
                await stream.input_stream.send_audio_event(audio_chunk=chunk)
                if sleep_time:
                    await asyncio.sleep(sleep_time)

            logger.info("Finished streaming audio bytes. Ending stream.")
            await stream.input_stream.end_stream()

        try:
            await asyncio.gather(write_chunks(), handler.handle_events())
        except Exception as exc:
            logger.error("Streaming loop failed: %s", exc)
            raise TranscriptionError(f"Streaming transcription failed: {exc}") from exc

        logger.info("Transcription complete. Length: %d", len(handler.transcript))
        return TranscriptionResult(
            transcript=handler.transcript.strip(),
            language_code=self._config.language_code,
        )

    async def _convert_to_pcm(self, audio_bytes: bytes) -> bytes:
        """Convert input audio to raw PCM s16le via ffmpeg using a thread."""
        return await run_in_threadpool(self._convert_to_pcm_sync, audio_bytes)

    def _convert_to_pcm_sync(self, audio_bytes: bytes) -> bytes:
        """Synchronous ffmpeg conversion using a temporary file to support seeking."""

        with tempfile.NamedTemporaryFile(delete=False, suffix=".tmp") as tmp_file:
            tmp_file.write(audio_bytes)
            tmp_path = tmp_file.name

        try:
            process = subprocess.run(
                [
                    "ffmpeg",
                    "-y",
                    "-i", tmp_path,
                    "-f", "s16le",
                    "-ac", "1",
                    "-ar", str(self._config.media_sample_rate_hz),
                    "pipe:1",
                ],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
            )
        except FileNotFoundError as exc:
            raise TranscriptionError("ffmpeg is not installed or not on PATH") from exc
        except subprocess.CalledProcessError as exc:
            error_msg = exc.stderr.decode("utf-8", errors="replace") if exc.stderr else "No stderr"
            logger.error("ffmpeg failed. stderr: %s", error_msg)
            raise TranscriptionError(f"ffmpeg failed to convert audio to PCM: {error_msg}") from exc
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

        if not process.stdout:
            logger.warning(
                "ffmpeg produced empty output. stderr: %s",
                process.stderr.decode("utf-8", errors="replace"),
            )
            raise TranscriptionError("ffmpeg produced no audio samples")
        return process.stdout


class _SimpleTranscriptHandler(TranscriptResultStreamHandler):
    def __init__(self, transcript_result_stream):
        super().__init__(transcript_result_stream)
        self.transcript = ""

    async def handle_transcript_event(self, transcript_event: TranscriptEvent):
        results = transcript_event.transcript.results
        for result in results:
            if not result.is_partial:
                for alt in result.alternatives:
                    logger.debug("Received transcript chunk: %s...", alt.transcript[:20])
                    self.transcript += alt.transcript + " "


@lru_cache(maxsize=1)
def get_transcribe_service() -> TranscribeService:
    """Return a lazily-instantiated transcribe service singleton."""
    return TranscribeService(settings.transcribe, settings.aws)


__all__ = [
    "TranscribeService",
    "TranscriptionError",
    "TranscriptionResult",
    "get_transcribe_service",
]
