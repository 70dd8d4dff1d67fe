"""Shared fakes and fixtures for the intake backend tests."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.config.settings import MediaConfig, PipelineConfig
from app.controllers.dependencies import get_case_repository
from app.main import app
from app.services.case_repository import CaseDocument, parse_case_id
from app.services.llm_client import get_llm_client
from app.services.storage import MediaStorage, get_media_storage
from app.services.transcribe import TranscriptionResult, get_transcribe_service
from app.utils.errors import NotFoundError, PersistenceError


class FakeTranscribeService:
    """Stand-in for Amazon Transcribe that records which files it was given."""

    def __init__(self, transcript: str = "Test transcript", error: Exception | None = None):
        self.transcript = transcript
        self.error = error
        self.calls: list[Path] = []

    async def transcribe_file(self, audio_path):
        self.calls.append(Path(audio_path))
        if self.error is not None:
            raise self.error
        return TranscriptionResult(transcript=self.transcript, language_code="en-US")


class FakeCompletionClient:
    """Answers severity and summary prompts with canned replies."""

    def __init__(
        self,
        severity: str | None = "3",
        summary: str | None = "Cardiac arrest",
        severity_error: Exception | None = None,
        summary_error: Exception | None = None,
    ):
        self.severity = severity
        self.summary = summary
        self.severity_error = severity_error
        self.summary_error = summary_error
        self.prompts: list[str] = []

    async def invoke(self, *, system_prompt, user_prompt, max_tokens=None, temperature=None):
        self.prompts.append(user_prompt)
        if "severity score" in user_prompt:
            if self.severity_error is not None:
                raise self.severity_error
            return self.severity
        if self.summary_error is not None:
            raise self.summary_error
        return self.summary


@dataclass
class StoredCase:
    voice: str | None
    video: str | None
    text: str | None
    latitude: float | None
    longitude: float | None
    score: float | None
    created_at: datetime
    updated_at: datetime
    id: uuid.UUID = field(default_factory=uuid.uuid4)


class InMemoryCaseRepository:
    """Dict-backed repository with a deterministic, strictly increasing clock."""

    def __init__(self, fail_writes: bool = False):
        self.records: dict[uuid.UUID, StoredCase] = {}
        self.fail_writes = fail_writes
        self._now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now

    async def create(self, document: CaseDocument) -> StoredCase:
        if self.fail_writes:
            raise PersistenceError("Upload failed: store unavailable")
        now = self._tick()
        record = StoredCase(
            voice=document.voice,
            video=document.video,
            text=document.text,
            latitude=document.latitude,
            longitude=document.longitude,
            score=document.score,
            created_at=now,
            updated_at=now,
        )
        self.records[record.id] = record
        return record

    async def list_cases(self):
        return sorted(self.records.values(), key=lambda r: r.created_at, reverse=True)

    async def get_case(self, case_id: str) -> StoredCase:
        record = self.records.get(parse_case_id(case_id))
        if record is None:
            raise NotFoundError()
        return record

    async def delete_case(self, case_id: str) -> StoredCase:
        record = await self.get_case(case_id)
        del self.records[record.id]
        return record

    async def delete_all(self) -> int:
        count = len(self.records)
        self.records.clear()
        return count


@pytest.fixture
def media_storage(tmp_path: Path) -> MediaStorage:
    return MediaStorage(MediaConfig(root=str(tmp_path / "uploads")))


@pytest.fixture
def repository() -> InMemoryCaseRepository:
    return InMemoryCaseRepository()


@pytest.fixture
def transcriber() -> FakeTranscribeService:
    return FakeTranscribeService()


@pytest.fixture
def completion_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def pipeline_config() -> PipelineConfig:
    return PipelineConfig(
        transcription_timeout_seconds=5,
        completion_timeout_seconds=5,
    )


@pytest.fixture
def client(media_storage, repository, transcriber, completion_client):
    """Test client with the store, media root and inference services replaced."""

    app.dependency_overrides[get_case_repository] = lambda: repository
    app.dependency_overrides[get_media_storage] = lambda: media_storage
    app.dependency_overrides[get_transcribe_service] = lambda: transcriber
    app.dependency_overrides[get_llm_client] = lambda: completion_client

    yield TestClient(app)

    app.dependency_overrides.clear()


def stored_files(storage: MediaStorage) -> list[Path]:
    if not storage.root.exists():
        return []
    return sorted(path for path in storage.root.rglob("*") if path.is_file())
