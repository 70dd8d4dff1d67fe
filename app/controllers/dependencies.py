"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.database import Database
from app.pipelines.intake import IntakePipeline
from app.services.case_repository import CaseRepository
from app.services.llm_client import BedrockLlmClient, get_llm_client
from app.services.storage import MediaStorage, get_media_storage
from app.services.transcribe import TranscribeService, get_transcribe_service
from app.utils.errors import StoreUnavailableError


def get_database(request: Request) -> Database:
    """Return the store handle created at application startup."""

    database = getattr(request.app.state, "database", None)
    if database is None:
        raise StoreUnavailableError()
    return database


DatabaseDep = Annotated[Database, Depends(get_database)]


async def get_session(database: DatabaseDep) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency-compatible generator yielding a session."""

    async with database.session_scope() as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_case_repository(session: SessionDep) -> CaseRepository:
    return CaseRepository(session)


CaseRepositoryDep = Annotated[CaseRepository, Depends(get_case_repository)]
MediaStorageDep = Annotated[MediaStorage, Depends(get_media_storage)]
TranscriberDep = Annotated[TranscribeService, Depends(get_transcribe_service)]
CompletionClientDep = Annotated[BedrockLlmClient, Depends(get_llm_client)]


def get_intake_pipeline(
    repository: CaseRepositoryDep,
    storage: MediaStorageDep,
    transcriber: TranscriberDep,
    completion_client: CompletionClientDep,
) -> IntakePipeline:
    """Build a fresh pipeline for one submission."""

    return IntakePipeline(
        storage=storage,
        transcriber=transcriber,
        completion_client=completion_client,
        repository=repository,
        config=settings.pipeline,
    )


IntakePipelineDep = Annotated[IntakePipeline, Depends(get_intake_pipeline)]


__all__ = [
    "CaseRepositoryDep",
    "DatabaseDep",
    "IntakePipelineDep",
    "MediaStorageDep",
    "SessionDep",
    "get_case_repository",
    "get_database",
    "get_intake_pipeline",
    "get_session",
]
