"""Emergency case endpoints.

`POST /upload` runs the intake pipeline (see `app.pipelines.intake`):

1. Receive the multipart form and store the voice/video files.
2. Transcribe the voice recording.
3. Score severity and derive a short label from the transcript.
4. Insert the case and answer with its canonical projection.

The remaining routes list, fetch and delete stored cases.
"""

import logging

from fastapi import APIRouter, Request, status

from app.config.settings import settings
from app.controllers.dependencies import (
    CaseRepositoryDep,
    IntakePipelineDep,
    MediaStorageDep,
)
from app.pipelines.intake import build_submission
from app.services.storage import StorageError
from app.utils.errors import BulkDeleteDisabledError
from app.views.cases import BulkDeleteResponse, CaseResponse, DeleteCaseResponse

router = APIRouter(tags=["cases"])

logger = logging.getLogger(__name__)


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_case(request: Request, pipeline: IntakePipelineDep) -> CaseResponse:
    """Store an emergency recording and create its case record."""

    form = await request.form()
    submission = await build_submission(form)
    logger.info(
        "Upload request fields=%s latitude=%s longitude=%s",
        [part.field_name for part in submission.parts],
        submission.latitude,
        submission.longitude,
    )
    return await pipeline.ingest(submission)


@router.get("/uploads")
async def list_cases(repository: CaseRepositoryDep) -> list[CaseResponse]:
    """Return every case, most recent first."""

    records = await repository.list_cases()
    logger.info("Found records: %d", len(records))
    return [CaseResponse.from_record(record) for record in records]


@router.get("/uploads/{case_id}")
async def get_case(case_id: str, repository: CaseRepositoryDep) -> CaseResponse:
    record = await repository.get_case(case_id)
    return CaseResponse.from_record(record)


@router.delete("/uploads/{case_id}")
async def delete_case(
    case_id: str,
    repository: CaseRepositoryDep,
    storage: MediaStorageDep,
) -> DeleteCaseResponse:
    """Delete one case; media files are kept unless cascade delete is enabled."""

    record = await repository.delete_case(case_id)

    if settings.media.delete_on_case_delete:
        for relative_path in (record.voice, record.video):
            if not relative_path:
                continue
            try:
                removed = await storage.delete(relative_path)
            except StorageError as exc:
                logger.warning("Could not remove media %s for case %s: %s", relative_path, record.id, exc)
                continue
            logger.info("Removed media %s for case %s (existed=%s)", relative_path, record.id, removed)

    return DeleteCaseResponse(message="Data successfully deleted", id=str(record.id))


@router.delete("/uploads")
@router.get("/delete-all-db")
async def delete_all_cases(repository: CaseRepositoryDep) -> BulkDeleteResponse:
    """Administrative wipe of every case; media files are left on disk."""

    if not settings.enable_bulk_delete:
        raise BulkDeleteDisabledError()

    deleted = await repository.delete_all()
    return BulkDeleteResponse(message="Database cleared!", deletedCount=deleted)
