"""Error taxonomy shared by the intake pipeline and case endpoints.

Each error carries the HTTP status the API answers with; the single
exception handler in ``app.main`` renders them as ``{message, error}``.
"""

from __future__ import annotations

from fastapi import status


class IntakeError(RuntimeError):
    """Base class for domain errors raised by the intake backend."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Request failed"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.message)
        self.detail = detail or self.message


class ValidationError(IntakeError):
    """Missing or malformed required input on a submission."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Voice file missing!"


class UnsupportedMediaError(IntakeError):
    """Upload part with an unrecognised field name."""

    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    message = "Unsupported file type"


class TranscriptionError(IntakeError):
    """Speech-to-text failed for the stored recording."""

    status_code = status.HTTP_502_BAD_GATEWAY
    message = "Transcription failed"


class SeverityError(IntakeError):
    """Severity scoring call failed upstream."""

    status_code = status.HTTP_502_BAD_GATEWAY
    message = "Severity scoring failed"


class SummarizationError(IntakeError):
    """Summary call failed upstream."""

    status_code = status.HTTP_502_BAD_GATEWAY
    message = "Summarization failed"


class PersistenceError(IntakeError):
    """The case store rejected a write."""

    message = "Upload failed"


class NotFoundError(IntakeError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Data not found"


class InvalidIdError(IntakeError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid ID format"


class BulkDeleteDisabledError(IntakeError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Bulk delete is disabled"


class StoreUnavailableError(IntakeError):
    """The case store was not opened at startup."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Database is not initialised"


__all__ = [
    "IntakeError",
    "ValidationError",
    "UnsupportedMediaError",
    "TranscriptionError",
    "SeverityError",
    "SummarizationError",
    "PersistenceError",
    "NotFoundError",
    "InvalidIdError",
    "BulkDeleteDisabledError",
    "StoreUnavailableError",
]
