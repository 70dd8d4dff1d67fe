"""Utility helpers for the emergency intake backend."""

from .errors import (
    BulkDeleteDisabledError,
    IntakeError,
    InvalidIdError,
    NotFoundError,
    PersistenceError,
    SeverityError,
    StoreUnavailableError,
    SummarizationError,
    TranscriptionError,
    UnsupportedMediaError,
    ValidationError,
)

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
