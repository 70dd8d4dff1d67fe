"""Service layer helpers for storage and external integrations."""

from .case_repository import CaseDocument, CaseRepository, parse_case_id
from .llm_client import BedrockLlmClient, LlmInvocationError, get_llm_client
from .storage import MediaStorage, StorageError, get_media_storage, new_media_filename
from .transcribe import (
    TranscribeService,
    TranscriptionError,
    TranscriptionResult,
    get_transcribe_service,
)

__all__ = [
    "CaseDocument",
    "CaseRepository",
    "parse_case_id",
    "BedrockLlmClient",
    "LlmInvocationError",
    "get_llm_client",
    "MediaStorage",
    "StorageError",
    "get_media_storage",
    "new_media_filename",
    "TranscribeService",
    "TranscriptionError",
    "TranscriptionResult",
    "get_transcribe_service",
]
