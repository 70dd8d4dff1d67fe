"""Pydantic schemas used as views in the MVC architecture."""

from .cases import BulkDeleteResponse, CaseResponse, DeleteCaseResponse, GpsCoords
from .common import ErrorResponse

__all__ = [
    "BulkDeleteResponse",
    "CaseResponse",
    "DeleteCaseResponse",
    "GpsCoords",
    "ErrorResponse",
]
