"""Pydantic schemas for emergency case endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

LEGACY_TEXT = "Unknown emergency"
LEGACY_SCORE = 10.0


class GpsCoords(BaseModel):
    """Submitter location; both axes default to 0."""

    latitude: float = Field(0.0, description="Decimal degrees")
    longitude: float = Field(0.0, description="Decimal degrees")


class CaseResponse(BaseModel):
    """Canonical projection of a stored case."""

    id: str = Field(..., description="Store-assigned case identifier")
    voice: Optional[str] = Field(None, description="Voice recording path relative to the media root")
    video: Optional[str] = Field(None, description="Video recording path relative to the media root")
    gpsCoords: GpsCoords = Field(default_factory=GpsCoords, alias="gpsCoords")
    score: float = Field(..., description="Severity from 1 (most severe) to 10")
    createdAt: datetime = Field(..., alias="createdAt")
    updatedAt: datetime = Field(..., alias="updatedAt")
    text: str = Field(..., description="Short display label")

    class Config:
        populate_by_name = True

    @classmethod
    def from_record(cls, record: Any) -> "CaseResponse":
        """Project a stored row, tolerating fields older rows may lack."""

        return cls(
            id=str(record.id),
            voice=record.voice or None,
            video=record.video or None,
            gpsCoords=GpsCoords(
                latitude=record.latitude or 0.0,
                longitude=record.longitude or 0.0,
            ),
            score=record.score or LEGACY_SCORE,
            createdAt=record.created_at,
            updatedAt=record.updated_at or record.created_at,
            text=record.text or LEGACY_TEXT,
        )


class DeleteCaseResponse(BaseModel):
    message: str
    id: str


class BulkDeleteResponse(BaseModel):
    message: str
    deletedCount: int = Field(..., alias="deletedCount")

    class Config:
        populate_by_name = True
