"""SQLAlchemy model for emergency case records."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, String, Text, Uuid

from app.models.base import Base


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class EmergencyCase(Base):
    __tablename__ = "emergency_cases"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )
    voice = Column(String(512), nullable=True)
    video = Column(String(512), nullable=True)
    # Nullable so rows written by older clients stay readable.
    text = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    score = Column(Float, nullable=True, index=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )


__all__ = ["EmergencyCase", "utc_now"]
