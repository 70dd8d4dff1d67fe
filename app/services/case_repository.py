"""Repository helpers for reading/writing emergency case records."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.case import EmergencyCase, utc_now
from app.utils.errors import InvalidIdError, NotFoundError, PersistenceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaseDocument:
    """Normalized case payload ready to be inserted."""

    voice: str | None
    video: str | None
    text: str
    latitude: float
    longitude: float
    score: float


def parse_case_id(raw_id: str) -> uuid.UUID:
    """Return the UUID behind an opaque case id or raise :class:`InvalidIdError`."""

    try:
        return uuid.UUID(str(raw_id).strip())
    except (TypeError, ValueError):
        raise InvalidIdError() from None


class CaseRepository:
    """Data-access object for :class:`EmergencyCase` rows bound to one session."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session = session
        self._clock = clock

    async def create(self, document: CaseDocument) -> EmergencyCase:
        now = self._clock()
        record = EmergencyCase(
            voice=document.voice,
            video=document.video,
            text=document.text,
            latitude=document.latitude,
            longitude=document.longitude,
            score=document.score,
            created_at=now,
            updated_at=now,
        )
        self._session.add(record)
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.exception("Failed to persist emergency case")
            raise PersistenceError(f"Upload failed: {exc}") from exc

        await self._session.refresh(record)
        return record

    async def list_cases(self) -> Sequence[EmergencyCase]:
        """Return every case, most recent first."""

        result = await self._session.execute(
            select(EmergencyCase).order_by(
                EmergencyCase.created_at.desc(),
                EmergencyCase.id,
            )
        )
        return result.scalars().all()

    async def get_case(self, case_id: str) -> EmergencyCase:
        identifier = parse_case_id(case_id)
        record = await self._session.get(EmergencyCase, identifier)
        if record is None:
            raise NotFoundError()
        return record

    async def delete_case(self, case_id: str) -> EmergencyCase:
        """Delete one case and return the removed row."""

        record = await self.get_case(case_id)
        await self._session.delete(record)
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise PersistenceError(f"Delete failed: {exc}") from exc
        return record

    async def delete_all(self) -> int:
        """Remove every case and return how many rows were deleted."""

        try:
            result = await self._session.execute(delete(EmergencyCase))
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise PersistenceError(f"Delete failed: {exc}") from exc

        deleted = result.rowcount or 0
        logger.warning("Deleted all emergency cases count=%d", deleted)
        return deleted


__all__ = ["CaseDocument", "CaseRepository", "parse_case_id"]
