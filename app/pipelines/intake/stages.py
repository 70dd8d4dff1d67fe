"""Stage runner that turns any inference failure into its fallback value."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from app.telemetry import record_stage_fallback

logger = logging.getLogger("app.services.intake_pipeline")

T = TypeVar("T")


async def run_stage(
    name: str,
    fn: Callable[[], Awaitable[T]],
    fallback: T,
    *,
    timeout: float | None = None,
) -> T:
    """Await ``fn`` and return its value, or ``fallback`` if it fails or times out.

    This is the only place stage errors are caught; it never re-raises.
    """

    try:
        if timeout:
            return await asyncio.wait_for(fn(), timeout=timeout)
        return await fn()
    except asyncio.TimeoutError:
        logger.warning("Stage %s timed out after %.1fs; using fallback", name, timeout)
        record_stage_fallback(name, "timeout")
    except Exception as exc:
        logger.warning("Stage %s failed; using fallback: %r", name, exc)
        record_stage_fallback(name, type(exc).__name__)
    return fallback


__all__ = ["run_stage"]
