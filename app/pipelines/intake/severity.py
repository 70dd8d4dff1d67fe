"""Severity scoring stage (Stage 03) of the intake pipeline."""

from __future__ import annotations

import logging

from app.services.llm_client import LlmInvocationError
from app.utils.errors import SeverityError

from .parsing import Defaulted, parse_severity
from .prompts import SYSTEM_PROMPT, build_severity_prompt
from .types import CompletionClient

logger = logging.getLogger("app.services.intake_pipeline")


async def score_severity(
    transcript: str,
    client: CompletionClient,
    *,
    max_prompt_chars: int = 2000,
) -> float:
    """Ask the model for a 1-10 rating (1 is most severe).

    A reply that is not a number in range yields the default score rather
    than an error; only a failed call raises :class:`SeverityError`.
    """

    try:
        raw_response = await client.invoke(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=build_severity_prompt(transcript, max_prompt_chars),
        )
    except LlmInvocationError as exc:
        raise SeverityError(str(exc)) from exc

    parsed = parse_severity(raw_response)
    if isinstance(parsed, Defaulted):
        logger.warning("Invalid severity response (%s); using default %s", parsed.reason, parsed.value)
    else:
        logger.info("Extracted severity: %s", parsed.value)
    return parsed.value


__all__ = ["score_severity"]
