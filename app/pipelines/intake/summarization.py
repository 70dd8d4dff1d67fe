"""Summarization stage (Stage 04) of the intake pipeline."""

from __future__ import annotations

import logging

from app.services.llm_client import LlmInvocationError
from app.utils.errors import SummarizationError

from .prompts import SYSTEM_PROMPT, build_summary_prompt
from .types import CompletionClient

logger = logging.getLogger("app.services.intake_pipeline")


async def summarize(
    transcript: str,
    client: CompletionClient,
    *,
    max_prompt_chars: int = 2000,
) -> str:
    """Return a label of at most three words for the dashboard."""

    try:
        raw_response = await client.invoke(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=build_summary_prompt(transcript, max_prompt_chars),
        )
    except LlmInvocationError as exc:
        raise SummarizationError(str(exc)) from exc

    label = (raw_response or "").strip()
    logger.info("Converted text: %s", label)
    return label


__all__ = ["summarize"]
