"""Instruction templates for the severity and summarization stages."""

from __future__ import annotations

SYSTEM_PROMPT = (
    "You are an emergency response assistant. "
    "Provide concise, helpful responses."
)

SEVERITY_TEMPLATE = (
    "give the following emergency: {transcript} a severity score from 1 to 10 "
    "according to the american criterias, 1 is the highest, 10 is the lowest, "
    "give me a number nothing else"
)

SUMMARY_TEMPLATE = (
    "give the following emergency: {transcript} a concise description "
    "with no more than three words"
)


def _truncate(value: str, max_length: int) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def build_severity_prompt(transcript: str, max_chars: int = 2000) -> str:
    return SEVERITY_TEMPLATE.format(transcript=_truncate(transcript.strip(), max_chars))


def build_summary_prompt(transcript: str, max_chars: int = 2000) -> str:
    return SUMMARY_TEMPLATE.format(transcript=_truncate(transcript.strip(), max_chars))


__all__ = [
    "SEVERITY_TEMPLATE",
    "SUMMARY_TEMPLATE",
    "SYSTEM_PROMPT",
    "build_severity_prompt",
    "build_summary_prompt",
]
