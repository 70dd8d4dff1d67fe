"""Telemetry helpers and metrics."""

from .metrics import (
    CASES_CREATED,
    ERROR_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    STAGE_FALLBACK_COUNTER,
    increment_cases_created,
    observe_request,
    record_stage_fallback,
)

__all__ = [
    "CASES_CREATED",
    "ERROR_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "STAGE_FALLBACK_COUNTER",
    "increment_cases_created",
    "observe_request",
    "record_stage_fallback",
]
