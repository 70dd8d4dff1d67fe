"""Telemetry middleware for request instrumentation."""

from __future__ import annotations

import time
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.routing import Mount

from app.telemetry import observe_request

# Scrapes of the metrics endpoint itself are not counted.
_SKIPPED_PATHS = frozenset({"/metrics"})


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Collect request metrics for Prometheus."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path in _SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        method = request.method

        try:
            response = await call_next(request)
        except Exception:  # pragma: no cover - defensive
            duration_seconds = time.perf_counter() - start_time
            observe_request(method, self._resolve_route(request), 500, duration_seconds)
            raise

        duration_seconds = time.perf_counter() - start_time
        observe_request(method, self._resolve_route(request), response.status_code, duration_seconds)
        return response

    @staticmethod
    def _resolve_route(request: Request) -> str:
        """Return best-effort route pattern for metrics labels.

        Static media mounts collapse to their mount path so every stored
        file does not become its own label.
        """

        scope_route: Any = request.scope.get("route")
        if isinstance(scope_route, Mount):
            return scope_route.path or "static"
        if scope_route is not None:
            path = getattr(scope_route, "path", None)
            if path:
                return path

        return "unmatched"
