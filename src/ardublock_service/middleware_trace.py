from __future__ import annotations

import logging
import time
import uuid

from starlette.datastructures import Headers


TRACE_HEADER = "X-Trace-Id"

logger = logging.getLogger(__name__)


def _incoming_trace_id(scope) -> str:
    value = Headers(scope=scope).get(TRACE_HEADER, "").strip()
    return value or uuid.uuid4().hex


class TraceIdMiddleware:
    """Tag each HTTP request with a trace id and log one access line for it.

    The id comes from the ``X-Trace-Id`` request header when present and is
    echoed back on the response; handlers read it from ``request.state``.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):  # type: ignore[override]
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        trace_id = _incoming_trace_id(scope)
        scope.setdefault("state", {})["trace_id"] = trace_id
        response_status: list[int] = []

        async def send_with_trace(message):
            if message.get("type") == "http.response.start":
                response_status.append(int(message.get("status", 0)))
                message.setdefault("headers", []).append(
                    (TRACE_HEADER.lower().encode("latin-1"), trace_id.encode("utf-8"))
                )
            await send(message)

        started = time.perf_counter()
        try:
            await self.app(scope, receive, send_with_trace)
        finally:
            logger.info(
                "access",
                extra={
                    "event": "access",
                    "method": scope.get("method", ""),
                    "path": scope.get("path", ""),
                    "status": response_status[0] if response_status else None,
                    "duration_ms": int((time.perf_counter() - started) * 1000),
                    "trace_id": trace_id,
                },
            )
