from __future__ import annotations

import logging
import traceback
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from ardublock.errors import (
    ArdublockError,
    EmptyPromptError,
    GenerationBlockedError,
    ProjectFileError,
    UnknownBoardError,
)


logger = logging.getLogger(__name__)


def _trace_id(request: Request) -> str:
    return getattr(getattr(request, "state", object()), "trace_id", "")


def _request_extra(request: Request, status_code: int, event: str) -> Dict[str, Any]:
    path = getattr(request, "url", None)
    return {
        "trace_id": _trace_id(request),
        "path": str(getattr(path, "path", path) or ""),
        "method": getattr(request, "method", ""),
        "status": status_code,
        "event": event,
    }


def _status_for(exc: ArdublockError) -> int:
    if isinstance(exc, GenerationBlockedError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, EmptyPromptError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, (UnknownBoardError, ProjectFileError)):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _reason_for(exc: ArdublockError) -> str:
    if isinstance(exc, GenerationBlockedError):
        return "generation_blocked"
    if isinstance(exc, EmptyPromptError):
        return "empty_prompt"
    if isinstance(exc, UnknownBoardError):
        return "unknown_board"
    return "invalid_request"


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ArdublockError)
    async def _domain_exception(request: Request, exc: ArdublockError):  # type: ignore[override]
        status_code = _status_for(exc)
        logger.info("ArdublockError", extra=_request_extra(request, status_code, "domain_error"))
        payload: Dict[str, Any] = {
            "reason": _reason_for(exc),
            "detail": str(exc),
            "trace_id": _trace_id(request),
        }
        if isinstance(exc, GenerationBlockedError):
            payload["report"] = exc.report.to_dict()
        return JSONResponse(status_code=status_code, content=payload)

    @app.exception_handler(HTTPException)
    async def _http_exception(request: Request, exc: HTTPException):  # type: ignore[override]
        status_code = int(getattr(exc, "status_code", 500))
        # 401/403/404 are routine; everything else is logged as an error
        level_logger = logger.info if status_code in (401, 403, 404) else logger.error
        level_logger("HTTPException", extra=_request_extra(request, status_code, "http_exception"))
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        content: Dict[str, Any] = {
            "reason": detail or "error",
            "detail": detail or "error",
            "trace_id": _trace_id(request),
        }
        return JSONResponse(status_code=status_code, content=content)

    @app.exception_handler(Exception)
    async def _unhandled_exception(request: Request, exc: Exception):  # type: ignore[override]
        status_code = 500
        extra = _request_extra(request, status_code, "unhandled_exception")
        extra["exception"] = traceback.format_exc()
        logger.error("Unhandled exception", extra=extra)
        payload: Dict[str, Any] = {
            "reason": "internal_error",
            "detail": str(exc) or "internal_error",
            "trace_id": _trace_id(request),
        }
        return JSONResponse(status_code=status_code, content=payload)
