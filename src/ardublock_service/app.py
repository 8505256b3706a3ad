from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
import secrets
from pathlib import Path
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, HTTPException, Request, status

from ardublock import __version__
from ardublock.core.parser import parse_prompt
from ardublock.core.pins import parse_pins, used_pin_counts
from ardublock.core.sketch import generate_sketch
from ardublock.core.validation import build_debug_report
from ardublock.domain.models import BoardId
from ardublock.domain.registry import (
    BOARD_PROFILES,
    COMPONENT_SPECS,
    DEFAULT_BOARD,
    PROMPT_EXAMPLES,
    coerce_board_id,
)
from ardublock.errors import EmptyPromptError
from ardublock.services.project import Project, ensure_generation_allowed, generate

from .exceptions import install_exception_handlers
from .logging_setup import resolve_log_file
from .middleware_trace import TraceIdMiddleware
from .models import (
    BoardSummary,
    ComponentSummary,
    GenerateRequest,
    HealthResponse,
    ParseRequest,
    PinCountsResponse,
    PinParseRequest,
    PinParseResponse,
    PseudocodeResponse,
    SketchResponse,
    ValidateRequest,
    components_to_domain,
)


logger = logging.getLogger(__name__)


def _truthy(raw: str | None) -> bool:
    if raw is None:
        return False
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class _ServiceFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            "%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        base = super().format(record)
        extras: list[str] = []
        for key in ("trace_id", "event", "method", "path", "status", "duration_ms"):
            value = getattr(record, key, None)
            if value is None or value == "":
                continue
            extras.append(f"{key}={value}")
        if extras:
            return f"{base} {' '.join(extras)}"
        return base


def configure_logging() -> Path | None:
    """Configure service logging based on environment variables."""

    level_name = (os.environ.get("ARDUBLOCK_LOG_LEVEL", "WARNING") or "").strip().upper() or "WARNING"
    debug_enabled = _truthy(os.environ.get("ARDUBLOCK_DEBUG"))
    if debug_enabled:
        level_name = "DEBUG"
    level = getattr(logging, level_name, logging.WARNING)

    log_file = resolve_log_file()
    formatter = _ServiceFormatter()
    handlers: list[logging.Handler] = []
    destination: Path | None = log_file

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5_000_000,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)
    except OSError:
        destination = None
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(formatter)
        handlers.append(stream_handler)

    if debug_enabled and destination is not None:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "ardublock_service", "ardublock"):
        target = logging.getLogger(name)
        target.handlers = []
        target.setLevel(level)
        target.propagate = True

    configured_logger = logging.getLogger(__name__)
    if destination is None:
        configured_logger.warning(
            "Logging to console because ARDUBLOCK_LOG_FILE/ARDUBLOCK_LOG_DIR is unavailable."
        )
    else:
        configured_logger.debug("Logging configured for file %s", destination)

    return destination


def create_app(
    *,
    auth_token: str | None = None,
    default_board: BoardId = DEFAULT_BOARD,
) -> FastAPI:
    """Return a configured FastAPI application exposing the translation core."""

    log_file = configure_logging()
    token = (auth_token or "").strip()
    app = FastAPI(title="ArduBlock Service", version=__version__)
    app.state.auth_required = bool(token)
    app.state.default_board = default_board
    app.state.log_file_path = str(log_file) if isinstance(log_file, Path) else ""

    install_exception_handlers(app)
    app.add_middleware(TraceIdMiddleware)

    def _require_auth(request: Request) -> None:
        if not token:
            return
        header = request.headers.get("Authorization", "").strip()
        if not header or not header.lower().startswith("bearer "):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Missing bearer token",
            )
        candidate = header.split(" ", 1)[1].strip()
        if not candidate:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Missing bearer token",
            )
        if not secrets.compare_digest(candidate, token):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid bearer token",
            )

    def _board(raw: str | None) -> BoardId:
        return coerce_board_id(raw) if raw else app.state.default_board

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(ok=True, version=__version__, auth_required=bool(token))

    @app.get("/boards", response_model=List[BoardSummary], dependencies=[Depends(_require_auth)])
    async def boards() -> List[BoardSummary]:
        return [
            BoardSummary(
                id=board_id.value,
                name=profile.name,
                description=profile.description,
                digital_pins=list(profile.digital_pins),
                analog_pins=list(profile.analog_pins),
                pwm_pins=list(profile.pwm_pins),
            )
            for board_id, profile in BOARD_PROFILES.items()
        ]

    @app.get("/components", response_model=List[ComponentSummary], dependencies=[Depends(_require_auth)])
    async def components() -> List[ComponentSummary]:
        return [
            ComponentSummary(
                type=kind,
                name=spec.name,
                pin_count=spec.pin_count,
                pin_types=[t.value for t in spec.pin_types],
                blocks=list(spec.blocks),
                category=spec.category,
                pin_labels=list(spec.pin_labels) if spec.pin_labels else None,
            )
            for kind, spec in COMPONENT_SPECS.items()
        ]

    @app.get("/examples", dependencies=[Depends(_require_auth)])
    async def examples() -> Dict[str, str]:
        return dict(PROMPT_EXAMPLES)

    @app.post("/pins/parse", response_model=PinParseResponse, dependencies=[Depends(_require_auth)])
    async def pins_parse(body: PinParseRequest) -> PinParseResponse:
        return PinParseResponse(pins=parse_pins(body.pins))

    @app.post("/pins/counts", response_model=PinCountsResponse, dependencies=[Depends(_require_auth)])
    async def pins_counts(body: ValidateRequest) -> PinCountsResponse:
        counts = used_pin_counts(components_to_domain(body.components))
        return PinCountsResponse(digital=counts.digital, analog=counts.analog)

    @app.post("/validate", dependencies=[Depends(_require_auth)])
    async def validate(body: ValidateRequest) -> Dict[str, Any]:
        report = build_debug_report(components_to_domain(body.components), _board(body.board))
        return report.to_dict()

    @app.post("/parse", dependencies=[Depends(_require_auth)])
    async def parse(body: ParseRequest) -> List[Dict[str, Any]]:
        actions = parse_prompt(body.prompt, components_to_domain(body.components))
        return [action.to_dict() for action in actions]

    @app.post("/pseudocode", response_model=PseudocodeResponse, dependencies=[Depends(_require_auth)])
    async def pseudocode(body: GenerateRequest) -> PseudocodeResponse:
        project = Project(
            prompt=body.prompt,
            board=_board(body.board),
            components=components_to_domain(body.components),
        )
        result = generate(project)
        return PseudocodeResponse(
            actions=[action.to_dict() for action in result.actions],
            steps=[step.to_dict() for step in result.steps],
            report=result.report.to_dict(),
        )

    @app.post("/sketch", response_model=SketchResponse, dependencies=[Depends(_require_auth)])
    async def sketch(body: GenerateRequest) -> SketchResponse:
        if not body.prompt.strip():
            raise EmptyPromptError()
        board = _board(body.board)
        comps = components_to_domain(body.components)
        report = build_debug_report(comps, board)
        ensure_generation_allowed(report)
        code = generate_sketch(parse_prompt(body.prompt, comps), comps, board)
        logger.info("Generated sketch for %s", board.value, extra={"event": "sketch"})
        return SketchResponse(code=code, report=report.to_dict())

    return app


__all__ = ["create_app", "configure_logging"]
