"""Project bundle and the validate -> parse -> emit orchestration."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping

from ..core.parser import parse_prompt
from ..core.pseudocode import generate_pseudocode
from ..core.validation import build_debug_report, generation_allowed
from ..domain.models import (
    BoardId,
    Component,
    DebugReport,
    ParsedAction,
    PseudocodeStep,
    component_from_dict,
    component_to_dict,
)
from ..domain.registry import DEFAULT_BOARD, coerce_board_id
from ..errors import EmptyPromptError, GenerationBlockedError, ProjectFileError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Project:
    prompt: str = ""
    board: BoardId = DEFAULT_BOARD
    components: List[Component] = field(default_factory=list)

    def report(self) -> DebugReport:
        return build_debug_report(self.components, self.board)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prompt": self.prompt,
            "board": self.board.value,
            "components": [component_to_dict(c) for c in self.components],
        }


@dataclass(slots=True)
class GenerationResult:
    actions: List[ParsedAction]
    steps: List[PseudocodeStep]
    report: DebugReport


def project_from_dict(data: Mapping[str, Any], default_board: BoardId = DEFAULT_BOARD) -> Project:
    if not isinstance(data, Mapping):
        raise ProjectFileError("Project data must be a mapping")
    raw_components = data.get("components") or []
    if not isinstance(raw_components, list):
        raise ProjectFileError("'components' must be a list")
    components: List[Component] = []
    for index, raw in enumerate(raw_components, start=1):
        if not isinstance(raw, Mapping):
            raise ProjectFileError(f"Component #{index} must be a mapping")
        try:
            components.append(component_from_dict(raw, fallback_id=str(index)))
        except (TypeError, ValueError) as exc:
            raise ProjectFileError(f"Component #{index}: {exc}") from exc
    prompt = data.get("prompt", data.get("projectPrompt", ""))
    board = data.get("board", data.get("arduinoModel"))
    return Project(
        prompt=str(prompt or ""),
        board=coerce_board_id(board) if board else default_board,
        components=components,
    )


def load_project(path: Path, default_board: BoardId = DEFAULT_BOARD) -> Project:
    """Read a JSON project file (``prompt``, ``board``, ``components``)."""

    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ProjectFileError(f"Cannot read project file {path}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ProjectFileError(f"Project file {path} is not valid JSON: {exc}") from exc
    return project_from_dict(data, default_board)


def ensure_generation_allowed(report: DebugReport) -> None:
    if not generation_allowed(report):
        raise GenerationBlockedError(report)


def generate(project: Project) -> GenerationResult:
    """Validate, gate on errors, then parse and emit the pseudocode steps."""

    if not project.prompt.strip():
        raise EmptyPromptError()
    report = project.report()
    ensure_generation_allowed(report)
    actions = parse_prompt(project.prompt, project.components)
    steps = generate_pseudocode(actions, project.components)
    logger.info(
        "Generated %d step(s) from %d action(s) for %s",
        len(steps),
        len(actions),
        project.board.value,
    )
    return GenerationResult(actions=actions, steps=steps, report=report)


__all__ = [
    "Project",
    "GenerationResult",
    "project_from_dict",
    "load_project",
    "ensure_generation_allowed",
    "generate",
]
