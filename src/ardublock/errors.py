"""Exceptions raised at the orchestration layer.

The validator, sentence parser and emitters never raise for malformed input
data; they turn it into issues or drop it.  The errors below are reserved for
callers that must refuse to continue.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .domain.models import DebugReport


class ArdublockError(Exception):
    """Base class for all project level failures."""


class UnknownBoardError(ArdublockError, ValueError):
    """Raised when a board identifier is not one of the built-in profiles."""

    def __init__(self, board_id: str) -> None:
        super().__init__(f"Unknown board '{board_id}'")
        self.board_id = board_id


class EmptyPromptError(ArdublockError, ValueError):
    """Raised when generation is requested without any prompt text."""

    def __init__(self) -> None:
        super().__init__("Project prompt is empty")


class GenerationBlockedError(ArdublockError):
    """Raised when the debug report contains errors."""

    def __init__(self, report: "DebugReport") -> None:
        errors = sum(1 for issue in report.issues if issue.type.value == "error")
        super().__init__(
            f"Generation blocked: {errors} error(s) in the component configuration"
        )
        self.report = report


class ProjectFileError(ArdublockError):
    """Raised when a project file cannot be read or has the wrong shape."""


__all__ = [
    "ArdublockError",
    "UnknownBoardError",
    "EmptyPromptError",
    "GenerationBlockedError",
    "ProjectFileError",
]
