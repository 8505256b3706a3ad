"""Component/pin validation against a board profile."""
from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Set, Union

from ..domain.models import (
    BoardId,
    Component,
    DebugIssue,
    DebugReport,
    Pin,
    PinType,
    ReportStatus,
    Severity,
)
from ..domain.registry import board_profile_for, is_pwm_pin, is_valid_pin, spec_for
from .pins import parse_pins, used_pin_counts

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
def validate_components(
    components: Iterable[Component], board: Union[BoardId, str]
) -> List[DebugIssue]:
    """Check a component list against ``board``.

    Issues come out in component order, then pin order.  An unknown kind or a
    wrong pin count stops the checks for that component; a pin missing from
    the board only skips that pin.  Reuse is tracked across all components
    seen so far, keyed on the parsed pin so ``9`` and ``"9"`` stay distinct.
    """

    profile = board_profile_for(board)
    issues: List[DebugIssue] = []
    used: Set[Pin] = set()

    for component in components:
        spec = spec_for(component)
        if spec is None:
            issues.append(
                DebugIssue(
                    type=Severity.ERROR,
                    message=f"Unknown component type: {component.kind}",
                    suggestion="Please select a supported component type",
                    component=component.id,
                )
            )
            continue

        pins = parse_pins(component.pins)
        if len(pins) != spec.pin_count:
            if spec.pin_labels:
                example = ",".join(f"{label}:{i + 2}" for i, label in enumerate(spec.pin_labels))
                suggestion = f"Use format: {example}"
            else:
                suggestion = f"Provide exactly {spec.pin_count} pin(s)"
            issues.append(
                DebugIssue(
                    type=Severity.ERROR,
                    message=f"{spec.name} requires {spec.pin_count} pin(s), got {len(pins)}",
                    suggestion=suggestion,
                    component=component.id,
                )
            )
            continue

        for index, pin in enumerate(pins):
            pin_type = spec.pin_types[index] if index < len(spec.pin_types) else None

            if not is_valid_pin(pin, board):
                issues.append(
                    DebugIssue(
                        type=Severity.ERROR,
                        message=f"Pin {pin} is not available on {profile.name}",
                        suggestion="Available digital pins: "
                        + ", ".join(str(p) for p in profile.digital_pins),
                        component=component.id,
                        pin=str(pin),
                    )
                )
                continue

            if pin_type is PinType.PWM and isinstance(pin, int) and not is_pwm_pin(pin, board):
                issues.append(
                    DebugIssue(
                        type=Severity.WARNING,
                        message=f"Pin {pin} is not a PWM pin, component may not work as expected",
                        suggestion="Available PWM pins: "
                        + ", ".join(str(p) for p in profile.pwm_pins),
                        component=component.id,
                        pin=str(pin),
                    )
                )

            if pin in used:
                issues.append(
                    DebugIssue(
                        type=Severity.ERROR,
                        message=f"Pin {pin} is used by multiple components",
                        suggestion="Each pin can only be used by one component",
                        component=component.id,
                        pin=str(pin),
                    )
                )
            else:
                used.add(pin)

    logger.debug("Validated components on %s: %d issue(s)", profile.name, len(issues))
    return issues


def report_status(issues: Iterable[DebugIssue]) -> ReportStatus:
    severities = {issue.type for issue in issues}
    if Severity.ERROR in severities:
        return ReportStatus.ERROR
    if Severity.WARNING in severities:
        return ReportStatus.WARNING
    return ReportStatus.SUCCESS


def estimate_blocks(component_count: int) -> str:
    return f"{max(4, component_count * 2)}-{max(8, component_count * 4)}"


def build_debug_report(
    components: Sequence[Component], board: Union[BoardId, str]
) -> DebugReport:
    """Validate ``components`` and derive the full debug report."""

    issues = validate_components(components, board)
    counts = used_pin_counts(components)
    return DebugReport(
        status=report_status(issues),
        issues=issues,
        component_count=len(components),
        digital_pins_used=counts.digital,
        analog_pins_used=counts.analog,
        estimated_blocks=estimate_blocks(len(components)),
    )


def generation_allowed(report: DebugReport) -> bool:
    return report.status is not ReportStatus.ERROR


__all__ = [
    "validate_components",
    "report_status",
    "estimate_blocks",
    "build_debug_report",
    "generation_allowed",
]
