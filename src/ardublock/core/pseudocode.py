"""Expand parsed actions into block-programming instruction steps."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..domain.models import ActionType, Component, ParsedAction, PseudocodeStep, StepType
from ..domain.registry import spec_for
from .pins import parse_pins

logger = logging.getLogger(__name__)

MISSING_PIN = "?"


def pin_text(pin: Optional[int]) -> str:
    return MISSING_PIN if pin is None else str(pin)


def pin_mode_for(component: Component) -> str:
    return "INPUT" if component.kind == "button" else "OUTPUT"


def _action(level: int, text: str, block: str) -> PseudocodeStep:
    return PseudocodeStep(level=level, text=text, type=StepType.ACTION, block_type=block)


def _set_pin(level: int, pin: Optional[int], value: object) -> PseudocodeStep:
    return _action(level, f"Add Set Digital Pin block for pin {pin_text(pin)} to {value}", "Set Digital Pin")


def _delay(level: int, duration: Optional[int]) -> PseudocodeStep:
    return _action(level, f"Add Delay block for {duration} ms", "Delay")


# ---------------------------------------------------------------------------
def setup_steps(components: Sequence[Component]) -> List[PseudocodeStep]:
    """Program/Setup header plus one Pin Mode step per declared pin."""

    steps = [
        PseudocodeStep(0, "Add Program block", StepType.STRUCTURE, "Program"),
        PseudocodeStep(0, "Add Setup block", StepType.STRUCTURE, "Setup"),
    ]
    for component in components:
        spec = spec_for(component)
        if spec is None:
            logger.debug("Skipping pin modes for unknown component kind %r", component.kind)
            continue
        mode = pin_mode_for(component)
        for pin in parse_pins(component.pins):
            steps.append(
                _action(1, f"Add Pin Mode block for {spec.name} on pin {pin} to {mode}", "Pin Mode")
            )
    return steps


def expand_action(action: ParsedAction, level: int) -> List[PseudocodeStep]:
    """Return the steps for ``action`` at indentation ``level``, recursing into repeats."""

    steps: List[PseudocodeStep] = []

    if action.type is ActionType.REPEAT:
        steps.append(
            PseudocodeStep(level, f"Add Repeat block for {action.count} times", StepType.CONTROL, "Repeat")
        )
        for child in action.actions:
            steps.extend(expand_action(child, level + 1))

    elif action.type is ActionType.SET:
        if action.component == "led" and action.value == "blink":
            steps.append(_set_pin(level, action.pin, "HIGH"))
            steps.append(_delay(level, action.duration))
            steps.append(_set_pin(level, action.pin, "LOW"))
            steps.append(_delay(level, action.duration))
        elif action.component == "servo":
            steps.append(
                _action(
                    level,
                    f"Add Servo Write block for pin {pin_text(action.pin)} to {action.value} degrees",
                    "Servo Write",
                )
            )
        elif action.component == "dc-motor":
            steps.append(_set_pin(level, action.pin, action.value))
            if action.duration and action.duration > 0:
                steps.append(_delay(level, action.duration))
                steps.append(_set_pin(level, action.pin, "LOW"))
        else:
            steps.append(_set_pin(level, action.pin, action.value))

    elif action.type is ActionType.DELAY:
        steps.append(_delay(level, action.duration))

    elif action.type is ActionType.READ:
        if action.component == "ultrasonic":
            steps.append(
                _action(
                    level,
                    f"Add Ultrasonic Read block for sensor on pin {pin_text(action.pin)}",
                    "Ultrasonic Read",
                )
            )
        else:
            steps.append(
                _action(level, f"Add Digital Read block for pin {pin_text(action.pin)}", "Digital Read")
            )

    elif action.type is ActionType.PRINT:
        steps.append(_action(level, f'Add LCD Print block with text "{action.value}"', "LCD Print"))

    elif action.type is ActionType.IF:
        steps.append(
            PseudocodeStep(
                level,
                f'Add If block with condition "{action.condition}"',
                StepType.CONTROL,
                "If",
            )
        )

    return steps


def generate_pseudocode(
    actions: Sequence[ParsedAction], components: Sequence[Component]
) -> List[PseudocodeStep]:
    """Build the full step list: program header, setup, loop and the action bodies."""

    steps = setup_steps(components)
    steps.append(PseudocodeStep(0, "Add Loop block (repeat forever)", StepType.STRUCTURE, "Loop"))
    for action in actions:
        steps.extend(expand_action(action, 1))
    return steps


def render_steps(steps: Sequence[PseudocodeStep], indent: str = "  ") -> str:
    """Plain-text rendering, one step per line, indented by level."""

    return "\n".join(f"{indent * step.level}{step.text}" for step in steps)


__all__ = [
    "MISSING_PIN",
    "pin_text",
    "pin_mode_for",
    "setup_steps",
    "expand_action",
    "generate_pseudocode",
    "render_steps",
]
