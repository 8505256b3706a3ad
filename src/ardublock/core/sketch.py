"""Render the parsed action tree as Arduino sketch source."""

from __future__ import annotations

import datetime as _dt
import re
from typing import List, Optional, Sequence, Union

from ..domain.models import ActionType, BoardId, Component, ParsedAction
from ..domain.registry import board_profile_for, spec_for
from .pins import parse_pins, used_pin_counts
from .pseudocode import pin_mode_for, pin_text

INDENT = "  "
_WS_RE = re.compile(r"\s+")


def define_name(component: Component, index: int) -> str:
    label = component.label or f"{component.kind}{index + 1}"
    return _WS_RE.sub("_", label.upper()) + "_PIN"


def action_lines(action: ParsedAction, level: int) -> List[str]:
    """Source lines for ``action``; branches mirror :func:`expand_action`."""

    pad = INDENT * level
    pin = pin_text(action.pin)
    lines: List[str] = []

    if action.type is ActionType.REPEAT:
        lines.append(f"{pad}for (int i = 0; i < {action.count}; i++) {{")
        for child in action.actions:
            lines.extend(action_lines(child, level + 1))
        lines.append(f"{pad}}}")

    elif action.type is ActionType.SET:
        if action.component == "led" and action.value == "blink":
            duration = action.duration or 1000
            lines += [
                f"{pad}digitalWrite({pin}, HIGH);",
                f"{pad}delay({duration});",
                f"{pad}digitalWrite({pin}, LOW);",
                f"{pad}delay({duration});",
            ]
        elif action.component == "servo":
            lines.append(f"{pad}analogWrite({pin}, map({action.value}, 0, 180, 0, 255));")
        elif action.component == "dc-motor":
            lines.append(f"{pad}digitalWrite({pin}, HIGH);")
            if action.duration and action.duration > 0:
                lines.append(f"{pad}delay({action.duration});")
                lines.append(f"{pad}digitalWrite({pin}, LOW);")
        else:
            value = "HIGH" if action.value in ("HIGH", "on") else "LOW"
            lines.append(f"{pad}digitalWrite({pin}, {value});")

    elif action.type is ActionType.DELAY:
        lines.append(f"{pad}delay({action.duration});")

    elif action.type is ActionType.READ:
        if action.component == "ultrasonic":
            lines.append(f"{pad}// ultrasonic pulse/echo on pin {pin}")
            lines.append(f"{pad}int distanceEcho = digitalRead({pin});")
        else:
            lines.append(f"{pad}int sensorValue = digitalRead({pin});")

    elif action.type is ActionType.PRINT:
        lines.append(f'{pad}Serial.println("{action.value}");')

    elif action.type is ActionType.IF:
        lines.append(f"{pad}// if {action.condition}")

    return lines


def generate_sketch(
    actions: Sequence[ParsedAction],
    components: Sequence[Component],
    board: Union[BoardId, str],
    generated_on: Optional[_dt.date] = None,
) -> str:
    """Return the full sketch text for ``actions`` on ``board``."""

    profile = board_profile_for(board)
    counts = used_pin_counts(components)
    day = (generated_on or _dt.date.today()).isoformat()

    lines = [
        "/*",
        " * Arduino Code Generated from ArduBlock Pseudocode Generator",
        f" * Model: {profile.name}",
        f" * Generated: {day}",
        f" * Components: {len(components)}",
        f" * Digital Pins Used: {counts.digital}",
        f" * Analog Pins Used: {counts.analog}",
        " */",
        "",
        "// Component Pin Definitions",
    ]
    for component in components:
        spec = spec_for(component)
        if spec is None:
            continue
        lines.append(f"// {spec.name}: {component.pins}")
        for index, pin in enumerate(parse_pins(component.pins)):
            if isinstance(pin, int):
                lines.append(f"#define {define_name(component, index)} {pin}")

    lines += ["", "void setup() {", f"{INDENT}// Initialize serial communication", f"{INDENT}Serial.begin(9600);", ""]
    for component in components:
        spec = spec_for(component)
        if spec is None:
            continue
        mode = pin_mode_for(component)
        for pin in parse_pins(component.pins):
            lines.append(f"{INDENT}pinMode({pin}, {mode}); // {spec.name}")
    lines += ["}", "", "void loop() {"]
    for action in actions:
        lines.extend(action_lines(action, 1))
    lines.append("}")
    return "\n".join(lines) + "\n"


__all__ = ["define_name", "action_lines", "generate_sketch"]
