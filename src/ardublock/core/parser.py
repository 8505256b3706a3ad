"""Sentence-template parser turning prompt text into :class:`ParsedAction` lists.

The prompt is split on ``,`` ``.`` and ``;`` and every segment is matched,
lower-cased, against :data:`ACTION_RULES`.  The rule order is part of the
contract: the first rule that matches a segment wins, so for instance
"blink the led" is claimed by the blink rule before the generic turn on/off
rule gets a chance.  Segments no rule understands are dropped.

A ``repeat N times`` segment produces no action.  It arms a pending count that
wraps the next action produced (and only that one) in a ``repeat`` action.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Sequence, Tuple

from ..domain.models import ActionType, Component, ParsedAction

logger = logging.getLogger(__name__)

SEGMENT_SPLIT_RE = re.compile(r"[,.;]")

_UNIT = r"(ms|milliseconds?|seconds?)"

REPEAT_RE = re.compile(r"repeat\s+(\d+)\s+times?")
PIN_RE = re.compile(r"pin\s+(\d+)")
DURATION_RE = re.compile(r"(\d+)\s*" + _UNIT)
TURN_RE = re.compile(r"turn\s+(on|off)\s+(\w+)(?:\s+on\s+pin\s+(\d+))?")
SERVO_RE = re.compile(r"set\s+servo(?:\s+on\s+pin\s+(\d+))?\s+to\s+(\d+)\s*degrees?")
MOTOR_RE = re.compile(
    r"(spin|start|run)\s+(dc\s+)?motor(?:\s+on\s+pin\s+(\d+))?(?:\s+for\s+(\d+)\s*" + _UNIT + r")?"
)
DELAY_RE = re.compile(r"(?:wait|delay)(?:\s+for)?\s+(\d+)\s*" + _UNIT)
SENSOR_RE = re.compile(r"read\s+(\w+)\s+sensor(?:\s+on\s+pins?\s+([\d,]+))?")
PRINT_RE = re.compile(r"print\s+(?:text\s+)?['\"](.*?)['\"](?:\s+on\s+lcd)?")
IF_RE = re.compile(r"if\s+(.+)")

DEFAULT_BLINK_MS = 1000

Rule = Callable[[str], Optional[ParsedAction]]


def to_milliseconds(value: int, unit: str | None) -> int:
    """Normalise a duration: units starting with ``s`` are seconds."""

    if unit and unit.startswith("s"):
        return value * 1000
    return value


def _optional_int(text: str | None) -> Optional[int]:
    return int(text) if text else None


# ---------------------------------------------------------------------------
def _match_blink(segment: str) -> Optional[ParsedAction]:
    if "blink" not in segment or "led" not in segment:
        return None
    pin = PIN_RE.search(segment)
    duration = DEFAULT_BLINK_MS
    found = DURATION_RE.search(segment)
    if found:
        duration = to_milliseconds(int(found.group(1)), found.group(2))
    return ParsedAction(
        type=ActionType.SET,
        component="led",
        pin=_optional_int(pin.group(1) if pin else None),
        value="blink",
        duration=duration,
    )


def _match_turn(segment: str) -> Optional[ParsedAction]:
    found = TURN_RE.search(segment)
    if not found:
        return None
    return ParsedAction(
        type=ActionType.SET,
        component=found.group(2),
        pin=_optional_int(found.group(3)),
        value="HIGH" if found.group(1) == "on" else "LOW",
    )


def _match_servo(segment: str) -> Optional[ParsedAction]:
    found = SERVO_RE.search(segment)
    if not found:
        return None
    return ParsedAction(
        type=ActionType.SET,
        component="servo",
        pin=_optional_int(found.group(1)),
        value=int(found.group(2)),
    )


def _match_motor(segment: str) -> Optional[ParsedAction]:
    found = MOTOR_RE.search(segment)
    if not found:
        return None
    duration = 0
    if found.group(4):
        duration = to_milliseconds(int(found.group(4)), found.group(5))
    return ParsedAction(
        type=ActionType.SET,
        component="dc-motor",
        pin=_optional_int(found.group(3)),
        value="HIGH",
        duration=duration,
    )


def _match_delay(segment: str) -> Optional[ParsedAction]:
    found = DELAY_RE.search(segment)
    if not found:
        return None
    return ParsedAction(
        type=ActionType.DELAY,
        duration=to_milliseconds(int(found.group(1)), found.group(2)),
    )


def _match_sensor(segment: str) -> Optional[ParsedAction]:
    found = SENSOR_RE.search(segment)
    if not found:
        return None
    pin = None
    if found.group(2):
        first = found.group(2).split(",")[0]
        pin = _optional_int(first)
    return ParsedAction(type=ActionType.READ, component=found.group(1), pin=pin)


def _match_print(segment: str) -> Optional[ParsedAction]:
    found = PRINT_RE.search(segment)
    if not found:
        return None
    return ParsedAction(type=ActionType.PRINT, component="lcd", value=found.group(1))


def _match_if(segment: str) -> Optional[ParsedAction]:
    found = IF_RE.search(segment)
    if not found:
        return None
    return ParsedAction(type=ActionType.IF, condition=found.group(1))


# Evaluated in order; the first rule returning an action wins.
ACTION_RULES: Tuple[Tuple[str, Rule], ...] = (
    ("blink", _match_blink),
    ("turn", _match_turn),
    ("servo", _match_servo),
    ("motor", _match_motor),
    ("delay", _match_delay),
    ("sensor", _match_sensor),
    ("print", _match_print),
    ("if", _match_if),
)


def split_segments(prompt: str) -> List[str]:
    segments = (part.strip() for part in SEGMENT_SPLIT_RE.split(prompt))
    return [segment for segment in segments if segment]


def parse_action(segment: str) -> Optional[ParsedAction]:
    """Match one lower-cased segment against :data:`ACTION_RULES`."""

    for name, rule in ACTION_RULES:
        action = rule(segment)
        if action is not None:
            logger.debug("Segment %r matched rule %s", segment, name)
            return action
    return None


def parse_prompt(prompt: str, components: Sequence[Component] = ()) -> List[ParsedAction]:
    """Translate ``prompt`` into an ordered action list.

    ``components`` is accepted so callers can pass the declared component
    list along; the templates do not consult it.
    """

    actions: List[ParsedAction] = []
    repeat_count = 1
    repeat_pending = False

    for segment in split_segments(prompt):
        lowered = segment.lower()

        repeat = REPEAT_RE.search(lowered)
        if repeat:
            repeat_count = int(repeat.group(1))
            repeat_pending = True
            continue

        action = parse_action(lowered)
        if action is None:
            logger.debug("Dropped unrecognised segment %r", segment)
            continue

        if repeat_pending and repeat_count > 1:
            actions.append(ParsedAction(type=ActionType.REPEAT, count=repeat_count, actions=[action]))
            repeat_pending = False
            repeat_count = 1
        else:
            actions.append(action)

    return actions


__all__ = [
    "ACTION_RULES",
    "DEFAULT_BLINK_MS",
    "parse_action",
    "parse_prompt",
    "split_segments",
    "to_milliseconds",
]
