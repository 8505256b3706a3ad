"""Built-in component kinds and board profiles."""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from ..errors import UnknownBoardError
from .models import (
    BoardId,
    BoardProfile,
    Component,
    ComponentSpec,
    CustomComponent,
    Pin,
    PinType,
)

DEFAULT_BOARD = BoardId.UNO

D = PinType.DIGITAL
PWM = PinType.PWM

BOARD_PROFILES: Dict[BoardId, BoardProfile] = {
    BoardId.UNO: BoardProfile(
        name="Arduino Uno",
        digital_pins=tuple(range(14)),
        analog_pins=tuple(f"A{i}" for i in range(6)),
        pwm_pins=(3, 5, 6, 9, 10, 11),
        description="14 Digital, 6 Analog",
    ),
    BoardId.MEGA: BoardProfile(
        name="Arduino Mega",
        digital_pins=tuple(range(54)),
        analog_pins=tuple(f"A{i}" for i in range(16)),
        pwm_pins=tuple(range(2, 14)),
        description="54 Digital, 16 Analog",
    ),
    BoardId.ESP32: BoardProfile(
        name="ESP32",
        digital_pins=tuple(range(40)),
        analog_pins=tuple(f"A{i}" for i in range(20)),
        pwm_pins=tuple(range(16)),
        description="WiFi + Bluetooth",
    ),
}

COMPONENT_SPECS: Dict[str, ComponentSpec] = {
    "led": ComponentSpec(
        name="LED",
        pin_types=(D,),
        pin_count=1,
        blocks=("Pin Mode", "Set Digital Pin"),
        category="Input/Output",
    ),
    "servo": ComponentSpec(
        name="Servo Motor",
        pin_types=(PWM,),
        pin_count=1,
        blocks=("Servo Write", "Servo Read"),
        category="Servo",
    ),
    "dc-motor": ComponentSpec(
        name="DC Motor",
        pin_types=(D, PWM),
        pin_count=1,
        blocks=("Set Digital Pin", "Analog Write"),
        category="Input/Output",
    ),
    "ultrasonic": ComponentSpec(
        name="Ultrasonic Sensor (HC-SR04)",
        pin_types=(D, D),
        pin_count=2,
        blocks=("Ultrasonic Read",),
        category="Sensors",
        pin_labels=("trig", "echo"),
    ),
    "button": ComponentSpec(
        name="Button",
        pin_types=(D,),
        pin_count=1,
        blocks=("Digital Read", "Pin Mode"),
        category="Input/Output",
    ),
    "lcd": ComponentSpec(
        name="LCD 1602",
        pin_types=(D,) * 6,
        pin_count=6,
        blocks=("LCD Print", "LCD Clear", "LCD Set Cursor"),
        category="Display",
        pin_labels=("rs", "enable", "d4", "d5", "d6", "d7"),
    ),
    "buzzer": ComponentSpec(
        name="Buzzer",
        pin_types=(D,),
        pin_count=1,
        blocks=("Set Digital Pin", "Tone"),
        category="Sound",
    ),
    "stepper": ComponentSpec(
        name="Stepper Motor",
        pin_types=(D,) * 4,
        pin_count=4,
        blocks=("Stepper Step", "Stepper Speed"),
        category="Motor",
        pin_labels=("in1", "in2", "in3", "in4"),
    ),
}

PROMPT_EXAMPLES: Dict[str, str] = {
    "blink": "Blink LED on pin 13 every 1 second",
    "servo": "Set servo on pin 9 to 90 degrees, wait 1 second, then to 0 degrees",
    "sensor": "Read ultrasonic sensor on pins 7,8 and if distance < 10cm turn on LED on pin 13",
    "conditional": "If button on pin 2 is pressed, turn on LED on pin 13 and buzzer on pin 12",
}


# ---------------------------------------------------------------------------
def spec_for(component: Union[Component, str]) -> Optional[ComponentSpec]:
    """Return the spec for a component instance or a bare kind string.

    Custom components synthesise their spec from their inline fields.
    ``None`` means the kind is unknown.
    """

    if isinstance(component, CustomComponent):
        return ComponentSpec(
            name=component.name,
            pin_types=tuple(component.pin_types),
            pin_count=component.pin_count,
            blocks=tuple(component.blocks),
            category=component.category,
        )
    kind = component if isinstance(component, str) else component.kind
    return COMPONENT_SPECS.get(kind)


def board_profile_for(board: Union[BoardId, str]) -> BoardProfile:
    return BOARD_PROFILES[coerce_board_id(board)]


def coerce_board_id(board: Union[BoardId, str, None]) -> BoardId:
    if board is None:
        return DEFAULT_BOARD
    if isinstance(board, BoardId):
        return board
    try:
        return BoardId(str(board).strip().lower())
    except ValueError as exc:
        raise UnknownBoardError(str(board)) from exc


def is_valid_pin(pin: Pin, board: Union[BoardId, str]) -> bool:
    profile = board_profile_for(board)
    if isinstance(pin, int):
        return pin in profile.digital_pins
    return pin in profile.analog_pins


def is_pwm_pin(pin: Pin, board: Union[BoardId, str]) -> bool:
    if not isinstance(pin, int):
        return False
    return pin in board_profile_for(board).pwm_pins


def board_ids() -> List[str]:
    return [board.value for board in BOARD_PROFILES]


def component_kinds() -> List[str]:
    return list(COMPONENT_SPECS)


def default_pins_for(kind: str, spec: ComponentSpec) -> str:
    """Pin string pre-filled for a freshly added component."""

    if spec.pin_count == 1:
        if kind == "servo":
            return "9"
        if kind == "button":
            return "2"
        return "13"
    if spec.pin_labels:
        return ",".join(f"{label}:{i + 2}" for i, label in enumerate(spec.pin_labels))
    return ",".join(str(i + 2) for i in range(spec.pin_count))


__all__ = [
    "DEFAULT_BOARD",
    "BOARD_PROFILES",
    "COMPONENT_SPECS",
    "PROMPT_EXAMPLES",
    "spec_for",
    "board_profile_for",
    "coerce_board_id",
    "is_valid_pin",
    "is_pwm_pin",
    "board_ids",
    "component_kinds",
    "default_pins_for",
]
