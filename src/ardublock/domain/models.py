"""Domain records shared by the parser, emitters and validator.

Registry records (:class:`ComponentSpec`, :class:`BoardProfile`) are frozen and
built once at import time.  Everything else is a plain value produced fresh by
each call and discarded by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

Pin = Union[int, str]


class PinType(str, Enum):
    DIGITAL = "digital"
    ANALOG = "analog"
    PWM = "pwm"


class BoardId(str, Enum):
    UNO = "uno"
    MEGA = "mega"
    ESP32 = "esp32"


class ActionType(str, Enum):
    SET = "set"
    DELAY = "delay"
    REPEAT = "repeat"
    IF = "if"
    READ = "read"
    PRINT = "print"


class StepType(str, Enum):
    STRUCTURE = "structure"
    ACTION = "action"
    CONTROL = "control"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ReportStatus(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ComponentSpec:
    """Static description of a hardware component kind.

    Attributes
    ----------
    name:
        Human readable name used in messages and emitted steps.
    pin_types:
        Pin type expected at each position of the pin specification.
    pin_count:
        Number of pins a declaration must supply.  For built-in kinds this
        normally equals ``len(pin_types)``; the DC motor entry lists an
        optional PWM position and still requires a single pin.
    blocks:
        Names of the block-programming blocks the component uses.
    category:
        Block palette category.
    pin_labels:
        Optional role label per pin position (``trig``/``echo`` ...).
    """

    name: str
    pin_types: Tuple[PinType, ...]
    pin_count: int
    blocks: Tuple[str, ...]
    category: str
    pin_labels: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True, slots=True)
class BoardProfile:
    """Addressable pins of a target board."""

    name: str
    digital_pins: Tuple[int, ...]
    analog_pins: Tuple[str, ...]
    pwm_pins: Tuple[int, ...]
    description: str


@dataclass(slots=True)
class KnownComponent:
    """A declared component whose kind is looked up in the registry."""

    id: str
    kind: str
    pins: str = ""
    label: Optional[str] = None


@dataclass(slots=True)
class CustomComponent:
    """A declared component carrying its own spec fields inline."""

    id: str
    name: str
    pin_count: int
    pin_types: List[PinType] = field(default_factory=list)
    blocks: List[str] = field(default_factory=lambda: ["Custom Block"])
    category: str = "Custom"
    pins: str = ""
    label: Optional[str] = None

    kind = "custom"


Component = Union[KnownComponent, CustomComponent]


def component_from_dict(data: Mapping[str, Any], fallback_id: str = "") -> Component:
    """Build a component from the JSON shape used by project files.

    ``type == "custom"`` selects :class:`CustomComponent` and reads the
    ``custom*`` keys; anything else is a :class:`KnownComponent`, even when
    the kind is not in the registry (the validator reports that).
    """

    comp_id = str(data.get("id") or fallback_id)
    kind = str(data.get("type") or "")
    pins = data.get("pins")
    pins = "" if pins is None else str(pins)
    label = data.get("label") or None

    if kind != CustomComponent.kind:
        return KnownComponent(id=comp_id, kind=kind, pins=pins, label=label)

    name = str(data.get("customName") or label or "Custom Component")
    pin_count = int(data.get("customPinCount") or 1)
    raw_types = data.get("customPinTypes") or []
    pin_types = [PinType(str(value)) for value in raw_types]
    if not pin_types:
        pin_types = [PinType.DIGITAL] * pin_count
    blocks = [str(b).strip() for b in (data.get("customBlocks") or []) if str(b).strip()]
    return CustomComponent(
        id=comp_id,
        name=name,
        pin_count=pin_count,
        pin_types=pin_types,
        blocks=blocks or ["Custom Block"],
        category=str(data.get("customCategory") or "Custom"),
        pins=pins,
        label=label,
    )


def component_to_dict(component: Component) -> Dict[str, Any]:
    data: Dict[str, Any] = {"id": component.id, "type": component.kind, "pins": component.pins}
    if component.label:
        data["label"] = component.label
    if isinstance(component, CustomComponent):
        data.update(
            {
                "customName": component.name,
                "customPinCount": component.pin_count,
                "customPinTypes": [t.value for t in component.pin_types],
                "customBlocks": list(component.blocks),
                "customCategory": component.category,
            }
        )
    return data


@dataclass(slots=True)
class ParsedAction:
    """One typed intent extracted from a prompt segment.

    Only ``repeat`` actions carry children in ``actions``.
    """

    type: ActionType
    component: Optional[str] = None
    pin: Optional[int] = None
    value: Union[str, int, None] = None
    duration: Optional[int] = None
    condition: Optional[str] = None
    count: Optional[int] = None
    actions: List["ParsedAction"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type.value}
        for key in ("component", "pin", "value", "duration", "condition", "count"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.type is ActionType.REPEAT:
            data["actions"] = [child.to_dict() for child in self.actions]
        return data


@dataclass(slots=True)
class PseudocodeStep:
    level: int
    text: str
    type: StepType
    block_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"level": self.level, "text": self.text, "type": self.type.value}
        if self.block_type is not None:
            data["blockType"] = self.block_type
        return data


@dataclass(slots=True)
class DebugIssue:
    type: Severity
    message: str
    suggestion: Optional[str] = None
    component: Optional[str] = None
    pin: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type.value, "message": self.message}
        for key in ("suggestion", "component", "pin"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(slots=True)
class DebugReport:
    """Derived view over a component list and a board selection."""

    status: ReportStatus
    issues: List[DebugIssue]
    component_count: int
    digital_pins_used: int
    analog_pins_used: int
    estimated_blocks: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "issues": [issue.to_dict() for issue in self.issues],
            "componentCount": self.component_count,
            "digitalPinsUsed": self.digital_pins_used,
            "analogPinsUsed": self.analog_pins_used,
            "estimatedBlocks": self.estimated_blocks,
        }


__all__ = [
    "Pin",
    "PinType",
    "BoardId",
    "ActionType",
    "StepType",
    "Severity",
    "ReportStatus",
    "ComponentSpec",
    "BoardProfile",
    "KnownComponent",
    "CustomComponent",
    "Component",
    "component_from_dict",
    "component_to_dict",
    "ParsedAction",
    "PseudocodeStep",
    "DebugIssue",
    "DebugReport",
]
