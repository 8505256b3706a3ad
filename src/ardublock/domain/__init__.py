from .models import (
    ActionType,
    BoardId,
    BoardProfile,
    Component,
    ComponentSpec,
    CustomComponent,
    DebugIssue,
    DebugReport,
    KnownComponent,
    ParsedAction,
    Pin,
    PinType,
    PseudocodeStep,
    ReportStatus,
    Severity,
    StepType,
    component_from_dict,
    component_to_dict,
)
from .registry import (
    BOARD_PROFILES,
    COMPONENT_SPECS,
    DEFAULT_BOARD,
    PROMPT_EXAMPLES,
    board_profile_for,
    coerce_board_id,
    is_pwm_pin,
    is_valid_pin,
    spec_for,
)

__all__ = [
    "ActionType",
    "BoardId",
    "BoardProfile",
    "Component",
    "ComponentSpec",
    "CustomComponent",
    "DebugIssue",
    "DebugReport",
    "KnownComponent",
    "ParsedAction",
    "Pin",
    "PinType",
    "PseudocodeStep",
    "ReportStatus",
    "Severity",
    "StepType",
    "component_from_dict",
    "component_to_dict",
    "BOARD_PROFILES",
    "COMPONENT_SPECS",
    "DEFAULT_BOARD",
    "PROMPT_EXAMPLES",
    "board_profile_for",
    "coerce_board_id",
    "is_pwm_pin",
    "is_valid_pin",
    "spec_for",
]
