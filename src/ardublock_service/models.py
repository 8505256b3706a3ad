from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ardublock.domain.models import Component, component_from_dict
from ardublock.errors import ProjectFileError


class ComponentModel(BaseModel):
    """A declared component, in the JSON shape used by project files."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    type: str
    pins: str = ""
    label: Optional[str] = None
    custom_name: Optional[str] = Field(default=None, alias="customName")
    custom_pin_count: Optional[int] = Field(default=None, alias="customPinCount")
    custom_pin_types: Optional[List[str]] = Field(default=None, alias="customPinTypes")
    custom_blocks: Optional[List[str]] = Field(default=None, alias="customBlocks")
    custom_category: Optional[str] = Field(default=None, alias="customCategory")

    def to_domain(self, fallback_id: str = "") -> Component:
        return component_from_dict(self.model_dump(by_alias=True, exclude_none=True), fallback_id)


def components_to_domain(models: List[ComponentModel]) -> List[Component]:
    result: List[Component] = []
    for index, model in enumerate(models, start=1):
        try:
            result.append(model.to_domain(str(index)))
        except ValueError as exc:
            raise ProjectFileError(f"Component #{index}: {exc}") from exc
    return result


class PinParseRequest(BaseModel):
    pins: str = ""


class PinParseResponse(BaseModel):
    pins: List[Union[int, str]]


class ValidateRequest(BaseModel):
    components: List[ComponentModel] = Field(default_factory=list)
    board: Optional[str] = None


class PinCountsResponse(BaseModel):
    digital: int
    analog: int


class ParseRequest(BaseModel):
    prompt: str
    components: List[ComponentModel] = Field(default_factory=list)


class GenerateRequest(BaseModel):
    prompt: str
    components: List[ComponentModel] = Field(default_factory=list)
    board: Optional[str] = None


class PseudocodeResponse(BaseModel):
    actions: List[Dict[str, Any]]
    steps: List[Dict[str, Any]]
    report: Dict[str, Any]


class SketchResponse(BaseModel):
    code: str
    report: Dict[str, Any]


class BoardSummary(BaseModel):
    id: str
    name: str
    description: str
    digital_pins: List[int]
    analog_pins: List[str]
    pwm_pins: List[int]


class ComponentSummary(BaseModel):
    type: str
    name: str
    pin_count: int
    pin_types: List[str]
    blocks: List[str]
    category: str
    pin_labels: Optional[List[str]] = None


class HealthResponse(BaseModel):
    ok: bool
    version: str
    auth_required: bool


__all__ = [
    "ComponentModel",
    "components_to_domain",
    "PinParseRequest",
    "PinParseResponse",
    "ValidateRequest",
    "PinCountsResponse",
    "ParseRequest",
    "GenerateRequest",
    "PseudocodeResponse",
    "SketchResponse",
    "BoardSummary",
    "ComponentSummary",
    "HealthResponse",
]
