import json

import pytest

from ardublock.domain.models import BoardId, CustomComponent, KnownComponent, PinType, component_from_dict
from ardublock.errors import EmptyPromptError, GenerationBlockedError, ProjectFileError, UnknownBoardError
from ardublock.services.project import Project, generate, load_project, project_from_dict


def _write(tmp_path, data) -> str:
    path = tmp_path / "project.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_component_from_dict_variants():
    known = component_from_dict({"id": "1", "type": "led", "pins": "13", "label": "Main LED"})
    assert known == KnownComponent(id="1", kind="led", pins="13", label="Main LED")

    custom = component_from_dict(
        {
            "id": "2",
            "type": "custom",
            "pins": "4,5",
            "customName": "Fan",
            "customPinCount": 2,
            "customPinTypes": ["digital", "pwm"],
            "customBlocks": ["Fan On", " "],
        }
    )
    assert isinstance(custom, CustomComponent)
    assert custom.kind == "custom"
    assert custom.pin_types == [PinType.DIGITAL, PinType.PWM]
    assert custom.blocks == ["Fan On"]
    assert custom.category == "Custom"


def test_custom_component_defaults_pin_types():
    custom = component_from_dict({"type": "custom", "customName": "Relay", "customPinCount": 3}, "7")
    assert custom.id == "7"
    assert custom.pin_types == [PinType.DIGITAL] * 3
    assert custom.blocks == ["Custom Block"]


def test_load_project(tmp_path):
    path = _write(
        tmp_path,
        {"prompt": "wait 1 second", "board": "mega", "components": [{"type": "led", "pins": "13"}]},
    )
    project = load_project(path)
    assert project.board is BoardId.MEGA
    assert project.components == [KnownComponent(id="1", kind="led", pins="13")]


def test_load_project_uses_default_board(tmp_path):
    path = _write(tmp_path, {"prompt": "wait 1 second"})
    assert load_project(path, default_board=BoardId.ESP32).board is BoardId.ESP32


def test_load_project_errors(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{nope", encoding="utf-8")
    with pytest.raises(ProjectFileError):
        load_project(bad)
    with pytest.raises(ProjectFileError):
        load_project(tmp_path / "missing.json")
    with pytest.raises(ProjectFileError):
        project_from_dict({"components": "led"})
    with pytest.raises(ProjectFileError):
        project_from_dict({"components": [{"type": "custom", "customPinTypes": ["laser"]}]})
    with pytest.raises(UnknownBoardError):
        project_from_dict({"board": "nano"})


def test_generate_runs_the_pipeline():
    project = Project(
        prompt="Blink LED on pin 13 for 1 second",
        components=[KnownComponent(id="1", kind="led", pins="13")],
    )
    result = generate(project)
    assert len(result.actions) == 1
    assert result.steps[2].text == "Add Pin Mode block for LED on pin 13 to OUTPUT"
    assert result.report.status.value == "success"


def test_generate_rejects_empty_prompt():
    with pytest.raises(EmptyPromptError):
        generate(Project(prompt="   "))


def test_generate_blocked_by_errors():
    project = Project(
        prompt="turn on led on pin 9",
        components=[KnownComponent(id="1", kind="led", pins="9"), KnownComponent(id="2", kind="led", pins="9")],
    )
    with pytest.raises(GenerationBlockedError) as excinfo:
        generate(project)
    assert excinfo.value.report.status.value == "error"
