import pytest

from ardublock.domain.models import BoardId, CustomComponent, KnownComponent, PinType
from ardublock.domain.registry import (
    BOARD_PROFILES,
    COMPONENT_SPECS,
    board_profile_for,
    coerce_board_id,
    default_pins_for,
    is_pwm_pin,
    is_valid_pin,
    spec_for,
)
from ardublock.errors import UnknownBoardError


def test_board_profiles_pwm_pins_are_digital_pins():
    for profile in BOARD_PROFILES.values():
        assert set(profile.pwm_pins) <= set(profile.digital_pins)


def test_board_profile_lookup():
    uno = board_profile_for("uno")
    assert uno.name == "Arduino Uno"
    assert uno.digital_pins == tuple(range(14))
    assert uno.analog_pins == ("A0", "A1", "A2", "A3", "A4", "A5")
    assert board_profile_for(BoardId.MEGA).pwm_pins == tuple(range(2, 14))
    assert len(board_profile_for("esp32").analog_pins) == 20


def test_unknown_board_raises():
    with pytest.raises(UnknownBoardError):
        coerce_board_id("nano")
    assert coerce_board_id(None) is BoardId.UNO
    assert coerce_board_id(" MEGA ") is BoardId.MEGA


def test_pin_checks():
    assert is_valid_pin(13, "uno")
    assert not is_valid_pin(14, "uno")
    assert is_valid_pin("A5", "uno")
    assert not is_valid_pin("A6", "uno")
    assert is_valid_pin("A15", "mega")
    assert is_pwm_pin(9, "uno")
    assert not is_pwm_pin(2, "uno")
    assert not is_pwm_pin("A0", "uno")


def test_spec_for_known_and_unknown():
    spec = spec_for(KnownComponent(id="1", kind="ultrasonic", pins="7,8"))
    assert spec is not None
    assert spec.pin_count == 2
    assert spec.pin_labels == ("trig", "echo")
    assert spec_for("servo") is COMPONENT_SPECS["servo"]
    assert spec_for(KnownComponent(id="2", kind="laser")) is None


def test_spec_for_custom_component_is_synthesised():
    custom = CustomComponent(
        id="c1",
        name="Fan",
        pin_count=2,
        pin_types=[PinType.DIGITAL, PinType.PWM],
        blocks=["Fan Speed"],
        category="Climate",
        pins="4,5",
    )
    spec = spec_for(custom)
    assert spec is not None
    assert spec.name == "Fan"
    assert spec.pin_types == (PinType.DIGITAL, PinType.PWM)
    assert spec.blocks == ("Fan Speed",)
    assert spec.category == "Climate"


def test_default_pins_for():
    assert default_pins_for("led", COMPONENT_SPECS["led"]) == "13"
    assert default_pins_for("servo", COMPONENT_SPECS["servo"]) == "9"
    assert default_pins_for("button", COMPONENT_SPECS["button"]) == "2"
    assert default_pins_for("ultrasonic", COMPONENT_SPECS["ultrasonic"]) == "trig:2,echo:3"
