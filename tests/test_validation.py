from ardublock.core.validation import (
    build_debug_report,
    estimate_blocks,
    generation_allowed,
    report_status,
    validate_components,
)
from ardublock.domain.models import (
    CustomComponent,
    KnownComponent,
    PinType,
    ReportStatus,
    Severity,
)


def _led(comp_id: str, pins: str) -> KnownComponent:
    return KnownComponent(id=comp_id, kind="led", pins=pins)


def test_empty_component_list_is_clean():
    assert validate_components([], "uno") == []
    report = build_debug_report([], "uno")
    assert report.status is ReportStatus.SUCCESS
    assert report.estimated_blocks == "4-8"


def test_ultrasonic_on_default_board_has_no_issues():
    comps = [KnownComponent(id="1", kind="ultrasonic", pins="7,8")]
    assert validate_components(comps, "uno") == []


def test_servo_on_non_pwm_pin_is_a_single_warning():
    comps = [KnownComponent(id="s", kind="servo", pins="2")]
    issues = validate_components(comps, "uno")
    assert len(issues) == 1
    issue = issues[0]
    assert issue.type is Severity.WARNING
    assert issue.message == "Pin 2 is not a PWM pin, component may not work as expected"
    assert issue.suggestion == "Available PWM pins: 3, 5, 6, 9, 10, 11"
    assert issue.component == "s"
    assert issue.pin == "2"
    assert report_status(issues) is ReportStatus.WARNING
    assert validate_components(comps, "mega") == []


def test_unknown_component_kind():
    issues = validate_components([KnownComponent(id="x", kind="laser", pins="5")], "uno")
    assert len(issues) == 1
    assert issues[0].type is Severity.ERROR
    assert issues[0].message == "Unknown component type: laser"
    assert issues[0].suggestion == "Please select a supported component type"


def test_pin_count_mismatch_skips_pin_checks():
    issues = validate_components([_led("1", "99,100")], "uno")
    assert len(issues) == 1
    assert issues[0].type is Severity.ERROR
    assert issues[0].message == "LED requires 1 pin(s), got 2"
    assert issues[0].suggestion == "Provide exactly 1 pin(s)"


def test_pin_count_mismatch_suggests_labelled_format():
    issues = validate_components([KnownComponent(id="u", kind="ultrasonic", pins="7")], "uno")
    assert [i.message for i in issues] == ["Ultrasonic Sensor (HC-SR04) requires 2 pin(s), got 1"]
    assert issues[0].suggestion == "Use format: trig:2,echo:3"


def test_pin_missing_from_board_continues_with_next_pin():
    comps = [
        KnownComponent(id="u", kind="ultrasonic", pins="20,7"),
        _led("l", "7"),
    ]
    issues = validate_components(comps, "uno")
    assert [(i.type, i.component, i.pin) for i in issues] == [
        (Severity.ERROR, "u", "20"),
        (Severity.ERROR, "l", "7"),
    ]
    assert issues[0].message == "Pin 20 is not available on Arduino Uno"
    assert issues[0].suggestion.startswith("Available digital pins: 0, 1, 2")
    assert issues[1].message == "Pin 7 is used by multiple components"
    assert validate_components([_led("l", "20")], "mega") == []


def test_shared_pin_between_components_is_an_error():
    comps = [_led("a", "9"), KnownComponent(id="b", kind="dc-motor", pins="9")]
    issues = validate_components(comps, "uno")
    assert len(issues) == 1
    assert issues[0].type is Severity.ERROR
    assert issues[0].component == "b"
    assert issues[0].suggestion == "Each pin can only be used by one component"


def test_pin_reused_within_one_component():
    issues = validate_components([KnownComponent(id="u", kind="ultrasonic", pins="7,7")], "uno")
    assert [i.message for i in issues] == ["Pin 7 is used by multiple components"]


def test_digital_and_analog_names_do_not_collide():
    comps = [_led("a", "0"), _led("b", "A0")]
    assert validate_components(comps, "uno") == []


def test_custom_component_uses_inline_spec():
    fan = CustomComponent(
        id="f",
        name="Fan",
        pin_count=2,
        pin_types=[PinType.DIGITAL, PinType.PWM],
        pins="4,5",
    )
    assert validate_components([fan], "uno") == []

    fan.pins = "4,7"
    issues = validate_components([fan], "uno")
    assert [i.type for i in issues] == [Severity.WARNING]

    fan.pins = "4"
    issues = validate_components([fan], "uno")
    assert issues[0].message == "Fan requires 2 pin(s), got 1"


def test_validation_is_repeatable():
    comps = [_led("a", "9"), KnownComponent(id="b", kind="servo", pins="9")]
    assert validate_components(comps, "uno") == validate_components(comps, "uno")


def test_debug_report_summarises_components():
    comps = [
        _led("a", "13"),
        KnownComponent(id="b", kind="servo", pins="2"),
        KnownComponent(id="c", kind="lcd", pins="rs:7,enable:8,d4:9,d5:10,d6:11,d7:12"),
    ]
    report = build_debug_report(comps, "uno")
    assert report.status is ReportStatus.WARNING
    assert report.component_count == 3
    assert report.digital_pins_used == 8
    assert report.analog_pins_used == 0
    assert report.estimated_blocks == "6-12"
    assert generation_allowed(report)

    data = report.to_dict()
    assert data["status"] == "warning"
    assert data["issues"][0]["type"] == "warning"
    assert data["componentCount"] == 3


def test_error_report_blocks_generation():
    report = build_debug_report([_led("a", "9"), _led("b", "9")], "uno")
    assert report.status is ReportStatus.ERROR
    assert not generation_allowed(report)


def test_estimate_blocks():
    assert estimate_blocks(1) == "4-8"
    assert estimate_blocks(5) == "10-20"
