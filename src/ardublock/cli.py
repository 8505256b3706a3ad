"""CLI entry points for ArduBlock."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from . import __version__, logging_cfg
from .config.loader import CONFIG_ENV_VAR, AppConfig, ConfigError, load_config
from .core.parser import parse_prompt
from .core.pins import parse_pins
from .core.pseudocode import render_steps
from .domain.models import DebugReport, ReportStatus
from .domain.registry import BOARD_PROFILES, COMPONENT_SPECS, PROMPT_EXAMPLES, coerce_board_id
from .errors import ArdublockError, GenerationBlockedError
from .services.export_service import EXPORT_FORMATS, export_sketch, write_export
from .services.project import Project, generate, load_project

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_BLOCKED = 2


def _print_report(report: DebugReport, stream=None) -> None:
    out = stream or sys.stdout
    print(f"Status: {report.status.value.upper()}", file=out)
    print(f"Components: {report.component_count}", file=out)
    print(f"Digital pins used: {report.digital_pins_used}", file=out)
    print(f"Analog pins used: {report.analog_pins_used}", file=out)
    print(f"Estimated blocks: {report.estimated_blocks}", file=out)
    for issue in report.issues:
        where = f" [{issue.component}]" if issue.component else ""
        print(f"{issue.type.value.upper()}{where}: {issue.message}", file=out)
        if issue.suggestion:
            print(f"  Suggestion: {issue.suggestion}", file=out)


def _load(args: argparse.Namespace) -> Project:
    project = load_project(args.project, default_board=args.config_obj.board.default)
    if getattr(args, "board", None):
        project.board = coerce_board_id(args.board)
    if getattr(args, "prompt", None):
        project.prompt = args.prompt
    return project


def boards_cmd(args: argparse.Namespace) -> int:
    for board_id, profile in BOARD_PROFILES.items():
        marker = "*" if board_id is args.config_obj.board.default else " "
        print(f"{marker} {board_id.value}\t{profile.name}\t{profile.description}")
    return EXIT_OK


def components_cmd(args: argparse.Namespace) -> int:
    for kind, spec in COMPONENT_SPECS.items():
        labels = f" ({','.join(spec.pin_labels)})" if spec.pin_labels else ""
        print(f"{kind}\t{spec.name}\t{spec.pin_count} pin(s){labels}\t{', '.join(spec.blocks)}")
    return EXIT_OK


def examples_cmd(args: argparse.Namespace) -> int:
    for name, prompt in PROMPT_EXAMPLES.items():
        print(f"{name}\t{prompt}")
    return EXIT_OK


def pins_cmd(args: argparse.Namespace) -> int:
    print(json.dumps(parse_pins(args.spec)))
    return EXIT_OK


def validate_cmd(args: argparse.Namespace) -> int:
    project = _load(args)
    report = project.report()
    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        _print_report(report)
    return EXIT_FAILURE if report.status is ReportStatus.ERROR else EXIT_OK


def pseudocode_cmd(args: argparse.Namespace) -> int:
    project = _load(args)
    try:
        result = generate(project)
    except GenerationBlockedError as exc:
        print(str(exc), file=sys.stderr)
        _print_report(exc.report, sys.stderr)
        return EXIT_BLOCKED
    if args.json:
        print(json.dumps([step.to_dict() for step in result.steps], indent=2))
    else:
        print(render_steps(result.steps))
    return EXIT_OK


def parse_cmd(args: argparse.Namespace) -> int:
    actions = parse_prompt(args.text)
    print(json.dumps([action.to_dict() for action in actions], indent=2))
    return EXIT_OK


def sketch_cmd(args: argparse.Namespace) -> int:
    project = _load(args)
    try:
        code = export_sketch(project)
    except GenerationBlockedError as exc:
        print(str(exc), file=sys.stderr)
        _print_report(exc.report, sys.stderr)
        return EXIT_BLOCKED
    sys.stdout.write(code)
    return EXIT_OK


def export_cmd(args: argparse.Namespace) -> int:
    project = _load(args)
    out_dir = args.out_dir or args.config_obj.export.out_dir
    try:
        target = write_export(project, out_dir, args.format)
    except GenerationBlockedError as exc:
        print(str(exc), file=sys.stderr)
        _print_report(exc.report, sys.stderr)
        return EXIT_BLOCKED
    print(target)
    return EXIT_OK


def _add_project_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("project", type=Path, help="Project JSON file")
    parser.add_argument("--board", choices=[b.value for b in BOARD_PROFILES], default=None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ArduBlock pseudocode generator")
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("--config", type=Path, default=None, help="Path to ardublock.yml")
    sub = parser.add_subparsers(dest="command", required=True)

    boards_p = sub.add_parser("boards", help="List supported boards")
    boards_p.set_defaults(func=boards_cmd)

    comps_p = sub.add_parser("components", help="List known component kinds")
    comps_p.set_defaults(func=components_cmd)

    examples_p = sub.add_parser("examples", help="Print example prompts")
    examples_p.set_defaults(func=examples_cmd)

    pins_p = sub.add_parser("pins", help="Parse a pin specification")
    pins_p.add_argument("spec")
    pins_p.set_defaults(func=pins_cmd)

    parse_p = sub.add_parser("parse", help="Show the actions parsed from a prompt")
    parse_p.add_argument("text")
    parse_p.set_defaults(func=parse_cmd)

    validate_p = sub.add_parser("validate", help="Print the debug report for a project")
    _add_project_args(validate_p)
    validate_p.add_argument("--json", action="store_true")
    validate_p.set_defaults(func=validate_cmd)

    pseudo_p = sub.add_parser("pseudocode", help="Generate block instructions")
    _add_project_args(pseudo_p)
    pseudo_p.add_argument("--prompt", default=None, help="Override the project prompt")
    pseudo_p.add_argument("--json", action="store_true")
    pseudo_p.set_defaults(func=pseudocode_cmd)

    sketch_p = sub.add_parser("sketch", help="Generate Arduino sketch source")
    _add_project_args(sketch_p)
    sketch_p.add_argument("--prompt", default=None, help="Override the project prompt")
    sketch_p.set_defaults(func=sketch_cmd)

    export_p = sub.add_parser("export", help="Write a TXT/JSON/INO export")
    _add_project_args(export_p)
    export_p.add_argument("--format", choices=EXPORT_FORMATS, required=True)
    export_p.add_argument("--out-dir", type=Path, default=None)
    export_p.set_defaults(func=export_cmd)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.config is not None:
        os.environ[CONFIG_ENV_VAR] = str(Path(args.config).expanduser())
    try:
        config: AppConfig = load_config()
        logging_cfg.configure(config.logging.level)
        args.config_obj = config
        return args.func(args)
    except (ArdublockError, ConfigError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
