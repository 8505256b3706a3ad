"""Serialize a project to the downloadable TXT / JSON / INO formats."""

from __future__ import annotations

import datetime as _dt
import json
import logging
from pathlib import Path
from typing import Optional

from .. import __version__
from ..core.parser import parse_prompt
from ..core.pseudocode import generate_pseudocode, render_steps
from ..core.sketch import generate_sketch
from ..domain.registry import board_profile_for, spec_for
from .project import Project, ensure_generation_allowed

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("txt", "json", "ino")


def _now(now: Optional[_dt.datetime]) -> _dt.datetime:
    return now or _dt.datetime.now(_dt.timezone.utc)


def export_text_report(project: Project, now: Optional[_dt.datetime] = None) -> str:
    """Plain-text instruction sheet with components, steps and the debug report.

    The steps are emitted even when the report has errors so the sheet can be
    used to show what is wrong.
    """

    profile = board_profile_for(project.board)
    report = project.report()
    steps = generate_pseudocode(parse_prompt(project.prompt, project.components), project.components)

    lines = [
        "Arduino Project Instructions - ArduBlock.ru Compatible",
        "=" * 56,
        "",
        f"Project: {project.prompt}",
        f"Arduino Model: {profile.name}",
        f"Generated: {_now(now).strftime('%Y-%m-%d %H:%M:%S')}",
        f"Components: {len(project.components)}",
        "",
        "COMPONENTS CONFIGURATION:",
        "-" * 24,
    ]
    for component in project.components:
        spec = spec_for(component)
        if spec is None:
            continue
        label = f" ({component.label})" if component.label else ""
        lines += [
            f"• {spec.name}{label}",
            f"  Pins: {component.pins}",
            f"  ArduBlock Category: {spec.category}",
            f"  Required Blocks: {', '.join(spec.blocks)}",
            "",
        ]

    lines += ["ARDUBLOCK.RU INSTRUCTIONS:", "-" * 26, render_steps(steps), ""]
    lines += ["", "PROJECT DESCRIPTION:", "-" * 19, project.prompt, ""]
    lines += [
        "DEBUG REPORT:",
        "-" * 13,
        f"Status: {report.status.value.upper()}",
        f"Digital Pins Used: {report.digital_pins_used}",
        f"Analog Pins Used: {report.analog_pins_used}",
        f"Estimated Blocks: {report.estimated_blocks}",
    ]
    if report.issues:
        lines += ["", "ISSUES:"]
        for issue in report.issues:
            lines.append(f"• {issue.type.value.upper()}: {issue.message}")
            if issue.suggestion:
                lines.append(f"  Suggestion: {issue.suggestion}")
    return "\n".join(lines) + "\n"


def export_json(project: Project, now: Optional[_dt.datetime] = None) -> str:
    report = project.report()
    actions = parse_prompt(project.prompt, project.components)
    steps = generate_pseudocode(actions, project.components)
    data = {
        "model": project.board.value,
        "prompt": project.prompt,
        "components": project.to_dict()["components"],
        "pseudocode": [step.to_dict() for step in steps],
        "debugReport": report.to_dict(),
        "timestamp": _now(now).isoformat(),
        "version": __version__,
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def export_sketch(project: Project, now: Optional[_dt.datetime] = None) -> str:
    """Sketch source; refused while the debug report has errors."""

    ensure_generation_allowed(project.report())
    actions = parse_prompt(project.prompt, project.components)
    return generate_sketch(actions, project.components, project.board, _now(now).date())


def write_export(
    project: Project,
    out_dir: Path,
    fmt: str,
    now: Optional[_dt.datetime] = None,
) -> Path:
    """Write ``project`` as ``fmt`` into ``out_dir`` and return the file path."""

    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format {fmt!r}; expected one of {EXPORT_FORMATS}")
    stamp = _now(now)
    if fmt == "txt":
        content = export_text_report(project, stamp)
    elif fmt == "json":
        content = export_json(project, stamp)
    else:
        content = export_sketch(project, stamp)

    out_dir = Path(out_dir).expanduser()
    out_dir.mkdir(parents=True, exist_ok=True)
    target = out_dir / f"arduino-project-{int(stamp.timestamp() * 1000)}.{fmt}"
    target.write_text(content, encoding="utf-8")
    logger.info("Exported %s to %s", fmt, target)
    return target


__all__ = [
    "EXPORT_FORMATS",
    "export_text_report",
    "export_json",
    "export_sketch",
    "write_export",
]
