from __future__ import annotations

import os
from pathlib import Path


def _expand(path_value: str) -> Path:
    return Path(os.path.expandvars(path_value)).expanduser()


def resolve_log_file() -> Path:
    """Return the target log file path based on environment overrides."""
    file_override = os.environ.get("ARDUBLOCK_LOG_FILE", "").strip()
    if file_override:
        return _expand(file_override)

    dir_override = os.environ.get("ARDUBLOCK_LOG_DIR", "").strip()
    if dir_override:
        return _expand(dir_override) / "service.log"

    return Path.home() / ".ardublock" / "logs" / "service.log"


def resolve_log_dir() -> Path:
    return resolve_log_file().parent
