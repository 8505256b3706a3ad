from __future__ import annotations

import copy
import importlib.resources
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, cast

import yaml

from ..domain.models import BoardId
from ..errors import UnknownBoardError
from ..domain.registry import DEFAULT_BOARD, coerce_board_id

CONFIG_ENV_VAR = "ARDUBLOCK_CONFIG"

_CONFIG_FILENAME = "ardublock.yml"
_DEFAULT_CONFIG_RESOURCE = "default_config.yaml"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigError(Exception):
    """Raised when the configuration file is malformed or invalid."""


def _load_default_config() -> Dict[str, Any]:
    resource = importlib.resources.files("ardublock.resources") / _DEFAULT_CONFIG_RESOURCE
    data = yaml.safe_load(resource.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ConfigError("default_config.yaml must contain a mapping at the top level")
    return cast(Dict[str, Any], data)


_DEFAULT_CONFIG_DATA: Dict[str, Any] = _load_default_config()


def _default_config_candidates() -> list[Path]:
    candidates: list[Path] = []

    def _add(path: Path) -> None:
        resolved = path.resolve()
        if resolved not in candidates:
            candidates.append(resolved)

    _add(Path.home() / ".ardublock" / _CONFIG_FILENAME)
    _add(Path(__file__).resolve().parents[3] / "config" / _CONFIG_FILENAME)
    return candidates


@dataclass
class BoardConfig:
    default: BoardId = DEFAULT_BOARD


@dataclass
class ExportConfig:
    out_dir: Path = field(default_factory=lambda: Path("~/ardublock-exports").expanduser())


@dataclass
class ServiceConfig:
    host: str = "127.0.0.1"
    port: int = 8765
    auth_token: str = ""


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class AppConfig:
    board: BoardConfig = field(default_factory=BoardConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    _source_path: Optional[Path] = field(default=None, repr=False, compare=False)

    @property
    def source_path(self) -> Optional[Path]:
        return self._source_path

    def with_source(self, path: Path) -> "AppConfig":
        self._source_path = path
        return self


def _default_dict() -> Dict[str, Any]:
    return copy.deepcopy(_DEFAULT_CONFIG_DATA)


def _resolve_config_path() -> Path:
    env_override = os.environ.get(CONFIG_ENV_VAR)
    if env_override:
        return Path(env_override).expanduser().resolve()
    for candidate in _default_config_candidates():
        if candidate.exists():
            return candidate
    return _default_config_candidates()[0]


def _section(merged: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = merged.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"{name} must be a mapping")
    return section


def _coerce_board(section: Dict[str, Any]) -> BoardConfig:
    raw = section.get("default", DEFAULT_BOARD.value)
    try:
        return BoardConfig(default=coerce_board_id(raw))
    except UnknownBoardError as exc:
        raise ConfigError(f"board.default: {exc}") from exc


def _coerce_export(section: Dict[str, Any]) -> ExportConfig:
    raw = section.get("out_dir")
    if raw is None:
        return ExportConfig()
    if not isinstance(raw, str) or not raw.strip():
        raise ConfigError("export.out_dir must be a non-empty string")
    path = Path(raw).expanduser()
    if path.exists() and not path.is_dir():
        raise ConfigError("export.out_dir points to a file, expected directory")
    return ExportConfig(out_dir=path)


def _coerce_service(section: Dict[str, Any]) -> ServiceConfig:
    host = section.get("host", "127.0.0.1")
    port = section.get("port", 8765)
    auth_token = section.get("auth_token", "") or ""

    if not isinstance(host, str) or not host:
        raise ConfigError("service.host must be a non-empty string")
    if not isinstance(auth_token, str):
        raise ConfigError("service.auth_token must be a string")
    try:
        port = int(port)
    except (TypeError, ValueError) as exc:
        raise ConfigError("service.port must be an integer") from exc
    if port <= 0 or port > 65535:
        raise ConfigError("service.port must be between 1 and 65535")
    return ServiceConfig(host=host, port=port, auth_token=auth_token.strip())


def _coerce_logging(section: Dict[str, Any]) -> LoggingConfig:
    level = str(section.get("level", "INFO") or "INFO").strip().upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"logging.level must be one of {sorted(_LOG_LEVELS)}")
    return LoggingConfig(level=level)


def _coerce_config(raw: Dict[str, Any]) -> AppConfig:
    if not isinstance(raw, dict):
        raise ConfigError("configuration must contain a mapping at the top level")
    merged: Dict[str, Any] = _default_dict()
    merged.update(raw)

    return AppConfig(
        board=_coerce_board(_section(merged, "board")),
        export=_coerce_export(_section(merged, "export")),
        service=_coerce_service(_section(merged, "service")),
        logging=_coerce_logging(_section(merged, "logging")),
    )


def load_config() -> AppConfig:
    path = _resolve_config_path()
    if path.exists():
        try:
            with path.open("r", encoding="utf-8") as handle:
                raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"{path} is not valid YAML: {exc}") from exc
    else:
        raw = {}
    config = _coerce_config(raw)
    config.with_source(path)
    logging.getLogger(__name__).debug("Loaded configuration from %s", path)
    return config


def save_config(config: AppConfig) -> None:
    target = config.source_path or _resolve_config_path()
    data = {
        "board": {"default": config.board.default.value},
        "export": {"out_dir": str(config.export.out_dir)},
        "service": {
            "host": config.service.host,
            "port": int(config.service.port),
            "auth_token": config.service.auth_token,
        },
        "logging": {"level": config.logging.level},
    }
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False)
    config.with_source(target)


__all__ = [
    "CONFIG_ENV_VAR",
    "AppConfig",
    "BoardConfig",
    "ExportConfig",
    "ServiceConfig",
    "LoggingConfig",
    "ConfigError",
    "load_config",
    "save_config",
]
