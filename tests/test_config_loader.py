from __future__ import annotations

from pathlib import Path

import pytest

from ardublock.config.loader import CONFIG_ENV_VAR, ConfigError, load_config, save_config
from ardublock.domain.models import BoardId


def test_config_defaults_when_file_missing(tmp_path, monkeypatch):
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.yml"))
    cfg = load_config()
    assert cfg.board.default is BoardId.UNO
    assert cfg.service.port == 8765
    assert cfg.logging.level == "INFO"
    assert cfg.source_path == tmp_path / "missing.yml"


def test_config_load_save_roundtrip(tmp_path, monkeypatch):
    cfg_path = tmp_path / "ardublock.yml"
    monkeypatch.setenv(CONFIG_ENV_VAR, str(cfg_path))

    cfg = load_config()
    cfg.board.default = BoardId.MEGA
    cfg.export.out_dir = tmp_path / "exports"
    cfg.service.host = "0.0.0.0"
    cfg.service.port = 9000
    cfg.service.auth_token = "secret"
    cfg.logging.level = "DEBUG"
    save_config(cfg)

    loaded = load_config()
    assert loaded.board.default is BoardId.MEGA
    assert loaded.export.out_dir == tmp_path / "exports"
    assert loaded.service.port == 9000
    assert loaded.service.auth_token == "secret"
    assert loaded.logging.level == "DEBUG"
    assert loaded.source_path == Path(cfg_path)


def test_partial_file_is_merged_with_defaults(tmp_path, monkeypatch):
    cfg_path = tmp_path / "partial.yml"
    cfg_path.write_text("board:\n  default: esp32\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(cfg_path))
    cfg = load_config()
    assert cfg.board.default is BoardId.ESP32
    assert cfg.service.host == "127.0.0.1"


@pytest.mark.parametrize(
    "text",
    [
        "board:\n  default: nano\n",
        "service:\n  port: 70000\n",
        "service:\n  port: abc\n",
        "logging:\n  level: LOUD\n",
        "board: [1, 2]\n",
        "- just\n- a list\n",
        "service: {port: [\n",
    ],
)
def test_invalid_values_raise(tmp_path, monkeypatch, text):
    cfg_path = tmp_path / "invalid.yml"
    cfg_path.write_text(text, encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(cfg_path))
    with pytest.raises(ConfigError):
        load_config()


def test_export_dir_pointing_to_file_raises(tmp_path, monkeypatch):
    blocker = tmp_path / "file.txt"
    blocker.write_text("x", encoding="utf-8")
    cfg_path = tmp_path / "cfg.yml"
    cfg_path.write_text(f"export:\n  out_dir: {blocker.as_posix()}\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(cfg_path))
    with pytest.raises(ConfigError):
        load_config()
