from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

import uvicorn

from ardublock.config.loader import CONFIG_ENV_VAR, AppConfig, ConfigError, load_config

from .app import create_app


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="ArduBlock HTTP service")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to ardublock.yml (defaults to the standard search locations).",
    )
    parser.add_argument("--host", type=str, default=None, help="Override service host")
    parser.add_argument("--port", type=int, default=None, help="Override service port")
    parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="Override bearer token (warning: prints in plain text)",
    )
    return parser.parse_args(argv)


def _apply_overrides(cfg: AppConfig, args: argparse.Namespace) -> AppConfig:
    if args.host is not None:
        cfg.service.host = args.host
    if args.port is not None:
        if args.port <= 0 or args.port > 65535:
            raise SystemExit("Service port must be between 1 and 65535")
        cfg.service.port = int(args.port)
    if args.token is not None:
        cfg.service.auth_token = args.token
    return cfg


def serve_from_config(cfg: AppConfig) -> int:
    # Environment wins over the config file for the service log level
    os.environ.setdefault("ARDUBLOCK_LOG_LEVEL", cfg.logging.level)
    app = create_app(
        auth_token=cfg.service.auth_token or None,
        default_board=cfg.board.default,
    )
    config = uvicorn.Config(
        app,
        host=cfg.service.host,
        port=cfg.service.port,
        log_config=None,
    )
    server = uvicorn.Server(config)
    server.run()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.config is not None:
        os.environ[CONFIG_ENV_VAR] = str(Path(args.config).expanduser())
    try:
        cfg = load_config()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return serve_from_config(_apply_overrides(cfg, args))


if __name__ == "__main__":
    sys.exit(main())
