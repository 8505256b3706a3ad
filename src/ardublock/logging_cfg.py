"""Logging setup for the ``ardublock`` command line tool."""

import logging
import logging.config
import sys
from pathlib import Path

LOG_DIR = Path.home() / ".ardublock" / "logs"
LOG_FILE_NAME = "ardublock.log"

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"


class ColorFormatter(logging.Formatter):
    """Prefix console records with an ANSI colour when stderr is a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        text = super().format(record)
        if not sys.stderr.isatty():
            return text
        color = self.COLORS.get(record.levelname)
        return f"{color}{text}{self.RESET}" if color else text


def _handler_table(log_file: Path) -> dict:
    table = {
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": str(log_file),
            "maxBytes": 1_000_000,
            "backupCount": 5,
            "encoding": "utf-8",
            "formatter": "plain",
        },
    }
    # Warnings go to the terminal too; the file keeps everything
    if sys.stderr.isatty():
        table["console"] = {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": "color",
            "level": "WARNING",
        }
    return table


def configure(level: str = "INFO", log_dir: Path | None = None) -> Path:
    """Install the CLI logging setup and return the log file path."""
    target_dir = Path(log_dir) if log_dir is not None else LOG_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = target_dir / LOG_FILE_NAME
    handlers = _handler_table(log_file)

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {"format": FILE_FORMAT},
            "color": {"()": ColorFormatter, "format": CONSOLE_FORMAT},
        },
        "handlers": handlers,
        "root": {"level": level.upper(), "handlers": list(handlers)},
    })
    return log_file
