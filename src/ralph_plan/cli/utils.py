"""
Shared utilities for CLI commands.
"""

import json
import logging
from datetime import datetime
from pathlib import Path

import click

from ralph_plan.config.app import LoggingSettings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single-line JSON object."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def setup_logging(settings: LoggingSettings | None = None) -> None:
    """
    Configure logging for CLI.

    Logs go to stderr so that JSON written to stdout stays clean.

    Args:
        settings: Logging settings from config (defaults if None)
    """
    settings = settings or LoggingSettings()
    level = getattr(logging, settings.level.upper())

    handler = logging.StreamHandler()
    if settings.format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT))

    logging.basicConfig(level=level, handlers=[handler], force=True)


def read_plan(path: str) -> str:
    """
    Read a plan file as UTF-8 text.

    Raises:
        click.ClickException: If the file cannot be read
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(f"Error reading {path}: {e}") from e


def write_output(path: Path, content: str) -> None:
    """
    Write text to ``path``, creating parent directories.

    Raises:
        click.ClickException: If the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content if content.endswith("\n") else content + "\n", encoding="utf-8")
    except OSError as e:
        raise click.ClickException(f"Error writing {path}: {e}") from e
