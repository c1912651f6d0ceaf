"""
Logging for rdbops.

Every module asks ``get_logger(__name__)`` for its logger. Output goes to
stderr (stdout is reserved for CLI documents) and optionally to a file, either
as one JSON object per line or as plain/colored text. A dictConfig YAML at
``settings.logging_config_path`` replaces the programmatic setup entirely.
"""

import json
import logging
import logging.config
import sys
from collections.abc import MutableMapping
from datetime import datetime, timezone
from functools import cache
from pathlib import Path
from typing import IO, Any

import yaml

from .config import LogFormat, settings

# Attributes every LogRecord carries; anything else arrived through ``extra=``
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

_TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, including ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        payload.update(
            (key, value) for key, value in vars(record).items() if key not in _STANDARD_ATTRS
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ColoredFormatter(logging.Formatter):
    """Text formatter that colors the level name for terminals."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        color = self.COLORS.get(original)
        if color:
            record.levelname = f"{color}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def _formatter(use_json: bool, stream: IO[str] | None = None) -> logging.Formatter:
    if use_json:
        return JSONFormatter()
    if stream is not None and stream.isatty():
        return ColoredFormatter(_TEXT_FORMAT)
    return logging.Formatter(_TEXT_FORMAT)


def _handlers(level: int, use_json: bool, log_file: Path | None) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_formatter(use_json, sys.stderr))
    handlers: list[logging.Handler] = [console]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(_formatter(use_json))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
    return handlers


@cache
def _apply_dict_config(cfg_path: Path) -> bool:
    """Apply the YAML dictConfig once per process; False when there is none."""
    if not cfg_path.exists():
        return False
    try:
        config = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
        logging.config.dictConfig(config)
    except (OSError, yaml.YAMLError, ValueError, TypeError) as e:
        print(f"rdbops: ignoring logging config {cfg_path}: {e}", file=sys.stderr)
        return False
    return True


def setup_logging(
    name: str,
    level: str | None = None,
    log_file: Path | None = None,
    use_json: bool | None = None,
) -> logging.Logger:
    """
    Configure and return the logger ``name``.

    Args:
        name: Logger name (usually __name__)
        level: Log level, defaults to ``settings.log_level``
        log_file: Extra file destination, defaults to ``settings.log_file_path``
        use_json: JSON lines instead of text, defaults to ``settings.log_format``
    """
    if _apply_dict_config(Path(settings.logging_config_path)):
        return logging.getLogger(name)

    logger = logging.getLogger(name)
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    if use_json is None:
        use_json = settings.log_format == LogFormat.JSON
    destination = log_file or settings.log_file_path

    logger.setLevel(log_level)
    logger.handlers.clear()
    for handler in _handlers(log_level, use_json, Path(destination) if destination else None):
        logger.addHandler(handler)
    logger.propagate = False
    return logger


@cache
def get_logger(name: str) -> logging.Logger:
    """Configured logger for ``name``, set up on first request."""
    return setup_logging(name)


class LoggerAdapter(logging.LoggerAdapter):
    """Adds fixed context (e.g. the snapshot name) to every record's ``extra``."""

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs
