"""Logging setup for processes embedding the board engine.

Levels come from a filter string such as ``"warning,seabattle.game.core=debug"``:
a bare level sets the root, ``name=level`` pairs override single loggers.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

__all__ = [
    "DEFAULT_FILTER",
    "JsonFormatter",
    "LogFilter",
    "TreeFormatter",
    "configure_logging",
    "install_logging",
    "parse_log_filter",
    "setup_default_logging",
]

DEFAULT_FILTER = "info"

# Attributes every LogRecord carries; anything else was passed via ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

_configured_targets: list[str] = []


@dataclass(frozen=True, slots=True)
class LogFilter:
    """Root level plus per-logger overrides."""

    root_level: int = logging.INFO
    targets: dict[str, int] = field(default_factory=dict)


def parse_log_filter(text: str) -> LogFilter:
    """Parse a comma separated filter; empty text means ``DEFAULT_FILTER``."""
    root_level = _parse_level(DEFAULT_FILTER)
    targets: dict[str, int] = {}
    for directive in (part.strip() for part in text.split(",")):
        if not directive:
            continue
        target, sep, level = directive.partition("=")
        if sep:
            if not target.strip():
                raise ValueError(f"Log filter directive '{directive}' has no logger name.")
            targets[target.strip()] = _parse_level(level)
        else:
            root_level = _parse_level(target)
    return LogFilter(root_level=root_level, targets=targets)


def _parse_level(name: str) -> int:
    normalized = name.strip().upper()
    if normalized == "WARN":
        normalized = "WARNING"
    if normalized == "TRACE":
        normalized = "DEBUG"
    level = logging.getLevelNamesMapping().get(normalized)
    if level is None:
        raise ValueError(f"Unknown log level '{name.strip()}'.")
    return level


def _extra_fields(record: logging.LogRecord) -> dict[str, object]:
    return {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS}


class TreeFormatter(logging.Formatter):
    """Human readable lines: ``time LEVEL target: message{key=value, ...}``."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, UTC).strftime("%H:%M:%S.%f")[:-3]
        line = f"{stamp} {record.levelname:<7} {record.name}: {record.getMessage()}"
        extras = _extra_fields(record)
        if extras:
            line += "{" + ", ".join(f"{key}={value}" for key, value in extras.items()) + "}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per record, ``extra`` values under ``fields``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname.lower(),
            "target": record.name,
            "message": record.getMessage(),
        }
        extras = _extra_fields(record)
        if extras:
            payload["fields"] = extras
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(
    log_filter: LogFilter,
    *,
    json_output: bool = False,
    file_path: str | None = None,
) -> None:
    """Replace root handlers and apply the filter's levels."""
    console = logging.StreamHandler()
    console.setFormatter(JsonFormatter() if json_output else TreeFormatter())
    handlers: list[logging.Handler] = [console]
    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        # Files are always JSON lines.
        file_handler.setFormatter(JsonFormatter())
        handlers.append(file_handler)

    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler):
            handler.close()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(log_filter.root_level)

    for name in _configured_targets:
        logging.getLogger(name).setLevel(logging.NOTSET)
    _configured_targets.clear()
    for name, level in log_filter.targets.items():
        logging.getLogger(name).setLevel(level)
        _configured_targets.append(name)


def install_logging(environ: Mapping[str, str] | None = None) -> LogFilter:
    """Configure logging from ``SEABATTLE_LOG``, ``LOG_FORMAT`` and ``SEABATTLE_LOG_FILE``."""
    env = os.environ if environ is None else environ
    filter_text = env.get("SEABATTLE_LOG", "").strip() or DEFAULT_FILTER
    log_filter = parse_log_filter(filter_text)
    configure_logging(
        log_filter,
        json_output=env.get("LOG_FORMAT", "").strip().lower() == "json",
        file_path=env.get("SEABATTLE_LOG_FILE", "").strip() or None,
    )
    logging.captureWarnings(True)
    logging.getLogger(__name__).debug("log_filter=%s", filter_text)
    return log_filter


def setup_default_logging() -> None:
    """Install logging from the environment unless handlers already exist."""
    if logging.getLogger().handlers:
        return
    install_logging()
