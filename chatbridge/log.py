"""Logging setup shared by the engine, the controller and the transports.

Everything logs below the ``chatbridge`` logger. :func:`configure_logging`
attaches three handlers to it: a console stream, a plain text log and a
JSON-lines log, the latter two rotating inside one log directory.
"""

from __future__ import annotations

import json
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from .util.time import utc_now_iso

LOG_DIR_ENV = "CHATBRIDGE_LOG_DIR"
TEXT_LOG_NAME = "chatbridge.log"
JSON_LOG_NAME = "chatbridge.jsonl"

_MAX_BYTES = 5 * 1024 * 1024
_BACKUPS = 5
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger("chatbridge")

_log_dir: Path | None = None


def _structured(record: logging.LogRecord) -> Any:
    return getattr(record, "json", None)


class ConsoleFormatter(logging.Formatter):
    """Short console lines; events from :func:`log_event` show their payload."""

    def __init__(self) -> None:
        super().__init__("%(levelname)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra = _structured(record)
        if not isinstance(extra, dict) or "payload" not in extra:
            return line
        # only records whose message is the bare event name carry a payload
        if str(record.msg).strip() != str(extra.get("event", "")).strip():
            return line
        try:
            rendered = json.dumps(extra["payload"], ensure_ascii=False)
        except TypeError:
            rendered = json.dumps(str(extra["payload"]), ensure_ascii=False)
        return f"{line} {rendered}"


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        extra = _structured(record)
        data: dict[str, Any] = dict(extra) if isinstance(extra, dict) else {}
        if extra is not None and not isinstance(extra, dict):
            data["data"] = extra
        data.setdefault("message", record.getMessage())
        data.setdefault("level", record.levelname)
        data.setdefault("logger", record.name)
        data.setdefault("timestamp", utc_now_iso())
        if record.exc_info:
            data.setdefault("exc_info", self.formatException(record.exc_info))
        return json.dumps(data, ensure_ascii=False, default=str)


class JsonlHandler(RotatingFileHandler):
    """Rotating file handler writing :class:`JsonFormatter` lines."""

    def __init__(self, filename: Path | str, *, max_bytes: int = _MAX_BYTES) -> None:
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(path, maxBytes=max_bytes, backupCount=_BACKUPS, encoding="utf-8")
        self.setFormatter(JsonFormatter())


def _log_directory(explicit: str | Path | None) -> Path:
    """Pick the log directory: argument, then environment, then home."""
    if explicit is not None:
        directory = Path(explicit)
    elif os.environ.get(LOG_DIR_ENV):
        directory = Path(os.environ[LOG_DIR_ENV])
    else:
        directory = Path.home() / ".chatbridge" / "logs"
    directory = directory.expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    return directory.resolve()


def _file_handlers(directory: Path) -> list[logging.Handler]:
    text = RotatingFileHandler(
        directory / TEXT_LOG_NAME,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUPS,
        encoding="utf-8",
    )
    text.setFormatter(logging.Formatter(_TEXT_FORMAT))
    handlers: list[logging.Handler] = [text, JsonlHandler(directory / JSON_LOG_NAME)]
    for handler in handlers:
        handler.setLevel(logging.DEBUG)
    return handlers


def configure_logging(level: int = logging.INFO, *, log_dir: str | Path | None = None) -> None:
    """Attach console and file handlers to the ``chatbridge`` logger.

    Only the first call installs handlers. Later calls change the console
    level and leave the log directory where it is.
    """
    global _log_dir

    consoles = [h for h in logger.handlers if type(h) is logging.StreamHandler]
    if logger.handlers:
        for handler in consoles:
            handler.setLevel(level)
        return

    _log_dir = _log_directory(log_dir)
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(ConsoleFormatter())
    for handler in [console, *_file_handlers(_log_dir)]:
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


def shutdown_logging() -> None:
    """Remove and close the handlers installed by :func:`configure_logging`."""
    global _log_dir

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    _log_dir = None


def get_log_file_paths() -> tuple[Path, Path]:
    """Return ``(text_log, jsonl_log)``; configures logging on first use."""
    if _log_dir is None:
        configure_logging()
    assert _log_dir is not None
    return _log_dir / TEXT_LOG_NAME, _log_dir / JSON_LOG_NAME


def log_event(name: str, payload: Any = None, *, level: int = logging.INFO) -> None:
    """Log the structured event *name*, optionally with a JSON payload."""
    data: dict[str, Any] = {"event": name}
    if payload is not None:
        data["payload"] = payload
    logger.log(level, name, extra={"json": data})


__all__ = [
    "ConsoleFormatter",
    "JsonFormatter",
    "JsonlHandler",
    "LOG_DIR_ENV",
    "configure_logging",
    "get_log_file_paths",
    "log_event",
    "logger",
    "shutdown_logging",
]
