"""Typed application settings with Pydantic validation."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import tomllib
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_ID_PREFIX = "msg"


def _blank_to_none(value: str | Path | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class TranscriptSettings(BaseModel):
    """Settings controlling how bridge events are folded into messages."""

    model_config = ConfigDict(validate_assignment=True)

    id_prefix: str = DEFAULT_ID_PREFIX
    strict_request_ids: bool = False

    @field_validator("id_prefix", mode="before")
    @classmethod
    def _normalise_id_prefix(cls, value: str | None) -> str:
        """Fall back to the default prefix for blank values."""
        return _blank_to_none(value) or DEFAULT_ID_PREFIX


class LoggingSettings(BaseModel):
    """Settings for the application logger."""

    model_config = ConfigDict(validate_assignment=True)

    level: int = Field(default=logging.INFO)
    log_dir: str | None = None

    @field_validator("level", mode="before")
    @classmethod
    def _normalise_level(cls, value: int | str | None) -> int:
        """Accept level names such as ``"debug"`` as well as numbers."""
        if value is None:
            return logging.INFO
        if isinstance(value, bool):
            raise ValueError("Boolean is not a valid log level")
        if isinstance(value, str):
            raw = value.strip()
            if not raw:
                return logging.INFO
            if raw.isdigit():
                return int(raw)
            resolved = logging.getLevelName(raw.upper())
            if not isinstance(resolved, int):
                raise ValueError(f"Unknown log level: {value!r}")
            return resolved
        return int(value)

    @field_validator("log_dir", mode="before")
    @classmethod
    def _normalise_log_dir(cls, value: str | Path | None) -> str | None:
        return _blank_to_none(value)


class AppSettings(BaseModel):
    """Aggregate settings for the application."""

    model_config = ConfigDict(validate_assignment=True)

    transcript: TranscriptSettings = Field(default_factory=TranscriptSettings)
    log: LoggingSettings = Field(default_factory=LoggingSettings)

    def to_dict(self) -> dict:
        """Return settings as a plain dictionary."""
        return self.model_dump()


def load_app_settings(path: str | Path) -> AppSettings:
    """Load :class:`AppSettings` from *path* with validation.

    Format is detected by file extension: ``.toml`` uses :mod:`tomllib`,
    everything else is treated as JSON.  Validation errors are wrapped into
    :class:`ValueError`.
    """
    p = Path(path)
    with p.open("rb") as fh:
        data = tomllib.load(fh) if p.suffix.lower() == ".toml" else json.load(fh)
    try:
        return AppSettings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc


__all__ = [
    "AppSettings",
    "LoggingSettings",
    "TranscriptSettings",
    "load_app_settings",
]
