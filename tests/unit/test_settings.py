import json
import logging
from pathlib import Path

import pytest

from chatbridge.settings import AppSettings, LoggingSettings, TranscriptSettings, load_app_settings

pytestmark = pytest.mark.unit


def test_defaults() -> None:
    settings = AppSettings()

    assert settings.transcript.id_prefix == "msg"
    assert settings.transcript.strict_request_ids is False
    assert settings.log.level == logging.INFO
    assert settings.log.log_dir is None


def test_load_json(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "transcript": {"id_prefix": "turn", "strict_request_ids": True},
                "log": {"level": "debug", "log_dir": str(tmp_path / "logs")},
            }
        ),
        encoding="utf-8",
    )

    settings = load_app_settings(path)

    assert settings.transcript.id_prefix == "turn"
    assert settings.transcript.strict_request_ids is True
    assert settings.log.level == logging.DEBUG
    assert settings.log.log_dir == str(tmp_path / "logs")


def test_load_toml(tmp_path: Path) -> None:
    path = tmp_path / "settings.toml"
    path.write_text(
        '[transcript]\nid_prefix = "  "\n\n[log]\nlevel = 30\nlog_dir = ""\n',
        encoding="utf-8",
    )

    settings = load_app_settings(path)

    assert settings.transcript.id_prefix == "msg"
    assert settings.log.level == logging.WARNING
    assert settings.log.log_dir is None


def test_invalid_values_raise_value_error(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"log": {"level": "chatty"}}), encoding="utf-8")

    with pytest.raises(ValueError):
        load_app_settings(path)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, logging.INFO), ("", logging.INFO), ("WARNING", logging.WARNING), ("10", 10), (40, 40)],
)
def test_log_level_normalisation(raw, expected: int) -> None:
    assert LoggingSettings(level=raw).level == expected


def test_boolean_log_level_rejected() -> None:
    with pytest.raises(ValueError):
        LoggingSettings(level=True)


def test_assignment_is_validated() -> None:
    settings = TranscriptSettings()

    settings.id_prefix = ""

    assert settings.id_prefix == "msg"
