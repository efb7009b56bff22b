import json
from pathlib import Path

import pytest

from chatbridge.application import ApplicationContext
from chatbridge.log import get_log_file_paths
from chatbridge.settings import AppSettings, TranscriptSettings
from chatbridge.transport import ScriptedTransport

pytestmark = pytest.mark.unit


def test_default_context_builds_engine_with_defaults() -> None:
    context = ApplicationContext()

    engine = context.create_engine()
    engine.handle_event({"type": "assistant", "text": "a"})

    assert engine.messages[0].id == "msg-0-1"


def test_engine_honours_transcript_settings() -> None:
    settings = AppSettings(
        transcript=TranscriptSettings(id_prefix="turn", strict_request_ids=True)
    )
    engine = ApplicationContext(settings).create_engine()
    engine.begin_request("r1")

    assert engine.handle_event({"type": "assistant", "text": "unlabelled"}) is False
    engine.handle_event({"type": "assistant", "text": "a", "request_id": "r1"})
    assert engine.messages[0].id == "turn-0-1"


def test_create_controller_uses_transport_factory() -> None:
    transports: list[ScriptedTransport] = []

    def _factory() -> ScriptedTransport:
        transport = ScriptedTransport([{"type": "assistant", "text": "x"}, {"type": "result"}])
        transports.append(transport)
        return transport

    controller = ApplicationContext(transport_factory=_factory).create_controller()
    controller.send("go")

    assert controller.subscribed
    assert len(transports) == 1
    assert len(controller.engine.messages) == 1


@pytest.mark.usefixtures("isolated_logging")
def test_from_file_configures_logging(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"log": {"level": "warning", "log_dir": str(tmp_path / "logs")}}),
        encoding="utf-8",
    )

    context = ApplicationContext.from_file(path)

    assert context.settings.log.log_dir == str(tmp_path / "logs")
    text_path, _ = get_log_file_paths()
    assert text_path.parent == (tmp_path / "logs").resolve()
