import pytest

from chatbridge.bridge.events import BridgeEvent

pytestmark = pytest.mark.unit


def test_from_dict_defaults_missing_fields_to_empty() -> None:
    event = BridgeEvent.from_dict({"type": "assistant"})

    assert event == BridgeEvent(type="assistant")
    assert event.text == ""
    assert event.tool_input == ""
    assert event.is_error is False


def test_from_dict_coerces_values() -> None:
    event = BridgeEvent.from_dict(
        {
            "type": "assistant",
            "tool_name": "read",
            "tool_input": {"path": "a.txt"},
            "text": None,
            "request_id": 7,
            "extra": "ignored",
        }
    )

    assert event.tool_input == '{"path":"a.txt"}'
    assert event.text == ""
    assert event.request_id == "7"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(True, True), (False, False), (None, False), ("true", True), ("no", False), (1, True)],
)
def test_from_dict_is_error_flag(raw, expected: bool) -> None:
    assert BridgeEvent.from_dict({"type": "result", "is_error": raw}).is_error is expected


def test_from_dict_tolerates_non_mapping_payload() -> None:
    assert BridgeEvent.from_dict(["not", "a", "mapping"]) == BridgeEvent(type="")


def test_to_dict_omits_empty_fields() -> None:
    event = BridgeEvent(type="result", is_error=True, result="boom", request_id="r1")

    assert event.to_dict() == {
        "type": "result",
        "request_id": "r1",
        "result": "boom",
        "is_error": True,
    }


def test_with_request_id_returns_labelled_copy() -> None:
    original = BridgeEvent(type="assistant", text="hi")
    labelled = original.with_request_id("r9")

    assert labelled.request_id == "r9"
    assert labelled.text == "hi"
    assert original.request_id == ""


def test_coerce_passes_events_through() -> None:
    event = BridgeEvent(type="system")

    assert BridgeEvent.coerce(event) is event
    assert BridgeEvent.coerce({"type": "system"}) == event
