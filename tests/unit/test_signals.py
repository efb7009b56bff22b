import pytest

from chatbridge.signals import ObservableValue, Signal

pytestmark = pytest.mark.unit


def test_signal_connect_emit_and_disconnect() -> None:
    signal: Signal[int] = Signal()
    received: list[int] = []

    disconnect = signal.connect(received.append)
    signal.emit(1)
    disconnect()
    signal.emit(2)

    assert received == [1]
    assert len(signal) == 0


def test_disconnect_unknown_callback_is_noop() -> None:
    signal: Signal[int] = Signal()

    signal.disconnect(print)

    assert len(signal) == 0


def test_listener_may_disconnect_during_emit() -> None:
    signal: Signal[str] = Signal()
    calls: list[str] = []

    def once(payload: str) -> None:
        calls.append(payload)
        signal.disconnect(once)

    signal.connect(once)
    signal.connect(calls.append)
    signal.emit("a")
    signal.emit("b")

    assert calls == ["a", "a", "b"]


def test_observable_value_emits_only_on_change() -> None:
    value: ObservableValue[str | None] = ObservableValue(None)
    seen: list[str | None] = []
    value.changed.connect(seen.append)

    value.value = "s1"
    value.value = "s1"
    value.value = None

    assert seen == ["s1", None]
    assert value.value is None
