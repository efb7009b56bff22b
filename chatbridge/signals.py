"""Minimal observer primitives used to publish transcript state."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import suppress
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class Signal(Generic[T]):
    """Simple signal implementation for reactive consumers."""

    __slots__ = ("_listeners",)

    def __init__(self) -> None:
        self._listeners: list[Callable[[T], Any]] = []

    def connect(self, callback: Callable[[T], Any]) -> Callable[[], None]:
        """Register *callback* and return a callable that disconnects it."""
        self._listeners.append(callback)

        def _disconnect() -> None:
            self.disconnect(callback)

        return _disconnect

    def disconnect(self, callback: Callable[[T], Any]) -> None:
        with suppress(ValueError):
            self._listeners.remove(callback)

    def emit(self, payload: T) -> None:
        for listener in list(self._listeners):
            listener(payload)

    def __len__(self) -> int:
        return len(self._listeners)


class ObservableValue(Generic[T]):
    """Hold a value and emit :attr:`changed` whenever it is replaced."""

    __slots__ = ("_value", "changed")

    def __init__(self, initial: T) -> None:
        self._value = initial
        self.changed: Signal[T] = Signal()

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if new_value is self._value or new_value == self._value:
            return
        self._value = new_value
        self.changed.emit(new_value)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"{type(self).__name__}({self._value!r})"


__all__ = ["ObservableValue", "Signal"]
