"""Boundary between the transcript engine and whatever delivers events."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from contextlib import suppress
from typing import Any, Protocol

from .bridge.events import ASSISTANT, RESULT, SYSTEM, BridgeEvent
from .bridge.parser import iter_bridge_events

logger = logging.getLogger(__name__)

EventCallback = Callable[[BridgeEvent], None]
Unsubscribe = Callable[[], None]


class Transport(Protocol):
    """Deliver bridge events for prompts issued through it."""

    def send_prompt(
        self, text: str, *, request_id: str, session_id: str | None = None
    ) -> None:
        """Start a new run for *text* labelled with *request_id*."""

    def continue_prompt(self, text: str, *, request_id: str) -> None:
        """Continue the most recent session with *text*."""

    def cancel_prompt(self) -> None:
        """Ask the running process to stop."""

    def subscribe(self, callback: EventCallback) -> Unsubscribe:
        """Register *callback* for every delivered event."""


DEFAULT_SCRIPT: tuple[BridgeEvent, ...] = (
    BridgeEvent(type=SYSTEM, session_id="scripted-session-001"),
    BridgeEvent(
        type=ASSISTANT,
        thinking="Let me analyze the request and think about the best approach...",
    ),
    BridgeEvent(
        type=ASSISTANT,
        text="I will help you with that. Here is my analysis:\n\n",
    ),
    BridgeEvent(
        type=ASSISTANT,
        text="The implementation looks straightforward. Let me proceed with the changes.",
    ),
    BridgeEvent(type=ASSISTANT, tool_name="read_file", tool_input='{"path":"src/main.py"}'),
    BridgeEvent(type=RESULT, result="completed"),
)


class ScriptedTransport:
    """Replay a fixed event script to subscribers for every prompt.

    Delivery is synchronous and in order. Useful for demos, tests and offline
    replay of recorded streams.
    """

    def __init__(
        self,
        script: Iterable[BridgeEvent | Mapping[str, Any]] | None = None,
    ) -> None:
        source = DEFAULT_SCRIPT if script is None else script
        self._script: tuple[BridgeEvent, ...] = tuple(
            BridgeEvent.coerce(event) for event in source
        )
        self._listeners: list[EventCallback] = []
        self.prompts: list[tuple[str, str]] = []
        self._last_request_id = ""
        self.cancel_count = 0

    @classmethod
    def from_ndjson(cls, lines: Iterable[bytes | str]) -> "ScriptedTransport":
        """Build a transport replaying a recorded ``stream-json`` capture."""
        return cls(iter_bridge_events(lines))

    # ------------------------------------------------------------------
    @property
    def script(self) -> Sequence[BridgeEvent]:
        return self._script

    # ------------------------------------------------------------------
    def send_prompt(
        self, text: str, *, request_id: str, session_id: str | None = None
    ) -> None:
        self.prompts.append((text, request_id))
        self._last_request_id = request_id
        logger.debug("Replaying %d scripted event(s) for %s", len(self._script), request_id)
        for event in self._script:
            self.emit(event.with_request_id(request_id))

    def continue_prompt(self, text: str, *, request_id: str) -> None:
        self.send_prompt(text, request_id=request_id)

    def cancel_prompt(self) -> None:
        self.cancel_count += 1
        if not self._last_request_id:
            logger.debug("Cancel requested before any prompt was sent")
            return
        self.emit(
            BridgeEvent(type=RESULT, result="cancelled", request_id=self._last_request_id)
        )

    # ------------------------------------------------------------------
    def subscribe(self, callback: EventCallback) -> Unsubscribe:
        self._listeners.append(callback)

        def _unsubscribe() -> None:
            with suppress(ValueError):
                self._listeners.remove(callback)

        return _unsubscribe

    def emit(self, event: BridgeEvent) -> None:
        """Deliver *event* to every current subscriber."""
        for listener in list(self._listeners):
            listener(event)


__all__ = [
    "DEFAULT_SCRIPT",
    "EventCallback",
    "ScriptedTransport",
    "Transport",
    "Unsubscribe",
]
