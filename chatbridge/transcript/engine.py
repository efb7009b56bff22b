"""Reducer turning the bridge event stream into a displayable transcript."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from ..bridge.events import BridgeEvent
from ..signals import ObservableValue
from ..util.time import now_millis
from .assembler import AssemblerState, MessageAssembler, MessageIdGenerator
from .filter import accept
from .model import ChatMessage
from .store import TranscriptStore

logger = logging.getLogger(__name__)


class TranscriptEngine:
    """Fold bridge events for one conversation into a :class:`TranscriptStore`.

    The engine is a synchronous reducer: every call to :meth:`handle_event`
    runs to completion and performs no I/O. It must only be driven from one
    thread of execution at a time.
    """

    def __init__(
        self,
        *,
        id_prefix: str = "msg",
        strict_request_ids: bool = False,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self.store = TranscriptStore()
        self.session_id: ObservableValue[str | None] = ObservableValue(None)
        self._strict = strict_request_ids
        self._current_request_id: str | None = None
        self._assembler = MessageAssembler(
            self.store,
            ids=MessageIdGenerator(id_prefix),
            clock=clock,
        )

    # ------------------------------------------------------------------
    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return self.store.messages

    # ------------------------------------------------------------------
    @property
    def state(self) -> AssemblerState:
        return self._assembler.state

    # ------------------------------------------------------------------
    @property
    def current_request_id(self) -> str | None:
        return self._current_request_id

    @current_request_id.setter
    def current_request_id(self, value: str | None) -> None:
        self._current_request_id = value or None

    # ------------------------------------------------------------------
    def begin_request(self, request_id: str | None) -> None:
        """Make *request_id* the active request before a prompt is issued."""
        self.current_request_id = request_id
        logger.debug("Active request is now %s", self._current_request_id)

    # ------------------------------------------------------------------
    def handle_event(self, event: BridgeEvent | Mapping[str, Any]) -> bool:
        """Apply one event; return ``False`` when it was dropped as stale.

        Malformed or unknown events never raise; they are either ignored or
        handled with per-field defaults.
        """
        event = BridgeEvent.coerce(event)
        if not accept(event, self._current_request_id, strict=self._strict):
            logger.debug(
                "Dropping %s event for request %r (active %r)",
                event.type or "untyped",
                event.request_id,
                self._current_request_id,
            )
            return False

        match event.type:
            case "system":
                if event.session_id:
                    self.session_id.value = event.session_id
            case "assistant":
                self._assembler.add_fragment(event)
            case "result":
                self._assembler.finish(event)
            case _:
                logger.debug("Ignoring event of unknown type %r", event.type)
        return True

    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Start an entirely new conversation.

        Clears the transcript, the open message, the session id and the active
        request. Identifiers issued afterwards never repeat earlier ones.
        """
        self._assembler.reset()
        self._current_request_id = None
        self.session_id.value = None
        self.store.reset()


__all__ = ["TranscriptEngine"]
