"""Chat controller binding a transport subscription to a transcript engine."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable

from .bridge.events import BridgeEvent
from .i18n import _
from .log import log_event
from .signals import ObservableValue
from .transcript.engine import TranscriptEngine
from .transcript.errors import format_process_error
from .transport import Transport, Unsubscribe

logger = logging.getLogger(__name__)

Dispatcher = Callable[[Callable[[], None]], None]


def _new_request_id() -> str:
    return uuid.uuid4().hex


class ChatController:
    """Issue prompts and route the resulting events into one engine.

    Every event delivered by the transport goes through ``dispatch`` (for
    example ``wx.CallAfter``) so the engine only ever runs on the thread that
    owns it. Without a dispatcher events are applied inline.
    """

    def __init__(
        self,
        engine: TranscriptEngine,
        transport: Transport,
        *,
        dispatch: Dispatcher | None = None,
        request_id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._engine = engine
        self._transport = transport
        self._dispatch = dispatch
        self._request_id_factory = request_id_factory or _new_request_id
        self._unsubscribe: Unsubscribe | None = None
        self.loading: ObservableValue[bool] = ObservableValue(False)
        self.stoppable: ObservableValue[bool] = ObservableValue(False)
        self.error: ObservableValue[str | None] = ObservableValue(None)

    # ------------------------------------------------------------------
    @property
    def engine(self) -> TranscriptEngine:
        return self._engine

    # ------------------------------------------------------------------
    @property
    def subscribed(self) -> bool:
        return self._unsubscribe is not None

    # ------------------------------------------------------------------
    def start(self) -> None:
        """Subscribe to the transport; calling twice has no effect."""
        if self._unsubscribe is None:
            self._unsubscribe = self._transport.subscribe(self._on_transport_event)

    # ------------------------------------------------------------------
    def close(self) -> None:
        """Stop receiving events. Events already dispatched still complete."""
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    # ------------------------------------------------------------------
    def send(self, text: str, *, session_id: str | None = None) -> str | None:
        """Start a new run for *text* and return its request id.

        Blank prompts are ignored and return ``None``.
        """
        prompt = text.strip()
        if not prompt:
            return None
        request_id = self._begin_request()
        self._transport.send_prompt(prompt, request_id=request_id, session_id=session_id)
        return request_id

    # ------------------------------------------------------------------
    def continue_(self, text: str) -> str | None:
        """Continue the previous session with *text*; see :meth:`send`."""
        prompt = text.strip()
        if not prompt:
            return None
        request_id = self._begin_request()
        self._transport.continue_prompt(prompt, request_id=request_id)
        return request_id

    # ------------------------------------------------------------------
    def cancel(self) -> None:
        """Ask the transport to stop the running request."""
        if not self.loading.value:
            return
        self.stoppable.value = False
        self._transport.cancel_prompt()

    # ------------------------------------------------------------------
    def new_conversation(self) -> None:
        """Reset the engine and controller state for a fresh conversation."""
        self._engine.reset()
        self.loading.value = False
        self.stoppable.value = False
        self.error.value = None

    # ------------------------------------------------------------------
    def _begin_request(self) -> str:
        request_id = self._request_id_factory()
        self._engine.begin_request(request_id)
        self.error.value = None
        self.loading.value = True
        self.stoppable.value = True
        log_event("request.started", {"request_id": request_id})
        return request_id

    # ------------------------------------------------------------------
    def _on_transport_event(self, event: BridgeEvent) -> None:
        if self._dispatch is None:
            self._apply(event)
        else:
            self._dispatch(lambda: self._apply(event))

    # ------------------------------------------------------------------
    def _apply(self, event: BridgeEvent) -> None:
        if not self._engine.handle_event(event):
            return
        if event.type != "result":
            return
        self.loading.value = False
        self.stoppable.value = False
        if event.is_error:
            self.error.value = format_process_error(event.result) or _("Unknown error")
            logger.warning("Request %s failed: %s", event.request_id or "-", event.result)


__all__ = ["ChatController", "Dispatcher"]
