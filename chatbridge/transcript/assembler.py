"""State machine folding assistant fragments into transcript messages."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable

from ..bridge.events import BridgeEvent
from .blocks import build_block
from .errors import format_process_error
from .model import ChatMessage, ErrorBlock
from .store import TranscriptStore

logger = logging.getLogger(__name__)


class AssemblerState(enum.Enum):
    """Whether a message is currently being built."""

    NO_OPEN_MESSAGE = "no_open_message"
    OPEN = "open"


class MessageIdGenerator:
    """Produce ``<prefix>-<generation>-<counter>`` identifiers.

    :meth:`restart` resets the counter and moves to the next generation, so an
    identifier handed out before a restart is never produced again.
    """

    __slots__ = ("_prefix", "_generation", "_counter")

    def __init__(self, prefix: str = "msg") -> None:
        self._prefix = prefix
        self._generation = 0
        self._counter = 0

    @property
    def generation(self) -> int:
        return self._generation

    def next(self) -> str:
        self._counter += 1
        return f"{self._prefix}-{self._generation}-{self._counter}"

    def restart(self) -> None:
        self._generation += 1
        self._counter = 0


class MessageAssembler:
    """Own the open message and decide whether an event extends it.

    The store is the only place finalized messages live; the assembler keeps
    just its working copy of the open message.
    """

    def __init__(
        self,
        store: TranscriptStore,
        *,
        ids: MessageIdGenerator,
        clock: Callable[[], int],
    ) -> None:
        self._store = store
        self._ids = ids
        self._clock = clock
        self._open: ChatMessage | None = None

    # ------------------------------------------------------------------
    @property
    def state(self) -> AssemblerState:
        if self._open is None:
            return AssemblerState.NO_OPEN_MESSAGE
        return AssemblerState.OPEN

    # ------------------------------------------------------------------
    @property
    def open_message(self) -> ChatMessage | None:
        return self._open

    # ------------------------------------------------------------------
    def add_fragment(self, event: BridgeEvent) -> ChatMessage:
        """Fold an ``assistant`` event into the open message and publish it."""
        message = self._open if self._open is not None else self._new_message()
        block = build_block(event)
        if block is not None:
            message = message.with_block(block)
        self._open = message
        self._store.upsert(message)
        return message

    # ------------------------------------------------------------------
    def finish(self, event: BridgeEvent) -> ChatMessage | None:
        """Close the open turn for a ``result`` event.

        A successful result only finalizes. An error result appends one
        :class:`ErrorBlock` to the open message, or to a new message appended
        at the end of the transcript when no turn is open, and then finalizes.
        Returns the message that received the error block, if any.
        """
        if not event.is_error:
            self._finalize()
            return None

        block = ErrorBlock(format_process_error(event.result))
        if self._open is None:
            message = self._new_message().with_block(block)
            self._store.append(message)
            logger.debug("Process error without an open turn: %s", block.content)
        else:
            message = self._open.with_block(block)
            self._store.upsert(message)
            logger.debug("Process error ended turn %s: %s", message.id, block.content)
        self._finalize()
        return message

    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Forget the open message and restart identifier generation."""
        self._open = None
        self._ids.restart()

    # ------------------------------------------------------------------
    def _new_message(self) -> ChatMessage:
        return ChatMessage(
            id=self._ids.next(),
            role="assistant",
            blocks=(),
            timestamp=self._clock(),
        )

    def _finalize(self) -> None:
        self._open = None


__all__ = ["AssemblerState", "MessageAssembler", "MessageIdGenerator"]
