"""Ordered, append-only sequence of transcript messages."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from ..signals import Signal
from .model import ChatMessage

logger = logging.getLogger(__name__)


class TranscriptStore:
    """Expose the transcript as an immutable tuple replaced on every mutation.

    Each mutation assigns a brand-new tuple and emits :attr:`changed` with it,
    so consumers may detect updates by identity alone.
    """

    def __init__(self) -> None:
        self._messages: tuple[ChatMessage, ...] = ()
        self.changed: Signal[tuple[ChatMessage, ...]] = Signal()

    # ------------------------------------------------------------------
    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return self._messages

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self._messages)

    # ------------------------------------------------------------------
    def get(self, message_id: str) -> ChatMessage | None:
        """Return the message stored under *message_id*, if any."""
        index = self._index_of(message_id)
        return None if index is None else self._messages[index]

    # ------------------------------------------------------------------
    def upsert(self, message: ChatMessage) -> None:
        """Replace the message sharing *message*'s id, or append it."""
        index = self._index_of(message.id)
        if index is None:
            self.append(message)
            return
        updated = list(self._messages)
        updated[index] = message
        self._publish(tuple(updated))

    # ------------------------------------------------------------------
    def append(self, message: ChatMessage) -> None:
        """Add *message* at the end of the transcript."""
        self._publish((*self._messages, message))

    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Drop every message."""
        self._publish(())

    # ------------------------------------------------------------------
    def _index_of(self, message_id: str) -> int | None:
        # The open message is nearly always the last one.
        for index in range(len(self._messages) - 1, -1, -1):
            if self._messages[index].id == message_id:
                return index
        return None

    def _publish(self, messages: tuple[ChatMessage, ...]) -> None:
        self._messages = messages
        logger.debug("Transcript now holds %d message(s)", len(messages))
        self.changed.emit(messages)


__all__ = ["TranscriptStore"]
