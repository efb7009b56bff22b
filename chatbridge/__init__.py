"""Fold a streaming CLI's bridge events into a chat transcript."""

from .bridge.events import BridgeEvent
from .transcript import ChatMessage, TranscriptEngine

__all__ = ["BridgeEvent", "ChatMessage", "TranscriptEngine"]
