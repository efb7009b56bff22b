"""Event shapes exchanged with the external CLI process."""

from .events import ASSISTANT, RESULT, SYSTEM, BridgeEvent
from .parser import ParsedEvent, StreamParseError, iter_bridge_events, parse_event, to_bridge_event

__all__ = [
    "ASSISTANT",
    "BridgeEvent",
    "ParsedEvent",
    "RESULT",
    "SYSTEM",
    "StreamParseError",
    "iter_bridge_events",
    "parse_event",
    "to_bridge_event",
]
