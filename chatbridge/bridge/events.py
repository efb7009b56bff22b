"""Flattened bridge events delivered by the transport to the transcript engine."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Final

SYSTEM: Final = "system"
ASSISTANT: Final = "assistant"
RESULT: Final = "result"

_TEXT_FIELDS: Final = (
    "session_id",
    "request_id",
    "text",
    "thinking",
    "tool_name",
    "tool_input",
    "result",
    "model",
    "subtype",
)


def _coerce_text(value: Any) -> str:
    """Return *value* as text; ``None`` becomes the empty string."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (Mapping, list, tuple)):
        try:
            return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def _coerce_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


@dataclass(frozen=True, slots=True)
class BridgeEvent:
    """One fragment of the external process output.

    Every text-bearing field defaults to ``""``; no field is guaranteed to be
    populated even when :attr:`type` implies it should be.
    """

    type: str
    session_id: str = ""
    request_id: str = ""
    text: str = ""
    thinking: str = ""
    tool_name: str = ""
    tool_input: str = ""
    is_error: bool = False
    result: str = ""
    model: str = ""
    subtype: str = ""

    def with_request_id(self, request_id: str) -> "BridgeEvent":
        """Return a copy of the event labelled with *request_id*."""
        return replace(self, request_id=request_id)

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation, omitting empty fields."""
        payload: dict[str, Any] = {"type": self.type}
        for name in _TEXT_FIELDS:
            value = getattr(self, name)
            if value:
                payload[name] = value
        if self.is_error:
            payload["is_error"] = True
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "BridgeEvent":
        """Build an event from *payload* without ever rejecting it.

        Missing or ``None`` fields fall back to their defaults and non-string
        values are converted to text; a payload that is not a mapping yields an
        event of unknown type.
        """
        if not isinstance(payload, Mapping):
            return cls(type="")
        values: dict[str, Any] = {"type": _coerce_text(payload.get("type"))}
        for name in _TEXT_FIELDS:
            values[name] = _coerce_text(payload.get(name))
        values["is_error"] = _coerce_flag(payload.get("is_error"))
        return cls(**values)

    @classmethod
    def coerce(cls, event: "BridgeEvent | Mapping[str, Any]") -> "BridgeEvent":
        """Return *event* unchanged or convert a mapping via :meth:`from_dict`."""
        if isinstance(event, cls):
            return event
        return cls.from_dict(event)


__all__ = [
    "ASSISTANT",
    "BridgeEvent",
    "RESULT",
    "SYSTEM",
]
