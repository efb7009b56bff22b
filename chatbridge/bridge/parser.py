"""Decode the CLI's NDJSON ``stream-json`` output into bridge events."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .events import ASSISTANT, RESULT, SYSTEM, BridgeEvent

logger = logging.getLogger(__name__)


class StreamParseError(ValueError):
    """Raised when a stream line cannot be decoded into a known record."""


@dataclass(frozen=True, slots=True)
class Usage:
    """Token usage reported by the CLI."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_input_tokens: int = 0
    cache_creation_input_tokens: int = 0


@dataclass(frozen=True, slots=True)
class SystemRecord:
    """``type="system"`` record (session init and hook notifications)."""

    subtype: str = ""
    session_id: str = ""
    model: str = ""
    tools: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ContentBlock:
    """Single content block of an assistant record."""

    type: str
    text: str = ""
    thinking: str = ""
    name: str = ""
    input: Any = None


@dataclass(frozen=True, slots=True)
class AssistantRecord:
    """``type="assistant"`` record carrying model output."""

    content: tuple[ContentBlock, ...] = ()
    usage: Usage | None = None


@dataclass(frozen=True, slots=True)
class ResultRecord:
    """``type="result"`` record terminating a run."""

    subtype: str = ""
    is_error: bool = False
    result: str = ""
    session_id: str = ""
    duration_ms: float = 0.0
    num_turns: int = 0
    total_cost_usd: float = 0.0
    usage: Usage | None = None


@dataclass(frozen=True, slots=True)
class ParsedEvent:
    """A decoded stream line with the typed record for its ``type``.

    Blank lines produce an instance with an empty :attr:`type`; unknown types
    keep only :attr:`raw`.
    """

    type: str = ""
    system: SystemRecord | None = None
    assistant: AssistantRecord | None = None
    result: ResultRecord | None = None
    raw: Mapping[str, Any] = field(default_factory=dict)


def _text(payload: Mapping[str, Any], key: str, context: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise StreamParseError(f"parse {context} event: {key} must be a string")
    return value


def _number(payload: Mapping[str, Any], key: str, context: str, kind: type) -> Any:
    value = payload.get(key)
    if value is None:
        return kind(0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise StreamParseError(f"parse {context} event: {key} must be a number")
    try:
        converted = kind(value)
    except (OverflowError, ValueError) as exc:
        raise StreamParseError(f"parse {context} event: {key} is out of range") from exc
    if isinstance(converted, float) and not math.isfinite(converted):
        raise StreamParseError(f"parse {context} event: {key} must be finite")
    return converted


def _usage(payload: Mapping[str, Any], context: str) -> Usage | None:
    raw = payload.get("usage")
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise StreamParseError(f"parse {context} event: usage must be an object")
    return Usage(
        input_tokens=_number(raw, "input_tokens", context, int),
        output_tokens=_number(raw, "output_tokens", context, int),
        cache_read_input_tokens=_number(raw, "cache_read_input_tokens", context, int),
        cache_creation_input_tokens=_number(
            raw, "cache_creation_input_tokens", context, int
        ),
    )


def _parse_system(payload: Mapping[str, Any]) -> SystemRecord:
    tools = payload.get("tools")
    if tools is None:
        tools = ()
    elif not isinstance(tools, Sequence) or isinstance(tools, str) or not all(
        isinstance(tool, str) for tool in tools
    ):
        raise StreamParseError("parse system event: tools must be a list of strings")
    return SystemRecord(
        subtype=_text(payload, "subtype", SYSTEM),
        session_id=_text(payload, "session_id", SYSTEM),
        model=_text(payload, "model", SYSTEM),
        tools=tuple(tools),
    )


def _parse_assistant(payload: Mapping[str, Any]) -> AssistantRecord:
    message = payload.get("message")
    if message is None:
        return AssistantRecord()
    if not isinstance(message, Mapping):
        raise StreamParseError("parse assistant event: message must be an object")
    content = message.get("content")
    if content is None:
        content = []
    if not isinstance(content, list):
        raise StreamParseError("parse assistant event: content must be a list")
    blocks: list[ContentBlock] = []
    for item in content:
        if not isinstance(item, Mapping):
            raise StreamParseError("parse assistant event: content block must be an object")
        blocks.append(
            ContentBlock(
                type=_text(item, "type", ASSISTANT),
                text=_text(item, "text", ASSISTANT),
                thinking=_text(item, "thinking", ASSISTANT),
                name=_text(item, "name", ASSISTANT),
                input=item.get("input"),
            )
        )
    return AssistantRecord(content=tuple(blocks), usage=_usage(message, ASSISTANT))


def _parse_result(payload: Mapping[str, Any]) -> ResultRecord:
    is_error = payload.get("is_error", False)
    if is_error is None:
        is_error = False
    if not isinstance(is_error, bool):
        raise StreamParseError("parse result event: is_error must be a boolean")
    return ResultRecord(
        subtype=_text(payload, "subtype", RESULT),
        is_error=is_error,
        result=_text(payload, "result", RESULT),
        session_id=_text(payload, "session_id", RESULT),
        duration_ms=_number(payload, "duration_ms", RESULT, float),
        num_turns=_number(payload, "num_turns", RESULT, int),
        total_cost_usd=_number(payload, "total_cost_usd", RESULT, float),
        usage=_usage(payload, RESULT),
    )


def parse_event(line: bytes | str) -> ParsedEvent:
    """Decode one NDJSON *line* into a :class:`ParsedEvent`."""
    if isinstance(line, (bytes, bytearray)):
        line = bytes(line).decode("utf-8", errors="replace")
    trimmed = line.strip()
    if not trimmed:
        return ParsedEvent()
    try:
        payload = json.loads(trimmed)
    except json.JSONDecodeError as exc:
        raise StreamParseError(f"parse event: {exc}") from exc
    if not isinstance(payload, dict):
        raise StreamParseError("parse event: expected a JSON object")

    event_type = payload.get("type")
    if not isinstance(event_type, str):
        event_type = ""

    match event_type:
        case "system":
            return ParsedEvent(type=event_type, system=_parse_system(payload), raw=payload)
        case "assistant":
            return ParsedEvent(
                type=event_type, assistant=_parse_assistant(payload), raw=payload
            )
        case "result":
            return ParsedEvent(type=event_type, result=_parse_result(payload), raw=payload)
        case _:
            return ParsedEvent(type=event_type, raw=payload)


def _serialise_tool_input(value: Any) -> str:
    if value is None:
        return ""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def to_bridge_event(parsed: ParsedEvent) -> BridgeEvent:
    """Flatten *parsed* into the structure consumed by the transcript engine.

    Assistant records may carry several content blocks; each known block type
    fills its own field and a later block of the same type overwrites an
    earlier one.
    """
    if parsed.system is not None:
        record = parsed.system
        return BridgeEvent(
            type=parsed.type,
            session_id=record.session_id,
            model=record.model,
            subtype=record.subtype,
        )
    if parsed.assistant is not None:
        values: dict[str, str] = {}
        for block in parsed.assistant.content:
            if block.type == "text":
                values["text"] = block.text
            elif block.type == "thinking":
                values["thinking"] = block.thinking
            elif block.type == "tool_use":
                values["tool_name"] = block.name
                values["tool_input"] = _serialise_tool_input(block.input)
        return BridgeEvent(type=parsed.type, **values)
    if parsed.result is not None:
        record = parsed.result
        return BridgeEvent(
            type=parsed.type,
            is_error=record.is_error,
            result=record.result,
            session_id=record.session_id,
            subtype=record.subtype,
        )
    return BridgeEvent(type=parsed.type)


def iter_bridge_events(
    lines: Iterable[bytes | str],
    *,
    request_id: str | None = None,
) -> Iterator[BridgeEvent]:
    """Yield bridge events decoded from an NDJSON stream.

    Blank lines are skipped silently and undecodable lines are logged and
    skipped, so a single corrupt line never ends the stream.
    """
    for index, line in enumerate(lines, start=1):
        try:
            parsed = parse_event(line)
        except StreamParseError as exc:
            logger.warning("Skipping invalid stream line %d: %s", index, exc)
            continue
        if not parsed.type:
            continue
        event = to_bridge_event(parsed)
        if request_id:
            event = event.with_request_id(request_id)
        yield event


__all__ = [
    "AssistantRecord",
    "ContentBlock",
    "ParsedEvent",
    "ResultRecord",
    "StreamParseError",
    "SystemRecord",
    "Usage",
    "iter_bridge_events",
    "parse_event",
    "to_bridge_event",
]
