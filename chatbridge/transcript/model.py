"""Immutable message and block types that make up a transcript."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, ClassVar, Literal, TypeAlias

Role = Literal["assistant", "system", "user"]
BlockKind = Literal["text", "thinking", "tool_use", "result", "error"]


@dataclass(frozen=True, slots=True)
class TextBlock:
    """Narration text emitted by the assistant."""

    content: str
    kind: ClassVar[BlockKind] = "text"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "content": self.content}


@dataclass(frozen=True, slots=True)
class ThinkingBlock:
    """Internal reasoning emitted before or between narration."""

    content: str
    kind: ClassVar[BlockKind] = "thinking"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "content": self.content}


@dataclass(frozen=True, slots=True)
class ToolUseBlock:
    """Tool invocation; ``content`` mirrors the tool name for plain renderers."""

    content: str
    tool_name: str
    tool_input: str = ""
    kind: ClassVar[BlockKind] = "tool_use"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "content": self.content,
            "tool_name": self.tool_name,
            "tool_input": self.tool_input,
        }


@dataclass(frozen=True, slots=True)
class ResultBlock:
    """Final result text."""

    content: str
    kind: ClassVar[BlockKind] = "result"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "content": self.content}


@dataclass(frozen=True, slots=True)
class ErrorBlock:
    """Process failure surfaced to the reader."""

    content: str
    kind: ClassVar[BlockKind] = "error"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "content": self.content}


MessageBlock: TypeAlias = TextBlock | ThinkingBlock | ToolUseBlock | ResultBlock | ErrorBlock


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """One turn of the transcript.

    Instances are immutable; :meth:`with_block` returns a new message with the
    same identifier so a store can replace the previous value by id.
    """

    id: str
    role: Role
    blocks: tuple[MessageBlock, ...] = ()
    timestamp: int = 0

    def with_block(self, block: MessageBlock) -> "ChatMessage":
        return replace(self, blocks=(*self.blocks, block))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role,
            "blocks": [block.to_dict() for block in self.blocks],
            "timestamp": self.timestamp,
        }


__all__ = [
    "BlockKind",
    "ChatMessage",
    "ErrorBlock",
    "MessageBlock",
    "ResultBlock",
    "Role",
    "TextBlock",
    "ThinkingBlock",
    "ToolUseBlock",
]
