"""Bridge-event aggregation: fold streamed fragments into chat messages."""

from .assembler import AssemblerState, MessageAssembler, MessageIdGenerator
from .blocks import build_block
from .engine import TranscriptEngine
from .errors import format_process_error
from .filter import accept
from .model import (
    ChatMessage,
    ErrorBlock,
    MessageBlock,
    ResultBlock,
    TextBlock,
    ThinkingBlock,
    ToolUseBlock,
)
from .store import TranscriptStore

__all__ = [
    "AssemblerState",
    "ChatMessage",
    "ErrorBlock",
    "MessageAssembler",
    "MessageBlock",
    "MessageIdGenerator",
    "ResultBlock",
    "TextBlock",
    "ThinkingBlock",
    "ToolUseBlock",
    "TranscriptEngine",
    "TranscriptStore",
    "accept",
    "build_block",
    "format_process_error",
]
