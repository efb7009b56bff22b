"""Map a single assistant event onto at most one transcript block."""

from __future__ import annotations

from ..bridge.events import BridgeEvent
from .model import MessageBlock, TextBlock, ThinkingBlock, ToolUseBlock


def build_block(event: BridgeEvent) -> MessageBlock | None:
    # An event should carry one of these fields; when several are present the
    # order below decides.
    if event.thinking:
        return ThinkingBlock(event.thinking)
    if event.tool_name:
        return ToolUseBlock(
            content=event.tool_name,
            tool_name=event.tool_name,
            tool_input=event.tool_input or "",
        )
    if event.text:
        return TextBlock(event.text)
    return None


__all__ = ["build_block"]
