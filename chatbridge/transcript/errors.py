"""Translate raw process-termination strings into short reader messages."""

from __future__ import annotations

from typing import Final

from .. import i18n

# Ordered: the first marker contained in the raw string wins. Interruption
# markers must precede the generic exit marker they overlap with.
_KNOWN_TERMINATIONS: Final[tuple[tuple[str, str], ...]] = (
    ("exit status 143", "Interrupted"),
    ("exit status 130", "Interrupted"),
    ("signal: terminated", "Interrupted"),
    ("signal: interrupt", "Interrupted"),
    ("exit status ", "Process error"),
)


def format_process_error(raw: str) -> str:
    """Return a short message for *raw*, or *raw* itself when unrecognised.

    Matching is case-sensitive and only looks for the exact markers above, so
    unexpected process output is shown verbatim.
    """
    for marker, message in _KNOWN_TERMINATIONS:
        if marker in raw:
            return i18n.gettext(message)
    return raw


__all__ = ["format_process_error"]
