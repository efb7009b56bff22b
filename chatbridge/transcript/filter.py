"""Request correlation for incoming bridge events."""

from __future__ import annotations

from ..bridge.events import BridgeEvent


def accept(
    event: BridgeEvent,
    current_request_id: str | None,
    *,
    strict: bool = False,
) -> bool:
    """Return ``True`` when *event* belongs to the active request.

    Without an active request every event is accepted, which allows passive
    replay of a recorded stream. Events without a ``request_id`` are trusted
    unless *strict* is set, in which case they are rejected while a request
    is active.
    """
    if not current_request_id:
        return True
    if not event.request_id:
        return not strict
    return event.request_id == current_request_id


__all__ = ["accept"]
