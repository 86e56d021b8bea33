"""UI event names.

Events published on the UI event bus and streamed to the UI over SSE:
- connection: boolean payload, emitted on every connect/disconnect transition
- champ-select: raw payload of champion-select session push messages
- gameflow: raw payload of game-flow session push messages
"""

from __future__ import annotations

__all__ = ["UIEventType"]

from enum import Enum


class UIEventType(str, Enum):
    """Event names understood by the UI."""

    CONNECTION = "connection"
    CHAMP_SELECT = "champ-select"
    GAMEFLOW = "gameflow"
