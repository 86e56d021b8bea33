"""WAMP 1 framing used by the client's push channel.

The client speaks a minimal subset of WAMP v1 over its websocket:
- Client → Server: [5, "<topic>"]              subscribe
- Server → Client: [8, "<topic>", <payload>]   event

JSON API topics are named after the REST path they mirror:
    "/lol-gameflow/v1/session" -> "OnJsonApiEvent_lol-gameflow_v1_session"

The payload of a JSON API event is an object with "data", "eventType"
and "uri" fields. It is forwarded untouched.
"""

from __future__ import annotations

__all__ = [
    "JSON_API_EVENT_PREFIX",
    "OPCODE_EVENT",
    "OPCODE_SUBSCRIBE",
    "PushEvent",
    "decode_event",
    "encode_subscribe",
    "json_api_topic",
]

import json
from dataclasses import dataclass
from typing import Any

OPCODE_SUBSCRIBE = 5
OPCODE_EVENT = 8

JSON_API_EVENT_PREFIX = "OnJsonApiEvent"


@dataclass(frozen=True)
class PushEvent:
    """One event delivered on the push channel.

    Attributes:
        topic: Topic the event was published on.
        payload: Decoded payload, exactly as sent by the client.
    """

    topic: str
    payload: Any


def json_api_topic(path: str) -> str:
    """Build the push topic mirroring a JSON API path.

    Example:
        >>> json_api_topic("/lol-champ-select/v1/session")
        'OnJsonApiEvent_lol-champ-select_v1_session'
    """
    return JSON_API_EVENT_PREFIX + path.replace("/", "_")


def encode_subscribe(topic: str) -> str:
    """Encode a subscribe frame."""
    return json.dumps([OPCODE_SUBSCRIBE, topic])


def decode_event(raw: str | bytes) -> PushEvent | None:
    """Decode an event frame.

    Args:
        raw: Text (or UTF-8 bytes) frame as received on the websocket.

    Returns:
        PushEvent, or None for empty frames, invalid JSON, and frames
        that are not events (the client sends a few welcome/ack frames).

    Example:
        >>> decode_event('[8, "OnJsonApiEvent", {"uri": "/x"}]')
        PushEvent(topic='OnJsonApiEvent', payload={'uri': '/x'})
    """
    if not raw:
        return None
    try:
        frame = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None

    if not isinstance(frame, list) or len(frame) < 3:
        return None
    if frame[0] != OPCODE_EVENT or not isinstance(frame[1], str):
        return None
    return PushEvent(topic=frame[1], payload=frame[2])
