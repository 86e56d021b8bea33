"""Adapter for the League client's local API (LCU).

- lockfile: port/token discovery
- client: authenticated REST session (httpx)
- websocket: push channel (websockets, WAMP framing)
- interfaces: protocols the core depends on
"""

from .client import LcuConnector, LcuSession
from .interfaces import LocalServiceClient, PushChannel, PushHandler, SessionHandle
from .lockfile import LockfileCredentials, find_lockfile, parse_lockfile, read_credentials
from .wamp import PushEvent, decode_event, encode_subscribe, json_api_topic
from .websocket import LcuWebSocket

__all__ = [
    "LcuConnector",
    "LcuSession",
    "LcuWebSocket",
    "LocalServiceClient",
    "LockfileCredentials",
    "PushChannel",
    "PushEvent",
    "PushHandler",
    "SessionHandle",
    "decode_event",
    "encode_subscribe",
    "find_lockfile",
    "json_api_topic",
    "parse_lockfile",
    "read_credentials",
]
