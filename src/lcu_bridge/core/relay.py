"""Relay of push-channel events to the UI.

EventRelay holds the fixed list of topic subscriptions and registers them
on every freshly opened push channel (subscriptions never survive a
disconnect). Each delivered message is reduced to its payload and
published on the UI event bus under the subscription's event name.

on_event() runs synchronously on the channel's delivery path, so it only
does a non-blocking bus emit and never raises.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_SUBSCRIPTIONS",
    "EventRelay",
    "TopicSubscription",
]

import logging
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

from lcu_bridge.constants import APP_NAME
from lcu_bridge.events import UIEventType
from lcu_bridge.exceptions import EventEmitError
from lcu_bridge.lcu.wamp import PushEvent, json_api_topic

if TYPE_CHECKING:
    from lcu_bridge.bus import UIEventBus
    from lcu_bridge.lcu.interfaces import PushChannel, PushHandler

_logger = logging.getLogger(f"{APP_NAME}.relay")


@dataclass(frozen=True)
class TopicSubscription:
    """A client API path whose push events are forwarded under event_name."""

    path: str
    event_name: str

    @property
    def topic(self) -> str:
        """Push-channel topic identifier for the path."""
        return json_api_topic(self.path)


DEFAULT_SUBSCRIPTIONS: tuple[TopicSubscription, ...] = (
    TopicSubscription("/lol-champ-select/v1/session", UIEventType.CHAMP_SELECT.value),
    TopicSubscription("/lol-gameflow/v1/session", UIEventType.GAMEFLOW.value),
)


class EventRelay:
    """Forwards push-channel events to the UI event bus."""

    def __init__(
        self,
        bus: "UIEventBus",
        subscriptions: tuple[TopicSubscription, ...] = DEFAULT_SUBSCRIPTIONS,
    ) -> None:
        self._bus = bus
        self._subscriptions = subscriptions
        self._forwarded = 0
        self._dropped = 0

    @property
    def subscriptions(self) -> tuple[TopicSubscription, ...]:
        return self._subscriptions

    @property
    def forwarded_count(self) -> int:
        """Events successfully handed to the bus."""
        return self._forwarded

    @property
    def dropped_count(self) -> int:
        """Events lost because the bus rejected them."""
        return self._dropped

    def subscribe(self, channel: "PushChannel", topic: str, handler: "PushHandler") -> None:
        """Register a handler for one topic on a push channel."""
        channel.subscribe(topic, handler)

    def attach(self, channel: "PushChannel") -> int:
        """Register every fixed subscription on a new channel.

        The supervisor passes this as the prepare hook of every channel it
        opens, so the subscriptions go out with the handshake.

        Returns:
            Number of subscriptions registered.
        """
        for sub in self._subscriptions:
            self.subscribe(channel, sub.topic, partial(self.on_event, sub.event_name))
        return len(self._subscriptions)

    def on_event(self, event_name: str, message: PushEvent) -> None:
        """Forward one push message as (event_name, payload).

        Emission failures are logged and swallowed so the delivery path
        keeps running.
        """
        try:
            self._bus.emit(event_name, message.payload)
        except EventEmitError as e:
            self._dropped += 1
            _logger.warning(
                {
                    "event": "ui_emit_failed",
                    "message": f"Dropped '{event_name}' event: {e}",
                    "event_name": event_name,
                    "topic": message.topic,
                    "error_type": type(e).__name__,
                }
            )
            return
        self._forwarded += 1
