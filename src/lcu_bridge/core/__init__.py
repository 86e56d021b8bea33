"""Connection core: state store, supervisor, event relay and request proxy."""

from .proxy import HttpMethod, RequestDescriptor, RequestProxy
from .relay import DEFAULT_SUBSCRIPTIONS, EventRelay, TopicSubscription
from .state import ConnectionState, SharedStateStore, StateSnapshot, StateView
from .status import STATUS_CONNECTED, STATUS_DISCONNECTED, display_status
from .supervisor import ConnectionSupervisor

__all__ = [
    "DEFAULT_SUBSCRIPTIONS",
    "STATUS_CONNECTED",
    "STATUS_DISCONNECTED",
    "ConnectionState",
    "ConnectionSupervisor",
    "EventRelay",
    "HttpMethod",
    "RequestDescriptor",
    "RequestProxy",
    "SharedStateStore",
    "StateSnapshot",
    "StateView",
    "TopicSubscription",
    "display_status",
]
