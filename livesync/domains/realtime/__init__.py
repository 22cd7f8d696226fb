from livesync.domains.realtime.hub import Connection, SubscriptionHub
from livesync.domains.realtime.live_query import LiveQuery
from livesync.domains.realtime.registry import Registry, validate_params

__all__ = [
    "Connection",
    "LiveQuery",
    "Registry",
    "SubscriptionHub",
    "validate_params",
]
