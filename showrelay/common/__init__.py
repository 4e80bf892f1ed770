"""Common utilities shared across the relay server."""

from showrelay.common.config import Settings, get_settings
from showrelay.common.events import ClientEvent, ServerEvent

__all__ = [
    "Settings",
    "get_settings",
    "ClientEvent",
    "ServerEvent",
]
