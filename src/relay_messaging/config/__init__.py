"""Settings and connection parameters for the broker connection."""

from .connection_parameters import DEFAULT_HEARTBEAT, ConnectionParameters, TLSOptions
from .settings import DEFAULT_HOST, Settings

__all__ = [
    "ConnectionParameters",
    "DEFAULT_HEARTBEAT",
    "DEFAULT_HOST",
    "Settings",
    "TLSOptions",
]
