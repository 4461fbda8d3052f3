"""Default dispatch unit for consuming from the input exchange."""

from .consumer_manager import ConsumerManager
from .consumer_manager_config import ConsumerManagerDependencies
from .consumer_spec import ConsumerSpec, MessageHandler

__all__ = [
    "ConsumerManager",
    "ConsumerManagerDependencies",
    "ConsumerSpec",
    "MessageHandler",
]
