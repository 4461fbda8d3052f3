"""Contract interfaces for relay messaging."""

from .broker_connection_interface import IBrokerConnection
from .dispatch_unit_interface import IDispatchUnit
from .message_decoder_interface import IMessageDecoder
from .response_publisher_interface import IResponsePublisher

__all__ = [
    "IBrokerConnection",
    "IDispatchUnit",
    "IMessageDecoder",
    "IResponsePublisher",
]
