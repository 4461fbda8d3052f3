"""Publishers for responses sent to the output exchange."""

from .exchange_response_publisher import ExchangeResponsePublisher

__all__ = ["ExchangeResponsePublisher"]
