"""Connection manager for the input and output exchanges."""

from .exchange_channel import DispatchFactory, ExchangeChannel

__all__ = ["DispatchFactory", "ExchangeChannel"]
