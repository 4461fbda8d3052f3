"""Messaging package providing resilient RabbitMQ connectivity and exchange topology."""

from .channel import ExchangeChannel
from .config import ConnectionParameters, Settings, TLSOptions
from .connection import RabbitMQConnection, RetryPolicy
from .consumer import ConsumerManager, ConsumerManagerDependencies, ConsumerSpec
from .contracts import IBrokerConnection, IDispatchUnit
from .exchange import Exchange
from .results import Failure, FailureKind, Outcome, StartupError

__all__ = [
    "ConnectionParameters",
    "ConsumerManager",
    "ConsumerManagerDependencies",
    "ConsumerSpec",
    "Exchange",
    "ExchangeChannel",
    "Failure",
    "FailureKind",
    "IBrokerConnection",
    "IDispatchUnit",
    "Outcome",
    "RabbitMQConnection",
    "RetryPolicy",
    "Settings",
    "StartupError",
    "TLSOptions",
]
