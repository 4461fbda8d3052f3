"""Broker connection with bounded retries."""

from .rabbitmq_connection import RabbitMQConnection
from .retry_policy import RetryPolicy

__all__ = ["RabbitMQConnection", "RetryPolicy"]
