"""Defines the contract for publishing responses."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from pika.adapters.blocking_connection import BlockingChannel

from relay_messaging.exchange import Exchange


class IResponsePublisher(ABC):
    """Publishes handler responses to the output exchange."""

    @abstractmethod
    def publish(
        self,
        *,
        channel: BlockingChannel,
        exchange: Exchange,
        routing_key: str,
        correlation_id: Optional[str],
        response: Dict[str, Any],
    ) -> None:
        """Send a response message."""
