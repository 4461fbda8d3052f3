"""RabbitMQ implementation of the response publisher."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import pika
from pika.adapters.blocking_connection import BlockingChannel

from relay_messaging.contracts import IResponsePublisher
from relay_messaging.exchange import Exchange


class ExchangeResponsePublisher(IResponsePublisher):
    """Publishes JSON responses to the output exchange."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(__name__)

    def publish(
        self,
        *,
        channel: BlockingChannel,
        exchange: Exchange,
        routing_key: str,
        correlation_id: Optional[str],
        response: Dict[str, Any],
    ) -> None:
        channel.basic_publish(
            exchange=exchange.name,
            routing_key=routing_key,
            properties=pika.BasicProperties(
                correlation_id=correlation_id,
                content_type="application/json",
            ),
            body=json.dumps(response).encode("utf-8"),
        )

        self.logger.info(
            "Published response to %s/%s with correlation_id=%s",
            exchange.name,
            routing_key,
            correlation_id,
        )
