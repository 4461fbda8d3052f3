import logging
from typing import Any, Dict, Optional

import pika
from pika.adapters.blocking_connection import BlockingChannel

from relay_messaging.contracts import IDispatchUnit
from relay_messaging.exchange import Exchange

from .consumer_manager_config import ConsumerManagerDependencies
from .consumer_spec import ConsumerSpec


class ConsumerManager(IDispatchUnit):
    """Binds a consumer to the input exchange and publishes its results to the output exchange."""

    def __init__(
        self,
        spec: ConsumerSpec,
        channel: BlockingChannel,
        exchange_in: Exchange,
        exchange_out: Exchange,
        *,
        dependencies: Optional[ConsumerManagerDependencies] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        deps = dependencies or ConsumerManagerDependencies()
        self.logger = logger or logging.getLogger(__name__)
        self.spec = spec
        self.channel = channel
        self.exchange_in = exchange_in
        self.exchange_out = exchange_out
        self.message_decoder = deps.make_message_decoder()
        self.response_publisher = deps.make_response_publisher()
        self.queue_name: Optional[str] = None

    def start(self) -> None:
        declared = self.channel.queue_declare(
            queue=self.spec.queue_name,
            durable=self.spec.durable,
            exclusive=self.spec.exclusive,
        )
        queue_name = declared.method.queue
        self.queue_name = queue_name

        # The default exchange routes by queue name and does not accept bindings.
        if not self.exchange_in.is_default:
            for routing_key in self.spec.routing_keys or (queue_name,):
                self.channel.queue_bind(
                    queue=queue_name,
                    exchange=self.exchange_in.name,
                    routing_key=routing_key,
                )
        self.channel.basic_qos(prefetch_count=self.spec.prefetch_count)
        self.channel.basic_consume(
            queue=queue_name,
            on_message_callback=self._on_message,
        )

        self.logger.info("Started consuming from %s", queue_name)

    def _on_message(
        self,
        channel: BlockingChannel,
        method: pika.spec.Basic.Deliver,
        properties: pika.spec.BasicProperties,
        body: bytes,
    ) -> None:
        correlation_id = properties.correlation_id
        routing_key = self.spec.response_routing_key or method.routing_key

        self.logger.info(
            "Received message with correlation_id=%s, routing_key=%s",
            correlation_id,
            method.routing_key,
        )

        try:
            message = self.message_decoder.decode(body)
            response = self.spec.handler(message)

            if response is not None:
                self._publish_response(channel, routing_key, correlation_id, response)

            channel.basic_ack(delivery_tag=method.delivery_tag)
            self.logger.info("Successfully processed message %s", correlation_id)

        except Exception as exc:
            self.logger.error("Error processing message: %s", exc, exc_info=True)

            error_response: Dict[str, Any] = {
                "success": False,
                "error": str(exc),
            }
            self._publish_response(channel, routing_key, correlation_id, error_response)

            channel.basic_ack(delivery_tag=method.delivery_tag)

    def _publish_response(
        self,
        channel: BlockingChannel,
        routing_key: str,
        correlation_id: Optional[str],
        response: Dict[str, Any],
    ) -> None:
        self.response_publisher.publish(
            channel=channel,
            exchange=self.exchange_out,
            routing_key=routing_key,
            correlation_id=correlation_id,
            response=response,
        )
