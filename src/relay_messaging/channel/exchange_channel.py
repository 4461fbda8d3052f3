"""Connection manager owning the broker connection, its channel and exchanges."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from pika.adapters.blocking_connection import BlockingChannel

from relay_messaging.config import Settings
from relay_messaging.connection import RabbitMQConnection
from relay_messaging.consumer import ConsumerManager, ConsumerSpec
from relay_messaging.contracts import IBrokerConnection, IDispatchUnit
from relay_messaging.exchange import DIRECT, Exchange
from relay_messaging.results import FailureKind, Outcome

DispatchFactory = Callable[[ConsumerSpec, BlockingChannel, Exchange, Exchange], IDispatchUnit]


class ExchangeChannel:
    """Connects to the broker and provisions the input and output exchanges.

    The input exchange is how messages arrive; when none is configured the
    broker's default exchange is used. The output exchange is where results go
    and must always be configured.

    Nothing here exits the process. ``establish`` returns an ``Outcome`` and the
    caller decides what a failure means.

    Examples

        channel = ExchangeChannel(settings)
        outcome = channel.establish()
        if outcome.ok:
            channel.add_consumer(ConsumerSpec(handler=handle, queue_name="jobs"))
            channel.consume_forever()
    """

    def __init__(
        self,
        settings: Settings,
        *,
        connection: Optional[IBrokerConnection] = None,
        dispatch_factory: DispatchFactory = ConsumerManager,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.settings = settings
        self.connection = connection or RabbitMQConnection(settings.connection_parameters())
        self.dispatch_factory = dispatch_factory
        self.logger = logger or logging.getLogger(__name__)
        self.channel: Optional[BlockingChannel] = None
        self.exchange_in: Optional[Exchange] = None
        self.exchange_out: Optional[Exchange] = None
        self._exchanges: Dict[str, Exchange] = {}

    @property
    def is_established(self) -> bool:
        return self.channel is not None and self.exchange_out is not None

    def establish(self) -> Outcome[ExchangeChannel]:
        if self.is_established:
            return Outcome.success(self)

        connected = self.connection.connect()
        if connected.value is None:
            return Outcome(failure=connected.failure)

        if self.channel is None or self.channel.is_closed:
            self.channel = connected.value.channel()
        return self.declare_topology()

    def declare_topology(self) -> Outcome[ExchangeChannel]:
        if self.channel is None:
            raise RuntimeError("A channel must be open before exchanges can be declared.")

        # Not every consumer needs an input exchange (monitors, for example).
        if self.settings.exchange is None:
            self.settings.exchange = ""
        exchange_in = self.direct(self.settings.exchange)

        if not self.settings.exchange_out:
            self.logger.error("An output exchange must be configured. Exiting.")
            return Outcome.failed(
                FailureKind.MISSING_OUTPUT_EXCHANGE,
                "An output exchange must be configured",
            )

        self.exchange_in = exchange_in
        self.exchange_out = self.direct(self.settings.exchange_out)

        self.logger.info("Connection to AMQP host established")
        return Outcome.success(self)

    def direct(self, name: str) -> Exchange:
        """Declare a direct exchange once and return its handle."""
        if name in self._exchanges:
            return self._exchanges[name]
        if self.channel is None:
            raise RuntimeError("A channel must be open before exchanges can be declared.")

        exchange = Exchange(name=name, exchange_type=DIRECT)
        # The default exchange always exists and cannot be redeclared.
        if not exchange.is_default:
            self.channel.exchange_declare(exchange=name, exchange_type=DIRECT)
            self.logger.info("Declared %s exchange %s", DIRECT, name)
        self._exchanges[name] = exchange
        return exchange

    def add_consumer(self, spec: ConsumerSpec) -> None:
        """Create a dispatch unit for ``spec`` on the shared channel and start it."""
        if self.channel is None or self.exchange_in is None or self.exchange_out is None:
            raise RuntimeError("Consumers can only be added once the topology is established.")

        self.dispatch_factory(spec, self.channel, self.exchange_in, self.exchange_out).start()

    def consume_forever(self) -> None:
        if self.channel is None:
            raise RuntimeError("Consumers can only run once the topology is established.")

        try:
            self.channel.start_consuming()
        except KeyboardInterrupt:
            self.logger.info("Stopping consumers...")
            self.channel.stop_consuming()
        finally:
            self.close()

    def close(self) -> None:
        if self.channel is not None and not self.channel.is_closed:
            self.channel.close()
            self.logger.info("Closed RabbitMQ channel.")
        self.connection.close()
