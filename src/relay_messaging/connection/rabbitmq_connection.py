"""RabbitMQ connection management."""

from __future__ import annotations

import logging
import threading
import time
from types import TracebackType
from typing import Callable, Optional, Type

import pika
from pika.adapters.blocking_connection import BlockingConnection

from relay_messaging.config import ConnectionParameters
from relay_messaging.contracts import IBrokerConnection
from relay_messaging.results import FailureKind, Outcome, StartupError

from .retry_policy import RetryPolicy


class RabbitMQConnection(IBrokerConnection):
    """Opens a blocking RabbitMQ connection, retrying with linear backoff.

    The wait between attempts blocks the calling thread. Pass ``stop_event`` to
    make the wait interruptible: setting the event abandons the remaining
    attempts.
    """

    def __init__(
        self,
        parameters: ConnectionParameters,
        *,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        self.parameters = parameters
        self.retry_policy = retry_policy or RetryPolicy()
        self.connection: Optional[BlockingConnection] = None
        self.logger = logging.getLogger(__name__)
        self._sleep = sleep
        self._stop_event = stop_event

    def connect(self) -> Outcome[BlockingConnection]:
        if self.connection is not None and not self.connection.is_closed:
            return Outcome.success(self.connection)

        self.logger.info(
            "Connecting to AMQP host: %s:%s", self.parameters.host, self.parameters.port
        )

        remaining = self.retry_policy.max_attempts
        attempt = 0
        while True:
            attempt += 1
            try:
                connection = pika.BlockingConnection(self.parameters.to_pika())
            except (pika.exceptions.AMQPError, OSError) as exc:
                remaining -= 1
                self.logger.error(
                    "%s: %s (host %s:%s). %d %s remaining",
                    type(exc).__name__,
                    exc,
                    self.parameters.host,
                    self.parameters.port,
                    remaining,
                    "try" if remaining == 1 else "tries",
                )
                if remaining <= 0:
                    return Outcome.failed(
                        FailureKind.CONNECTION_EXHAUSTED,
                        f"Could not connect to AMQP host {self.parameters.host}:"
                        f"{self.parameters.port} after {attempt} attempts",
                    )

                wait = self.retry_policy.wait_before(attempt)
                self.logger.info("Trying to connect again in %s seconds", wait)
                if self._wait(wait):
                    self.logger.info("Shutdown requested, abandoning connection attempts")
                    return Outcome.failed(
                        FailureKind.ABORTED, "Connection attempts aborted by shutdown"
                    )
                continue

            self.logger.info(
                "Connected to AMQP host %s:%s on attempt %d",
                self.parameters.host,
                self.parameters.port,
                attempt,
            )
            self.connection = connection
            return Outcome.success(connection)

    def _wait(self, seconds: float) -> bool:
        """Wait between attempts. Returns True when shutdown was requested."""
        if self._stop_event is None:
            self._sleep(seconds)
            return False
        return self._stop_event.wait(seconds)

    def close(self) -> None:
        if self.connection and not self.connection.is_closed:
            self.connection.close()
            self.logger.info("Closed RabbitMQ connection.")

    def __enter__(self) -> RabbitMQConnection:
        outcome = self.connect()
        if outcome.failure is not None:
            raise StartupError(outcome.failure)
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.close()
