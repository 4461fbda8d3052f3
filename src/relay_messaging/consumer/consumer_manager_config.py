"""Configuration primitives for wiring a `ConsumerManager`."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from relay_messaging.contracts import IMessageDecoder, IResponsePublisher
from relay_messaging.request_decoder import JSONMessageDecoder
from relay_messaging.response_publisher import ExchangeResponsePublisher


@dataclass(frozen=True)
class ConsumerManagerDependencies:
    """Bundles factory functions for consumer wiring."""

    make_message_decoder: Callable[[], IMessageDecoder] = field(default=JSONMessageDecoder)
    make_response_publisher: Callable[[], IResponsePublisher] = field(
        default=ExchangeResponsePublisher
    )
