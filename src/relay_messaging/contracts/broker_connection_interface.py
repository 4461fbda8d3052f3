"""Defines the contract for broker connections."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Optional, Type

from pika.adapters.blocking_connection import BlockingConnection

from relay_messaging.results import Outcome


class IBrokerConnection(ABC):
    """Represents a broker connection established with bounded retries."""

    @abstractmethod
    def connect(self) -> Outcome[BlockingConnection]:
        """Return the open connection, or the reason it could not be opened."""

    @abstractmethod
    def close(self) -> None:
        """Close the connection and associated resources."""

    @abstractmethod
    def __enter__(self) -> IBrokerConnection:
        """Enter a managed connection context."""

    @abstractmethod
    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        """Exit a managed connection context."""
