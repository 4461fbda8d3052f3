"""Defines the contract for consumer dispatch units."""

from __future__ import annotations

from abc import ABC, abstractmethod


class IDispatchUnit(ABC):
    """Consumes from the input side and publishes results to the output exchange."""

    @abstractmethod
    def start(self) -> None:
        """Register the unit with the shared channel."""
