"""Defines the contract for decoding inbound messages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict


class IMessageDecoder(ABC):
    """Decodes raw message payloads into message dicts."""

    @abstractmethod
    def decode(self, payload: bytes) -> Dict[str, Any]:
        """Convert raw payload bytes into a message dict."""
