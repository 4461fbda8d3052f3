"""JSON implementation of the message decoder."""

from __future__ import annotations

import json
from typing import Any, Dict

from relay_messaging.contracts import IMessageDecoder


class JSONMessageDecoder(IMessageDecoder):
    """Decodes JSON object payloads into message dicts."""

    def decode(self, payload: bytes) -> Dict[str, Any]:
        try:
            message = json.loads(payload.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ValueError("Failed to decode message payload as JSON.") from exc

        if not isinstance(message, dict):
            raise ValueError("Message payload must be a JSON object.")
        return message
