"""Decoders for inbound message payloads."""

from .json_message_decoder import JSONMessageDecoder

__all__ = ["JSONMessageDecoder"]
