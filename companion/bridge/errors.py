"""Error types raised by the settings bridge."""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for settings bridge failures."""


class TransportError(BridgeError):
    """A message to the device could not be delivered."""

    def __init__(self, message: str, transaction_id: int | None = None) -> None:
        super().__init__(message)
        self.transaction_id = transaction_id

    def __str__(self) -> str:
        base = super().__str__()
        if self.transaction_id is None:
            return base
        return f"{base} (transactionId={self.transaction_id})"


class ParseError(BridgeError, ValueError):
    """The configuration page response is not a JSON object."""


__all__ = ["BridgeError", "ParseError", "TransportError"]
