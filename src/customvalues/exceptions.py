"""Custom exceptions for customvalues.

Every error carries a human-readable message plus a context dict, so the CLI
can render it either as a panel or as JSON.
"""

from __future__ import annotations

from typing import Any


class CustomValuesError(Exception):
    """Base exception for all customvalues errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class ConnectionError(CustomValuesError):
    """Failed to connect to the database."""

    pass


class SerializationError(CustomValuesError):
    """A mapping could not be encoded into its stored text form."""

    def __init__(self, reason: str, codec: str | None = None) -> None:
        message = f"Cannot encode values: {reason}"
        super().__init__(message, {"reason": reason, "codec": codec})
        self.reason = reason


class DeserializationError(CustomValuesError):
    """Stored text could not be decoded back into a mapping.

    Fatal to the read that triggered it; there is no partial result.
    """

    def __init__(self, reason: str, codec: str | None = None) -> None:
        message = f"Cannot decode stored values: {reason}"
        super().__init__(message, {"reason": reason, "codec": codec})
        self.reason = reason


class PersistenceError(CustomValuesError):
    """A write or query against the relational store failed."""

    pass


class NotFoundError(CustomValuesError):
    """A lookup returned no rows."""

    def __init__(self, entity_name: str, entity_id: int | None = None) -> None:
        if entity_id is None:
            message = f"No {entity_name} rows exist yet. Save one before loading."
        else:
            message = f"{entity_name} '{entity_id}' not found."
        super().__init__(message, {"entity_name": entity_name, "entity_id": entity_id})
        self.entity_name = entity_name
        self.entity_id = entity_id
