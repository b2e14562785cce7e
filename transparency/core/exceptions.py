"""Core custom exceptions for the application."""


class TransparencyError(Exception):
    """Base exception for transparency pipeline errors."""


class ValidationError(TransparencyError):
    """Required input is missing or blank. User-correctable."""


class NotFound(TransparencyError):
    """The referenced product record does not exist."""

    def __init__(self, product_id: str):
        super().__init__(f"Product '{product_id}' not found")
        self.product_id = product_id


class AssistantUnavailable(TransparencyError):
    """The assistant could not be reached or returned a malformed payload.

    ``reason`` is one of ``timeout``, ``network``, ``status``, ``malformed`` or
    ``empty``. It exists for diagnostics only; callers treat every reason alike.
    """

    def __init__(self, operation: str, reason: str, detail: str = ""):
        message = f"Assistant operation '{operation}' failed ({reason})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.operation = operation
        self.reason = reason


class StorageFailure(TransparencyError):
    """The record store failed to complete an operation."""
