"""Checkout error taxonomy.

Nothing here is fatal: every error carries a message meant for the shopper and
the session turns it into a retryable state with the processing flag cleared.
"""

from protean.exceptions import ValidationError


class ValidationFailure(ValidationError):
    """A required selection is missing (field name → list of messages)."""


class CheckoutError(Exception):
    """Base class for operational checkout failures."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NetworkFailure(CheckoutError):
    """The request never produced a server response."""

    default_message = "Network error. Please check your connection and try again."


class ServerRejection(CheckoutError):
    """The server answered with a business error."""

    default_message = "Failed to place order. Please try again."

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GatewayUnavailable(CheckoutError):
    default_message = "Payment gateway not available. Please try Cash on Delivery or refresh the page."


class GatewayFailed(CheckoutError):
    default_message = "Payment failed. Please try again or use a different payment method."


class VerificationFailure(CheckoutError):
    default_message = "Payment verification failed. Please contact support with your payment ID."


def first_message(messages: dict) -> str | None:
    """First message in a protean ``ValidationError.messages`` mapping."""
    for value in messages.values():
        if isinstance(value, (list, tuple)) and value:
            return str(value[0])
        if value:
            return str(value)
    return None
