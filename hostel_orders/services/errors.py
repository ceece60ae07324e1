"""Domain errors raised by order services."""


class OrderServiceError(Exception):
    """Base class for errors the API maps to client responses."""

    status_code: int = 400


class ValidationError(OrderServiceError):
    """Raised when request input is malformed or incomplete."""


class StateConflictError(OrderServiceError):
    """Raised when an operation is illegal for the order's current status."""


class EditForbiddenError(StateConflictError):
    """Raised when editing an order that has been accepted or completed."""


class InvalidTransitionError(OrderServiceError):
    """Raised when a status change is not in the transition table."""


class NotFoundError(OrderServiceError):
    """Raised when an order or food item does not exist."""

    status_code = 404


class CredentialsError(OrderServiceError):
    """Raised when a supplied password does not match the account."""

    status_code = 401


class DuplicateError(OrderServiceError):
    """Raised when a unique admin username or email is already taken."""

    status_code = 409


class NotificationError(Exception):
    """Raised by email senders; logged by the dispatcher and never surfaced."""
