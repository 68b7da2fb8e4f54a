class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class InsufficientStockError(ValidationError):
    """Raised when a booking asks for more stock than a location holds."""


class EmailDeliveryError(DomainError):
    """Raised when the e-mail provider rejects or cannot receive a message."""
