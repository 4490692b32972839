class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class SessionLostError(AuthenticationError):
    """Raised when the admin session could not be restored after creating an account."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a requested user or log does not exist."""


class StoreError(DomainError):
    """Raised when a call to the record store or auth provider fails.

    The message is the provider's own message, passed through unchanged.
    """


class RecordNotFoundError(StoreError):
    """Raised by partial updates that target a missing record."""


class AccountExistsError(StoreError):
    """Raised by the auth provider when the email is already registered."""
