class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when a credential is missing, malformed or expired."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced conversation or user does not exist."""


class ConflictError(DomainError):
    """Raised by repositories when a unique key already exists."""


class TransientError(DomainError):
    """Raised when storage or a collaborator is temporarily unavailable."""
