class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class MissingSourceStreamError(ValidationError):
    """Raised when a required entry/exit stream is entirely absent from an export.

    Aborts the whole reconciliation run before any record is produced.
    """


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when the addressed entity does not exist."""
