class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid; nothing has been written."""


class StatePreconditionError(DomainError):
    """Raised when the current stored state does not allow the operation."""
