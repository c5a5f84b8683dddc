class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class ConflictError(DomainError):
    """Raised when an association already exists and the caller asked to be told."""


class StorageError(DomainError):
    """Raised when the database rejects a write; the transaction has been rolled back."""
