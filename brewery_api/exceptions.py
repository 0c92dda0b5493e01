from typing import List, Tuple


FieldError = Tuple[str, str]
"""A single constraint violation: (dotted field path, message)."""


class ApplicationError(Exception):
    """Base class for application-specific errors."""
    pass


class ValidationFailedError(ApplicationError):
    """Raised when a request payload violates one or more field constraints."""
    def __init__(self, errors: List[FieldError], message="Validation failed"):
        super().__init__(message)
        self.message = message
        self.errors = errors

    @property
    def messages(self) -> List[str]:
        return [f"{path}: {msg}" if path else msg for path, msg in self.errors]


class DatabaseError(ApplicationError):
    """Raised for general database-related errors not specifically handled."""
    def __init__(self, message="A database error occurred.", original_exception=None):
        super().__init__(message)
        self.original_exception = original_exception
