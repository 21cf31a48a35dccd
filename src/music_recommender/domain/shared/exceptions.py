"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when input validation fails before any I/O takes place."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class EntityNotFoundError(DomainError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, identifier: str, message: str | None = None) -> None:
        msg = message or f"{entity_type} with id '{identifier}' not found"
        super().__init__(msg, code="ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.identifier = identifier


class CompletionError(DomainError):
    """Raised when the completion provider fails, times out or returns nothing."""

    def __init__(self, message: str, code: str = "COMPLETION_FAILED") -> None:
        super().__init__(message, code=code)


class CompletionParseError(CompletionError):
    """Raised when completion output is not a JSON array of recommendation objects."""

    def __init__(self, message: str, raw_output: str | None = None) -> None:
        super().__init__(message, code="COMPLETION_PARSE_FAILED")
        self.raw_output = raw_output
