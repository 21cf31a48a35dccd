"""
Shared Domain Kernel

Contains types, messages and exceptions shared across the recommendations context.
"""

from music_recommender.domain.shared.exceptions import (
    CompletionError,
    CompletionParseError,
    DomainError,
    EntityNotFoundError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "EntityNotFoundError",
    "CompletionError",
    "CompletionParseError",
]
