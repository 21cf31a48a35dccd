# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, messages and exceptions
- recommendations/: Recommendation records, ranking, prompts and fallback selection
"""

from music_recommender.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
