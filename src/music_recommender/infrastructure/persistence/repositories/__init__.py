"""SQLite repository implementations."""

from music_recommender.infrastructure.persistence.repositories.recommendation_repository import (
    SQLiteRecommendationRepository,
)

__all__ = [
    "SQLiteRecommendationRepository",
]
