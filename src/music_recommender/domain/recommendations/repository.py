"""
Recommendations Domain Repository Interfaces

Abstract base classes defining the contracts for recommendation storage.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from music_recommender.domain.recommendations.entities import Recommendation


class RecommendationFilter(BaseModel):
    """Conjunctive filter over stored recommendations.

    Unset fields do not constrain the match; an entirely empty filter matches
    every record of every user.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str | None = None
    source_item: str | None = None
    recommended_item_id: str | None = None
    involving_item: str | None = None  # source_item OR recommended_item_id
    has_feedback: bool | None = None

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


class RecommendationRepository(ABC):
    """Abstract document store for recommendation records.

    Implementations must return records from ``find`` in insertion order;
    retrieval relies on it when collapsing duplicate candidates.
    """

    @abstractmethod
    async def insert_many(self, records: Sequence[Recommendation]) -> int:
        """Insert a batch of records atomically.

        Args:
            records: The records to insert. An empty batch is a no-op.

        Returns:
            Number of records inserted.
        """
        ...

    @abstractmethod
    async def find(self, filter: RecommendationFilter) -> list[Recommendation]:
        """Find records matching a filter, oldest insert first.

        Args:
            filter: The match criteria.

        Returns:
            Matching records.
        """
        ...

    @abstractmethod
    async def update_many(
        self,
        filter: RecommendationFilter,
        *,
        feedback: bool | None,
        created_at: datetime,
    ) -> int:
        """Set feedback and refresh the timestamp on every matching record.

        Args:
            filter: The match criteria.
            feedback: New feedback value.
            created_at: New "last touched" timestamp.

        Returns:
            Number of records matched.
        """
        ...

    @abstractmethod
    async def delete_many(self, filter: RecommendationFilter) -> int:
        """Delete every matching record.

        An empty filter deletes all records for all users.

        Returns:
            Number of records deleted.
        """
        ...

    @abstractmethod
    async def delete_one(self, recommendation_id: str) -> bool:
        """Delete a single record by primary id.

        Returns:
            True if a record was deleted.
        """
        ...

    @abstractmethod
    async def count(self, filter: RecommendationFilter | None = None) -> int:
        """Count records matching a filter (all records when None)."""
        ...
