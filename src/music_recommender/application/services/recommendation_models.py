"""Result objects returned by the recommendation application service."""

from __future__ import annotations

from enum import Enum
from typing import Self

from pydantic import BaseModel, Field

from ...domain.recommendations.entities import FeedbackEntry, Recommendation, RecommendedItem
from ...domain.shared.exceptions import (
    CompletionError,
    DomainError,
    EntityNotFoundError,
    ValidationError,
)
from ...domain.shared.types import NonNegativeInt


class OperationStatus(Enum):
    """Status codes for recommendation operation results."""

    SUCCESS = "success"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    UPSTREAM_ERROR = "upstream_error"

    @classmethod
    def from_error(cls, exc: DomainError) -> OperationStatus:
        if isinstance(exc, ValidationError):
            return cls.VALIDATION_ERROR
        if isinstance(exc, EntityNotFoundError):
            return cls.NOT_FOUND
        if isinstance(exc, CompletionError):
            return cls.UPSTREAM_ERROR
        return cls.VALIDATION_ERROR


class _Result(BaseModel):
    status: OperationStatus
    message: str = ""

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def error_message(self) -> str | None:
        """The failure message, or None for a successful result."""
        return None if self.is_success else self.message

    @classmethod
    def error(cls, status: OperationStatus, message: str) -> Self:
        if status == OperationStatus.SUCCESS:
            raise ValueError("An error result cannot carry SUCCESS status")
        return cls(status=status, message=message)


class GenerateResult(_Result):
    recommendations: list[Recommendation] = Field(default_factory=list)

    @classmethod
    def success(cls, recommendations: list[Recommendation]) -> GenerateResult:
        return cls(
            status=OperationStatus.SUCCESS,
            message=f"Generated {len(recommendations)} recommendations.",
            recommendations=recommendations,
        )


class RecommendationsResult(_Result):
    recommendations: list[RecommendedItem] = Field(default_factory=list)

    @classmethod
    def success(cls, recommendations: list[RecommendedItem]) -> RecommendationsResult:
        return cls(
            status=OperationStatus.SUCCESS,
            message=f"Found {len(recommendations)} recommendations.",
            recommendations=recommendations,
        )


class FeedbackHistoryResult(_Result):
    entries: list[FeedbackEntry] = Field(default_factory=list)

    @classmethod
    def success(cls, entries: list[FeedbackEntry]) -> FeedbackHistoryResult:
        return cls(
            status=OperationStatus.SUCCESS,
            message=f"Found {len(entries)} feedback entries.",
            entries=entries,
        )


class OperationResult(_Result):
    affected: NonNegativeInt = 0

    @classmethod
    def success(cls, message: str, affected: int = 0) -> OperationResult:
        return cls(status=OperationStatus.SUCCESS, message=message, affected=affected)
