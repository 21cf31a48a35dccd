"""
Recommendations Bounded Context

Domain logic for feedback-aware, LLM-refined music recommendations.
"""

from music_recommender.domain.recommendations.entities import (
    Candidate,
    CandidateOrigin,
    CompletionRecommendation,
    FeedbackEntry,
    MusicBrainzTag,
    Recommendation,
    RecommendedItem,
    SimilarItem,
    SourceItemMetadata,
)
from music_recommender.domain.recommendations.parsing import parse_completion_output
from music_recommender.domain.recommendations.prompt import build_recommendation_prompt
from music_recommender.domain.recommendations.repository import (
    RecommendationFilter,
    RecommendationRepository,
)
from music_recommender.domain.recommendations.services import RecommendationDomainService

__all__ = [
    # Entities
    "Candidate",
    "CandidateOrigin",
    "CompletionRecommendation",
    "FeedbackEntry",
    "MusicBrainzTag",
    "Recommendation",
    "RecommendedItem",
    "SimilarItem",
    "SourceItemMetadata",
    # Repository
    "RecommendationFilter",
    "RecommendationRepository",
    # Services
    "RecommendationDomainService",
    # Utilities
    "build_recommendation_prompt",
    "parse_completion_output",
]
