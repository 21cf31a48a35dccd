"""Core domain entities for the recommendations bounded context."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Final

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from music_recommender.domain.shared.datetime_utils import utcnow
from music_recommender.domain.shared.types import NonEmptyStr, UnitInterval, UtcDatetimeField

MAX_PROMPT_SIMILAR_ITEMS: Final[int] = 10
MAX_PROMPT_PREVIOUS_NAMES: Final[int] = 50
FALLBACK_SCORE_SCALE: Final[float] = 100.0

FALLBACK_REASONING_TEMPLATE: Final[str] = (
    "Based on its similarity as a {origin} and shared genres. (LLM not available)"
)


def new_recommendation_id() -> str:
    return uuid.uuid4().hex


class Recommendation(BaseModel):
    """A stored recommendation edge from a source item to a recommended item.

    ``created_at`` doubles as a "last touched" timestamp: recording feedback
    refreshes it, and retrieval uses it as the final ranking tie-breaker.
    """

    id: NonEmptyStr = Field(default_factory=new_recommendation_id)
    user_id: NonEmptyStr
    source_item: NonEmptyStr
    source_item_name: str | None = None
    recommended_item_id: NonEmptyStr
    recommended_item_name: NonEmptyStr
    reasoning: str = ""
    confidence: UnitInterval = 0.0
    feedback: bool | None = None
    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def has_feedback(self) -> bool:
        return self.feedback is not None

    @property
    def normalized_name(self) -> str:
        return self.recommended_item_name.lower()


class RecommendedItem(BaseModel):
    """A retrieval result: the other side of a stored edge plus its explanation."""

    model_config = ConfigDict(frozen=True)

    item: NonEmptyStr
    name: str
    reasoning: str
    confidence: UnitInterval


class FeedbackEntry(BaseModel):
    """One judged recommendation, as returned by the feedback history query."""

    model_config = ConfigDict(frozen=True)

    recommendation_id: NonEmptyStr
    item: str
    feedback: bool
    reasoning: str
    source_item: NonEmptyStr

    @classmethod
    def from_recommendation(cls, record: Recommendation) -> FeedbackEntry:
        if record.feedback is None:
            raise ValueError("Recommendation has no feedback")
        return cls(
            recommendation_id=record.id,
            item=record.recommended_item_name or record.recommended_item_id,
            feedback=record.feedback,
            reasoning=record.reasoning,
            source_item=record.source_item,
        )


# ── Upstream boundary models ────────────────────────────────────────


class MusicBrainzTag(BaseModel):
    """A genre or user tag with its vote count."""

    model_config = ConfigDict(extra="ignore")

    name: str
    count: int = 0

    @field_validator("count", mode="before")
    @classmethod
    def _none_count(cls, v: object) -> object:
        return 0 if v is None else v


class SourceItemMetadata(BaseModel):
    """Metadata for the item recommendations are generated from.

    Artists carry ``name``; recordings, releases and release groups carry
    ``title``. ``id`` is the authoritative catalog identifier when present.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str | None = None
    title: str | None = None
    type: str | None = None
    disambiguation: str | None = None
    description: str | None = None
    genres: list[MusicBrainzTag] = Field(default_factory=list)
    tags: list[MusicBrainzTag] = Field(default_factory=list)

    @field_validator("genres", "tags", mode="before")
    @classmethod
    def _none_as_empty(cls, v: object) -> object:
        return [] if v is None else v

    @property
    def display_name(self) -> str | None:
        return self.name or self.title or None

    @property
    def genre_names(self) -> list[str]:
        return [g.name for g in self.genres]

    @property
    def tag_names(self) -> list[str]:
        return [t.name for t in self.tags]


class SimilarItem(BaseModel):
    """A similarity-scored candidate supplied by an upstream provider."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    mbid: str | None = Field(default=None, validation_alias=AliasChoices("mbid", "id"))
    name: str | None = None
    title: str | None = None
    artist: str | None = None
    score: float = 0.0
    shared_genres: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("sharedGenres", "shared_genres", "genres"),
    )

    @field_validator("shared_genres", mode="before")
    @classmethod
    def _coerce_genres(cls, v: object) -> object:
        if v is None:
            return []
        if isinstance(v, list):
            # Tolerate [{name, count}] genre objects alongside plain strings.
            return [g.get("name", "") if isinstance(g, dict) else g for g in v]
        return v

    @field_validator("score", mode="before")
    @classmethod
    def _none_score(cls, v: object) -> object:
        return 0.0 if v is None else v

    @property
    def label(self) -> str:
        """Bare name or title as supplied upstream."""
        return self.name or self.title or ""

    @property
    def display_name(self) -> str:
        """Return "Artist - Title" when the artist is known, otherwise the bare label."""
        if self.artist and self.title:
            return f"{self.artist} - {self.title}"
        return self.label


class CandidateOrigin(str, Enum):
    """Which similarity list a candidate came from."""

    ARTIST = "artist"
    RECORDING = "recording"
    RELEASE_GROUP = "release-group"


class Candidate(BaseModel):
    """A similarity candidate tagged with its origin, used by the fallback path."""

    model_config = ConfigDict(frozen=True)

    name: str
    origin: CandidateOrigin
    score: float

    @property
    def normalized_name(self) -> str:
        return self.name.lower()


class CompletionRecommendation(BaseModel):
    """A single recommendation object emitted by the LLM."""

    model_config = ConfigDict(extra="ignore")

    name: str
    reasoning: str = ""
    confidence: float = 0.0

    @field_validator("reasoning", mode="before")
    @classmethod
    def _none_reasoning(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("confidence", mode="before")
    @classmethod
    def _none_confidence(cls, v: object) -> object:
        return 0.0 if v is None else v
