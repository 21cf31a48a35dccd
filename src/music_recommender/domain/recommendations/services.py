"""
Recommendations Domain Services

Pure business rules: identifier synthesis, candidate selection for both
generation paths, and feedback-aware ranking for retrieval.
"""

from __future__ import annotations

import math
import re
from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from music_recommender.domain.recommendations.entities import (
    FALLBACK_SCORE_SCALE,
    Candidate,
    CandidateOrigin,
    CompletionRecommendation,
    Recommendation,
    RecommendedItem,
    SimilarItem,
)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


@dataclass(frozen=True, slots=True)
class RetrievalCandidate:
    """The "other side" of a stored edge, carried through ranking."""

    item: str
    name: str
    feedback: bool | None
    confidence: float
    created_at: datetime
    reasoning: str


class RecommendationDomainService:
    """Domain service for recommendation-related business rules.

    Encapsulates identifier synthesis, duplicate suppression for the LLM
    and fallback generation paths, and ranking of stored recommendations.
    """

    # Lower ranks sort first: positive, then unset, then negative.
    FEEDBACK_RANK = {True: 0, None: 1, False: 2}

    @staticmethod
    def normalize_name(name: str) -> str:
        return name.lower()

    @classmethod
    def slugify(cls, name: str) -> str:
        """Lowercase *name* and replace every non-alphanumeric character with '-'."""
        return _NON_ALNUM.sub("-", name.lower())

    @classmethod
    def make_item_id(
        cls,
        user_id: str,
        name: str,
        timestamp_ms: int,
        taken: Collection[str] = (),
    ) -> str:
        """Synthesize a local recommended-item id from a display name and a timestamp.

        The id is an opaque token, never a catalog identifier. Names that slug
        to the same value within one batch get a numeric suffix.
        """
        base = f"rec:{user_id}:{cls.slugify(name)}:{timestamp_ms}"
        item_id = base
        suffix = 2
        while item_id in taken:
            item_id = f"{base}-{suffix}"
            suffix += 1
        return item_id

    @staticmethod
    def clamp_confidence(value: float) -> float:
        if math.isnan(value):
            return 0.0
        return max(0.0, min(1.0, float(value)))

    # ── Fallback path ───────────────────────────────────────────────

    @classmethod
    def merge_candidates(
        cls,
        similar_artists: Iterable[SimilarItem],
        similar_recordings: Iterable[SimilarItem],
        similar_release_groups: Iterable[SimilarItem],
    ) -> list[Candidate]:
        """Merge the three similarity lists into one, highest score first.

        The sort is stable, so equal scores keep artist, recording,
        release-group order.
        """
        merged: list[Candidate] = []
        for origin, items in (
            (CandidateOrigin.ARTIST, similar_artists),
            (CandidateOrigin.RECORDING, similar_recordings),
            (CandidateOrigin.RELEASE_GROUP, similar_release_groups),
        ):
            for item in items:
                name = item.display_name
                if name:
                    merged.append(Candidate(name=name, origin=origin, score=item.score))

        merged.sort(key=lambda c: c.score, reverse=True)
        return merged

    @classmethod
    def select_fallback(
        cls,
        candidates: Sequence[Candidate],
        amount: int,
        *,
        excluded_names: Collection[str],
        source_name: str | None,
    ) -> list[Candidate]:
        """Greedily pick up to *amount* candidates from a score-sorted list.

        Skips names with feedback for this source, the source item itself, and
        names already picked in this batch.
        """
        chosen: list[Candidate] = []
        seen: set[str] = set()
        for candidate in candidates:
            if len(chosen) >= amount:
                break
            key = candidate.normalized_name
            if key in seen or key in excluded_names:
                continue
            if source_name is not None and candidate.name == source_name:
                continue
            seen.add(key)
            chosen.append(candidate)
        return chosen

    @classmethod
    def fallback_confidence(cls, score: float, scale: float = FALLBACK_SCORE_SCALE) -> float:
        """Normalize an upstream similarity score (0-100 by default) into [0, 1]."""
        return cls.clamp_confidence(score / scale)

    # ── LLM path ────────────────────────────────────────────────────

    @classmethod
    def select_completion(
        cls,
        items: Sequence[CompletionRecommendation],
        amount: int,
        *,
        source_name: str | None,
        feedback_names: Collection[str],
        previous_names: Collection[str],
    ) -> list[CompletionRecommendation]:
        """Accept LLM candidates in order until *amount* are collected.

        A candidate is rejected when its name is blank, equals the source
        item's name, has feedback for this source, was recommended from this
        source before, or repeats a name accepted earlier in the batch.
        """
        accepted: list[CompletionRecommendation] = []
        seen: set[str] = set()
        for item in items:
            if len(accepted) >= amount:
                break
            name = item.name.strip()
            if not name:
                continue
            if source_name is not None and name == source_name:
                continue
            key = cls.normalize_name(name)
            if key in feedback_names or key in previous_names or key in seen:
                continue
            seen.add(key)
            accepted.append(item.model_copy(update={"name": name}))
        return accepted

    # ── Retrieval ───────────────────────────────────────────────────

    @classmethod
    def collect_candidates(
        cls,
        records: Iterable[Recommendation],
        item: str,
        ignore: Collection[str] = (),
    ) -> list[RetrievalCandidate]:
        """Turn stored edges touching *item* into candidates for the other side.

        Skips the queried item, ids in *ignore*, and repeated candidates
        (the first record in store order wins).
        """
        candidates: list[RetrievalCandidate] = []
        seen: set[str] = set()
        for record in records:
            if record.source_item == item:
                other, name = record.recommended_item_id, record.recommended_item_name
            else:
                other, name = record.source_item, record.source_item_name or ""

            if other == item or other in seen or other in ignore:
                continue

            seen.add(other)
            candidates.append(
                RetrievalCandidate(
                    item=other,
                    name=name,
                    feedback=record.feedback,
                    confidence=record.confidence,
                    created_at=record.created_at,
                    reasoning=record.reasoning,
                )
            )
        return candidates

    @classmethod
    def rank(cls, candidates: Iterable[RetrievalCandidate]) -> list[RetrievalCandidate]:
        """Order by feedback class, then confidence desc, then most recently touched."""
        return sorted(
            candidates,
            key=lambda c: (
                cls.FEEDBACK_RANK[c.feedback],
                -c.confidence,
                -c.created_at.timestamp(),
            ),
        )

    @staticmethod
    def is_visible(feedback: bool | None, feedbacked: bool) -> bool:
        """Default mode hides negatives; unjudged mode shows only unset feedback."""
        if feedbacked:
            return feedback is not False
        return feedback is None

    @classmethod
    def select_recommendations(
        cls,
        records: Iterable[Recommendation],
        item: str,
        amount: int,
        *,
        feedbacked: bool = True,
        ignore: Collection[str] = (),
    ) -> list[RecommendedItem]:
        ranked = cls.rank(cls.collect_candidates(records, item, ignore))
        visible = [c for c in ranked if cls.is_visible(c.feedback, feedbacked)]
        return [
            RecommendedItem(
                item=c.item,
                name=c.name,
                reasoning=c.reasoning,
                confidence=c.confidence,
            )
            for c in visible[:amount]
        ]
