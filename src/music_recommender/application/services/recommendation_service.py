"""Recommendation engine: generation, feedback-aware retrieval and bookkeeping."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ...domain.recommendations.entities import (
    FALLBACK_REASONING_TEMPLATE,
    FeedbackEntry,
    Recommendation,
    SimilarItem,
    SourceItemMetadata,
)
from ...domain.recommendations.parsing import parse_completion_output
from ...domain.recommendations.prompt import build_recommendation_prompt
from ...domain.recommendations.repository import RecommendationFilter
from ...domain.recommendations.services import RecommendationDomainService
from ...domain.shared.datetime_utils import UtcDateTime, utcnow
from ...domain.shared.exceptions import (
    CompletionError,
    DomainError,
    EntityNotFoundError,
    ValidationError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ...domain.shared.validators import require_fields
from .recommendation_models import (
    FeedbackHistoryResult,
    GenerateResult,
    OperationResult,
    OperationStatus,
    RecommendationsResult,
)

if TYPE_CHECKING:
    from datetime import datetime

    from ...config.settings import RecommendationSettings
    from ...domain.recommendations.repository import RecommendationRepository
    from ..interfaces.completion_client import CompletionClient

logger = logging.getLogger(__name__)

_SIMILAR_ITEMS = TypeAdapter(list[SimilarItem])


class RecommendationApplicationService:
    """Turns similarity data and per-user feedback into stored, ranked recommendations.

    Generation goes through the completion client when one is configured and
    through a deterministic score-ordered fallback otherwise. Every public
    operation reports domain failures through its result object; storage
    errors propagate.
    """

    def __init__(
        self,
        *,
        repository: RecommendationRepository,
        completion_client: CompletionClient | None,
        settings: RecommendationSettings,
    ) -> None:
        self._repository = repository
        self._completion_client = completion_client
        self._settings = settings

    @property
    def uses_completion(self) -> bool:
        return self._completion_client is not None

    # ── Generation ──────────────────────────────────────────────────

    async def generate(
        self,
        user_id: str,
        source_item: str,
        amount: int,
        source_item_metadata: SourceItemMetadata | dict[str, Any] | None = None,
        similar_artists: Sequence[SimilarItem | dict[str, Any]] = (),
        similar_recordings: Sequence[SimilarItem | dict[str, Any]] = (),
        similar_release_groups: Sequence[SimilarItem | dict[str, Any]] = (),
    ) -> GenerateResult:
        """Generate and store up to *amount* new recommendations from a source item."""
        try:
            require_fields(
                ErrorMessages.INVALID_GENERATE_REQUEST,
                strings={"user_id": user_id, "source_item": source_item},
                amounts={"amount": amount},
            )
            metadata = self._coerce_metadata(source_item_metadata)
            artists = self._coerce_similar("artists", similar_artists)
            recordings = self._coerce_similar("recordings", similar_recordings)
            release_groups = self._coerce_similar("release groups", similar_release_groups)

            source_id = metadata.id or source_item
            logger.info(
                LogTemplates.RECOMMENDATIONS_GENERATING,
                amount,
                user_id,
                source_id,
                "completion" if self.uses_completion else "fallback",
            )

            history = await self._repository.find(
                RecommendationFilter(user_id=user_id, source_item=source_id, has_feedback=True)
            )
            previous = await self._repository.find(
                RecommendationFilter(user_id=user_id, source_item=source_id)
            )
            feedback_names = {record.normalized_name for record in history}
            previous_names = list(dict.fromkeys(record.normalized_name for record in previous))

            now = utcnow()
            if self._completion_client is not None:
                records = await self._generate_with_completion(
                    self._completion_client,
                    user_id=user_id,
                    source_id=source_id,
                    amount=amount,
                    metadata=metadata,
                    artists=artists,
                    recordings=recordings,
                    release_groups=release_groups,
                    history=[FeedbackEntry.from_recommendation(r) for r in history],
                    feedback_names=feedback_names,
                    previous_names=previous_names,
                    now=now,
                )
            else:
                records = self._generate_fallback(
                    user_id=user_id,
                    source_id=source_id,
                    amount=amount,
                    metadata=metadata,
                    artists=artists,
                    recordings=recordings,
                    release_groups=release_groups,
                    feedback_names=feedback_names,
                    now=now,
                )

            await self._repository.insert_many(records)
        except DomainError as exc:
            return self._failure(GenerateResult, "generate", exc)

        logger.info(LogTemplates.RECOMMENDATIONS_GENERATED, len(records), user_id, source_id)
        return GenerateResult.success(records)

    async def _generate_with_completion(
        self,
        client: CompletionClient,
        *,
        user_id: str,
        source_id: str,
        amount: int,
        metadata: SourceItemMetadata,
        artists: list[SimilarItem],
        recordings: list[SimilarItem],
        release_groups: list[SimilarItem],
        history: list[FeedbackEntry],
        feedback_names: set[str],
        previous_names: list[str],
        now: datetime,
    ) -> list[Recommendation]:
        prompt = build_recommendation_prompt(
            user_id=user_id,
            amount=amount,
            metadata=metadata,
            similar_artists=artists,
            similar_recordings=recordings,
            similar_release_groups=release_groups,
            feedback_history=history,
            previous_names=previous_names,
            max_similar_items=self._settings.max_prompt_similar_items,
            max_previous_names=self._settings.max_prompt_previous_names,
        )

        try:
            output = await client.complete(prompt)
        except CompletionError:
            raise
        except Exception as e:
            raise CompletionError(f"{e.__class__.__name__}: {e}") from e
        items = parse_completion_output(output)

        accepted = RecommendationDomainService.select_completion(
            items,
            amount,
            source_name=metadata.display_name,
            feedback_names=feedback_names,
            previous_names=set(previous_names),
        )
        if len(accepted) < len(items):
            logger.debug(
                LogTemplates.COMPLETION_CANDIDATES_DROPPED,
                len(items) - len(accepted),
                len(items),
            )

        return self._build_records(
            user_id=user_id,
            source_id=source_id,
            source_name=metadata.display_name,
            entries=((i.name, i.reasoning, i.confidence) for i in accepted),
            now=now,
        )

    def _generate_fallback(
        self,
        *,
        user_id: str,
        source_id: str,
        amount: int,
        metadata: SourceItemMetadata,
        artists: list[SimilarItem],
        recordings: list[SimilarItem],
        release_groups: list[SimilarItem],
        feedback_names: set[str],
        now: datetime,
    ) -> list[Recommendation]:
        logger.debug(LogTemplates.AI_UNAVAILABLE_FALLBACK)
        candidates = RecommendationDomainService.merge_candidates(
            artists, recordings, release_groups
        )
        chosen = RecommendationDomainService.select_fallback(
            candidates,
            amount,
            excluded_names=feedback_names,
            source_name=metadata.display_name,
        )
        scale = self._settings.fallback_score_scale
        return self._build_records(
            user_id=user_id,
            source_id=source_id,
            source_name=metadata.display_name,
            entries=(
                (
                    c.name,
                    FALLBACK_REASONING_TEMPLATE.format(origin=c.origin.value),
                    RecommendationDomainService.fallback_confidence(c.score, scale),
                )
                for c in chosen
            ),
            now=now,
        )

    @staticmethod
    def _build_records(
        *,
        user_id: str,
        source_id: str,
        source_name: str | None,
        entries: Iterable[tuple[str, str, float]],
        now: datetime,
    ) -> list[Recommendation]:
        timestamp_ms = UtcDateTime(now).unix_millis
        taken: set[str] = set()
        records: list[Recommendation] = []
        for name, reasoning, confidence in entries:
            item_id = RecommendationDomainService.make_item_id(user_id, name, timestamp_ms, taken)
            taken.add(item_id)
            records.append(
                Recommendation(
                    user_id=user_id,
                    source_item=source_id,
                    source_item_name=source_name,
                    recommended_item_id=item_id,
                    recommended_item_name=name,
                    reasoning=reasoning,
                    confidence=RecommendationDomainService.clamp_confidence(confidence),
                    feedback=None,
                    created_at=now,
                )
            )
        return records

    # ── Retrieval ───────────────────────────────────────────────────

    async def get_recommendations(
        self,
        user_id: str,
        item: str,
        amount: int,
        feedbacked: bool = True,
        ignore: Iterable[str] = (),
    ) -> RecommendationsResult:
        """Return up to *amount* ranked items related to *item* in either direction.

        With ``feedbacked=True`` negatively judged items are hidden; with
        ``feedbacked=False`` only items without feedback are returned.
        """
        try:
            require_fields(
                ErrorMessages.INVALID_RETRIEVAL_REQUEST,
                strings={"user_id": user_id, "item": item},
                amounts={"amount": amount},
            )
        except DomainError as exc:
            return self._failure(RecommendationsResult, "get_recommendations", exc)

        records = await self._repository.find(
            RecommendationFilter(user_id=user_id, involving_item=item)
        )
        selected = RecommendationDomainService.select_recommendations(
            records, item, amount, feedbacked=feedbacked, ignore=frozenset(ignore)
        )
        logger.info(LogTemplates.RECOMMENDATIONS_RETRIEVED, len(selected), user_id, item)
        return RecommendationsResult.success(selected)

    # ── Feedback ────────────────────────────────────────────────────

    async def provide_feedback(
        self, user_id: str, recommended_item: str, feedback: bool
    ) -> OperationResult:
        """Record a like or dislike on every record recommending *recommended_item*."""
        try:
            require_fields(
                ErrorMessages.INVALID_FEEDBACK_REQUEST,
                strings={"user_id": user_id, "recommended_item": recommended_item},
            )
            if not isinstance(feedback, bool):
                raise ValidationError(ErrorMessages.INVALID_FEEDBACK_REQUEST, field="feedback")

            matched = await self._repository.update_many(
                RecommendationFilter(user_id=user_id, recommended_item_id=recommended_item),
                feedback=feedback,
                created_at=utcnow(),
            )
            if matched == 0:
                raise EntityNotFoundError(
                    "Recommendation",
                    recommended_item,
                    message=ErrorMessages.RECOMMENDATION_NOT_RECOMMENDED,
                )
        except DomainError as exc:
            return self._failure(OperationResult, "provide_feedback", exc)

        logger.info(
            LogTemplates.RECOMMENDATION_FEEDBACK_RECORDED,
            feedback,
            matched,
            user_id,
            recommended_item,
        )
        return OperationResult.success("Feedback recorded.", affected=matched)

    async def get_feedback_history(
        self, user_id: str, source_item: str | None = None
    ) -> FeedbackHistoryResult:
        """List the user's judged recommendations, optionally for one source item."""
        try:
            require_fields(ErrorMessages.INVALID_HISTORY_REQUEST, strings={"user_id": user_id})
        except DomainError as exc:
            return self._failure(FeedbackHistoryResult, "get_feedback_history", exc)

        records = await self._repository.find(
            RecommendationFilter(user_id=user_id, source_item=source_item, has_feedback=True)
        )
        entries = [FeedbackEntry.from_recommendation(record) for record in records]
        logger.info(LogTemplates.FEEDBACK_HISTORY_LOADED, len(entries), user_id, source_item)
        return FeedbackHistoryResult.success(entries)

    # ── Deletion ────────────────────────────────────────────────────

    async def delete_recommendation(self, recommendation_id: str) -> OperationResult:
        try:
            require_fields(
                ErrorMessages.EMPTY_RECOMMENDATION_ID,
                strings={"recommendation_id": recommendation_id},
            )
            if not await self._repository.delete_one(recommendation_id):
                raise EntityNotFoundError(
                    "Recommendation",
                    recommendation_id,
                    message=ErrorMessages.RECOMMENDATION_ID_NOT_FOUND,
                )
        except DomainError as exc:
            return self._failure(OperationResult, "delete_recommendation", exc)

        logger.info(LogTemplates.RECOMMENDATION_DELETED, recommendation_id)
        return OperationResult.success("Recommendation deleted.", affected=1)

    async def clear_recommendations(self, user_id: str | None = None) -> OperationResult:
        """Delete every record of *user_id*, or of every user when it is None."""
        if user_id is not None:
            try:
                require_fields(ErrorMessages.INVALID_HISTORY_REQUEST, strings={"user_id": user_id})
            except DomainError as exc:
                return self._failure(OperationResult, "clear_recommendations", exc)

        deleted = await self._repository.delete_many(RecommendationFilter(user_id=user_id))
        logger.info(LogTemplates.RECOMMENDATIONS_CLEARED, deleted, user_id or "*")
        return OperationResult.success(f"Cleared {deleted} recommendations.", affected=deleted)

    # ── Helpers ─────────────────────────────────────────────────────

    @staticmethod
    def _coerce_metadata(value: SourceItemMetadata | dict[str, Any] | None) -> SourceItemMetadata:
        if value is None:
            return SourceItemMetadata()
        if isinstance(value, SourceItemMetadata):
            return value
        try:
            return SourceItemMetadata.model_validate(value)
        except PydanticValidationError as e:
            raise ValidationError(
                ErrorMessages.INVALID_SOURCE_METADATA.format(error=e.errors()[0]["msg"]),
                field="source_item_metadata",
            ) from e

    @staticmethod
    def _coerce_similar(
        kind: str, values: Sequence[SimilarItem | dict[str, Any]] | None
    ) -> list[SimilarItem]:
        if not values:
            return []
        try:
            return _SIMILAR_ITEMS.validate_python(list(values))
        except PydanticValidationError as e:
            raise ValidationError(
                ErrorMessages.INVALID_SIMILAR_ITEMS.format(kind=kind, error=e.errors()[0]["msg"]),
                field=f"similar_{kind.replace(' ', '_')}",
            ) from e

    @staticmethod
    def _failure(result_type: Any, operation: str, exc: DomainError) -> Any:
        status = OperationStatus.from_error(exc)
        if isinstance(exc, CompletionError):
            logger.error(LogTemplates.RECOMMENDATIONS_GENERATION_FAILED, operation, exc.message)
            return result_type.error(status, ErrorMessages.COMPLETION_FAILED.format(error=exc.message))
        logger.warning(LogTemplates.REQUEST_REJECTED, operation, exc.message)
        return result_type.error(status, exc.message)
