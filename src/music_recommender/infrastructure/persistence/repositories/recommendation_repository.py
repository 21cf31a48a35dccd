"""SQLite implementation of the recommendation repository."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any

from music_recommender.domain.recommendations.entities import Recommendation
from music_recommender.domain.recommendations.repository import (
    RecommendationFilter,
    RecommendationRepository,
)
from music_recommender.domain.shared.constants import DatabaseColumns as Col
from music_recommender.domain.shared.constants import DatabaseTables
from music_recommender.domain.shared.datetime_utils import UtcDateTime

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)

_TABLE = DatabaseTables.RECOMMENDATIONS

_INSERT_SQL = f"""
    INSERT INTO {_TABLE} (
        {Col.ID}, {Col.USER_ID}, {Col.SOURCE_ITEM}, {Col.SOURCE_ITEM_NAME},
        {Col.RECOMMENDED_ITEM_ID}, {Col.RECOMMENDED_ITEM_NAME}, {Col.REASONING},
        {Col.CONFIDENCE}, {Col.FEEDBACK}, {Col.CREATED_AT}
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


def _feedback_to_db(feedback: bool | None) -> int | None:
    if feedback is None:
        return None
    return 1 if feedback else 0


def _feedback_from_db(value: Any) -> bool | None:
    if value is None:
        return None
    return bool(value)


def _where(filter: RecommendationFilter) -> tuple[str, tuple[Any, ...]]:
    """Translate a filter into a WHERE clause (empty when unconstrained)."""
    clauses: list[str] = []
    params: list[Any] = []

    if filter.user_id is not None:
        clauses.append(f"{Col.USER_ID} = ?")
        params.append(filter.user_id)
    if filter.source_item is not None:
        clauses.append(f"{Col.SOURCE_ITEM} = ?")
        params.append(filter.source_item)
    if filter.recommended_item_id is not None:
        clauses.append(f"{Col.RECOMMENDED_ITEM_ID} = ?")
        params.append(filter.recommended_item_id)
    if filter.involving_item is not None:
        clauses.append(f"({Col.SOURCE_ITEM} = ? OR {Col.RECOMMENDED_ITEM_ID} = ?)")
        params.extend((filter.involving_item, filter.involving_item))
    if filter.has_feedback is not None:
        clauses.append(f"{Col.FEEDBACK} IS {'NOT ' if filter.has_feedback else ''}NULL")

    if not clauses:
        return "", ()
    return " WHERE " + " AND ".join(clauses), tuple(params)


class SQLiteRecommendationRepository(RecommendationRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def insert_many(self, records: Sequence[Recommendation]) -> int:
        return await self._db.execute_many(
            _INSERT_SQL, (self._record_to_row(record) for record in records)
        )

    async def find(self, filter: RecommendationFilter) -> list[Recommendation]:
        where, params = _where(filter)
        rows = await self._db.fetch_all(
            f"SELECT * FROM {_TABLE}{where} ORDER BY rowid ASC", params
        )
        return [self._row_to_record(row) for row in rows]

    async def update_many(
        self,
        filter: RecommendationFilter,
        *,
        feedback: bool | None,
        created_at: datetime,
    ) -> int:
        where, params = _where(filter)
        return await self._db.execute(
            f"UPDATE {_TABLE} SET {Col.FEEDBACK} = ?, {Col.CREATED_AT} = ?{where}",
            (_feedback_to_db(feedback), UtcDateTime(created_at).iso, *params),
        )

    async def delete_many(self, filter: RecommendationFilter) -> int:
        where, params = _where(filter)
        deleted = await self._db.execute(f"DELETE FROM {_TABLE}{where}", params)
        logger.debug("Deleted %d recommendation rows (filter=%s)", deleted, filter)
        return deleted

    async def delete_one(self, recommendation_id: str) -> bool:
        deleted = await self._db.execute(
            f"DELETE FROM {_TABLE} WHERE {Col.ID} = ?", (recommendation_id,)
        )
        return deleted > 0

    async def count(self, filter: RecommendationFilter | None = None) -> int:
        where, params = _where(filter or RecommendationFilter())
        row = await self._db.fetch_one(f"SELECT COUNT(*) as count FROM {_TABLE}{where}", params)
        return row["count"] if row else 0

    @staticmethod
    def _record_to_row(record: Recommendation) -> tuple[Any, ...]:
        return (
            record.id,
            record.user_id,
            record.source_item,
            record.source_item_name,
            record.recommended_item_id,
            record.recommended_item_name,
            record.reasoning,
            record.confidence,
            _feedback_to_db(record.feedback),
            UtcDateTime(record.created_at).iso,
        )

    @staticmethod
    def _row_to_record(row: dict[str, Any]) -> Recommendation:
        return Recommendation(
            id=row[Col.ID],
            user_id=row[Col.USER_ID],
            source_item=row[Col.SOURCE_ITEM],
            source_item_name=row[Col.SOURCE_ITEM_NAME],
            recommended_item_id=row[Col.RECOMMENDED_ITEM_ID],
            recommended_item_name=row[Col.RECOMMENDED_ITEM_NAME],
            reasoning=row[Col.REASONING] or "",
            confidence=row[Col.CONFIDENCE],
            feedback=_feedback_from_db(row[Col.FEEDBACK]),
            created_at=UtcDateTime.from_iso(row[Col.CREATED_AT]).dt,
        )
