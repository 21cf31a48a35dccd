"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (SQLite via aiosqlite)
- AI completion transports (OpenAI, pydantic-ai)
"""

from music_recommender.infrastructure.persistence.database import Database

__all__ = [
    "Database",
]
