"""Centralized constants for the database schema and other shared values."""

from __future__ import annotations


class DatabaseTables:
    """Database table names."""

    RECOMMENDATIONS = "recommendations"


class DatabaseColumns:
    """Column names of the recommendations table."""

    ID = "id"
    USER_ID = "user_id"
    SOURCE_ITEM = "source_item"
    SOURCE_ITEM_NAME = "source_item_name"
    RECOMMENDED_ITEM_ID = "recommended_item_id"
    RECOMMENDED_ITEM_NAME = "recommended_item_name"
    REASONING = "reasoning"
    CONFIDENCE = "confidence"
    FEEDBACK = "feedback"
    CREATED_AT = "created_at"


class SQLPragmas:
    """SQLite PRAGMA statements applied to each connection."""

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    FOREIGN_KEYS_ON = "PRAGMA foreign_keys=ON"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"


class DatabaseURLSchemes:
    """Valid database URL schemes for validation."""

    SQLITE = "sqlite://"
    SQLITE_PREFIX = "sqlite:///"

    # For in-memory testing
    MEMORY = ":memory:"
    MEMORY_SHARED_URI = "file:music-recommender-{token}?mode=memory&cache=shared"


class LogLevels:
    """Valid logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    ALL = frozenset({DEBUG, INFO, WARNING, ERROR, CRITICAL})
