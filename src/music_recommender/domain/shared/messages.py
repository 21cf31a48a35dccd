"""Centralized message constants for error messages, validation, and log output."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions, validation failures and result objects."""

    # Request Validation Errors
    INVALID_GENERATE_REQUEST = "Invalid user ID, source item or amount specified."
    INVALID_RETRIEVAL_REQUEST = "Invalid user ID, item or amount specified."
    INVALID_FEEDBACK_REQUEST = "User ID or recommended item not specified."
    INVALID_HISTORY_REQUEST = "User ID not specified."
    EMPTY_RECOMMENDATION_ID = "Recommendation ID not specified."
    INVALID_SOURCE_METADATA = "Source item metadata is malformed: {error}"
    INVALID_SIMILAR_ITEMS = "Similar {kind} list is malformed: {error}"

    # Not Found Errors
    RECOMMENDATION_NOT_RECOMMENDED = (
        "No existing recommendation found for the provided item and user."
    )
    RECOMMENDATION_ID_NOT_FOUND = "No recommendation found with the provided ID."

    # Completion Errors
    COMPLETION_FAILED = "Failed to generate recommendations: {error}"
    COMPLETION_PARSE_FAILED = "Failed to parse LLM recommendations."
    COMPLETION_EMPTY = "Empty response from completion provider"
    COMPLETION_NOT_ARRAY = "Completion output must be a JSON array of objects"
    COMPLETION_INVALID_ITEM = "Completion item #{index} is invalid: {error}"

    # Field Validation Errors (templates)
    FIELD_MUST_BE_POSITIVE = "{field_name} must be positive"
    FIELD_CANNOT_BE_EMPTY = "{field_name} cannot be empty"

    # Time/Date Validation Errors
    TIMEZONE_REQUIRED_UTC_DATETIME = "UtcDateTime requires a timezone-aware datetime"

    # Settings Validation Errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    OPENAI_API_KEY_NOT_SET = "OPENAI_API_KEY is not set; LLM recommendations are disabled."

    # CLI Errors
    CLEAR_ALL_REQUIRES_CONFIRMATION = (
        "Refusing to clear every user's recommendations without --all --yes"
    )
    CLI_INPUT_UNREADABLE = "Could not read generate payload {path}: {error}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"

    # Completion Client
    AI_CLIENT_INITIALIZED = "Completion client initialized (model=%s, timeout=%.1fs)"
    AI_AGENT_INITIALIZED = "pydantic-ai agent initialized (model=%s)"
    AI_REQUESTING_COMPLETION = "Requesting completion (prompt_chars=%d)"
    AI_COMPLETION_RECEIVED = "Completion received (chars=%d)"
    AI_API_ERROR = "Completion API error (%s, retryable=%s)"
    AI_UNAVAILABLE_FALLBACK = "No completion client configured; using fallback recommendations"

    # Recommendation Engine
    RECOMMENDATIONS_GENERATING = (
        "Generating %d recommendations for user=%s source=%s (mode=%s)"
    )
    RECOMMENDATIONS_GENERATED = "Stored %d new recommendations for user=%s source=%s"
    COMPLETION_CANDIDATES_DROPPED = "Dropped %d of %d completion candidates"
    RECOMMENDATIONS_GENERATION_FAILED = "Recommendation generation failed (%s): %s"
    RECOMMENDATIONS_RETRIEVED = "Retrieved %d recommendations for user=%s item=%s"
    RECOMMENDATION_FEEDBACK_RECORDED = "Recorded feedback=%s on %d record(s) for user=%s item=%s"
    RECOMMENDATION_DELETED = "Deleted recommendation %s"
    RECOMMENDATIONS_CLEARED = "Cleared %d recommendations (user=%s)"
    FEEDBACK_HISTORY_LOADED = "Loaded %d feedback entries for user=%s source=%s"
    REQUEST_REJECTED = "Rejected %s request: %s"

    # Application Lifecycle
    APP_STARTING = "Music recommender starting (environment=%s)"
    APP_COMMAND_FAILED = "Command %s failed: %s"
