"""
Shared Kernel Tests

Tests for validators, UTC datetime helpers and domain exceptions.
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from music_recommender.domain.shared.datetime_utils import UtcDateTime, utcnow
from music_recommender.domain.shared.exceptions import (
    CompletionError,
    CompletionParseError,
    DomainError,
    EntityNotFoundError,
    ValidationError,
)
from music_recommender.domain.shared.validators import (
    require_fields,
    validate_non_empty_string,
    validate_positive_int,
)


class TestValidatePositiveInt:
    """Tests for positive integer validation."""

    def test_valid_positive_int(self):
        assert validate_positive_int(42) == 42

    @pytest.mark.parametrize("value", [0, -1])
    def test_rejects_non_positive(self, value):
        with pytest.raises(ValueError, match="must be positive"):
            validate_positive_int(value)

    def test_rejects_bool(self):
        """True is an int subclass but never a valid amount."""
        with pytest.raises(ValueError):
            validate_positive_int(True)

    def test_custom_field_name(self):
        with pytest.raises(ValueError, match="amount must be positive"):
            validate_positive_int(0, "amount")


class TestValidateNonEmptyString:
    def test_valid_string(self):
        assert validate_non_empty_string("u1") == "u1"

    @pytest.mark.parametrize("value", ["", "   ", None, 7])
    def test_rejects_blank_and_non_strings(self, value):
        with pytest.raises(ValueError, match="cannot be empty"):
            validate_non_empty_string(value, "user_id")


class TestRequireFields:
    def test_passes_when_all_valid(self):
        require_fields("bad", strings={"user_id": "u1"}, amounts={"amount": 3})

    def test_reports_first_bad_string(self):
        with pytest.raises(ValidationError) as exc_info:
            require_fields("bad request", strings={"user_id": "u1", "item": ""})

        assert exc_info.value.message == "bad request"
        assert exc_info.value.field == "item"

    def test_reports_bad_amount(self):
        with pytest.raises(ValidationError) as exc_info:
            require_fields("bad request", strings={"user_id": "u1"}, amounts={"amount": 0})

        assert exc_info.value.field == "amount"


class TestUtcDateTime:
    def test_init_with_naive_datetime_raises(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            UtcDateTime(datetime.now())

    def test_non_utc_timezone_converts(self):
        eastern = timezone(timedelta(hours=-5))

        utc_dt = UtcDateTime(datetime(2024, 1, 15, 12, 0, 0, tzinfo=eastern))

        assert utc_dt.dt.hour == 17
        assert utc_dt.dt.tzinfo == UTC

    def test_from_iso_with_z_suffix(self):
        utc_dt = UtcDateTime.from_iso("2024-01-15T12:00:00Z")

        assert utc_dt.dt == datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC)

    def test_iso_round_trip(self):
        original = UtcDateTime(datetime(2024, 1, 15, 12, 30, 45, 123456, tzinfo=UTC))

        assert UtcDateTime.from_iso(original.iso) == original

    def test_unix_millis(self):
        assert UtcDateTime(datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC)).unix_millis == 1000

    def test_utcnow_is_aware(self):
        assert utcnow().tzinfo == UTC


class TestDomainExceptions:
    def test_validation_error_carries_field(self):
        err = ValidationError("bad", field="user_id")

        assert isinstance(err, DomainError)
        assert err.code == "VALIDATION_ERROR"
        assert err.field == "user_id"

    def test_entity_not_found_default_message(self):
        err = EntityNotFoundError("Recommendation", "abc")

        assert err.message == "Recommendation with id 'abc' not found"
        assert err.code == "ENTITY_NOT_FOUND"

    def test_parse_error_is_completion_error(self):
        err = CompletionParseError("nope", raw_output="{}")

        assert isinstance(err, CompletionError)
        assert err.code == "COMPLETION_PARSE_FAILED"
        assert err.raw_output == "{}"
