"""Tests for parsing raw completion text into recommendation objects."""

import pytest

from music_recommender.domain.recommendations.parsing import (
    parse_completion_output,
    strip_code_fence,
)
from music_recommender.domain.shared.exceptions import CompletionError, CompletionParseError

VALID = '[{"name": "Muse", "reasoning": "Shares alternative rock.", "confidence": 0.9}]'


class TestStripCodeFence:
    def test_plain_text_is_returned_stripped(self):
        assert strip_code_fence(f"  {VALID}\n") == VALID

    def test_json_fence_is_removed(self):
        assert strip_code_fence(f"```json\n{VALID}\n```") == VALID

    def test_bare_fence_is_removed(self):
        assert strip_code_fence(f"```\n{VALID}\n```") == VALID

    def test_inner_fence_is_left_alone(self):
        text = f"Here you go:\n```json\n{VALID}\n```"
        assert strip_code_fence(text) == text


class TestParseCompletionOutput:
    def test_parses_array(self):
        items = parse_completion_output(VALID)
        assert len(items) == 1
        assert items[0].name == "Muse"
        assert items[0].confidence == 0.9

    def test_parses_fenced_array(self):
        items = parse_completion_output(f"```json\n{VALID}\n```")
        assert [i.name for i in items] == ["Muse"]

    def test_empty_array_is_valid(self):
        assert parse_completion_output("[]") == []

    def test_missing_optional_fields_use_defaults(self):
        items = parse_completion_output('[{"name": "Blur"}]')
        assert items[0].reasoning == ""
        assert items[0].confidence == 0.0

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            '{"name": "Muse"}',
            '["Muse"]',
            '[{"reasoning": "no name"}]',
            f"Sure!\n```json\n{VALID}\n```",
        ],
    )
    def test_rejects_malformed_output(self, text):
        with pytest.raises(CompletionParseError) as exc_info:
            parse_completion_output(text)
        assert exc_info.value.raw_output == text

    def test_parse_error_is_a_completion_error(self):
        with pytest.raises(CompletionError):
            parse_completion_output("nope")
