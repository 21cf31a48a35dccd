"""Parsing of raw completion text into recommendation objects.

The model is asked for a bare JSON array but frequently wraps it in a
markdown code fence. Exactly one enclosing fence is stripped; any other
shape is rejected rather than repaired.
"""

from __future__ import annotations

import json
import re

from pydantic import ValidationError as PydanticValidationError

from music_recommender.domain.recommendations.entities import CompletionRecommendation
from music_recommender.domain.shared.exceptions import CompletionParseError
from music_recommender.domain.shared.messages import ErrorMessages

_FENCE = re.compile(r"\A```[A-Za-z0-9_-]*[ \t]*\r?\n(?P<body>.*?)\r?\n?```\Z", re.DOTALL)


def strip_code_fence(text: str) -> str:
    """Remove one markdown code fence enclosing the whole text, if present."""
    stripped = text.strip()
    match = _FENCE.match(stripped)
    if match:
        return match.group("body").strip()
    return stripped


def parse_completion_output(text: str) -> list[CompletionRecommendation]:
    """Parse completion text into recommendation objects.

    Raises:
        CompletionParseError: If the text is not a JSON array of objects
            carrying at least a ``name``.
    """
    body = strip_code_fence(text)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise CompletionParseError(ErrorMessages.COMPLETION_PARSE_FAILED, raw_output=text) from e

    if not isinstance(data, list):
        raise CompletionParseError(ErrorMessages.COMPLETION_NOT_ARRAY, raw_output=text)

    items: list[CompletionRecommendation] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise CompletionParseError(ErrorMessages.COMPLETION_NOT_ARRAY, raw_output=text)
        try:
            items.append(CompletionRecommendation.model_validate(entry))
        except PydanticValidationError as e:
            raise CompletionParseError(
                ErrorMessages.COMPLETION_INVALID_ITEM.format(index=index, error=e.errors()[0]["msg"]),
                raw_output=text,
            ) from e
    return items
