"""OpenAI chat-completions transport for recommendation prompts."""

from __future__ import annotations

import logging

import httpx
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    OpenAIError,
    RateLimitError,
)

from music_recommender.application.interfaces.completion_client import CompletionClient
from music_recommender.config.settings import AISettings
from music_recommender.domain.recommendations.prompt import SYSTEM_PROMPT
from music_recommender.domain.shared.exceptions import CompletionError
from music_recommender.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

_TRANSIENT_ERRORS = (
    APITimeoutError,
    APIConnectionError,
    RateLimitError,
    httpx.TimeoutException,
    httpx.ConnectError,
)


class OpenAICompletionClient(CompletionClient):
    def __init__(self, settings: AISettings | None = None) -> None:
        self._settings = settings or AISettings()
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is not None:
            return self._client

        api_key_value = self._settings.api_key.get_secret_value()
        if not api_key_value:
            raise CompletionError(ErrorMessages.OPENAI_API_KEY_NOT_SET)

        # Retries are disabled; a failed call fails the whole generation.
        self._client = AsyncOpenAI(api_key=api_key_value, max_retries=0)
        logger.info(
            LogTemplates.AI_CLIENT_INITIALIZED,
            self._settings.model,
            self._settings.timeout_seconds,
        )
        return self._client

    async def complete(self, prompt: str) -> str:
        client = self._get_client()
        logger.debug(LogTemplates.AI_REQUESTING_COMPLETION, len(prompt))

        try:
            response = await client.with_options(
                timeout=self._settings.timeout_seconds
            ).chat.completions.create(
                model=self._settings.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=self._settings.max_tokens,
                temperature=self._settings.temperature,
            )
        except (OpenAIError, httpx.HTTPError) as e:
            raise self._handle_api_error(e) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise CompletionError(ErrorMessages.COMPLETION_EMPTY)

        logger.debug(LogTemplates.AI_COMPLETION_RECEIVED, len(content))
        return content

    def _handle_api_error(self, error: Exception) -> CompletionError:
        is_transient = isinstance(error, _TRANSIENT_ERRORS)
        logger.warning(LogTemplates.AI_API_ERROR, error.__class__.__name__, is_transient)

        if isinstance(error, APIStatusError):
            return CompletionError(f"{error.__class__.__name__} (status {error.status_code})")
        return CompletionError(f"{error.__class__.__name__}: {error}")

    async def is_available(self) -> bool:
        if not self._settings.api_key.get_secret_value():
            return False

        try:
            self._get_client()
            return True
        except CompletionError:
            return False
