"""pydantic-ai transport, for any provider pydantic-ai supports (Gemini, Anthropic, ...)."""

from __future__ import annotations

import logging

import httpx
from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError, UserError

from music_recommender.application.interfaces.completion_client import CompletionClient
from music_recommender.config.settings import AISettings
from music_recommender.domain.recommendations.prompt import SYSTEM_PROMPT
from music_recommender.domain.shared.exceptions import CompletionError
from music_recommender.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)


class AgentCompletionClient(CompletionClient):
    """Completion client backed by a plain-text pydantic-ai agent.

    The model is a pydantic-ai model string such as
    ``google-gla:gemini-2.0-flash``; credentials come from the provider's
    own environment variables.
    """

    def __init__(self, settings: AISettings | None = None) -> None:
        self._settings = settings or AISettings(provider="pydantic-ai")
        self._agent: Agent[None, str] | None = None

    def _get_agent(self) -> Agent[None, str]:
        if self._agent is not None:
            return self._agent

        try:
            self._agent = Agent(
                self._settings.model,
                output_type=str,
                system_prompt=SYSTEM_PROMPT,
            )
        except UserError as e:
            raise CompletionError(f"{e.__class__.__name__}: {e}") from e
        logger.info(LogTemplates.AI_AGENT_INITIALIZED, self._settings.model)
        return self._agent

    async def complete(self, prompt: str) -> str:
        agent = self._get_agent()
        logger.debug(LogTemplates.AI_REQUESTING_COMPLETION, len(prompt))

        try:
            result = await agent.run(
                prompt,
                model_settings={
                    "max_tokens": self._settings.max_tokens,
                    "temperature": self._settings.temperature,
                    "timeout": self._settings.timeout_seconds,
                },
            )
        except (AgentRunError, httpx.HTTPError, TimeoutError) as e:
            logger.warning(
                LogTemplates.AI_API_ERROR,
                e.__class__.__name__,
                isinstance(e, httpx.TimeoutException | TimeoutError),
            )
            raise CompletionError(f"{e.__class__.__name__}: {e}") from e

        content = result.output
        if not content:
            raise CompletionError(ErrorMessages.COMPLETION_EMPTY)

        logger.debug(LogTemplates.AI_COMPLETION_RECEIVED, len(content))
        return content

    async def is_available(self) -> bool:
        if not self._settings.enabled:
            return False

        try:
            self._get_agent()
            return True
        except CompletionError:
            return False
