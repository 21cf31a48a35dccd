"""
Tests for the completion transports.

The OpenAI and pydantic-ai clients are exercised with mocked SDK objects;
no network calls are made.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from openai import APITimeoutError
from pydantic import SecretStr
from pydantic_ai.exceptions import AgentRunError

from music_recommender.config.settings import AISettings
from music_recommender.domain.recommendations.prompt import SYSTEM_PROMPT
from music_recommender.domain.shared.exceptions import CompletionError
from music_recommender.infrastructure.ai.agent_client import AgentCompletionClient
from music_recommender.infrastructure.ai.openai_client import OpenAICompletionClient


def _openai_response(content):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


def _openai_client(create: AsyncMock, **settings_kwargs) -> OpenAICompletionClient:
    settings = AISettings(api_key=SecretStr("sk-test-key"), **settings_kwargs)
    client = OpenAICompletionClient(settings)
    sdk = MagicMock()
    sdk.with_options.return_value.chat.completions.create = create
    client._client = sdk
    return client


# ============================================================================
# OpenAICompletionClient
# ============================================================================


class TestOpenAICompletionClient:
    @pytest.mark.asyncio
    async def test_complete_returns_content(self):
        create = AsyncMock(return_value=_openai_response('[{"name": "Muse"}]'))
        client = _openai_client(create, model="gpt-4o-mini", timeout_seconds=12.0)

        output = await client.complete("recommend please")

        assert output == '[{"name": "Muse"}]'
        client._client.with_options.assert_called_once_with(timeout=12.0)
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["messages"] == [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": "recommend please"},
        ]

    @pytest.mark.asyncio
    async def test_empty_content_is_completion_error(self):
        client = _openai_client(AsyncMock(return_value=_openai_response("")))

        with pytest.raises(CompletionError):
            await client.complete("p")

    @pytest.mark.asyncio
    async def test_timeout_is_wrapped(self):
        error = APITimeoutError(request=httpx.Request("POST", "https://api.openai.com/v1"))
        client = _openai_client(AsyncMock(side_effect=error))

        with pytest.raises(CompletionError) as exc_info:
            await client.complete("p")

        assert "APITimeoutError" in exc_info.value.message
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_transport_error_is_wrapped(self):
        client = _openai_client(AsyncMock(side_effect=httpx.ConnectError("refused")))

        with pytest.raises(CompletionError):
            await client.complete("p")

    @pytest.mark.asyncio
    async def test_is_not_retried(self):
        create = AsyncMock(side_effect=httpx.ConnectError("refused"))
        client = _openai_client(create)

        with pytest.raises(CompletionError):
            await client.complete("p")

        assert create.await_count == 1

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        client = OpenAICompletionClient(AISettings())

        assert await client.is_available() is False
        with pytest.raises(CompletionError):
            await client.complete("p")

    @pytest.mark.asyncio
    async def test_available_with_api_key(self):
        with patch("music_recommender.infrastructure.ai.openai_client.AsyncOpenAI") as sdk_cls:
            client = OpenAICompletionClient(AISettings(api_key=SecretStr("sk-test-key")))

            assert await client.is_available() is True
            sdk_cls.assert_called_once_with(api_key="sk-test-key", max_retries=0)


# ============================================================================
# AgentCompletionClient
# ============================================================================


class TestAgentCompletionClient:
    def _settings(self) -> AISettings:
        return AISettings(provider="pydantic-ai", model="google-gla:gemini-2.0-flash")

    @pytest.mark.asyncio
    async def test_complete_returns_agent_output(self):
        client = AgentCompletionClient(self._settings())
        mock_agent = MagicMock()
        mock_agent.run = AsyncMock(return_value=MagicMock(output='[{"name": "Muse"}]'))

        with patch.object(client, "_get_agent", return_value=mock_agent):
            output = await client.complete("prompt")

        assert output == '[{"name": "Muse"}]'
        model_settings = mock_agent.run.call_args.kwargs["model_settings"]
        assert model_settings["timeout"] == 30.0
        assert model_settings["max_tokens"] == 1500

    @pytest.mark.asyncio
    async def test_agent_errors_are_wrapped(self):
        client = AgentCompletionClient(self._settings())
        mock_agent = MagicMock()
        mock_agent.run = AsyncMock(side_effect=AgentRunError("model exploded"))

        with patch.object(client, "_get_agent", return_value=mock_agent):
            with pytest.raises(CompletionError) as exc_info:
                await client.complete("prompt")

        assert "model exploded" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_timeout_is_wrapped(self):
        client = AgentCompletionClient(self._settings())
        mock_agent = MagicMock()
        mock_agent.run = AsyncMock(side_effect=httpx.ReadTimeout("slow"))

        with patch.object(client, "_get_agent", return_value=mock_agent):
            with pytest.raises(CompletionError):
                await client.complete("prompt")

    @pytest.mark.asyncio
    async def test_empty_output_is_completion_error(self):
        client = AgentCompletionClient(self._settings())
        mock_agent = MagicMock()
        mock_agent.run = AsyncMock(return_value=MagicMock(output=""))

        with patch.object(client, "_get_agent", return_value=mock_agent):
            with pytest.raises(CompletionError):
                await client.complete("prompt")

    def test_agent_built_once_with_text_output(self):
        with patch("music_recommender.infrastructure.ai.agent_client.Agent") as agent_cls:
            client = AgentCompletionClient(self._settings())
            first = client._get_agent()
            second = client._get_agent()

        assert first is second
        agent_cls.assert_called_once_with(
            "google-gla:gemini-2.0-flash", output_type=str, system_prompt=SYSTEM_PROMPT
        )

    @pytest.mark.asyncio
    async def test_unavailable_without_provider_prefix(self):
        client = AgentCompletionClient(AISettings(provider="pydantic-ai", model="gpt-4o-mini"))

        assert await client.is_available() is False
