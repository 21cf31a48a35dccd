"""Completion transports: OpenAI chat completions and pydantic-ai agents."""

from music_recommender.infrastructure.ai.agent_client import AgentCompletionClient
from music_recommender.infrastructure.ai.openai_client import OpenAICompletionClient

__all__ = ["AgentCompletionClient", "OpenAICompletionClient"]
