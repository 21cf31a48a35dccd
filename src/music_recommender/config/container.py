"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the database, repository, completion client
and recommendation service.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.interfaces.completion_client import CompletionClient
    from ..application.services.recommendation_service import RecommendationApplicationService
    from ..domain.recommendations.repository import RecommendationRepository
    from ..infrastructure.persistence.database import Database
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed.
    """

    settings: Settings

    # Persistence layer
    _database: Database | None = None
    _recommendation_repository: RecommendationRepository | None = None

    # Infrastructure adapters
    _completion_client: CompletionClient | None = None
    _completion_client_resolved: bool = False

    # Application services
    _recommendation_service: RecommendationApplicationService | None = None

    # === Database ===

    @property
    def database(self) -> Database:
        """Get the database connection manager."""
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.database.url, settings=self.settings.database)
        return self._database

    # === Repositories ===

    @property
    def recommendation_repository(self) -> RecommendationRepository:
        """Get the recommendation repository."""
        if self._recommendation_repository is None:
            from ..infrastructure.persistence.repositories.recommendation_repository import (
                SQLiteRecommendationRepository,
            )

            self._recommendation_repository = SQLiteRecommendationRepository(self.database)
        return self._recommendation_repository

    # === Infrastructure Adapters ===

    @property
    def completion_client(self) -> CompletionClient | None:
        """Get the completion client, or None when no provider is configured."""
        if not self._completion_client_resolved:
            self._completion_client_resolved = True
            ai = self.settings.ai
            if not ai.enabled:
                logger.info(LogTemplates.AI_UNAVAILABLE_FALLBACK)
            elif ai.provider == "pydantic-ai":
                from ..infrastructure.ai.agent_client import AgentCompletionClient

                self._completion_client = AgentCompletionClient(ai)
            else:
                from ..infrastructure.ai.openai_client import OpenAICompletionClient

                self._completion_client = OpenAICompletionClient(ai)
        return self._completion_client

    # === Application Services ===

    @property
    def recommendation_service(self) -> RecommendationApplicationService:
        """Get the recommendation application service."""
        if self._recommendation_service is None:
            from ..application.services.recommendation_service import (
                RecommendationApplicationService,
            )

            self._recommendation_service = RecommendationApplicationService(
                repository=self.recommendation_repository,
                completion_client=self.completion_client,
                settings=self.settings.recommendations,
            )
        return self._recommendation_service

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Initialize all async resources."""
        await self.database.initialize()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
