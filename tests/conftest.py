import pytest
import pytest_asyncio

# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from music_recommender.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def recommendation_repository(in_memory_database):
    """Create a recommendation repository with in-memory database."""
    from music_recommender.infrastructure.persistence.repositories.recommendation_repository import (
        SQLiteRecommendationRepository,
    )

    return SQLiteRecommendationRepository(in_memory_database)


# ============================================================================
# Completion Client Fixtures
# ============================================================================


class FakeCompletionClient:
    """Completion client returning canned output and recording every prompt."""

    def __init__(self, output: str = "[]", error: Exception | None = None) -> None:
        self.output = output
        self.error = error
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.output

    async def is_available(self) -> bool:
        return True


@pytest.fixture
def fake_completion_client():
    return FakeCompletionClient()


@pytest.fixture
def make_completion_client():
    """Factory for fake clients with custom output or error."""
    return FakeCompletionClient


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def recommendation_settings():
    from music_recommender.config.settings import RecommendationSettings

    return RecommendationSettings()


@pytest.fixture
def make_service(recommendation_repository, recommendation_settings):
    """Factory building a service over the shared repository with an optional client."""
    from music_recommender.application.services.recommendation_service import (
        RecommendationApplicationService,
    )

    def _make(completion_client=None, settings=None):
        return RecommendationApplicationService(
            repository=recommendation_repository,
            completion_client=completion_client,
            settings=settings or recommendation_settings,
        )

    return _make


@pytest.fixture
def fallback_service(make_service):
    """Service without a completion client (deterministic fallback path)."""
    return make_service()


@pytest.fixture
def llm_service(make_service, fake_completion_client):
    """Service wired to the fake completion client."""
    return make_service(fake_completion_client)


# ============================================================================
# Upstream Data Fixtures
# ============================================================================


@pytest.fixture
def radiohead_metadata():
    return {
        "name": "Radiohead",
        "type": "Group",
        "disambiguation": "English rock band",
        "genres": [{"name": "alternative rock", "count": 12}, {"name": "art rock", "count": 8}],
        "tags": [{"name": "british", "count": 5}],
    }


@pytest.fixture
def radiohead_similar_artists():
    return [
        {"name": "Muse", "score": 95, "sharedGenres": ["alternative rock"]},
        {"name": "Pink Floyd", "score": 70, "sharedGenres": ["art rock", "progressive rock"]},
    ]
