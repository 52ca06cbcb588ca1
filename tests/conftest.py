import warnings

import pytest

from press_connect.app_config import AppSettings
from press_connect.domain.identity import IdentityService
from press_connect.domain.live.media import MediaRegistry
from press_connect.domain.live.session import BroadcastOrchestrator

# Ignore import-time deprecations from logfire instrumentation
warnings.filterwarnings("ignore", category=DeprecationWarning, module="logfire.*")

# Import fixtures so they are available to all tests
from tests.fixtures.fake_provider import FakeBroadcastProvider  # noqa: E402
from tests.fixtures.memory_stores import (  # noqa: E402
    InMemoryCredentialStore,
    InMemoryMediaStore,
    InMemorySessionRegistry,
    InMemoryUserStore,
)
from tests.fixtures.postgres_fixtures import *  # noqa: E402, F403


@pytest.fixture
def settings() -> AppSettings:
    # Minimum bcrypt cost keeps the suite fast
    return AppSettings(JWT_SECRET="test-secret-0123456789", PASSWORD_HASH_ROUNDS=4)


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def registry() -> InMemorySessionRegistry:
    return InMemorySessionRegistry()


@pytest.fixture
def media_store() -> InMemoryMediaStore:
    return InMemoryMediaStore()


@pytest.fixture
def provider() -> FakeBroadcastProvider:
    return FakeBroadcastProvider()


@pytest.fixture
def identity(settings, user_store) -> IdentityService:
    return IdentityService(settings, user_store)


@pytest.fixture
def orchestrator(settings, credential_store, registry, provider) -> BroadcastOrchestrator:
    return BroadcastOrchestrator(credential_store, registry, provider, settings)  # type: ignore[arg-type]


@pytest.fixture
def media_registry(registry, media_store) -> MediaRegistry:
    return MediaRegistry(registry, media_store)  # type: ignore[arg-type]


@pytest.fixture
async def youtube_user(credential_store) -> str:
    """A user id holding a non-expiring YouTube credential."""
    user_id = "us_owner"
    await credential_store.put(user_id, "youtube", "ya29.token", refresh_token="1//refresh")
    return user_id
