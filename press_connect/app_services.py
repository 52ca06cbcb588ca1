"""Process-wide service objects, built once in the app lifespan."""

from dataclasses import dataclass

from press_connect.app_config import AppSettings
from press_connect.domain.credentials import CredentialStore
from press_connect.domain.identity import IdentityService, UserStore
from press_connect.domain.live.media import MediaRegistry, MediaStore
from press_connect.domain.live.session import BroadcastOrchestrator, SessionRegistry
from press_connect.services.integrations.youtube import BroadcastProvider, YoutubeLiveClient
from press_connect.storage.postgres import PostgresManager


@dataclass(frozen=True)
class AppServices:
    settings: AppSettings
    identity: IdentityService
    credentials: CredentialStore
    orchestrator: BroadcastOrchestrator
    media: MediaRegistry


def build_services(
    settings: AppSettings,
    db: PostgresManager,
    provider: BroadcastProvider | None = None,
) -> AppServices:
    if provider is None:
        provider = YoutubeLiveClient(
            base_url=settings.YOUTUBE_API_BASE_URL,
            timeout=settings.YOUTUBE_API_TIMEOUT,
        )

    credentials = CredentialStore(db)
    registry = SessionRegistry(db)

    return AppServices(
        settings=settings,
        identity=IdentityService(settings, UserStore(db)),
        credentials=credentials,
        orchestrator=BroadcastOrchestrator(credentials, registry, provider, settings),
        media=MediaRegistry(registry, MediaStore(db)),
    )
