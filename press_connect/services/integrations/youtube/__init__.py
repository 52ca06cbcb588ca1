from .errors import reauth_required, translate_provider_error
from .provider import BroadcastProvider, ProviderError, RemoteBroadcast, RemoteIngestStream
from .youtube_client import YoutubeLiveClient

__all__ = [
    "BroadcastProvider",
    "ProviderError",
    "RemoteBroadcast",
    "RemoteIngestStream",
    "YoutubeLiveClient",
    "reauth_required",
    "translate_provider_error",
]
