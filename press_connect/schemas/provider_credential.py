"""Provider OAuth credential schema."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel

YOUTUBE_PROVIDER = "youtube"


class ProviderCredential(BaseModel):
    credential_id: str
    user_id: str
    provider: str
    access_token: str
    refresh_token: str | None = None
    token_type: str = "Bearer"
    # None means the token does not expire
    expires_at: datetime | None = None
    scope: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ProviderCredential":
        return cls.model_validate(dict(record))
