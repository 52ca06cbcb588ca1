"""Recording and snapshot schemas."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel


class Recording(BaseModel):
    recording_id: str
    session_key: str
    user_id: str
    filename: str
    file_path: str
    file_size: int | None = None
    duration: int | None = None
    format: str | None = None
    created_at: datetime

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Recording":
        return cls.model_validate(dict(record))


class Snapshot(BaseModel):
    snapshot_id: str
    session_key: str
    user_id: str
    filename: str
    file_path: str
    file_size: int | None = None
    created_at: datetime

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Snapshot":
        return cls.model_validate(dict(record))
