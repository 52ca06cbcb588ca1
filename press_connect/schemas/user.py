"""User identity schemas."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel


class UserIdentity(BaseModel):
    """Public view of a user. Never carries the password hash."""

    user_id: str
    username: str
    email: str
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class UserRecord(UserIdentity):
    password_hash: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "UserRecord":
        return cls.model_validate(dict(record))

    def to_identity(self) -> UserIdentity:
        return UserIdentity.model_validate(self.model_dump(exclude={"password_hash"}))
