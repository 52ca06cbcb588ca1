from pydantic import BaseModel, Field

from press_connect.schemas import Recording, Snapshot


class RecordingIn(BaseModel):
    filename: str
    file_path: str
    file_size: int | None = Field(default=None, ge=0)
    duration: int | None = Field(default=None, ge=0, description="Seconds")
    format: str | None = None


class SnapshotIn(BaseModel):
    filename: str
    file_path: str
    file_size: int | None = Field(default=None, ge=0)


class RecordingListOut(BaseModel):
    recordings: list[Recording]
    count: int


class SnapshotListOut(BaseModel):
    snapshots: list[Snapshot]
    count: int
