"""Subset of the YouTube Data API v3 live resources this service reads and writes."""

from pydantic import BaseModel, ConfigDict, Field


class _YoutubeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# --- liveBroadcasts ---


class BroadcastSnippet(_YoutubeModel):
    title: str
    description: str | None = None
    scheduled_start_time: str | None = Field(default=None, alias="scheduledStartTime")


class BroadcastStatus(_YoutubeModel):
    privacy_status: str = Field(alias="privacyStatus")
    self_declared_made_for_kids: bool = Field(default=False, alias="selfDeclaredMadeForKids")
    life_cycle_status: str | None = Field(default=None, alias="lifeCycleStatus")


class BroadcastContentDetails(_YoutubeModel):
    enable_auto_start: bool = Field(default=True, alias="enableAutoStart")
    enable_auto_stop: bool = Field(default=True, alias="enableAutoStop")
    bound_stream_id: str | None = Field(default=None, alias="boundStreamId")


class LiveBroadcastBody(_YoutubeModel):
    snippet: BroadcastSnippet
    status: BroadcastStatus
    content_details: BroadcastContentDetails = Field(alias="contentDetails")


class LiveBroadcastResource(_YoutubeModel):
    id: str
    snippet: BroadcastSnippet


# --- liveStreams ---


class StreamSnippet(_YoutubeModel):
    title: str


class IngestionInfo(_YoutubeModel):
    stream_name: str = Field(alias="streamName")
    ingestion_address: str = Field(alias="ingestionAddress")


class StreamCdn(_YoutubeModel):
    ingestion_type: str = Field(alias="ingestionType")
    resolution: str | None = None
    frame_rate: str | None = Field(default=None, alias="frameRate")
    ingestion_info: IngestionInfo | None = Field(default=None, alias="ingestionInfo")


class LiveStreamBody(_YoutubeModel):
    snippet: StreamSnippet
    cdn: StreamCdn


class LiveStreamResource(_YoutubeModel):
    id: str
    snippet: StreamSnippet
    cdn: StreamCdn


# --- errors ---


class GoogleErrorItem(_YoutubeModel):
    reason: str | None = None
    message: str | None = None
    domain: str | None = None


class GoogleErrorBody(_YoutubeModel):
    code: int | None = None
    message: str | None = None
    status: str | None = None
    errors: list[GoogleErrorItem] = Field(default_factory=list)


class GoogleErrorEnvelope(_YoutubeModel):
    error: GoogleErrorBody
