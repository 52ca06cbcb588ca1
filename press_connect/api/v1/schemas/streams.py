from pydantic import BaseModel, Field

from press_connect.schemas import Visibility


class CreateStreamIn(BaseModel):
    title: str | None = Field(default=None, max_length=255, description="Broadcast title")
    description: str | None = Field(default=None, description="Broadcast description")
    visibility: Visibility = Field(default=Visibility.PUBLIC, description="YouTube privacy status")
