from pydantic import BaseModel, Field

from press_connect.schemas import UserIdentity


class RegisterIn(BaseModel):
    username: str = Field(description="Unique username")
    email: str = Field(description="Unique email address")
    password: str = Field(description="At least 6 characters")


class LoginIn(BaseModel):
    username: str = Field(description="Username or email")
    password: str


class AuthOut(BaseModel):
    message: str
    user: UserIdentity
    token: str


class StoreOAuthTokenIn(BaseModel):
    provider: str | None = Field(default=None, description="Provider name, e.g. youtube")
    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = Field(default=None, ge=0, description="Token lifetime in seconds")
    scope: str | None = None


class StoreOAuthTokenOut(BaseModel):
    message: str = "OAuth token stored successfully"
    provider: str
    expires_at: str | None = None
