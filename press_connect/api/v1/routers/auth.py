from fastapi import APIRouter, Depends

from press_connect.api.v1.dependency import CurrentUser, get_credential_store, get_identity_service
from press_connect.api.v1.schemas.auth import (
    AuthOut,
    LoginIn,
    RegisterIn,
    StoreOAuthTokenIn,
    StoreOAuthTokenOut,
)
from press_connect.api.v1.schemas.base import ApiOut
from press_connect.domain.credentials import CredentialStore
from press_connect.domain.identity import IdentityService
from press_connect.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

router = APIRouter(prefix="/auth")


@router.post("/register", status_code=201)
async def register(
    body: RegisterIn,
    identity: IdentityService = Depends(get_identity_service),
) -> ApiOut[AuthOut]:
    result = await identity.register(body.username, body.email, body.password)
    return ApiOut[AuthOut](
        results=AuthOut(message="User registered successfully", user=result.user, token=result.token)
    )


@router.post("/login")
async def login(
    body: LoginIn,
    identity: IdentityService = Depends(get_identity_service),
) -> ApiOut[AuthOut]:
    result = await identity.authenticate(body.username, body.password)
    return ApiOut[AuthOut](
        results=AuthOut(message="Login successful", user=result.user, token=result.token)
    )


@router.post("/oauth/store")
async def store_oauth_token(
    body: StoreOAuthTokenIn,
    user: CurrentUser,
    store: CredentialStore = Depends(get_credential_store),
) -> ApiOut[StoreOAuthTokenOut]:
    """Store the caller's provider OAuth token, replacing any previous one."""
    if not body.provider or not body.access_token:
        raise AppError(
            errcode=AppErrorCode.E_VALIDATION,
            errmesg="Provider and access token are required",
            status_code=HttpStatusCode.BAD_REQUEST,
        )

    credential = await store.put(
        user.user_id,
        body.provider,
        body.access_token,
        refresh_token=body.refresh_token,
        ttl_seconds=body.expires_in,
        scope=body.scope,
    )
    return ApiOut[StoreOAuthTokenOut](
        results=StoreOAuthTokenOut(
            provider=credential.provider,
            expires_at=credential.expires_at.isoformat() if credential.expires_at else None,
        )
    )
