from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger

from press_connect.app_services import AppServices
from press_connect.domain.credentials import CredentialStore
from press_connect.domain.identity import IdentityService, SessionClaims
from press_connect.domain.live.media import MediaRegistry
from press_connect.domain.live.session import BroadcastOrchestrator
from press_connect.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

bearer_scheme = HTTPBearer(auto_error=False)


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def get_identity_service(request: Request) -> IdentityService:
    return get_services(request).identity


def get_credential_store(request: Request) -> CredentialStore:
    return get_services(request).credentials


def get_orchestrator(request: Request) -> BroadcastOrchestrator:
    return get_services(request).orchestrator


def get_media_registry(request: Request) -> MediaRegistry:
    return get_services(request).media


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    identity: IdentityService = Depends(get_identity_service),
) -> SessionClaims:
    # Do not log the Authorization header; it carries the token.
    claims = identity.verify_token(credentials.credentials if credentials else None)
    if claims is None:
        raise AppError(
            errcode=AppErrorCode.E_UNAUTHENTICATED,
            errmesg="Access token required" if credentials is None else "Invalid or expired token",
            status_code=HttpStatusCode.UNAUTHORIZED,
        )

    logger.debug("Authenticated user_id: {}", claims.user_id)
    return claims


CurrentUser = Annotated[SessionClaims, Depends(get_current_user)]
