"""Map provider failures onto application errors."""

from press_connect.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .provider import ProviderError

QUOTA_REASONS = frozenset(
    {"quotaExceeded", "rateLimitExceeded", "userRateLimitExceeded", "dailyLimitExceeded"}
)


def is_quota_error(error: ProviderError) -> bool:
    if error.status_code not in (403, 429):
        return False
    if error.reason in QUOTA_REASONS:
        return True
    return "quota" in (error.message or "").lower()


def translate_provider_error(error: ProviderError) -> AppError:
    """
    Classify a provider failure.

    Quota is checked before auth: YouTube reports quota exhaustion as 403, which
    would otherwise read as a revoked token.
    """
    if is_quota_error(error):
        return AppError(
            errcode=AppErrorCode.E_QUOTA_EXCEEDED,
            errmesg="YouTube API quota exceeded. Please try again later.",
            status_code=HttpStatusCode.TOO_MANY_REQUESTS,
        )
    if error.status_code in (401, 403):
        return reauth_required("YouTube authentication failed. Please re-authenticate with YouTube.")
    return AppError(
        errcode=AppErrorCode.E_REMOTE_ERROR,
        errmesg="Failed to create YouTube stream",
        status_code=HttpStatusCode.BAD_GATEWAY,
    )


def reauth_required(
    errmesg: str = "Valid YouTube OAuth token required. Please re-authenticate with YouTube.",
) -> AppError:
    return AppError(
        errcode=AppErrorCode.E_PROVIDER_REAUTH_REQUIRED,
        errmesg=errmesg,
        status_code=HttpStatusCode.UNAUTHORIZED,
        extra={"requires_reauth": True},
    )
