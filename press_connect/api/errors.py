from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from loguru import logger

from press_connect.shared.api.utils import E_INVALID_PARAMS, ApiFailure, api_failure, make_response
from press_connect.utils.app_errors import AppError


async def app_error_handler(request: Request, exc: AppError) -> ORJSONResponse:
    """
    Custom exception handler for AppError.
    Converts AppError to ApiFailure and returns via make_response.
    """
    # Log with the caller info captured when AppError was raised
    log_msg = f"{exc.errcode} {exc.erresid} msg={exc.errmesg} caller={exc.caller_info}"
    if exc.status_code >= 500:
        logger.error(log_msg)
    else:
        logger.warning(log_msg)

    failure = ApiFailure(errcode=exc.errcode, errmesg=exc.errmesg, erresid=exc.erresid, **exc.extra)
    return make_response(failure, status_code=exc.status_code)


async def app_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> ORJSONResponse:
    errors = exc.errors()

    logger.warning(
        "Validation error: path={} method={} errors={}",
        request.url.path,
        request.method,
        errors,
    )

    fields = ", ".join(".".join(str(p) for p in err.get("loc", ())[1:]) or "body" for err in errors)
    failure = api_failure(E_INVALID_PARAMS, errmesg=f"Invalid request parameters: {fields}")

    return ORJSONResponse(status_code=422, content=failure.model_dump())
