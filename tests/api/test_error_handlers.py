"""Tests for AppError rendering into the failure envelope."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from press_connect.api.errors import app_error_handler
from press_connect.utils.app_errors import AppError, AppErrorCode, HttpStatusCode, not_found


def make_client(exc: AppError) -> TestClient:
    app = FastAPI()
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]

    @app.get("/fail")
    async def fail():
        raise exc

    return TestClient(app)


class TestAppErrorHandler:
    def test_envelope_and_status(self):
        error = AppError(
            errcode=AppErrorCode.E_CONFLICT,
            errmesg="Stream already exists",
            status_code=HttpStatusCode.CONFLICT,
        )

        response = make_client(error).get("/fail")

        assert response.status_code == 409
        body = response.json()
        assert body == {
            "version": body["version"],
            "success": False,
            "errcode": "E_CONFLICT",
            "erresid": error.erresid,
            "errmesg": "Stream already exists",
        }

    def test_extra_fields_merged(self):
        response = make_client(not_found("se_x")).get("/fail")

        assert response.status_code == 404
        assert response.json()["session_key"] == "se_x"

    def test_database_unavailable_is_500(self):
        error = AppError(
            errcode=AppErrorCode.E_DATABASE_UNAVAILABLE,
            errmesg="Database temporarily unavailable",
            status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
        )

        response = make_client(error).get("/fail")

        assert response.status_code == 500
        assert response.json()["errcode"] == "E_DATABASE_UNAVAILABLE"


class TestAppError:
    def test_records_raise_site(self):
        error = not_found("se_x")
        assert "not_found" in error.caller_info or "test_records_raise_site" in error.caller_info
        assert len(error.erresid) == 10
        assert error.errcode == "E_SESSION_NOT_FOUND"
