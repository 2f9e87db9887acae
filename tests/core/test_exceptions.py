"""
Unit tests for the error taxonomy and its HTTP rendering.
"""

from fastapi import FastAPI, Query
from fastapi.testclient import TestClient

from eduportal.core.exceptions import (
    ConflictError,
    NotFoundError,
    RateLimitExceeded,
    ValidationError,
    format_errors,
    register_exception_handlers,
)


def _build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/conflict")
    async def conflict():
        raise ConflictError("Email is already registered")

    @app.get("/limited")
    async def limited():
        raise RateLimitExceeded(5, 60)

    @app.get("/typed")
    async def typed(count: int = Query(...)):
        return {"count": count}

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database exploded")

    return app


class TestErrorClasses:
    def test_not_found_message_includes_id(self):
        error = NotFoundError("Admission", "abc")
        assert error.status_code == 404
        assert error.message == "Admission abc not found"

    def test_not_found_without_id(self):
        assert NotFoundError("Admission").message == "Admission not found"

    def test_validation_error_is_400(self):
        error = ValidationError("Images Required!")
        assert error.status_code == 400
        assert error.error_code == "VALIDATION_ERROR"


class TestFormatErrors:
    def test_strips_location_and_value_error_prefix(self):
        errors = [
            {"loc": ("body", "institution_details", "images"), "msg": "Value error, too few"},
            {"loc": ("query", "limit"), "msg": "Input should be less than or equal to 100"},
        ]
        assert format_errors(errors) == (
            "institution_details.images: too few; limit: Input should be less than or equal to 100"
        )

    def test_empty_errors(self):
        assert format_errors([]) == "Invalid request"


class TestHandlers:
    def setup_method(self):
        self.client = TestClient(_build_app(), raise_server_exceptions=False)

    def test_app_error_body(self):
        response = self.client.get("/conflict")

        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "error": "CONFLICT",
            "message": "Email is already registered",
        }

    def test_rate_limit_sets_retry_after(self):
        response = self.client.get("/limited")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"

    def test_request_validation_maps_to_400(self):
        response = self.client.get("/typed", params={"count": "many"})

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"
        assert response.json()["message"].startswith("count:")

    def test_unknown_route_uses_uniform_body(self):
        response = self.client.get("/missing")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_unhandled_error_hides_details(self):
        response = self.client.get("/boom")

        assert response.status_code == 500
        assert "exploded" not in response.json()["message"]
