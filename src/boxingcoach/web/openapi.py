from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

# Endpoints reachable without a bearer token
PUBLIC_ENDPOINTS = {
    ("GET", "/health"),
    ("GET", "/api/v1"),
    ("GET", "/api/v1/auth/test"),
    ("POST", "/api/v1/auth/signup"),
    ("POST", "/api/v1/auth/login"),
}


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Boxing Coach API",
            version="1.0.0",
            summary="Boxing training tracker with JWT authentication",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
                "description": "Token returned by signup, login or refresh",
            },
        }

        # Apply security globally (overridden for public endpoints)
        openapi_schema["security"] = [{"BearerAuth": []}]

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in PUBLIC_ENDPOINTS:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"error": "Access token required", "type": "authentication_error"},
                {"error": "Invalid or expired token", "type": "invalid_token"},
                {"error": "Session not found", "type": "not_found"},
            ]
        }
    }
