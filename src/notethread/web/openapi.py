from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

# Routes callable without authentication; an optional token is still honoured
PUBLIC_ENDPOINTS = {
    ("POST", "/api/v1/auth/login"),
    ("GET", "/api/v1/notes/{note_id}"),
    ("GET", "/api/v1/notes/{note_id}/comments"),
    ("POST", "/api/v1/notes/{note_id}/comments"),
    ("GET", "/health"),
}


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="NoteThread API",
            version="0.1.0",
            summary="Threaded comments on published notes, for accounts and guests",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "description": "Bearer token authentication (preferred)",
            },
            "AuthTokenCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": "auth_token",
                "description": "Authentication token stored in cookie",
            },
        }

        # Apply security globally (overridden for public endpoints)
        openapi_schema["security"] = [
            {"BearerAuth": []},
            {"AuthTokenCookie": []},
        ]

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in PUBLIC_ENDPOINTS:
                    # Authentication optional: anonymous access allowed
                    operation["security"] = [{}, {"BearerAuth": []}, {"AuthTokenCookie": []}]

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Invalid credentials", "type": "authentication_error"},
                {"message": "Comment not found or no permission", "type": "not_found"},
                {"message": "Admin privileges required", "type": "access_denied"},
            ]
        }
    }
