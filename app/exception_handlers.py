"""
Global Exception Handlers

Error Response Format:
{
    "error": {
        "status_code": 404,
        "message": "Topic with id '123' not found",
        "type": "Not Found",
        "details": {"resource_type": "Topic", "resource_id": 123},
        "path": "/api/v1/topics/123"
    }
}
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.exceptions import ForumException

logger = logging.getLogger(__name__)


def get_error_type(status_code: int) -> str:
    """Get a human-readable error type based on status code."""
    error_types = {
        400: "Bad Request",
        401: "Unauthorized",
        403: "Forbidden",
        404: "Not Found",
        409: "Conflict",
        422: "Validation Error",
        500: "Internal Server Error",
    }
    return error_types.get(status_code, "Error")


def create_error_response(
    status_code: int,
    message: str,
    details: dict[str, Any] | None = None,
    path: str | None = None,
) -> JSONResponse:
    error_response: dict[str, Any] = {
        "error": {
            "status_code": status_code,
            "message": message,
            "type": get_error_type(status_code),
        }
    }
    if details:
        error_response["error"]["details"] = details
    if path:
        error_response["error"]["path"] = path

    return JSONResponse(status_code=status_code, content=error_response)


async def forum_exception_handler(request: Request, exc: ForumException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    else:
        logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return create_error_response(exc.status_code, exc.message, exc.details, request.url.path)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ForumException, forum_exception_handler)
