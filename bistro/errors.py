"""
Domain errors and their HTTP rendering.

Every error the API returns on purpose has the body ``{"message": ..., "field": ...}``
with ``field`` omitted when the error is not tied to a single input.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


class ApiError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_body(self) -> dict:
        body = {"message": self.message}
        if self.field is not None:
            body["field"] = self.field
        return body


class ValidationFailed(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class StateConflict(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: str = "status") -> None:
        super().__init__(message, field)


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str) -> None:
        super().__init__(message)


def first_error_body(errors: list[dict]) -> dict:
    """Render the first pydantic error as ``{message, field}``."""
    if not errors:
        return {"message": "Invalid request"}
    error = errors[0]
    ctx = error.get("ctx") or {}
    # Plain ValueErrors raised by our validators carry the readable text in ctx
    message = str(ctx["error"]) if "error" in ctx else error["msg"]
    location = [str(part) for part in error.get("loc", ())]
    # Path ids are reported as "id" whatever the route calls them
    if len(location) > 1 and location[0] == "path":
        return {"message": f"Invalid {location[1].removesuffix('_id')} id", "field": "id"}
    if location and location[0] in _LOCATION_PREFIXES:
        location = location[1:]
    body = {"message": message}
    if location:
        body["field"] = ".".join(location)
    return body


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    body = first_error_body(list(exc.errors()))
    logger.info(
        "Rejected invalid request",
        extra={"path": request.url.path, "field": body.get("field"), "reason": body["message"]},
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


async def _pydantic_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=first_error_body(list(exc.errors())),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error while serving request",
        extra={"path": request.url.path, "request_id": getattr(request.state, "request_id", None)},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(ValidationError, _pydantic_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
