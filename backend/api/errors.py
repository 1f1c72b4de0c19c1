"""
Exception handling for the API.

Maps the shared exception taxonomy to HTTP status codes. Modules raise
their own subclasses; only the base class decides the status.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.exceptions import (
    VimplError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    LimitExceededError,
    ExternalServiceError,
)
from .models.errors import ErrorResponse

logger = logging.getLogger(__name__)

# Checked in order; first match wins
STATUS_CODES: list[tuple[type[VimplError], int]] = [
    (NotFoundError, 404),
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (ConflictError, 409),
    (LimitExceededError, 403),
    (ExternalServiceError, 502),
]


def status_code_for(exc: VimplError) -> int:
    """HTTP status for an exception; 500 for anything unmapped."""
    for exc_type, code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return 500


async def vimpl_error_handler(request: Request, exc: VimplError) -> JSONResponse:
    """Serialize a VimplError as an ErrorResponse."""
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(**exc.to_dict()).model_dump(),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(VimplError, vimpl_error_handler)
