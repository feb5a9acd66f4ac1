"""Exceptions and FastAPI error handlers."""

import logging
from typing import List, Optional

import pydantic
from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class DiscordAPIError(Exception):
    """A Discord endpoint answered with a non-success status."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        self.message = message or f"HTTP {status_code}"
        super().__init__(self.message)


class FileStorageError(Exception):
    """Every configured backend refused the operation."""

    def __init__(self, message: str, errors: Optional[List[str]] = None, configured: bool = True):
        self.errors = errors or []
        self.configured = configured
        super().__init__(message)


class FileNotFoundInStoreError(Exception):
    """The file id is unknown or its backend confirmed the payload is gone."""

    def __init__(self, file_id: str):
        self.file_id = file_id
        super().__init__(f"File '{file_id}' not found")


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception as e:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Internal server error"},
        )


async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    errors = exc.errors()
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": [
                {
                    "msg": error["msg"],
                    "input": error["input"],
                }
                for error in errors
            ]
        },
    )
