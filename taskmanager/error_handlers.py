"""
Error Translator
================

Maps failures to HTTP error responses:

- NOT_FOUND          -> 404
- VALIDATION_FAILED  -> 400, field messages joined with ", "
- anything else      -> 500, raw exception message in ``details``

The 500 body exposes the underlying message as-is.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .errors import ErrorKind, TaskError
from .models import ErrorResponse

logger = logging.getLogger(__name__)

NOT_FOUND_DETAILS = "The requested task does not exist in the database"
INTERNAL_ERROR_MESSAGE = "Internal server error"

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION_FAILED: 400,
    ErrorKind.UNCLASSIFIED: 500,
}


def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> List[str]:
    """
    Turn pydantic error entries into "field: message" strings.

    The leading location part ("body", "path", "query") is dropped.
    """
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "path", "query", "header"):
            loc = loc[1:]
        field_name = ".".join(loc)
        msg = error.get("msg", "Invalid value")
        messages.append(f"{field_name}: {msg}" if field_name else msg)
    return messages


class ErrorTranslator:
    """Stateless classification of errors into status code and body."""

    def __init__(self, clock=None):
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def translate(self, error: TaskError) -> Tuple[int, ErrorResponse]:
        """Pick the status code and build the error body for a TaskError."""
        status_code = STATUS_BY_KIND.get(error.kind, 500)

        if error.kind == ErrorKind.NOT_FOUND:
            message, details = error.message, NOT_FOUND_DETAILS
        elif error.kind == ErrorKind.VALIDATION_FAILED:
            message, details = error.message, ", ".join(error.field_messages)
        else:
            message, details = INTERNAL_ERROR_MESSAGE, error.message

        body = ErrorResponse(message=message, timestamp=self.clock(), details=details)
        return status_code, body

    def to_response(self, error: TaskError) -> JSONResponse:
        status_code, body = self.translate(error)
        return JSONResponse(
            status_code=status_code,
            content=body.model_dump(mode="json"),
        )

    # ==================== FastAPI handlers ====================

    async def handle_validation_error(
        self, request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = format_validation_errors(exc.errors())
        logger.info(f"Validation failed for {request.method} {request.url.path}: {messages}")
        return self.to_response(TaskError.validation_failed(messages))

    async def handle_unexpected_error(self, request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            exc_info=exc
        )
        return self.to_response(TaskError.unclassified(exc))

    def register(self, app: FastAPI):
        """Install the handlers on an application."""
        app.add_exception_handler(RequestValidationError, self.handle_validation_error)
        app.add_exception_handler(Exception, self.handle_unexpected_error)
