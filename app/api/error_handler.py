# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

import logging
import re

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from domain.errors import (
    ConcurrentModificationError,
    PersistenceError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)


def custom_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Centralized exception handler for FastAPI routes.
    Maps domain exceptions to appropriate HTTP status codes and returns consistent error responses.

    Args:
        request: The incoming request object.
        exc: The exception object.

    Returns:
        JSONResponse with appropriate status code and error message.
    """
    try:
        body_str = request._body.decode("utf-8") if hasattr(request, "_body") and request._body else ""
    except Exception:
        body_str = "<unable to read body>"

    if isinstance(exc, ResourceNotFoundError):
        _log_handled(request, exc, body_str)
        message = str(exc) if str(exc) else "The requested resource was not found."
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": message})

    if isinstance(exc, ResourceAlreadyExistsError | ConcurrentModificationError):
        _log_handled(request, exc, body_str)
        message = str(exc) if str(exc) else "A conflict occurred with the current state of the resource."
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": message})

    if isinstance(exc, RequestValidationError):
        return _handle_validation_error(request, exc, body_str)

    if isinstance(exc, PersistenceError | ValidationError | ValueError):
        _log_handled(request, exc, body_str)
        message = str(exc) if str(exc) else "Invalid request. Please check your input and try again."
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})

    if isinstance(exc, IntegrityError):
        logger.error(f"Unhandled IntegrityError in endpoint: {exc}", exc_info=exc)
        message = "Database constraint violation. Please check your input."
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})

    logger.error(
        f"Internal error for {request.method} {request.url.path}: "
        f"{type(exc).__name__}: {str(exc)}. "
        f"Headers: {dict(request.headers)}. Body: {body_str}",
        exc_info=exc,
    )
    message = "An internal server error occurred. Please try again later or contact support for assistance."
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": message})


def _log_handled(request: Request, exc: Exception, body_str: str) -> None:
    logger.debug(
        f"Exception handler called: {request.method} {request.url.path} "
        f"raised {type(exc).__name__}: {str(exc)}. Body: {body_str}"
    )


# leading request location of an error loc
_REQUEST_LOCATIONS = {"body", "query", "path"}

_SQLITE_CONSTRAINT_FAILED = re.compile(r"(?:unique|check|not null) constraint failed:\s*(.+)$", re.MULTILINE)


def _handle_validation_error(request: Request, exc: RequestValidationError, body_str: str) -> JSONResponse:
    """
    Turn request validation errors into one readable 400 response.

    Each error is reported as `Field '<dotted path>'`, e.g. `Field 'parameters.0.name' is required.`
    """
    errors = exc.errors()
    logger.debug(f"Validation error for {request.method} {request.url.path}: {errors}. Body: {body_str}")

    error_messages = []
    for error in errors:
        loc = [str(part) for part in error["loc"]]
        if len(loc) > 1 and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        field_path = ".".join(loc)
        if error["type"] == "missing":
            error_messages.append(f"Field '{field_path}' is required.")
        else:
            error_messages.append(f"Field '{field_path}': {error['msg']}")

    detail = " ".join(error_messages) or "Invalid request data."
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


def extract_constraint_name(error_msg: str) -> str | None:
    """
    Return what a SQLite IntegrityError message names as the failed constraint.

    Named CHECK constraints are reported by name (`ck_data_processor_description_length`),
    UNIQUE and NOT NULL failures by their columns (`processor_parameter.data_processor_id, processor_parameter.name`).
    Foreign key failures name nothing and yield None.
    """
    match = _SQLITE_CONSTRAINT_FAILED.search(error_msg.lower())
    return match.group(1).strip() if match else None
