"""
Error handling utilities for standardized error responses.

Standard Error Response Format:
{
    "detail": {
        "code": "ERROR_CODE",
        "message": "Human readable message"
    }
}

Typed errors from the Engine Client and the Association Store are turned
into responses by the exception handlers installed with
register_exception_handlers(); handlers themselves only raise.
"""
from enum import Enum
from typing import Optional, Dict, Any, Tuple, Type
from loguru import logger
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from tribler_arr_shim.exceptions import (
    CategoryNotFound,
    ConfigurationError,
    DecodeError,
    NotFound,
    RemoteEngineError,
    ShimError,
    TransportError,
)


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Not found errors (404)
    NOT_FOUND = "NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"

    # Configuration errors
    CONFIG_ERROR = "CONFIG_ERROR"


# Exception kind -> (HTTP status, error code). Checked in order, first match wins.
ERROR_STATUS: Tuple[Tuple[Type[Exception], int, ErrorCode], ...] = (
    (ConfigurationError, 500, ErrorCode.CONFIG_ERROR),
    (TransportError, 503, ErrorCode.SERVICE_UNAVAILABLE),
    (RemoteEngineError, 502, ErrorCode.EXTERNAL_SERVICE_ERROR),
    (DecodeError, 500, ErrorCode.EXTERNAL_SERVICE_ERROR),
    (NotFound, 404, ErrorCode.NOT_FOUND),
    (CategoryNotFound, 409, ErrorCode.RESOURCE_NOT_FOUND),
)


def create_error_response(
    code: ErrorCode,
    message: str,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Create a standardized error response dict.

    Args:
        code: Error code enum value
        message: Human-readable error message
        details: Optional additional details

    Returns:
        Error response dict suitable for HTTPException detail
    """
    response = {
        "code": code.value,
        "message": message
    }
    if details:
        response["details"] = details
    return response


def raise_error(
    code: ErrorCode,
    message: str,
    status_code: int = 500,
    details: Optional[Dict[str, Any]] = None,
    log: bool = True
) -> None:
    """
    Raise a standardized HTTP exception.

    Args:
        code: Error code enum value
        message: Human-readable error message
        status_code: HTTP status code
        details: Optional additional details
        log: Whether to log the error (default True)
    """
    if log:
        logger.error(f"API Error [{code.value}]: {message}")

    raise HTTPException(
        status_code=status_code,
        detail=create_error_response(code, message, details)
    )


def classify_error(error: ShimError) -> Tuple[int, ErrorCode]:
    """HTTP status and error code for a translation-layer error."""
    for kind, status_code, code in ERROR_STATUS:
        if isinstance(error, kind):
            return status_code, code
    return 500, ErrorCode.INTERNAL_ERROR


async def shim_error_handler(request: Request, error: ShimError) -> JSONResponse:
    status_code, code = classify_error(error)
    details = None
    if isinstance(error, RemoteEngineError):
        details = {"remote_status": error.status, "remote_status_line": error.status_line}

    log = logger.warning if status_code < 500 else logger.error
    log(f"{request.method} {request.url.path} -> {status_code} [{code.value}]: {type(error).__name__}: {error}")

    return JSONResponse(
        status_code=status_code,
        content={"detail": create_error_response(code, str(error), details)}
    )


async def database_error_handler(request: Request, error: SQLAlchemyError) -> JSONResponse:
    # Never echo SQL back to the client
    logger.error(f"{request.method} {request.url.path} database error: {type(error).__name__}: {error}")
    return JSONResponse(
        status_code=500,
        content={"detail": create_error_response(ErrorCode.DATABASE_ERROR, "Database error. Please check logs for details.")}
    )


def register_exception_handlers(app: FastAPI):
    """Install the translation-layer exception handlers on ``app``."""
    app.add_exception_handler(ShimError, shim_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
