# imageflow/utils/router_helpers.py
"""
Router Helper Functions

Standardized error handling for FastAPI endpoints: maps the imageflow
exception hierarchy onto HTTP status codes in one place.
"""

import inspect
from functools import wraps
from typing import Callable

from fastapi import HTTPException

from ..enums import LoggerName, LogSource
from ..services.logger import get_service_logger
from ..services.transform_pipeline.exceptions import (
    BackendSelectionError,
    DecodeError,
    InvalidDimensionError,
    ParseError,
    UnsupportedFormatError,
)

logger = get_service_logger(LoggerName.ERROR_HANDLER, LogSource.API)


def exception_status_code(exc: Exception) -> int:
    """HTTP status code for an imageflow exception."""
    if isinstance(exc, (ParseError, InvalidDimensionError, UnsupportedFormatError)):
        return 400
    if isinstance(exc, DecodeError):
        return 415
    if isinstance(exc, BackendSelectionError):
        return 503
    return 500


def _to_http_exception(operation_name: str, exc: Exception) -> HTTPException:
    status_code = exception_status_code(exc)
    if status_code >= 500:
        logger.error(f"Error {operation_name}: {exc}", exception=exc)
        return HTTPException(status_code=status_code, detail=f"Failed to {operation_name}")

    logger.warning(
        f"Rejected request to {operation_name}: {exc}",
        extra_context={"error_type": type(exc).__name__, "status_code": status_code},
    )
    return HTTPException(status_code=status_code, detail=str(exc))


def handle_exceptions(operation_name: str):
    """
    Decorator for standardized exception handling in router endpoints.

    Works with both ``def`` and ``async def`` endpoints; sync endpoints stay
    sync so FastAPI keeps running them in its threadpool.

    Args:
        operation_name: Human-readable description of the operation for error messages

    Usage:
        @handle_exceptions("transform image")
        def get_image(...):
            ...
    """

    def decorator(func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except HTTPException:
                    raise
                except Exception as e:
                    raise _to_http_exception(operation_name, e) from e

            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except HTTPException:
                raise
            except Exception as e:
                raise _to_http_exception(operation_name, e) from e

        return wrapper

    return decorator
