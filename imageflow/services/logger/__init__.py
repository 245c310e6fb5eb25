# imageflow/services/logger/__init__.py
"""
Centralized Logger Service Module.

Usage:
    from imageflow.services.logger import get_service_logger
    from imageflow.enums import LoggerName, LogSource

    logger = get_service_logger(LoggerName.TRANSFORM_PIPELINE, LogSource.PIPELINE)
    logger.info("Transform applied", extra_context={"operations": "resize,400"})
"""

# Re-export commonly used enums for convenience
from ...enums import LogEmoji, LoggerName, LogLevel, LogSource
from .logger_service import configure_logging, format_context_preview, get_service_logger

__all__ = [
    "configure_logging",
    "format_context_preview",
    "get_service_logger",
    # Enums
    "LogLevel",
    "LogSource",
    "LoggerName",
    "LogEmoji",
]
