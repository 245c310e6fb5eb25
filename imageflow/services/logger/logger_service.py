# imageflow/services/logger/logger_service.py
"""
Centralized Logger Service for imageflow.

Thin, type-safe layer over loguru:
- Console sink with level colours and source/logger-name columns
- Optional rotating file sink
- Service loggers pre-bound to a LoggerName/LogSource pair
- Emoji priority system (direct > instance default > level fallback)
"""

import sys
from typing import Any, Dict, Optional

from loguru import logger

from ...config import Settings, get_settings
from ...enums import LogEmoji, LoggerName, LogLevel, LogSource
from .constants import (
    CONSOLE_CONTEXT_INDENTATION,
    CONSOLE_FORMAT,
    CONSOLE_MAX_CONTEXT_ITEMS,
    DEFAULT_EXTRA,
    FILE_FORMAT,
    FILE_RETENTION,
    PRIORITY_CONTEXT_KEYS,
)

# Service loggers work even before configure_logging() runs
logger.configure(extra=dict(DEFAULT_EXTRA))


def format_context_preview(context: Optional[Dict[str, Any]]) -> str:
    """
    Format the most interesting context items as a short ``key=value`` list.

    Args:
        context: Context dictionary attached to a log call

    Returns:
        Comma-separated preview, or an empty string when there is nothing to show
    """
    if not context:
        return ""

    preview_items = []
    for key in PRIORITY_CONTEXT_KEYS:
        if key in context:
            preview_items.append(f"{key}={context[key]}")
            if len(preview_items) >= CONSOLE_MAX_CONTEXT_ITEMS:
                return ", ".join(preview_items)

    for key, value in context.items():
        if key in PRIORITY_CONTEXT_KEYS:
            continue
        preview_items.append(f"{key}={value}")
        if len(preview_items) >= CONSOLE_MAX_CONTEXT_ITEMS:
            break

    return ", ".join(preview_items)


def _console_format(record) -> str:
    """Console format with an optional context preview line."""
    preview = format_context_preview(record["extra"].get("context"))
    line = CONSOLE_FORMAT
    if preview:
        # Escape braces so loguru does not treat context values as fields
        escaped = preview.replace("{", "{{").replace("}", "}}").replace("<", r"\<")
        line += f"\n<dim>{CONSOLE_CONTEXT_INDENTATION}{escaped}</dim>"
    return line + "\n{exception}"


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Install the console sink and, when configured, the rotating file sink.

    Args:
        settings: Application settings (defaults to the cached environment settings)
    """
    settings = settings or get_settings()
    level = settings.log_level.value

    logger.remove()
    logger.configure(extra=dict(DEFAULT_EXTRA))
    logger.add(
        sys.stderr,
        level=level,
        format=_console_format,
        colorize=sys.stderr.isatty(),
        backtrace=settings.environment == "development",
        diagnose=False,
    )

    if settings.log_file:
        logger.add(
            settings.log_file,
            level=level,
            format=FILE_FORMAT,
            rotation=settings.log_rotation,
            retention=FILE_RETENTION,
            encoding="utf-8",
            enqueue=False,
        )


def get_service_logger(
    logger_name: LoggerName,
    source: LogSource = LogSource.SYSTEM,
    default_emoji: Optional[LogEmoji] = None,
):
    """
    Factory function to create a pre-configured logger for a specific service.

    Returns a logger with simplified methods that automatically bind the
    source and logger_name for every call.

    Emoji priority system (highest to lowest):
    1. Direct: Emoji passed directly to log method call
    2. Instance-set: Default emoji set when creating the service logger
    3. Fallback: Default emoji based on log level

    Args:
        logger_name: The logger name enum to use for all calls
        source: The log source enum to use for all calls (defaults to SYSTEM)
        default_emoji: Instance-level default emoji that overrides level-based fallbacks

    Returns:
        ServiceLogger instance with error, warning, info, debug methods

    Example:
        logger = get_service_logger(LoggerName.TRANSFORM_PIPELINE, LogSource.PIPELINE)
        logger.debug("Resized image", extra_context={"width": 400})
    """

    def _resolve_emoji(
        method_emoji: Optional[LogEmoji], fallback_emoji: LogEmoji
    ) -> LogEmoji:
        if method_emoji is not None:
            return method_emoji
        if default_emoji is not None:
            return default_emoji
        return fallback_emoji

    bound = logger.bind(source=source.value, logger_name=logger_name.value)

    def _emit(
        level: LogLevel,
        message: str,
        emoji: LogEmoji,
        extra_context: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
    ) -> None:
        target = bound.bind(context=dict(extra_context or {}))
        if exception is not None:
            target = target.opt(exception=exception)
        target.log(level.value, f"{emoji.value} {message}")

    class ServiceLogger:
        name = logger_name
        log_source = source

        @staticmethod
        def error(
            message: str,
            exception: Optional[BaseException] = None,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ) -> None:
            """Log an error with emoji priority system."""
            _emit(
                LogLevel.ERROR,
                message,
                _resolve_emoji(emoji, LogEmoji.ERROR),
                extra_context,
                exception,
            )

        @staticmethod
        def warning(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ) -> None:
            """Log a warning with emoji priority system."""
            _emit(
                LogLevel.WARNING,
                message,
                _resolve_emoji(emoji, LogEmoji.WARNING),
                extra_context,
            )

        @staticmethod
        def info(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ) -> None:
            """Log an info message with emoji priority system."""
            _emit(
                LogLevel.INFO,
                message,
                _resolve_emoji(emoji, LogEmoji.INFO),
                extra_context,
            )

        @staticmethod
        def debug(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ) -> None:
            """Log a debug message with emoji priority system."""
            _emit(
                LogLevel.DEBUG,
                message,
                _resolve_emoji(emoji, LogEmoji.DEBUG),
                extra_context,
            )

    return ServiceLogger()
