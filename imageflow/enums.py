# imageflow/enums.py
"""
Application Enums - Centralized enum definitions.

All enums live here so that constants, config and the pipeline modules can
import them without creating circular dependencies.
"""

from enum import Enum


# =============================================================================
# TRANSFORM PIPELINE
# =============================================================================


class OperationName(str, Enum):
    """Operations accepted by the transform mini-language (case-sensitive)."""

    RESIZE = "resize"
    RESIZE_CROP = "resizeCrop"
    CROP = "crop"
    FORMAT = "format"


class Anchor(str, Enum):
    """Named crop/position anchors. x-axis: left/center/right, y-axis: top/middle/bottom."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


class CropMode(str, Enum):
    """Smart-crop modes, only valid as the x position of a crop."""

    ENTROPY = "Entropy"
    BALANCED = "Balanced"


class EngineName(str, Enum):
    """Registered image engine identifiers."""

    PILLOW = "pillow"
    OPENCV = "opencv"


class ResponsiveRuleKey(str, Enum):
    """Constraint keys understood by the responsive operation selector."""

    MAX_WIDTH = "max-width"
    MIN_WIDTH = "min-width"
    WIDTH = "width"
    MAX_HEIGHT = "max-height"
    MIN_HEIGHT = "min-height"
    HEIGHT = "height"


# =============================================================================
# LOGGING SYSTEM
# =============================================================================


class LogLevel(str, Enum):
    """Log level constants for centralized logging system."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogSource(str, Enum):
    """Log source constants for identifying log origins."""

    API = "api"
    SYSTEM = "system"
    PIPELINE = "pipeline"
    ENGINE = "engine"
    MIDDLEWARE = "middleware"


class LoggerName(str, Enum):
    """Logger name constants for categorizing log entries."""

    # API/Request loggers
    REQUEST_LOGGER = "request_logger"
    ERROR_HANDLER = "error_handler"

    # Pipeline loggers
    TRANSFORM_PIPELINE = "transform_pipeline"
    RESPONSIVE_FILTER = "responsive_filter"

    # Engine loggers
    PILLOW_ENGINE = "pillow_engine"
    OPENCV_ENGINE = "opencv_engine"
    ENGINE_REGISTRY = "engine_registry"

    # System loggers
    SYSTEM = "system"


class LogEmoji(str, Enum):
    """Type-safe emoji constants for log messages."""

    # Request/Response emojis
    INCOMING = "📥"
    OUTGOING = "📤"

    # Status emojis
    SUCCESS = "✅"
    FAILED = "❌"
    ERROR = "❌"
    WARNING = "⚠️"
    INFO = "ℹ️"
    DEBUG = "🐞"
    CRITICAL = "☠️"
    SKIPPED = "⏭️"

    # Work emojis
    PROCESSING = "🔄"
    IMAGE = "🖼️"
    CROP = "✂️"
    ROTATE = "🔃"
    SAVE = "💾"
    SECURITY = "🔒"
    SYSTEM = "🖥️"
    STARTUP = "🚀"
    SHUTDOWN = "🛑"
