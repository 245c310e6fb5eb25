# imageflow/constants.py
"""
Global Constants for imageflow

Centralized location for application constants to avoid hardcoded values
throughout the codebase.
"""

from .enums import EngineName

# =============================================================================
# ENGINE SELECTION
# =============================================================================

# Probe order when no engine is named explicitly
DEFAULT_ENGINE_PREFERENCE = (EngineName.PILLOW.value, EngineName.OPENCV.value)

# =============================================================================
# HTTP SURFACE
# =============================================================================

DEFAULT_CLIENT_METRICS_COOKIE = "imageflow_detection"
DEFAULT_CACHE_MAX_AGE = 86400  # 1 day
TRANSFORM_QUERY_PARAM = "transform"

# =============================================================================
# FILE SCANNING
# =============================================================================

GIF_SCAN_CHUNK_SIZE = 100 * 1024  # 100KB per read
