# imageflow/services/logger/constants.py
"""
Logger Service Constants

Local constants for the logger service to avoid hardcoded values
and provide centralized configuration for logger-specific settings.
"""

# ====================================================================
# CONSOLE SINK CONSTANTS
# ====================================================================

CONSOLE_FORMAT = (
    "<dim>[{time:YYYY-MM-DD HH:mm:ss}]</dim> "
    "<level>[{level: ^8}]</level> "
    "<dim>({extra[source]: ^8} [{extra[logger_name]: ^9}])</dim> "
    "{message}"
)
CONSOLE_MAX_CONTEXT_ITEMS = 3
CONSOLE_CONTEXT_INDENTATION = "  ↳ "

# ====================================================================
# FILE SINK CONSTANTS
# ====================================================================

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[source]} | {extra[logger_name]} | {message} | {extra[context]}"
)
FILE_RETENTION = "14 days"

# ====================================================================
# DEFAULT BINDINGS
# ====================================================================

DEFAULT_EXTRA = {"source": "system", "logger_name": "system", "context": {}}

# Context keys shown first in console previews
PRIORITY_CONTEXT_KEYS = ["error", "operation", "engine", "source_path", "operations"]
