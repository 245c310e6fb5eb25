# imageflow/utils/file_helpers.py
"""
File helper functions for safe path handling.
"""

from pathlib import Path
from typing import Union

from fastapi import HTTPException

from ..enums import LogEmoji, LoggerName, LogSource
from ..services.logger import get_service_logger

logger = get_service_logger(LoggerName.SYSTEM, LogSource.API)


def validate_file_path(
    file_path: str, base_directory: Union[str, Path], must_exist: bool = True
) -> Path:
    """
    Validate and resolve a file path with security checks.

    Args:
        file_path: File path relative to ``base_directory``
        base_directory: Directory the path must stay inside
        must_exist: Whether the path must point at an existing file

    Returns:
        Resolved and validated Path object

    Raises:
        HTTPException: 403 for path traversal attempts, 404 if file not found
    """
    base_path = Path(base_directory).resolve()
    full_path = (base_path / file_path.lstrip("/")).resolve()

    # Security check: ensure path is within allowed directory
    try:
        full_path.relative_to(base_path)
    except ValueError:
        logger.warning(
            f"Path traversal attempt detected: {file_path}",
            emoji=LogEmoji.SECURITY,
            extra_context={
                "operation": "file_validation",
                "file_path": file_path,
                "base_directory": str(base_path),
            },
        )
        raise HTTPException(status_code=403, detail="Access denied")

    if must_exist and not full_path.is_file():
        raise HTTPException(status_code=404, detail="Image not found")

    return full_path
