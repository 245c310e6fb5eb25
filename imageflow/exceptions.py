# imageflow/exceptions.py
"""
Custom exceptions for imageflow.

Centralized location for the application-wide exception classes. Errors
specific to the transform pipeline live in
``imageflow.services.transform_pipeline.exceptions`` and derive from
``ImageflowError`` as well.
"""


class ImageflowError(Exception):
    """Base exception for all imageflow-specific errors."""

    pass


class FileOperationError(ImageflowError):
    """Custom exception for file system operation failures."""

    pass
