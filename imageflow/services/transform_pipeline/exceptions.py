# imageflow/services/transform_pipeline/exceptions.py
"""
Transform Pipeline Exception Classes

Specific error types for the different failure modes of the transform
pipeline: operation parsing, dimension resolution, engine selection,
decoding and encoding.
"""

from ...exceptions import FileOperationError, ImageflowError


class TransformPipelineError(ImageflowError):
    """Base exception for transform pipeline operations."""

    pass


class ParseError(TransformPipelineError):
    """Exception raised when an operations string cannot be parsed."""

    pass


class InvalidOperationError(ParseError):
    """Exception raised for an unknown operation name or a wrong parameter count."""

    def __init__(self, message: str, token: str = ""):
        super().__init__(message)
        self.token = token


class InvalidDimensionError(TransformPipelineError):
    """Exception raised when a size or position value cannot be resolved."""

    pass


class BackendSelectionError(TransformPipelineError):
    """Exception raised when no usable image engine can be selected."""

    pass


class NoEngineAvailableError(BackendSelectionError):
    """Exception raised when none of the preferred engines is available."""

    pass


class UnknownEngineError(BackendSelectionError):
    """Exception raised when an engine name is not registered."""

    pass


class EngineUnavailableError(BackendSelectionError):
    """Exception raised when a named engine exists but cannot run here."""

    pass


class DecodeError(TransformPipelineError):
    """Exception raised when the source image cannot be decoded."""

    pass


class UnreadableImageError(DecodeError):
    """Exception raised for corrupt, missing or unsupported image input."""

    pass


class EngineOperationError(TransformPipelineError):
    """Exception raised when an engine cannot perform an operation."""

    pass


class UnsupportedFormatError(EngineOperationError):
    """Exception raised when an output format is not supported by the engine."""

    pass


class OutputError(TransformPipelineError, FileOperationError):
    """Exception raised when the transformed image has nowhere to be written."""

    pass
