# imageflow/services/transform_pipeline/__init__.py
"""
Transform Pipeline Module

Operation parsing, dimension resolution, responsive selection and the
image engines behind the ``TransformPipeline`` facade.
"""

from .engines import (
    ImageEngine,
    OpenCVEngine,
    PillowEngine,
    available_engines,
    get_engine_class,
)
from .exceptions import (
    BackendSelectionError,
    DecodeError,
    EngineOperationError,
    EngineUnavailableError,
    InvalidDimensionError,
    InvalidOperationError,
    NoEngineAvailableError,
    OutputError,
    ParseError,
    TransformPipelineError,
    UnknownEngineError,
    UnreadableImageError,
    UnsupportedFormatError,
)
from .transform_pipeline import TransformPipeline
from .utils import (
    ClientMetrics,
    Operation,
    get_responsive_operations,
    parse_operations,
    resolve_position,
    resolve_resize_dimensions,
    resolve_size,
)

__all__ = [
    # Facade
    "TransformPipeline",
    # Engines
    "ImageEngine",
    "PillowEngine",
    "OpenCVEngine",
    "get_engine_class",
    "available_engines",
    # Parsing and resolution
    "Operation",
    "parse_operations",
    "ClientMetrics",
    "get_responsive_operations",
    "resolve_size",
    "resolve_position",
    "resolve_resize_dimensions",
    # Exceptions
    "TransformPipelineError",
    "ParseError",
    "InvalidOperationError",
    "InvalidDimensionError",
    "BackendSelectionError",
    "NoEngineAvailableError",
    "UnknownEngineError",
    "EngineUnavailableError",
    "DecodeError",
    "UnreadableImageError",
    "EngineOperationError",
    "UnsupportedFormatError",
    "OutputError",
]
