# imageflow/__init__.py
"""
imageflow - declarative image transformations with responsive operation selection.
"""

from .services.transform_pipeline import (
    TransformPipeline,
    get_responsive_operations,
)

__version__ = "0.4.0"

__all__ = ["TransformPipeline", "get_responsive_operations", "__version__"]
