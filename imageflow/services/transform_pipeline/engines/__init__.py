# imageflow/services/transform_pipeline/engines/__init__.py
"""
Image Engines

Interchangeable pixel backends behind the ``ImageEngine`` contract.
"""

from .base_engine import ImageEngine
from .opencv_engine import OpenCVEngine
from .pillow_engine import PillowEngine
from .registry import ENGINE_REGISTRY, available_engines, get_engine_class

__all__ = [
    "ImageEngine",
    "PillowEngine",
    "OpenCVEngine",
    "ENGINE_REGISTRY",
    "get_engine_class",
    "available_engines",
]
