# imageflow/services/transform_pipeline/engines/base_engine.py
"""
Base Image Engine - Abstract interface for all pixel backends.

Defines the contract that every engine must implement (decode, encode,
geometry, format) and provides the state shared by all engines:
compression quality, background colour and the animation flag.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from ....enums import CropMode
from ..exceptions import UnsupportedFormatError
from ..utils.constants import DEFAULT_BACKGROUND, FORMAT_ALIASES, FORMAT_MIME_TYPES
from ..utils.image_utils import rgb_to_bw
from ..utils.smart_crop import get_smart_crop_offsets

PathLike = Union[str, Path]


class ImageEngine(ABC):
    """
    Abstract base class for image engines.

    An engine instance owns exactly one decoded image and mutates it in
    place. Instances are never shared between pipelines.
    """

    name: str = ""

    def __init__(self, output_format: Optional[str] = None):
        self.output_format = output_format or "PNG"
        self.quality: Optional[int] = None
        self.background: Tuple[int, int, int] = DEFAULT_BACKGROUND
        self.animated = False

    # ---- Construction ----

    @classmethod
    @abstractmethod
    def is_available(cls) -> bool:
        """Check whether the engine's native library can run here."""
        pass

    @classmethod
    @abstractmethod
    def create_from_file(cls, path: PathLike) -> "ImageEngine":
        """Decode an image file. Raises UnreadableImageError on failure."""
        pass

    @classmethod
    @abstractmethod
    def create_from_bytes(cls, data: bytes) -> "ImageEngine":
        """Decode in-memory image data. Raises UnreadableImageError on failure."""
        pass

    # ---- Output ----

    @abstractmethod
    def save(self, path: PathLike) -> None:
        pass

    @abstractmethod
    def get_bytes(self) -> bytes:
        pass

    def get_mime_type(self) -> str:
        return FORMAT_MIME_TYPES.get(self.output_format, "application/octet-stream")

    # ---- Geometry ----

    @abstractmethod
    def get_width(self) -> int:
        pass

    @abstractmethod
    def get_height(self) -> int:
        pass

    @abstractmethod
    def resize(self, width: int, height: int) -> None:
        pass

    @abstractmethod
    def crop(self, width: int, height: int, x: int, y: int) -> None:
        """Crop to ``width``×``height`` at (x, y); uncovered areas get the background."""
        pass

    @abstractmethod
    def rotate(self, angle: int) -> None:
        """Rotate counter-clockwise by ``angle`` degrees, expanding the canvas."""
        pass

    @abstractmethod
    def flip(self) -> None:
        """Mirror vertically."""
        pass

    @abstractmethod
    def flop(self) -> None:
        """Mirror horizontally."""
        pass

    @abstractmethod
    def get_grayscale(self) -> np.ndarray:
        """Return the current image as a 2D float luma array."""
        pass

    # ---- Settings ----

    def format(self, format_name: str) -> None:
        self.output_format = self.normalize_format(format_name)

    def set_compression_quality(self, quality: int) -> None:
        self.quality = quality

    def set_background(self, background: Sequence[int]) -> None:
        red, green, blue = (max(0, min(255, int(value))) for value in background)
        self.background = (red, green, blue)

    def set_animated(self, animated: bool) -> None:
        self.animated = bool(animated)

    def get_crop_offsets(self, width: int, height: int, mode: CropMode) -> Tuple[int, int]:
        """Compute smart-crop (x, y) offsets for a ``width``×``height`` crop."""
        return get_smart_crop_offsets(self.get_grayscale(), width, height, mode)

    # ---- Helpers ----

    @staticmethod
    def normalize_format(format_name: str) -> str:
        """
        Map a user-facing format name (jpg, png, webp...) to the engine name.

        Raises:
            UnsupportedFormatError: for unknown formats
        """
        normalized = FORMAT_ALIASES.get(str(format_name).strip().lower())
        if normalized is None:
            raise UnsupportedFormatError(f"Unsupported image format: '{format_name}'")
        return normalized

    def background_luma(self) -> int:
        return int(round(rgb_to_bw(*self.background)))
