# imageflow/services/transform_pipeline/engines/opencv_engine.py
"""
OpenCV Image Engine

Pixel backend built on OpenCV and numpy. Images are held as BGR, BGRA or
single-channel uint8 arrays. Only the first frame of animated sources is
decoded.
"""

import math
from pathlib import Path
from typing import List, Optional, Tuple

import cv2
import numpy as np

from ....enums import EngineName, LogEmoji, LoggerName, LogSource
from ...logger import get_service_logger
from ..exceptions import (
    EngineOperationError,
    UnreadableImageError,
    UnsupportedFormatError,
)
from ..utils.image_utils import sniff_format, to_grayscale_array
from .base_engine import ImageEngine, PathLike

logger = get_service_logger(LoggerName.OPENCV_ENGINE, LogSource.ENGINE)

# File extensions used to select the OpenCV encoder
FORMAT_EXTENSIONS = {
    "JPEG": ".jpg",
    "PNG": ".png",
    "GIF": ".gif",
    "WEBP": ".webp",
    "BMP": ".bmp",
    "TIFF": ".tiff",
}

# Highest PNG compression level accepted by OpenCV
PNG_MAX_COMPRESSION = 9


class OpenCVEngine(ImageEngine):
    """Image engine backed by OpenCV."""

    name = EngineName.OPENCV.value

    def __init__(self, pixels: np.ndarray, output_format: Optional[str] = None):
        super().__init__(output_format)
        self.pixels = pixels

    # ---- Construction ----

    @classmethod
    def is_available(cls) -> bool:
        try:
            return bool(cv2.haveImageWriter("probe.jpg") and cv2.haveImageWriter("probe.png"))
        except cv2.error:
            return False

    @classmethod
    def create_from_file(cls, path: PathLike) -> "OpenCVEngine":
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise UnreadableImageError(f"Cannot read image file '{path}': {e}") from e
        return cls.create_from_bytes(data)

    @classmethod
    def create_from_bytes(cls, data: bytes) -> "OpenCVEngine":
        buffer = np.frombuffer(data, dtype=np.uint8)
        try:
            pixels = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED) if buffer.size else None
        except cv2.error as e:
            raise UnreadableImageError(f"Cannot decode image data: {e}") from e

        if pixels is None:
            raise UnreadableImageError("Cannot decode image data")

        return cls(cls._normalize_depth(pixels), output_format=sniff_format(data))

    @staticmethod
    def _normalize_depth(pixels: np.ndarray) -> np.ndarray:
        """Reduce 16-bit and float images to uint8."""
        if pixels.dtype == np.uint8:
            return pixels
        if pixels.dtype == np.uint16:
            return (pixels // 257).astype(np.uint8)
        return cv2.normalize(pixels, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

    # ---- Helpers ----

    @property
    def channels(self) -> int:
        return 1 if self.pixels.ndim == 2 else self.pixels.shape[2]

    def _fill_color(self) -> Tuple[int, ...]:
        red, green, blue = self.background
        if self.channels == 1:
            return (self.background_luma(),)
        if self.channels == 4:
            return (blue, green, red, 255)
        return (blue, green, red)

    def _flattened(self) -> np.ndarray:
        """Composite a BGRA image onto the background colour."""
        if self.channels != 4:
            return self.pixels
        bgr = self.pixels[..., :3].astype(np.float32)
        alpha = self.pixels[..., 3:4].astype(np.float32) / 255.0
        background = np.array(self._fill_color()[:3], dtype=np.float32)
        return np.rint(bgr * alpha + background * (1.0 - alpha)).astype(np.uint8)

    def _encode_params(self) -> List[int]:
        if self.quality is None:
            return []
        if self.output_format == "JPEG":
            return [cv2.IMWRITE_JPEG_QUALITY, self.quality]
        if self.output_format == "WEBP":
            return [cv2.IMWRITE_WEBP_QUALITY, max(1, self.quality)]
        if self.output_format == "PNG":
            level = PNG_MAX_COMPRESSION - round(self.quality * PNG_MAX_COMPRESSION / 100)
            return [cv2.IMWRITE_PNG_COMPRESSION, level]
        return []

    # ---- Output ----

    def save(self, path: PathLike) -> None:
        Path(path).write_bytes(self.get_bytes())
        logger.debug(
            f"Saved image to {path}",
            emoji=LogEmoji.SAVE,
            extra_context={"format": self.output_format},
        )

    def get_bytes(self) -> bytes:
        extension = FORMAT_EXTENSIONS[self.output_format]
        pixels = self._flattened() if self.output_format == "JPEG" else self.pixels
        try:
            ok, encoded = cv2.imencode(extension, pixels, self._encode_params())
        except cv2.error as e:
            raise EngineOperationError(
                f"Failed to encode image as {self.output_format}: {e}"
            ) from e
        if not ok:
            raise EngineOperationError(f"Failed to encode image as {self.output_format}")
        return encoded.tobytes()

    # ---- Geometry ----

    def get_width(self) -> int:
        return int(self.pixels.shape[1])

    def get_height(self) -> int:
        return int(self.pixels.shape[0])

    def resize(self, width: int, height: int) -> None:
        shrinking = width * height < self.get_width() * self.get_height()
        interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_CUBIC
        self.pixels = cv2.resize(self.pixels, (width, height), interpolation=interpolation)

    def crop(self, width: int, height: int, x: int, y: int) -> None:
        image_height, image_width = self.pixels.shape[:2]
        inside = x >= 0 and y >= 0 and x + width <= image_width and y + height <= image_height
        if inside:
            self.pixels = self.pixels[y : y + height, x : x + width].copy()
            return

        shape = (height, width) + self.pixels.shape[2:]
        canvas = np.empty(shape, dtype=self.pixels.dtype)
        canvas[...] = self._fill_color() if self.channels > 1 else self._fill_color()[0]

        # Overlap between the source image and the crop window
        src_left, src_top = max(0, x), max(0, y)
        src_right = min(image_width, x + width)
        src_bottom = min(image_height, y + height)
        if src_right > src_left and src_bottom > src_top:
            canvas[
                src_top - y : src_bottom - y, src_left - x : src_right - x
            ] = self.pixels[src_top:src_bottom, src_left:src_right]

        self.pixels = canvas

    def rotate(self, angle: int) -> None:
        image_height, image_width = self.pixels.shape[:2]
        center = (image_width / 2, image_height / 2)
        matrix = cv2.getRotationMatrix2D(center, angle, 1.0)

        radians = math.radians(angle)
        cos, sin = abs(math.cos(radians)), abs(math.sin(radians))
        bound_width = int(round(image_height * sin + image_width * cos))
        bound_height = int(round(image_height * cos + image_width * sin))

        # Shift so the rotated image is centred in the expanded canvas
        matrix[0, 2] += bound_width / 2 - center[0]
        matrix[1, 2] += bound_height / 2 - center[1]

        self.pixels = cv2.warpAffine(
            self.pixels,
            matrix,
            (bound_width, bound_height),
            flags=cv2.INTER_CUBIC,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=self._fill_color(),
        )

    def flip(self) -> None:
        self.pixels = cv2.flip(self.pixels, 0)

    def flop(self) -> None:
        self.pixels = cv2.flip(self.pixels, 1)

    def get_grayscale(self) -> np.ndarray:
        if self.channels == 1:
            return to_grayscale_array(self.pixels)
        # BGR(A) -> RGB
        return to_grayscale_array(self.pixels[..., 2::-1])

    # ---- Settings ----

    def format(self, format_name: str) -> None:
        output_format = self.normalize_format(format_name)
        if not cv2.haveImageWriter("probe" + FORMAT_EXTENSIONS[output_format]):
            raise UnsupportedFormatError(
                f"OpenCV cannot write '{format_name}' on this system"
            )
        self.output_format = output_format

    def set_animated(self, animated: bool) -> None:
        super().set_animated(animated)
        if self.animated:
            logger.warning(
                "OpenCV engine processes the first animation frame only",
                emoji=LogEmoji.SKIPPED,
            )
