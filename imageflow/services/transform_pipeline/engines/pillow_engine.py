# imageflow/services/transform_pipeline/engines/pillow_engine.py
"""
Pillow Image Engine

Pixel backend built on Pillow. Supports every output format the pipeline
accepts and processes animated GIF frames one by one when the image is
flagged as animated.
"""

from io import BytesIO
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import numpy as np
from PIL import Image as PILImage
from PIL import ImageOps, ImageSequence, UnidentifiedImageError, features

from ....enums import EngineName, LogEmoji, LoggerName, LogSource
from ...logger import get_service_logger
from ..exceptions import (
    EngineOperationError,
    UnreadableImageError,
    UnsupportedFormatError,
)
from ..utils.image_utils import to_grayscale_array
from .base_engine import ImageEngine, PathLike

logger = get_service_logger(LoggerName.PILLOW_ENGINE, LogSource.ENGINE)

# Formats that can hold more than one frame
ANIMATED_FORMATS = {"GIF", "WEBP", "PNG"}

# Formats without an alpha channel
OPAQUE_FORMATS = {"JPEG"}

# Multi-picture camera JPEGs (stereo/preview pictures after the primary one)
MULTI_PICTURE_FORMAT = "MPO"

DEFAULT_FRAME_DURATION = 100  # ms


class PillowEngine(ImageEngine):
    """Image engine backed by Pillow."""

    name = EngineName.PILLOW.value

    def __init__(
        self,
        frames: List[PILImage.Image],
        output_format: Optional[str] = None,
        info: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(output_format)
        self.frames = frames
        self.info = dict(info or {})

    @property
    def image(self) -> PILImage.Image:
        return self.frames[0]

    # ---- Construction ----

    @classmethod
    def is_available(cls) -> bool:
        return bool(features.check_codec("jpg") and features.check_codec("zlib"))

    @classmethod
    def create_from_file(cls, path: PathLike) -> "PillowEngine":
        try:
            with PILImage.open(path) as img:
                return cls._from_image(img)
        except (OSError, UnidentifiedImageError, ValueError) as e:
            raise UnreadableImageError(f"Cannot decode image file '{path}': {e}") from e

    @classmethod
    def create_from_bytes(cls, data: bytes) -> "PillowEngine":
        try:
            with PILImage.open(BytesIO(data)) as img:
                return cls._from_image(img)
        except (OSError, UnidentifiedImageError, ValueError) as e:
            raise UnreadableImageError(f"Cannot decode image data: {e}") from e

    @classmethod
    def _from_image(cls, img: PILImage.Image) -> "PillowEngine":
        img.load()
        source_format = img.format
        info = dict(img.info)

        # Only the primary picture of an MPO file is kept, served as JPEG
        if source_format == MULTI_PICTURE_FORMAT:
            return cls([cls._normalize_mode(img)], output_format="JPEG", info=info)

        if getattr(img, "n_frames", 1) > 1:
            frames = [frame.convert("RGBA") for frame in ImageSequence.Iterator(img)]
        else:
            frames = [cls._normalize_mode(img)]

        return cls(frames, output_format=source_format, info=info)

    @staticmethod
    def _normalize_mode(img: PILImage.Image) -> PILImage.Image:
        """Convert palette/bilevel/high-depth images to L, RGB or RGBA."""
        if img.mode in ("RGB", "RGBA", "L"):
            return img.copy()
        if img.mode in ("LA", "PA", "RGBa", "La") or "transparency" in img.info:
            return img.convert("RGBA")
        return img.convert("RGB")

    # ---- Frame helpers ----

    def _apply(self, operation: Callable[[PILImage.Image], PILImage.Image]) -> None:
        """Apply ``operation`` to every frame when animated, else to the first frame."""
        frames = self.frames if self.animated else self.frames[:1]
        self.frames = [operation(frame) for frame in frames]

    def _fill_color(self, mode: str) -> Union[int, tuple]:
        if mode == "RGBA":
            return (*self.background, 255)
        if mode == "L":
            return self.background_luma()
        return self.background

    # ---- Output ----

    def save(self, path: PathLike) -> None:
        self._write(Path(path))
        logger.debug(
            f"Saved image to {path}",
            emoji=LogEmoji.SAVE,
            extra_context={"format": self.output_format},
        )

    def get_bytes(self) -> bytes:
        buffer = BytesIO()
        self._write(buffer)
        return buffer.getvalue()

    def _write(self, target) -> None:
        output_format = self.output_format
        frames = [self._prepare_frame(frame, output_format) for frame in self.frames]

        params: Dict[str, Any] = {}
        if self.quality is not None and output_format in ("JPEG", "WEBP"):
            params["quality"] = self.quality

        if self.animated and len(frames) > 1 and output_format in ANIMATED_FORMATS:
            params.update(
                save_all=True,
                append_images=frames[1:],
                loop=self.info.get("loop", 0),
                duration=self.info.get("duration", DEFAULT_FRAME_DURATION),
            )

        try:
            frames[0].save(target, format=output_format, **params)
        except (OSError, KeyError, ValueError) as e:
            raise EngineOperationError(
                f"Failed to encode image as {output_format}: {e}"
            ) from e

    def _prepare_frame(self, frame: PILImage.Image, output_format: str) -> PILImage.Image:
        """Flatten transparent frames onto the background for opaque formats."""
        if output_format not in OPAQUE_FORMATS or frame.mode in ("RGB", "L"):
            return frame
        rgba = frame.convert("RGBA")
        canvas = PILImage.new("RGB", rgba.size, self.background)
        canvas.paste(rgba, mask=rgba.getchannel("A"))
        return canvas

    # ---- Geometry ----

    def get_width(self) -> int:
        return self.image.width

    def get_height(self) -> int:
        return self.image.height

    def resize(self, width: int, height: int) -> None:
        self._apply(
            lambda frame: frame.resize((width, height), PILImage.Resampling.LANCZOS)
        )

    def crop(self, width: int, height: int, x: int, y: int) -> None:
        def _crop_frame(frame: PILImage.Image) -> PILImage.Image:
            inside = (
                x >= 0 and y >= 0 and x + width <= frame.width and y + height <= frame.height
            )
            if inside:
                return frame.crop((x, y, x + width, y + height))
            canvas = PILImage.new(frame.mode, (width, height), self._fill_color(frame.mode))
            canvas.paste(frame, (-x, -y))
            return canvas

        self._apply(_crop_frame)

    def rotate(self, angle: int) -> None:
        self._apply(
            lambda frame: frame.rotate(
                angle,
                resample=PILImage.Resampling.BICUBIC,
                expand=True,
                fillcolor=self._fill_color(frame.mode),
            )
        )

    def flip(self) -> None:
        self._apply(ImageOps.flip)

    def flop(self) -> None:
        self._apply(ImageOps.mirror)

    def get_grayscale(self) -> np.ndarray:
        return to_grayscale_array(np.asarray(self.image.convert("RGB")))

    # ---- Settings ----

    def format(self, format_name: str) -> None:
        output_format = self.normalize_format(format_name)
        PILImage.init()
        if output_format not in PILImage.SAVE:
            raise UnsupportedFormatError(
                f"Pillow cannot write '{format_name}' on this system"
            )
        self.output_format = output_format

    def set_animated(self, animated: bool) -> None:
        super().set_animated(animated)
        if self.animated:
            logger.debug(
                f"Processing {len(self.frames)} animation frames",
                extra_context={"frames": len(self.frames)},
            )
