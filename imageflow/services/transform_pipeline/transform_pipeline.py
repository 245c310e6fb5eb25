# imageflow/services/transform_pipeline/transform_pipeline.py
"""
Main Transform Pipeline Class

Facade over an image engine: resolves mixed-unit dimensions against the
live image, applies the enlargement and fit policies, and hands concrete
pixel parameters to the engine. Operations can be called one by one
(chainable) or as a mini-language string through ``transform()``.

Example:
    pipeline = TransformPipeline.create_from_file("photo.jpg")
    pipeline.auto_rotate().transform("resizeCrop,400,300,CROP_ENTROPY|format,webp")
    pipeline.save("photo.webp")
"""

import sys
from pathlib import Path
from typing import Any, BinaryIO, Optional, Sequence, Type, Union

from ...config import Settings, get_settings
from ...enums import CropMode, LogEmoji, LoggerName, LogSource, OperationName
from ..logger import get_service_logger
from .engines import ImageEngine, get_engine_class
from .exceptions import OutputError
from .utils import (
    Operation,
    format_operations,
    is_animated_gif,
    parse_operations,
    parse_position_spec,
    read_exif_data,
    resolve_position,
    resolve_resize_dimensions,
    resolve_size,
    substitute_crop_tokens,
)
from .utils.constants import (
    DEFAULT_CROP_X,
    DEFAULT_CROP_Y,
    MAX_COMPRESSION_QUALITY,
    MIN_COMPRESSION_QUALITY,
    TRUTHY_FLAGS,
)
from .utils.responsive import lenient_int

logger = get_service_logger(LoggerName.TRANSFORM_PIPELINE, LogSource.PIPELINE)

PathLike = Union[str, Path]
EngineSelector = Union[str, Type[ImageEngine], None]

JPEG_MIME_TYPE = "image/jpeg"
EXIF_ORIENTATION_KEY = "Orientation"


def _to_flag(value: Any) -> bool:
    """Interpret a boolean flag given as bool or mini-language string."""
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_FLAGS
    return bool(value)


def _to_int(value: Any) -> int:
    """Truncate a numeric value (``"90.5"`` -> 90); unparseable values are 0."""
    if isinstance(value, (int, float)):
        return int(value)
    return lenient_int(str(value))


def _select_engine_class(engine: EngineSelector, settings: Settings) -> Type[ImageEngine]:
    if isinstance(engine, type) and issubclass(engine, ImageEngine):
        return engine
    return get_engine_class(
        engine or settings.image_engine, settings.engine_preference_list
    )


class TransformPipeline:
    """
    Image transformation facade.

    Owns exactly one engine instance and, for file sources, the source
    filename used by ``save()``, ``get_exif_data()`` and ``auto_rotate()``.
    """

    def __init__(self, engine: ImageEngine, filename: Optional[PathLike] = None):
        """
        Initialize the pipeline around an already decoded engine image.

        Args:
            engine: Engine instance holding the decoded image
            filename: Source file, if the image was loaded from disk
        """
        self.engine = engine
        self.filename = Path(filename) if filename is not None else None
        self.source_mime_type = engine.get_mime_type()

    # ---- Construction ----

    @classmethod
    def create(
        cls,
        source: Union[PathLike, bytes, bytearray],
        engine: EngineSelector = None,
        settings: Optional[Settings] = None,
    ) -> "TransformPipeline":
        """Create a pipeline from a file path or from in-memory image data."""
        if isinstance(source, (bytes, bytearray, memoryview)):
            return cls.create_from_bytes(bytes(source), engine=engine, settings=settings)
        return cls.create_from_file(source, engine=engine, settings=settings)

    @classmethod
    def create_from_file(
        cls,
        path: PathLike,
        engine: EngineSelector = None,
        settings: Optional[Settings] = None,
    ) -> "TransformPipeline":
        """
        Decode an image file.

        Raises:
            BackendSelectionError: If no usable engine can be selected
            UnreadableImageError: If the file cannot be decoded
        """
        settings = settings or get_settings()
        engine_class = _select_engine_class(engine, settings)

        pipeline = cls(engine_class.create_from_file(path), filename=path)
        if pipeline.engine.output_format == "GIF" and is_animated_gif(
            path, settings.gif_scan_chunk_size
        ):
            pipeline.engine.set_animated(True)

        logger.debug(
            f"Loaded {path} with {engine_class.name} engine",
            emoji=LogEmoji.IMAGE,
            extra_context=pipeline._describe(),
        )
        return pipeline

    @classmethod
    def create_from_bytes(
        cls,
        data: bytes,
        engine: EngineSelector = None,
        settings: Optional[Settings] = None,
    ) -> "TransformPipeline":
        """
        Decode in-memory image data.

        Raises:
            BackendSelectionError: If no usable engine can be selected
            UnreadableImageError: If the data cannot be decoded
        """
        settings = settings or get_settings()
        engine_class = _select_engine_class(engine, settings)

        pipeline = cls(engine_class.create_from_bytes(data))
        if pipeline.engine.output_format == "GIF" and is_animated_gif(data):
            pipeline.engine.set_animated(True)

        logger.debug(
            f"Loaded {len(data)} bytes with {engine_class.name} engine",
            emoji=LogEmoji.IMAGE,
            extra_context=pipeline._describe(),
        )
        return pipeline

    def _describe(self) -> dict:
        return {
            "engine": self.engine.name,
            "width": self.get_width(),
            "height": self.get_height(),
            "animated": self.engine.animated,
        }

    # ---- Output ----

    def save(self, filename: Optional[PathLike] = None) -> "TransformPipeline":
        """
        Write the image to ``filename``, or back to the source file.

        Raises:
            OutputError: If neither a filename nor a source file exists
        """
        destination = filename or self.filename
        if destination is None:
            raise OutputError("No filename given and the image was not loaded from a file")

        self.engine.save(destination)
        logger.info(f"Saved image to {destination}", emoji=LogEmoji.SAVE)
        return self

    def get_bytes(self) -> bytes:
        return self.engine.get_bytes()

    def get_mime_type(self) -> str:
        return self.engine.get_mime_type()

    def get_width(self) -> int:
        return self.engine.get_width()

    def get_height(self) -> int:
        return self.engine.get_height()

    def show(self, stream: Optional[BinaryIO] = None) -> None:
        """
        Write a ``Content-Type`` header, a blank line and the image bytes,
        then terminate the process.
        """
        data = self.get_bytes()
        mime_type = self.get_mime_type()
        output = stream if stream is not None else sys.stdout.buffer

        output.write(f"Content-Type: {mime_type}\r\n\r\n".encode("ascii"))
        output.write(data)
        output.flush()
        sys.exit(0)

    # ---- Geometry ----

    def resize(
        self, width, height=0, enlarge: bool = False, cover: bool = False
    ) -> "TransformPipeline":
        """
        Resize preserving the aspect ratio.

        Args:
            width: Max width in pixels or percent ("50%"); 0 derives it from height
            height: Max height in pixels or percent; 0 derives it from width
            enlarge: Allow results wider than the current image
            cover: Cover the box instead of fitting inside it

        The engine is skipped when the resolved width equals the current
        width, or exceeds it while enlarging is not allowed. Only the width
        is compared.
        """
        image_width = self.get_width()
        image_height = self.get_height()

        width, height = resolve_resize_dimensions(
            image_width,
            image_height,
            resolve_size(width, image_width),
            resolve_size(height, image_height),
            cover=_to_flag(cover),
        )

        if width == image_width or (not _to_flag(enlarge) and width > image_width):
            logger.debug(
                "Resize skipped",
                emoji=LogEmoji.SKIPPED,
                extra_context={"width": width, "image_width": image_width},
            )
            return self

        self.engine.resize(width, height)
        return self

    def crop(
        self, width, height, x=DEFAULT_CROP_X, y=DEFAULT_CROP_Y
    ) -> "TransformPipeline":
        """
        Crop the image.

        Args:
            width: Crop width in pixels or percent; 0 keeps the current width
            height: Crop height in pixels or percent; 0 keeps the current height
            x: Pixels, percent, left/center/right, or a smart-crop mode
            y: Pixels, percent or top/middle/bottom; replaced by the engine's
                value when ``x`` is a smart-crop mode
        """
        image_width = self.get_width()
        image_height = self.get_height()

        width = resolve_size(width, image_width) or image_width
        height = resolve_size(height, image_height) or image_height

        position = parse_position_spec(x)
        if isinstance(position, CropMode):
            x, y = self.engine.get_crop_offsets(width, height, position)
            logger.debug(
                f"{position.value} crop offsets: ({x}, {y})",
                emoji=LogEmoji.CROP,
            )
        else:
            x = resolve_position(position, width, image_width)
            y = resolve_position(y, height, image_height)

        self.engine.crop(width, height, x, y)
        return self

    def resize_crop(
        self, width, height, x=DEFAULT_CROP_X, y=DEFAULT_CROP_Y, enlarge: bool = False
    ) -> "TransformPipeline":
        """
        Cover-fit resize, then crop.

        Equivalent to ``resize(width, height, enlarge, cover=True)`` followed by
        ``crop(width, height, x, y)``. Percentages in the crop step resolve
        against the resized image.
        """
        self.resize(width, height, enlarge, cover=True)
        return self.crop(width, height, x, y)

    def rotate(self, angle) -> "TransformPipeline":
        """Rotate counter-clockwise; fractional angles are truncated, 0 is a no-op."""
        angle = _to_int(angle)
        if angle != 0:
            self.engine.rotate(angle)
            logger.debug(f"Rotated {angle} degrees", emoji=LogEmoji.ROTATE)
        return self

    def flip(self) -> "TransformPipeline":
        """Mirror vertically."""
        self.engine.flip()
        return self

    def flop(self) -> "TransformPipeline":
        """Mirror horizontally."""
        self.engine.flop()
        return self

    def auto_rotate(self) -> "TransformPipeline":
        """Undo the camera orientation recorded in the EXIF data."""
        orientation = self.get_exif_data(EXIF_ORIENTATION_KEY)

        match orientation:
            case 2:
                self.flop()
            case 3:
                self.rotate(180)
            case 4:
                self.flip()
            case 5:
                self.flip().rotate(-90)
            case 6:
                self.rotate(90)
            case 7:
                self.flop().rotate(-90)
            case 8:
                self.rotate(90)

        return self

    # ---- Settings ----

    def format(self, format_name: str) -> "TransformPipeline":
        self.engine.format(format_name)
        return self

    def set_compression_quality(self, quality) -> "TransformPipeline":
        quality = max(MIN_COMPRESSION_QUALITY, min(MAX_COMPRESSION_QUALITY, _to_int(quality)))
        self.engine.set_compression_quality(quality)
        return self

    def set_background(self, background: Sequence[int]) -> "TransformPipeline":
        self.engine.set_background(background)
        return self

    def get_exif_data(self, key: Optional[str] = None) -> Any:
        """
        Read EXIF data of a JPEG file source.

        Args:
            key: Tag name (e.g. "Orientation"); returns the whole mapping if None

        Returns:
            The tag value, the full mapping, or None when there is no EXIF
            source (in-memory or non-JPEG images) or the tag is missing
        """
        if self.filename is None or self.source_mime_type != JPEG_MIME_TYPE:
            return None

        exif = read_exif_data(self.filename)
        if key is not None:
            return exif.get(key)
        return exif

    # ---- Mini-language ----

    def transform(self, operations: Optional[str] = "") -> "TransformPipeline":
        """
        Execute an operations string such as ``"resize,800|crop,50%,50%|format,png"``.

        The whole string is parsed before the image is touched, so a parse
        error leaves the image unchanged.

        Raises:
            InvalidOperationError: For unknown operations or parameter counts
            InvalidDimensionError: For malformed size or position values
        """
        if not operations:
            return self

        pipeline = tuple(substitute_crop_tokens(op) for op in parse_operations(operations))
        logger.debug(
            f"Applying {len(pipeline)} operations",
            emoji=LogEmoji.PROCESSING,
            extra_context={"operations": format_operations(pipeline)},
        )

        for operation in pipeline:
            self._apply_operation(operation)

        return self

    def _apply_operation(self, operation: Operation) -> None:
        params = operation.params

        match operation.name:
            case OperationName.RESIZE:
                self.resize(*params)
            case OperationName.RESIZE_CROP:
                self.resize_crop(*params)
            case OperationName.CROP:
                self.crop(*params)
            case OperationName.FORMAT:
                self.format(*params)
