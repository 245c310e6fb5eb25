# imageflow/services/transform_pipeline/utils/dimensions.py
"""
Dimension Resolution

Pure functions that turn mixed-unit size and position values into concrete
pixel integers. Raw values (strings from the operations mini-language, or
plain ints from library callers) are parsed once into a small closed set of
types:

- ``Pixels``: an absolute pixel count or offset
- ``Percent``: a percentage of a reference dimension
- ``Anchor``: a named position (left/center/right, top/middle/bottom)
- ``CropMode``: a smart-crop tag, resolved by the engine instead of here
"""

import math
import re
from dataclasses import dataclass
from typing import Tuple, Union

from ....enums import Anchor, CropMode
from ..exceptions import InvalidDimensionError

_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")

_ANCHORS = {anchor.value: anchor for anchor in Anchor}
_CROP_MODES = {mode.value.lower(): mode for mode in CropMode}


@dataclass(frozen=True)
class Pixels:
    """Absolute pixel value."""

    value: int


@dataclass(frozen=True)
class Percent:
    """Percentage of a reference dimension."""

    value: float


SizeSpec = Union[Pixels, Percent]
PositionSpec = Union[Pixels, Percent, Anchor, CropMode]


def _parse_number(text: str, raw) -> float:
    if not _NUMBER_PATTERN.match(text):
        raise InvalidDimensionError(f"Invalid dimension value: {raw!r}")
    return float(text)


def parse_size_spec(raw) -> SizeSpec:
    """
    Parse a width/height value.

    Accepts ints, numeric strings ("400"), percentages ("50%") and empty
    values, which mean "unconstrained" and parse as ``Pixels(0)``.

    Raises:
        InvalidDimensionError: for negative or unparseable values
    """
    if isinstance(raw, (Pixels, Percent)):
        spec = raw
    elif raw is None:
        spec = Pixels(0)
    elif isinstance(raw, (int, float)):
        spec = Pixels(int(raw))
    else:
        text = str(raw).strip()
        if not text:
            spec = Pixels(0)
        elif text.endswith("%"):
            spec = Percent(_parse_number(text[:-1].strip(), raw))
        else:
            spec = Pixels(int(_parse_number(text, raw)))

    if spec.value < 0:
        raise InvalidDimensionError(f"Size cannot be negative: {raw!r}")
    return spec


def parse_position_spec(raw) -> PositionSpec:
    """
    Parse an x/y crop position.

    Accepts pixel offsets (may be negative), percentages, named anchors and
    the smart-crop mode tags. Empty values parse as ``Pixels(0)``.

    Raises:
        InvalidDimensionError: for unparseable values
    """
    if isinstance(raw, (Pixels, Percent, Anchor, CropMode)):
        return raw
    if raw is None:
        return Pixels(0)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return Pixels(int(raw))

    text = str(raw).strip()
    if not text:
        return Pixels(0)

    lowered = text.lower()
    if lowered in _ANCHORS:
        return _ANCHORS[lowered]
    if lowered in _CROP_MODES:
        return _CROP_MODES[lowered]
    if text.endswith("%"):
        return Percent(_parse_number(text[:-1].strip(), raw))
    return Pixels(int(_parse_number(text, raw)))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))


def _percent_of(percent: float, reference: int) -> int:
    return round_half_up(reference * percent / 100)


def resolve_size(spec, reference: int) -> int:
    """
    Resolve a size against a reference dimension.

    Args:
        spec: Raw or parsed size ("400", "50%", 0, Pixels(400)...)
        reference: Reference dimension in pixels (the current image side)

    Returns:
        Non-negative pixel count; 0 means "unconstrained" to the caller
    """
    parsed = parse_size_spec(spec)
    if isinstance(parsed, Percent):
        return max(0, _percent_of(parsed.value, reference))
    return parsed.value


def resolve_position(spec, target_size: int, reference: int) -> int:
    """
    Resolve a crop position against the target size and reference dimension.

    Named anchors map to 0 (left/top), ``reference - target`` (right/bottom)
    or the floored midpoint (center/middle). The result is not clamped.

    Raises:
        InvalidDimensionError: for smart-crop tags, which only the engine can resolve
    """
    parsed = parse_position_spec(spec)

    if isinstance(parsed, CropMode):
        raise InvalidDimensionError(
            f"Smart-crop mode '{parsed.value}' must be resolved by the image engine"
        )
    if isinstance(parsed, Anchor):
        if parsed in (Anchor.LEFT, Anchor.TOP):
            return 0
        if parsed in (Anchor.RIGHT, Anchor.BOTTOM):
            return reference - target_size
        return (reference - target_size) // 2
    if isinstance(parsed, Percent):
        return _percent_of(parsed.value, reference)
    return parsed.value


def resolve_resize_dimensions(
    source_width: int,
    source_height: int,
    width: int,
    height: int,
    cover: bool = False,
) -> Tuple[int, int]:
    """
    Calculate aspect-preserving resize dimensions.

    Args:
        source_width: Current image width
        source_height: Current image height
        width: Requested width (0 = derive from height)
        height: Requested height (0 = derive from width)
        cover: Cover the whole box (larger scale binds) instead of fitting
            inside it (smaller scale binds)

    Returns:
        (width, height) rounded half away from zero, at least 1
    """
    if not width and not height:
        return (source_width, source_height)

    # Nothing to derive a ratio from
    if not source_width or not source_height:
        return (width, height)

    if not height:
        return (width, max(1, round_half_up(width * source_height / source_width)))

    if not width:
        return (max(1, round_half_up(height * source_width / source_height)), height)

    scale_width = width / source_width
    scale_height = height / source_height

    if cover:
        binds_width = scale_width >= scale_height
    else:
        binds_width = scale_width <= scale_height

    if binds_width:
        return (width, max(1, round_half_up(source_height * scale_width)))
    return (max(1, round_half_up(source_width * scale_height)), height)
