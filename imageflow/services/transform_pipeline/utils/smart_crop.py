# imageflow/services/transform_pipeline/utils/smart_crop.py
"""
Smart Crop Offsets

Content-aware crop anchors computed on a grayscale numpy array, shared by
every image engine:

- Entropy: repeatedly slices away the edge strip with the lower entropy
  until the crop size is reached.
- Balanced: finds the energy centre of an edge map in each quadrant and
  centres the crop on their weighted mean.
"""

import math
from typing import List, Tuple

import numpy as np

from ....enums import CropMode
from .constants import ENTROPY_SLICE_DIVISOR, HISTOGRAM_BINS


def image_entropy(gray: np.ndarray) -> float:
    """
    Shannon entropy of a grayscale region's histogram, in bits.

    Args:
        gray: 2D array with values in 0-255

    Returns:
        Entropy value; 0.0 for empty regions
    """
    if gray.size == 0:
        return 0.0
    values = np.clip(np.rint(gray), 0, HISTOGRAM_BINS - 1).astype(np.uint8)
    hist = np.bincount(values.ravel(), minlength=HISTOGRAM_BINS).astype(np.float64)
    prob = hist[hist > 0] / values.size
    return float(-(prob * np.log2(prob)).sum())


def _slice_step(excess: int) -> int:
    return max(1, math.ceil(excess / ENTROPY_SLICE_DIVISOR))


def entropy_crop_offsets(gray: np.ndarray, width: int, height: int) -> Tuple[int, int]:
    """
    Find the top-left corner of the highest-entropy ``width``×``height`` window.

    Args:
        gray: 2D grayscale array
        width: Crop width in pixels
        height: Crop height in pixels

    Returns:
        (x, y) offsets inside the image
    """
    image_height, image_width = gray.shape
    width = min(width, image_width)
    height = min(height, image_height)

    left, right = 0, image_width
    top, bottom = 0, image_height

    while right - left > width:
        step = _slice_step(right - left - width)
        left_strip = gray[top:bottom, left : left + step]
        right_strip = gray[top:bottom, right - step : right]
        if image_entropy(left_strip) < image_entropy(right_strip):
            left += step
        else:
            right -= step

    while bottom - top > height:
        step = _slice_step(bottom - top - height)
        top_strip = gray[top : top + step, left:right]
        bottom_strip = gray[bottom - step : bottom, left:right]
        if image_entropy(top_strip) < image_entropy(bottom_strip):
            top += step
        else:
            bottom -= step

    return (left, top)


def edge_energy(gray: np.ndarray) -> np.ndarray:
    """Gradient magnitude of a grayscale array."""
    if min(gray.shape) < 2:
        return np.zeros_like(gray, dtype=np.float32)
    gy, gx = np.gradient(gray.astype(np.float32))
    return np.hypot(gx, gy)


def _energy_point(
    energy: np.ndarray, offset_x: int, offset_y: int
) -> Tuple[float, float, float]:
    """Energy-weighted centre (x, y) of a block and its total energy."""
    total = float(energy.sum())
    block_height, block_width = energy.shape
    if total <= 0:
        return (offset_x + block_width / 2, offset_y + block_height / 2, 0.0)

    ys, xs = np.indices(energy.shape)
    x = float((xs * energy).sum()) / total + offset_x
    y = float((ys * energy).sum()) / total + offset_y
    return (x, y, total)


def _clamp_offset(center: float, size: int, limit: int) -> int:
    offset = max(0, int(round(center - size / 2)))
    if offset + size > limit:
        offset = limit - size
    return max(0, offset)


def balanced_crop_offsets(gray: np.ndarray, width: int, height: int) -> Tuple[int, int]:
    """
    Centre a ``width``×``height`` window on the image's balanced energy point.

    The image is split into four quadrants; each contributes its energy
    centre weighted by its total energy.

    Returns:
        (x, y) offsets, clamped so the window stays inside the image
    """
    image_height, image_width = gray.shape
    energy = edge_energy(gray)

    half_width = math.ceil(image_width / 2)
    half_height = math.ceil(image_height / 2)

    points: List[Tuple[float, float, float]] = []
    for offset_y in (0, half_height):
        for offset_x in (0, half_width):
            block = energy[
                offset_y : offset_y + half_height, offset_x : offset_x + half_width
            ]
            if block.size:
                points.append(_energy_point(block, offset_x, offset_y))

    total = sum(weight for _, _, weight in points)
    if total <= 0:
        center_x, center_y = image_width / 2, image_height / 2
    else:
        center_x = sum(x * weight for x, _, weight in points) / total
        center_y = sum(y * weight for _, y, weight in points) / total

    return (
        _clamp_offset(center_x, width, image_width),
        _clamp_offset(center_y, height, image_height),
    )


def get_smart_crop_offsets(
    gray: np.ndarray, width: int, height: int, mode: CropMode
) -> Tuple[int, int]:
    """Dispatch to the offset finder for ``mode``."""
    if mode == CropMode.ENTROPY:
        return entropy_crop_offsets(gray, width, height)
    return balanced_crop_offsets(gray, width, height)
