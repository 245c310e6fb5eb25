# imageflow/services/transform_pipeline/utils/image_utils.py
"""
Image Utility Functions

Small helpers around the source file: animated GIF detection, EXIF
lookup, format sniffing and grayscale conversion used by smart cropping.
"""

import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
from PIL import ExifTags, Image, UnidentifiedImageError

from .constants import (
    FORMAT_SIGNATURES,
    GIF_FRAME_PATTERN,
    LUMA_WEIGHTS,
)
from ....constants import GIF_SCAN_CHUNK_SIZE

_GIF_FRAME = re.compile(GIF_FRAME_PATTERN, re.DOTALL)


def rgb_to_bw(r: float, g: float, b: float) -> float:
    """
    Return a YUV weighted greyscale value.

    See http://en.wikipedia.org/wiki/YUV
    """
    red, green, blue = LUMA_WEIGHTS
    return (r * red) + (g * green) + (b * blue)


def to_grayscale_array(pixels: np.ndarray) -> np.ndarray:
    """
    Convert an RGB(A) or single-channel array into float32 luma values.

    Args:
        pixels: HxW, HxWx3 or HxWx4 array in RGB channel order

    Returns:
        HxW float32 array in the 0-255 range
    """
    if pixels.ndim == 2:
        return pixels.astype(np.float32)
    rgb = pixels[..., :3].astype(np.float32)
    return rgb_to_bw(rgb[..., 0], rgb[..., 1], rgb[..., 2]).astype(np.float32)


def count_gif_frames(data: bytes) -> int:
    """Count graphic-control-extension frame markers in raw GIF bytes."""
    return len(_GIF_FRAME.findall(data))


def is_animated_gif(
    source: Union[str, Path, bytes], chunk_size: int = GIF_SCAN_CHUNK_SIZE
) -> bool:
    """
    Check whether GIF data contains more than one frame.

    Files are read in chunks and the scan stops as soon as a second frame
    is found.

    Args:
        source: Path to a GIF file, or the raw bytes
        chunk_size: Bytes read per chunk for file sources

    Returns:
        True for animated GIFs, False otherwise (including unreadable files)
    """
    if isinstance(source, (bytes, bytearray)):
        return count_gif_frames(bytes(source)) > 1

    count = 0
    try:
        with open(source, "rb") as handle:
            while count < 2:
                chunk = handle.read(chunk_size)
                if not chunk:
                    break
                count += count_gif_frames(chunk)
    except OSError:
        return False

    return count > 1


def sniff_format(data: bytes) -> Optional[str]:
    """
    Identify an encoded image format from its magic bytes.

    Returns:
        Format name (JPEG, PNG, GIF, WEBP, BMP, TIFF) or None if unknown
    """
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "WEBP"
    for signature, format_name in FORMAT_SIGNATURES:
        if data.startswith(signature):
            return format_name
    return None


def read_exif_data(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read EXIF tags from an image file, keyed by tag name.

    Tags from the main IFD and the Exif sub-IFD are merged; unknown tag ids
    are kept under their numeric id. Unreadable files yield an empty dict.
    """
    try:
        with Image.open(path) as img:
            exif = img.getexif()
            tags = dict(exif.items())
            tags.update(exif.get_ifd(ExifTags.IFD.Exif).items())
    except (OSError, UnidentifiedImageError):
        return {}

    return {ExifTags.TAGS.get(tag_id, tag_id): value for tag_id, value in tags.items()}
