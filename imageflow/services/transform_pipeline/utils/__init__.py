# imageflow/services/transform_pipeline/utils/__init__.py
"""
Transform Pipeline Utilities
"""

from .dimensions import (
    Percent,
    Pixels,
    PositionSpec,
    SizeSpec,
    parse_position_spec,
    parse_size_spec,
    resolve_position,
    resolve_resize_dimensions,
    resolve_size,
)
from .image_utils import (
    is_animated_gif,
    read_exif_data,
    rgb_to_bw,
    sniff_format,
    to_grayscale_array,
)
from .operation_parser import (
    Operation,
    format_operations,
    parse_operations,
    substitute_crop_tokens,
)
from .responsive import ClientMetrics, get_responsive_operations, rule_matches
from .smart_crop import (
    balanced_crop_offsets,
    entropy_crop_offsets,
    get_smart_crop_offsets,
    image_entropy,
)

__all__ = [
    # Dimensions
    "Pixels",
    "Percent",
    "SizeSpec",
    "PositionSpec",
    "parse_size_spec",
    "parse_position_spec",
    "resolve_size",
    "resolve_position",
    "resolve_resize_dimensions",
    # Parsing
    "Operation",
    "parse_operations",
    "substitute_crop_tokens",
    "format_operations",
    # Responsive
    "ClientMetrics",
    "get_responsive_operations",
    "rule_matches",
    # Image helpers
    "is_animated_gif",
    "read_exif_data",
    "rgb_to_bw",
    "sniff_format",
    "to_grayscale_array",
    # Smart crop
    "image_entropy",
    "entropy_crop_offsets",
    "balanced_crop_offsets",
    "get_smart_crop_offsets",
]
