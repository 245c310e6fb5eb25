# imageflow/services/transform_pipeline/utils/constants.py
"""
Transform Pipeline Constants
"""

# Operations mini-language separators
OPERATION_SEPARATOR = "|"
PARAM_SEPARATOR = ","

# x position of crop / resizeCrop (width, height, x, y, ...)
CROP_POSITION_PARAM_INDEX = 2

# Responsive rule grammar separators
RESPONSIVE_ENTRY_SEPARATOR = ";"
RESPONSIVE_RULE_SEPARATOR = ":"
RESPONSIVE_CONSTRAINT_SEPARATOR = ","
RESPONSIVE_KEY_VALUE_SEPARATOR = "="
CLIENT_METRICS_SEPARATOR = ","

# Default crop anchors
DEFAULT_CROP_X = "center"
DEFAULT_CROP_Y = "middle"

# Compression quality bounds
MIN_COMPRESSION_QUALITY = 0
MAX_COMPRESSION_QUALITY = 100

# Default fill colour for crops/rotations that uncover empty canvas
DEFAULT_BACKGROUND = (255, 255, 255)

# Truthy spellings for boolean flags passed through the mini-language
TRUTHY_FLAGS = {"1", "true", "yes", "on"}

# GIF graphic control extension followed by an image descriptor or another extension
GIF_FRAME_PATTERN = rb"\x00\x21\xF9\x04.{4}\x00(\x2C|\x21)"

# Mime types by engine format name
FORMAT_MIME_TYPES = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "GIF": "image/gif",
    "WEBP": "image/webp",
    "BMP": "image/bmp",
    "TIFF": "image/tiff",
}

# Accepted output format spellings
FORMAT_ALIASES = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "gif": "GIF",
    "webp": "WEBP",
    "bmp": "BMP",
    "tif": "TIFF",
    "tiff": "TIFF",
}

# Magic bytes used to sniff encoded formats
FORMAT_SIGNATURES = (
    (b"\xff\xd8\xff", "JPEG"),
    (b"\x89PNG\r\n\x1a\n", "PNG"),
    (b"GIF87a", "GIF"),
    (b"GIF89a", "GIF"),
    (b"BM", "BMP"),
    (b"II*\x00", "TIFF"),
    (b"MM\x00*", "TIFF"),
)

# Grayscale conversion weights (YUV luma)
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# Smart crop tuning
ENTROPY_SLICE_DIVISOR = 10
HISTOGRAM_BINS = 256
