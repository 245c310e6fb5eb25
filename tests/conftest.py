#!/usr/bin/env python3
# tests/conftest.py
"""
Pytest configuration and shared fixtures for imageflow tests.
"""

import shutil
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from PIL import Image, ImageDraw

from imageflow.config import Settings
from imageflow.services.transform_pipeline.engines import ImageEngine


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without real image decoding")
    config.addinivalue_line(
        "markers", "integration: tests decoding and encoding real images"
    )


def make_fake_engine(width: int = 800, height: int = 600, mime_type: str = "image/jpeg"):
    """
    Build a MagicMock engine that tracks its own size.

    ``resize`` and ``crop`` update the reported width/height so that chained
    operations resolve against the new dimensions, like a real engine.
    """
    engine = MagicMock(spec=ImageEngine)
    engine.name = "fake"
    engine.animated = False
    engine.output_format = "JPEG"

    size = {"width": width, "height": height}

    def _set_size(new_width, new_height, *args):
        size["width"] = new_width
        size["height"] = new_height

    engine.get_width.side_effect = lambda: size["width"]
    engine.get_height.side_effect = lambda: size["height"]
    engine.resize.side_effect = _set_size
    engine.crop.side_effect = _set_size
    engine.get_mime_type.return_value = mime_type
    engine.get_crop_offsets.return_value = (0, 0)
    return engine


@pytest.fixture
def fake_engine():
    """Fake 800x600 JPEG engine."""
    return make_fake_engine()


@pytest.fixture
def fake_engine_factory():
    """Build fake engines with custom sizes or mime types."""
    return make_fake_engine


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def test_settings(temp_dir):
    """Settings isolated from the environment, serving images from temp_dir."""
    return Settings(_env_file=None, images_directory=str(temp_dir))


@pytest.fixture
def sample_jpeg(temp_dir):
    """800x600 JPEG: blue background with a white rectangle."""
    image_path = temp_dir / "sample.jpg"

    img = Image.new("RGB", (800, 600), color="blue")
    draw = ImageDraw.Draw(img)
    draw.rectangle([50, 50, 750, 550], fill="white")
    img.save(image_path, "JPEG", quality=90)

    return image_path


@pytest.fixture
def sample_png_alpha(temp_dir):
    """200x100 PNG, fully transparent except a red square."""
    image_path = temp_dir / "alpha.png"

    img = Image.new("RGBA", (200, 100), color=(0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.rectangle([0, 0, 49, 49], fill=(255, 0, 0, 255))
    img.save(image_path, "PNG")

    return image_path


@pytest.fixture
def animated_gif(temp_dir):
    """120x80 GIF with three differently coloured frames."""
    image_path = temp_dir / "animated.gif"

    frames = [Image.new("RGB", (120, 80), color=color) for color in ("red", "green", "blue")]
    frames[0].save(
        image_path, "GIF", save_all=True, append_images=frames[1:], duration=100, loop=0
    )

    return image_path


@pytest.fixture
def still_gif(temp_dir):
    """Single frame 120x80 GIF."""
    image_path = temp_dir / "still.gif"
    Image.new("RGB", (120, 80), color="red").save(image_path, "GIF")
    return image_path


@pytest.fixture
def exif_jpeg_factory(temp_dir):
    """Create 60x40 JPEGs tagged with a given EXIF orientation."""

    def _create(orientation: int) -> Path:
        image_path = temp_dir / f"orientation_{orientation}.jpg"
        exif = Image.Exif()
        exif[0x0112] = orientation
        Image.new("RGB", (60, 40), color="white").save(image_path, "JPEG", exif=exif)
        return image_path

    return _create


@pytest.fixture
def mpo_jpeg(temp_dir):
    """Create a two-picture MPO file: 60x40 primary (EXIF orientation 6), 30x20 second."""
    image_path = temp_dir / "camera.jpg"
    exif = Image.Exif()
    exif[0x0112] = 6
    primary = Image.new("RGB", (60, 40), color="red")
    second = Image.new("RGB", (30, 20), color="blue")
    primary.save(image_path, "MPO", save_all=True, append_images=[second], exif=exif)
    return image_path


@pytest.fixture
def invalid_file_path(temp_dir):
    """Create an invalid (non-image) file."""
    invalid_path = temp_dir / "invalid.jpg"
    with open(invalid_path, "w") as f:
        f.write("This is not an image file")
    return invalid_path
