#!/usr/bin/env python3
"""Pytest configuration and shared fixtures."""
import pytest
import tempfile
from pathlib import Path
import sys

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from pixel_blend import ImageBuffer


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def rgb8():
    """2x2 8-bit RGB image with distinct pixels."""
    return ImageBuffer(np.array([
        [[200, 100, 50], [0, 128, 255]],
        [[10, 20, 30], [255, 255, 255]],
    ], dtype=np.uint8))


@pytest.fixture
def rgba8():
    """2x2 8-bit RGBA image with varying alpha."""
    return ImageBuffer(np.array([
        [[200, 100, 50, 255], [0, 128, 255, 128]],
        [[10, 20, 30, 0], [255, 255, 255, 64]],
    ], dtype=np.uint8))


@pytest.fixture
def la8():
    """2x2 8-bit luma + alpha image."""
    return ImageBuffer(np.array([
        [[128, 10], [64, 200]],
        [[0, 255], [255, 77]],
    ], dtype=np.uint8))


@pytest.fixture
def l8():
    """2x2 8-bit luma image."""
    return ImageBuffer(np.array([
        [128, 64],
        [0, 255],
    ], dtype=np.uint8))


@pytest.fixture
def rgba16():
    """2x2 16-bit RGBA image."""
    return ImageBuffer(np.array([
        [[65535, 0, 32768, 65535], [1000, 2000, 3000, 40000]],
        [[12345, 54321, 0, 0], [257, 514, 771, 1]],
    ], dtype=np.uint16))


def all_formats(width: int = 3, height: int = 2, seed: int = 0) -> list[ImageBuffer]:
    """Random buffers in every supported layout and bit depth."""
    rng = np.random.default_rng(seed)
    buffers = []
    for dtype, high in ((np.uint8, 256), (np.uint16, 65536)):
        for channels in (1, 2, 3, 4):
            shape = (height, width) if channels == 1 else (height, width, channels)
            buffers.append(ImageBuffer(rng.integers(0, high, size=shape, dtype=dtype)))
    return buffers
