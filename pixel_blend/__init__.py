"""
Pixel Blending and Alpha Channel Tools

Combines two raster images pixel by pixel with any blend function, across
pixel formats:
- Grayscale or colour, with or without an alpha channel
- 8-bit or 16-bit samples, mixed freely between the two images
- Built-in Photoshop-style modes (multiply, screen, overlay, ...) or any
  custom ``fn(a, b)`` over normalized 0-1 values

Also extracts an alpha channel as a standalone grayscale image, writes one
back, or transplants alpha directly from one image to another.

Works on NumPy-backed ``ImageBuffer`` objects and on Pillow images alike.

Usage:
    from PIL import Image
    from pixel_blend import blend, multiply, get_alpha, set_alpha

    base = Image.open("base.png")
    blend(base, Image.open("overlay.png"), multiply)

    mask = get_alpha(Image.open("sprite.png"))
    set_alpha(base, mask)

    # Command line
    python -m pixel_blend.cli blend base.png overlay.png -o out.png --mode screen
"""

from .errors import (
    PixelOpsError,
    DimensionMismatch,
    IncompatibleFormats,
    NoAlphaChannel,
    UnsupportedFormat,
)
from .formats import BitDepth, ChannelLayout, PixelFormat, describe
from .handles import ImageBuffer
from .engine import blend
from .alpha import get_alpha, set_alpha, transplant_alpha
from .blend_modes import (
    BLEND_MODES,
    BlendFunction,
    BlendMode,
    get_blend_mode,
    list_blend_modes,
    vectorized,
    with_opacity,
    add,
    subtract,
    multiply,
    divide,
    darken,
    lighten,
    difference,
    screen,
    overlay,
    hard_light,
    soft_light,
    normal,
)
from .config import BatchConfig, BlendConfig

__all__ = [
    # Operations
    "blend",
    "get_alpha",
    "set_alpha",
    "transplant_alpha",
    # Images and formats
    "ImageBuffer",
    "PixelFormat",
    "ChannelLayout",
    "BitDepth",
    "describe",
    # Errors
    "PixelOpsError",
    "DimensionMismatch",
    "IncompatibleFormats",
    "NoAlphaChannel",
    "UnsupportedFormat",
    # Blend modes
    "BLEND_MODES",
    "BlendFunction",
    "BlendMode",
    "get_blend_mode",
    "list_blend_modes",
    "vectorized",
    "with_opacity",
    "add",
    "subtract",
    "multiply",
    "divide",
    "darken",
    "lighten",
    "difference",
    "screen",
    "overlay",
    "hard_light",
    "soft_light",
    "normal",
    # Config
    "BlendConfig",
    "BatchConfig",
]
__version__ = "0.1.0"
