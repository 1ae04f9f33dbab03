"""
Pixel format descriptors.

A format is a channel layout (L, LA, RGB, RGBA) paired with a sample bit
depth (8 or 16). The other modules only ever dispatch on these values,
never on image dimensions.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np
from PIL import Image

from .errors import UnsupportedFormat


class ChannelLayout(Enum):
    """Channel layout of a pixel; the last channel of alpha layouts is opacity."""

    LUMA = ("L", 1, False)
    LUMA_ALPHA = ("La", 2, True)
    RGB = ("Rgb", 3, False)
    RGB_ALPHA = ("Rgba", 4, True)

    def __init__(self, label: str, channels: int, has_alpha: bool):
        self.label = label
        self.channels = channels
        self.has_alpha = has_alpha

    @property
    def is_color(self) -> bool:
        return self in (ChannelLayout.RGB, ChannelLayout.RGB_ALPHA)

    @property
    def color_channels(self) -> int:
        """Number of non-alpha channels (1 or 3)."""
        return 3 if self.is_color else 1

    @property
    def alpha_index(self) -> int | None:
        return self.channels - 1 if self.has_alpha else None

    @classmethod
    def from_channels(cls, channels: int) -> "ChannelLayout":
        for layout in cls:
            if layout.channels == channels:
                return layout
        raise UnsupportedFormat(f"Unsupported channel count: {channels}")


class BitDepth(Enum):
    """Integer sample width."""

    EIGHT = 8
    SIXTEEN = 16

    @property
    def max_value(self) -> int:
        return (1 << self.value) - 1

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(np.uint8) if self is BitDepth.EIGHT else np.dtype(np.uint16)

    @classmethod
    def from_dtype(cls, dtype) -> "BitDepth":
        dtype = np.dtype(dtype)
        if dtype == np.uint8:
            return cls.EIGHT
        if dtype == np.uint16:
            return cls.SIXTEEN
        raise UnsupportedFormat(
            f"Unsupported sample type: {dtype}. Use uint8 or uint16"
        )


# Pillow modes that map onto a supported format. Pillow has no 16-bit
# LA/RGB/RGBA modes, so 16-bit colour images need an ImageBuffer.
PIL_MODES = {
    "L": (ChannelLayout.LUMA, BitDepth.EIGHT),
    "LA": (ChannelLayout.LUMA_ALPHA, BitDepth.EIGHT),
    "RGB": (ChannelLayout.RGB, BitDepth.EIGHT),
    "RGBA": (ChannelLayout.RGB_ALPHA, BitDepth.EIGHT),
    "I;16": (ChannelLayout.LUMA, BitDepth.SIXTEEN),
}


@dataclass(frozen=True)
class PixelFormat:
    """Channel layout and bit depth of an image."""

    layout: ChannelLayout
    bit_depth: BitDepth

    @property
    def channels(self) -> int:
        return self.layout.channels

    @property
    def has_alpha(self) -> bool:
        return self.layout.has_alpha

    @property
    def is_color(self) -> bool:
        return self.layout.is_color

    @property
    def alpha_index(self) -> int | None:
        return self.layout.alpha_index

    @property
    def max_value(self) -> int:
        return self.bit_depth.max_value

    @property
    def dtype(self) -> np.dtype:
        return self.bit_depth.dtype

    @property
    def name(self) -> str:
        """Short name such as ``Rgba8`` or ``L16``."""
        return f"{self.layout.label}{self.bit_depth.value}"

    def __str__(self) -> str:
        return self.name

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> "PixelFormat":
        """Infer the format of an ``(H, W)`` or ``(H, W, C)`` sample array."""
        if pixels.ndim == 2:
            channels = 1
        elif pixels.ndim == 3:
            channels = pixels.shape[2]
        else:
            raise UnsupportedFormat(
                f"Expected array of shape (H, W) or (H, W, C), got {pixels.shape}"
            )
        return cls(ChannelLayout.from_channels(channels), BitDepth.from_dtype(pixels.dtype))

    @classmethod
    def from_pil_mode(cls, mode: str) -> "PixelFormat":
        if mode not in PIL_MODES:
            raise UnsupportedFormat(
                f"Unsupported image mode: {mode}. Use one of {list(PIL_MODES.keys())}"
            )
        return cls(*PIL_MODES[mode])

    def to_pil_mode(self) -> str:
        for mode, entry in PIL_MODES.items():
            if entry == (self.layout, self.bit_depth):
                return mode
        raise UnsupportedFormat(f"No Pillow mode for pixel format {self.name}")


def describe(image) -> PixelFormat:
    """Report the pixel format of an ImageBuffer or Pillow image."""
    if isinstance(image, Image.Image):
        return PixelFormat.from_pil_mode(image.mode)
    fmt = getattr(image, "format", None)
    if isinstance(fmt, PixelFormat):
        return fmt
    raise TypeError(f"Expected ImageBuffer or PIL.Image.Image, got {type(image).__name__}")
