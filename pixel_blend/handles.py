"""
Image handles accepted by the blend and alpha operations.

Two flavours are supported and behave identically:

- ``ImageBuffer``: a NumPy sample array paired with a declared
  ``PixelFormat``. The format is fixed when the buffer is built.
- ``PIL.Image.Image``: the format is resolved from the image mode at call
  time. Writes go back into the same Image object.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from .errors import UnsupportedFormat
from .formats import BitDepth, ChannelLayout, PixelFormat


@dataclass(eq=False)
class ImageBuffer:
    """NumPy-backed image with a fixed pixel format.

    ``pixels`` has shape ``(H, W)`` for luma or ``(H, W, C)`` with C in
    1..4, dtype uint8 or uint16. When ``format`` is omitted it is inferred
    from the array; when given, the array must match it.
    """

    pixels: np.ndarray
    format: Optional[PixelFormat] = field(default=None)

    def __post_init__(self) -> None:
        if not isinstance(self.pixels, np.ndarray):
            raise TypeError(f"pixels must be a numpy array, got {type(self.pixels).__name__}")
        inferred = PixelFormat.from_array(self.pixels)
        if self.format is None:
            self.format = inferred
        elif self.format != inferred:
            raise UnsupportedFormat(
                f"Array of shape {self.pixels.shape} and dtype {self.pixels.dtype} "
                f"does not hold {self.format.name} pixels"
            )

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        """(width, height), matching Pillow's convention."""
        return (self.width, self.height)

    def channel_view(self) -> np.ndarray:
        """``(H, W, C)`` view sharing memory with ``pixels``."""
        if self.pixels.ndim == 2:
            return self.pixels[..., np.newaxis]
        return self.pixels

    def copy(self) -> "ImageBuffer":
        return ImageBuffer(self.pixels.copy(), self.format)

    @classmethod
    def new(
        cls,
        width: int,
        height: int,
        fmt: PixelFormat,
        fill: int = 0
    ) -> "ImageBuffer":
        """Allocate a buffer filled with a constant sample value."""
        if fmt.channels == 1:
            shape = (height, width)
        else:
            shape = (height, width, fmt.channels)
        return cls(np.full(shape, fill, dtype=fmt.dtype), fmt)

    @classmethod
    def from_pil(cls, image: Image.Image) -> "ImageBuffer":
        """Copy a Pillow image into a new buffer."""
        fmt = PixelFormat.from_pil_mode(image.mode)
        return cls(np.array(image, dtype=fmt.dtype), fmt)

    def to_pil(self) -> Image.Image:
        """Copy the buffer into a new Pillow image.

        Pillow has no 16-bit LA/RGB/RGBA modes, so those raise UnsupportedFormat.
        """
        mode = self.format.to_pil_mode()
        return _pil_from_samples(mode, self.size, self.pixels)

    # The core operations as methods. Imports are deferred because the
    # operation modules depend on this one.

    def blend(self, other, fn, blend_alpha: bool = False, clamp_alpha: bool = True, **kwargs) -> None:
        from .engine import blend
        blend(self, other, fn, blend_alpha, clamp_alpha, **kwargs)

    def get_alpha(self) -> "ImageBuffer":
        from .alpha import get_alpha
        return get_alpha(self)

    def set_alpha(self, alpha_image) -> None:
        from .alpha import set_alpha
        set_alpha(self, alpha_image)

    def transplant_alpha(self, other) -> None:
        from .alpha import transplant_alpha
        transplant_alpha(self, other)


@dataclass(eq=False)
class PixelView:
    """Resolved view of either handle flavour, valid for a single call."""

    pixels: np.ndarray  # (H, W, C), writable
    format: PixelFormat
    commit: Callable[[], None]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


def _pil_from_samples(mode: str, size: tuple[int, int], samples: NDArray) -> Image.Image:
    if mode == "I;16":
        data = np.ascontiguousarray(samples, dtype="<u2").tobytes()
    else:
        data = np.ascontiguousarray(samples).tobytes()
    return Image.frombytes(mode, size, data)


def _pil_view(image: Image.Image) -> PixelView:
    fmt = PixelFormat.from_pil_mode(image.mode)
    image.load()
    pixels = np.array(image, dtype=fmt.dtype)
    if pixels.ndim == 2:
        pixels = pixels[..., np.newaxis]

    def commit() -> None:
        if fmt.bit_depth is BitDepth.SIXTEEN:
            data = np.ascontiguousarray(pixels, dtype="<u2").tobytes()
        else:
            data = np.ascontiguousarray(pixels).tobytes()
        image.frombytes(data)

    return PixelView(pixels, fmt, commit)


def open_view(image) -> PixelView:
    """Resolve an ImageBuffer or Pillow image to a writable (H, W, C) view.

    Writes to the view reach an ImageBuffer directly; for a Pillow image
    they are applied when ``commit()`` is called.
    """
    if isinstance(image, ImageBuffer):
        return PixelView(image.channel_view(), image.format, lambda: None)
    if isinstance(image, Image.Image):
        return _pil_view(image)
    raise TypeError(f"Expected ImageBuffer or PIL.Image.Image, got {type(image).__name__}")


def new_alpha_like(image, samples: NDArray, bit_depth: BitDepth):
    """Wrap extracted ``(H, W)`` alpha samples in the flavour of ``image``."""
    fmt = PixelFormat(ChannelLayout.LUMA, bit_depth)
    if isinstance(image, Image.Image):
        height, width = samples.shape
        return _pil_from_samples(fmt.to_pil_mode(), (width, height), samples)
    return ImageBuffer(samples, fmt)
