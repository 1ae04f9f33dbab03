"""
Conversion between integer samples and normalized floats.

Every blend and alpha operation moves samples through the closed range
[0, 1] so that images of different bit depth can be combined:

    decode:  sample / max            (max = 255 or 65535)
    encode:  round(value * max)      (nearest, ties away from zero)

All functions are vectorized with NumPy and work on whole images.
"""

import numpy as np
from numpy.typing import NDArray

from .errors import IncompatibleFormats
from .formats import BitDepth, PixelFormat


def decode(samples: NDArray, bit_depth: BitDepth) -> NDArray[np.float64]:
    """Convert integer samples to floats in [0, 1].

    Args:
        samples: Array of uint8 or uint16 samples
        bit_depth: Bit depth the samples are stored at

    Returns:
        float64 array of the same shape
    """
    return np.asarray(samples, dtype=np.float64) / bit_depth.max_value


def round_half_away(values: NDArray[np.float64]) -> NDArray[np.float64]:
    """Round to the nearest integer, ties away from zero.

    NumPy's ``round`` uses ties-to-even; the engine holds this rule instead
    so that 0.5 always rounds up in magnitude.
    """
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


def encode(
    values: NDArray[np.float64],
    bit_depth: BitDepth,
    clamp: bool = True
) -> NDArray:
    """Convert normalized floats back to integer samples.

    Args:
        values: Float array, nominally in [0, 1]
        bit_depth: Target bit depth
        clamp: Clamp to [0, 1] before scaling. When False, out-of-range
            values are only saturated at the integer boundary.

    Returns:
        Array of uint8 or uint16 samples
    """
    max_value = bit_depth.max_value
    values = np.nan_to_num(np.asarray(values, dtype=np.float64), nan=0.0)
    if clamp:
        values = np.clip(values, 0.0, 1.0)
    scaled = round_half_away(values * max_value)
    return np.clip(scaled, 0, max_value).astype(bit_depth.dtype)


def split_channels(
    normalized: NDArray[np.float64],
    fmt: PixelFormat
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Split an ``(H, W, C)`` normalized image into colour and alpha.

    Images without an alpha channel read as fully opaque.

    Returns:
        (color, alpha) where color is ``(H, W, 1 or 3)`` and alpha is
        ``(H, W, 1)``
    """
    n_color = fmt.layout.color_channels
    color = normalized[..., :n_color]
    if fmt.has_alpha:
        alpha = normalized[..., fmt.alpha_index:fmt.alpha_index + 1]
    else:
        alpha = np.ones(normalized.shape[:-1] + (1,), dtype=np.float64)
    return color, alpha


def broadcast_color(
    color: NDArray[np.float64],
    target_channels: int,
    source_name: str = "",
    target_name: str = ""
) -> NDArray[np.float64]:
    """Bridge source colour channels onto the target's channel count.

    A single luma channel is repeated across RGB. Folding RGB into a single
    channel has no defined rule and raises IncompatibleFormats.
    """
    channels = color.shape[-1]
    if channels == target_channels:
        return color
    if channels == 1:
        return np.repeat(color, target_channels, axis=-1)
    raise IncompatibleFormats(target_name or f"{target_channels}ch", source_name or f"{channels}ch")
