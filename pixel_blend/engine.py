"""
Blend one image into another, channel by channel.

Both images are decoded to normalized floats, combined with the blend
function, and re-encoded into the target's own bit depth. The source may
be grayscale while the target is colour (luma is repeated across RGB), and
either side may lack an alpha channel (it reads as opaque). The reverse,
colour into grayscale, is rejected.
"""

import numpy as np
from numpy.typing import NDArray

from .blend_modes import BlendFunction
from .errors import DimensionMismatch, IncompatibleFormats
from .handles import PixelView, open_view
from .normalize import broadcast_color, decode, encode, split_channels


def as_array_function(fn: BlendFunction):
    """Return a callable that evaluates ``fn`` over whole arrays."""
    if getattr(fn, "vectorized", False) or isinstance(fn, np.ufunc):
        return fn
    return np.vectorize(fn, otypes=[np.float64])


def check_dimensions(a: PixelView, b: PixelView) -> None:
    if a.size != b.size:
        raise DimensionMismatch(a.size, b.size)


def _evaluate(op, a: NDArray[np.float64], b: NDArray[np.float64]) -> NDArray[np.float64]:
    result = np.asarray(op(a, b), dtype=np.float64)
    return np.broadcast_to(result, a.shape)


def blend(
    target,
    source,
    fn: BlendFunction,
    blend_alpha: bool = False,
    clamp_alpha: bool = True,
    *,
    blend_color: bool = True,
    alpha_weighted: bool = False
) -> None:
    """Blend ``source`` into ``target`` in place.

    Args:
        target: ImageBuffer or Pillow image, modified in place
        source: ImageBuffer or Pillow image, never modified
        fn: Blend function ``fn(target_value, source_value)`` over 0-1
            values; see ``blend_modes`` for built-ins
        blend_alpha: Also blend the alpha channel. Skipped when the target
            has no alpha channel.
        clamp_alpha: Clamp the blended alpha to 0-1 before re-encoding.
            When False it is only saturated at the integer range.
        blend_color: Blend the colour channels (False blends alpha only)
        alpha_weighted: Weight the colour result by the source alpha,
            ``fn(a, b) × alpha_b + a × (1 - alpha_b)``

    Raises:
        DimensionMismatch: Width or height differ
        IncompatibleFormats: Source is colour and target is grayscale
        UnsupportedFormat: Either image is not an 8/16-bit L, LA, RGB, RGBA
    """
    target_view = open_view(target)
    source_view = open_view(source)
    target_fmt = target_view.format
    source_fmt = source_view.format

    check_dimensions(target_view, source_view)
    if source_fmt.is_color and not target_fmt.is_color:
        raise IncompatibleFormats(target_fmt.name, source_fmt.name)

    op = as_array_function(fn)

    t_color, t_alpha = split_channels(decode(target_view.pixels, target_fmt.bit_depth), target_fmt)
    s_color, s_alpha = split_channels(decode(source_view.pixels, source_fmt.bit_depth), source_fmt)
    s_color = broadcast_color(s_color, t_color.shape[-1], source_fmt.name, target_fmt.name)

    new_color = None
    if blend_color:
        new_color = _evaluate(op, t_color, s_color)
        if alpha_weighted:
            # Mix with the target first; the clamp applies to the mixed value
            new_color = new_color * s_alpha + t_color * (1 - s_alpha)
        new_color = np.clip(new_color, 0.0, 1.0)

    new_alpha = None
    if blend_alpha and target_fmt.has_alpha:
        new_alpha = _evaluate(op, t_alpha, s_alpha)
        if clamp_alpha:
            new_alpha = np.clip(new_alpha, 0.0, 1.0)

    # All results are computed before the first write to the target.
    bit_depth = target_fmt.bit_depth
    if new_color is not None:
        target_view.pixels[..., :t_color.shape[-1]] = encode(new_color, bit_depth)
    if new_alpha is not None:
        index = target_fmt.alpha_index
        target_view.pixels[..., index:index + 1] = encode(new_alpha, bit_depth, clamp=clamp_alpha)
    if new_color is not None or new_alpha is not None:
        target_view.commit()
