"""
Alpha channel extraction, injection and transplant.

The alpha channel is exchanged as a standalone single-channel (luma)
image, so a mask can be edited, saved, or built by hand and then put back.
"""

from .errors import NoAlphaChannel
from .engine import check_dimensions
from .handles import PixelView, new_alpha_like, open_view
from .normalize import decode, encode


def _alpha_samples(view: PixelView):
    fmt = view.format
    if not fmt.has_alpha:
        raise NoAlphaChannel(fmt.name)
    return view.pixels[..., fmt.alpha_index]


def _write_alpha(target: PixelView, samples, bit_depth) -> None:
    """Store ``(H, W)`` samples of ``bit_depth`` into the target's alpha channel."""
    fmt = target.format
    if bit_depth is fmt.bit_depth:
        target.pixels[..., fmt.alpha_index] = samples
    else:
        target.pixels[..., fmt.alpha_index] = encode(decode(samples, bit_depth), fmt.bit_depth)
    target.commit()


def get_alpha(image):
    """Return the alpha channel of ``image`` as a new grayscale image.

    The result has the same width, height, bit depth and handle flavour as
    the input; its samples equal the input's alpha samples exactly.

    Raises:
        NoAlphaChannel: The image has no alpha channel
    """
    view = open_view(image)
    samples = _alpha_samples(view).copy()
    return new_alpha_like(image, samples, view.format.bit_depth)


def set_alpha(image, alpha_image) -> None:
    """Overwrite the alpha channel of ``image`` from a grayscale image.

    Only the first channel of ``alpha_image`` is read, so any format is
    accepted; differing bit depths are converted through 0-1.

    Raises:
        DimensionMismatch: The two images differ in width or height
        NoAlphaChannel: ``image`` has no alpha channel
    """
    target = open_view(image)
    mask = open_view(alpha_image)
    check_dimensions(target, mask)
    if not target.format.has_alpha:
        raise NoAlphaChannel(target.format.name)

    _write_alpha(target, mask.pixels[..., 0], mask.format.bit_depth)


def transplant_alpha(target, source) -> None:
    """Copy the alpha channel of ``source`` into ``target``.

    Same result and same errors, in the same order, as
    ``set_alpha(target, get_alpha(source))`` without building the
    intermediate image.

    Raises:
        NoAlphaChannel: ``source`` or ``target`` has no alpha channel
        DimensionMismatch: The two images differ in width or height
    """
    target_view = open_view(target)
    source_view = open_view(source)
    samples = _alpha_samples(source_view)
    check_dimensions(target_view, source_view)
    if not target_view.format.has_alpha:
        raise NoAlphaChannel(target_view.format.name)

    _write_alpha(target_view, samples, source_view.format.bit_depth)
