"""
Exceptions raised by the blend and alpha operations.

Every check that can raise one of these runs before the first sample of
the target is written, so a failed call leaves the target untouched.
"""


class PixelOpsError(ValueError):
    """Base class for caller-input errors in pixel operations."""


class DimensionMismatch(PixelOpsError):
    """The two images do not share width and height."""

    def __init__(self, size_a: tuple[int, int], size_b: tuple[int, int]):
        self.size_a = size_a
        self.size_b = size_b
        super().__init__(
            f"Image dimensions do not match: {size_a[0]}x{size_a[1]} vs {size_b[0]}x{size_b[1]}"
        )


class IncompatibleFormats(PixelOpsError):
    """A colour image cannot be blended into a grayscale target."""

    def __init__(self, target: str, source: str):
        self.target = target
        self.source = source
        super().__init__(
            f"Image of type {target} cannot accept blends from image of type {source}"
        )


class NoAlphaChannel(PixelOpsError):
    """The image format carries no alpha channel."""

    def __init__(self, format_name: str):
        self.format_name = format_name
        super().__init__(
            f"Cannot access alpha channel: image of type {format_name} has no alpha channel"
        )


class UnsupportedFormat(PixelOpsError):
    """The image is not one of the 8/16-bit L, LA, RGB, RGBA formats."""
