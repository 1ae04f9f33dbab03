"""
Photoshop-style blend functions.

Each function takes the target value ``a`` and the source value ``b``,
both normalized to 0-1, and returns the blended value. Results are not
bounded here; the engine clamps them before converting back to samples.

All built-ins are vectorized with NumPy, so they accept whole channel
arrays as well as plain floats.

Formulas follow https://en.wikipedia.org/wiki/Blend_modes
"""

from typing import Callable, Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray


BlendFunction = Callable[[float, float], float]

BlendMode = Literal[
    "add", "subtract", "multiply", "divide", "darken", "lighten",
    "difference", "screen", "overlay", "hard_light", "soft_light", "normal",
]


def vectorized(fn: BlendFunction) -> BlendFunction:
    """Mark a blend function as safe to call on whole NumPy arrays.

    Unmarked callables are lifted with ``numpy.vectorize`` by the engine and
    evaluated one sample at a time.
    """
    fn.vectorized = True
    return fn


@vectorized
def add(a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    """Linear dodge: result = a + b"""
    return np.add(a, b)


@vectorized
def subtract(a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    """result = a - b"""
    return np.subtract(a, b)


@vectorized
def multiply(a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    """Multiply blend mode - darkens the image.

    Formula: result = a × b

    Multiplying by a gray value darkens proportionally; pure white (1.0)
    has no effect, pure black (0.0) results in black.
    """
    return np.multiply(a, b)


@vectorized
def divide(a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    """Divide blend mode - brightens the image.

    Formula: result = a / b, with b = 0 giving 1.0
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.where(b == 0, 1.0, a / np.where(b == 0, 1.0, b))


@vectorized
def darken(a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    """Darken only: result = min(a, b)"""
    return np.minimum(a, b)


@vectorized
def lighten(a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    """Lighten only: result = max(a, b)"""
    return np.maximum(a, b)


@vectorized
def difference(a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    """result = |a - b|"""
    return np.abs(np.subtract(a, b))


@vectorized
def screen(a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    """Screen blend mode - lightens the image.

    Formula: result = 1 - (1 - a) × (1 - b)

    The inverse of multiply. Pure black (0.0) has no effect, pure white
    (1.0) results in white.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    return 1 - (1 - a) * (1 - b)


@vectorized
def overlay(a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    """Overlay blend mode - combines multiply and screen.

    Formula:
        if a < 0.5: result = 2 × a × b
        otherwise:  result = 1 - 2 × (1 - a) × (1 - b)

    The target decides: dark areas get darker, light areas get lighter.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    return np.where(
        a < 0.5,
        2 * a * b,
        1 - 2 * (1 - a) * (1 - b)
    )


@vectorized
def hard_light(a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    """Hard Light - overlay with the roles of the layers swapped.

    Formula:
        if b < 0.5: result = 2 × a × b
        otherwise:  result = 1 - 2 × (1 - a) × (1 - b)
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    return np.where(
        b < 0.5,
        2 * a * b,
        1 - 2 * (1 - a) * (1 - b)
    )


@vectorized
def soft_light(a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    """Soft Light blend mode - gentle contrast enhancement.

    This is the Photoshop formula which produces smoother results
    than the simpler Pegtop formula.

    Formula (Photoshop):
        if b <= 0.5: result = a - (1 - 2×b) × a × (1 - a)
        if b > 0.5:  result = a + (2×b - 1) × (D(a) - a)
        where D(x) = ((16x-12)x+4)x if x <= 0.25, else sqrt(x)

    Values of b below 0.5 darken slightly, values above 0.5 lighten
    slightly.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)

    # D function for Photoshop Soft Light
    def D(x: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.where(
            x <= 0.25,
            ((16 * x - 12) * x + 4) * x,
            np.sqrt(np.abs(x))
        )

    return np.where(
        b <= 0.5,
        a - (1 - 2 * b) * a * (1 - a),
        a + (2 * b - 1) * (D(a) - a)
    )


@vectorized
def normal(a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    """Normal blend mode - the source replaces the target."""
    return np.zeros_like(np.asarray(a, dtype=np.float64)) + b


BLEND_MODES: dict[str, BlendFunction] = {
    "add": add,
    "subtract": subtract,
    "multiply": multiply,
    "divide": divide,
    "darken": darken,
    "lighten": lighten,
    "difference": difference,
    "screen": screen,
    "overlay": overlay,
    "hard_light": hard_light,
    "soft_light": soft_light,
    "normal": normal,
}


def get_blend_mode(mode: str) -> BlendFunction:
    """Look up a built-in blend function by name.

    Raises:
        ValueError: If mode is not recognized
    """
    if mode not in BLEND_MODES:
        raise ValueError(f"Unknown blend mode: {mode}. Use one of {list(BLEND_MODES.keys())}")
    return BLEND_MODES[mode]


def list_blend_modes() -> list[str]:
    return list(BLEND_MODES.keys())


def with_opacity(fn: BlendFunction, opacity: float) -> BlendFunction:
    """Wrap a blend function so it only applies partially.

    Formula: result = a × (1 - opacity) + fn(a, b) × opacity

    Args:
        fn: Blend function to weaken
        opacity: Blend strength (0-1)

    Returns:
        A new blend function; vectorized if ``fn`` is
    """
    if not 0.0 <= opacity <= 1.0:
        raise ValueError(f"opacity must be in [0..1], got {opacity}")

    def partial(a, b):
        return a * (1 - opacity) + fn(a, b) * opacity

    partial.__name__ = f"{getattr(fn, '__name__', 'blend')}@{opacity:g}"
    if getattr(fn, "vectorized", False) or isinstance(fn, np.ufunc):
        partial.vectorized = True
    return partial
