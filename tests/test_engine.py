#!/usr/bin/env python3
"""Tests for the blend engine."""
import pytest
import sys
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from pixel_blend import (
    DimensionMismatch,
    ImageBuffer,
    IncompatibleFormats,
    UnsupportedFormat,
    add,
    blend,
    darken,
    lighten,
    multiply,
    normal,
    subtract,
    vectorized,
)
from pixel_blend.engine import as_array_function
from conftest import all_formats


def rgb_pixel(r, g, b, dtype=np.uint8):
    return ImageBuffer(np.array([[[r, g, b]]], dtype=dtype))


class TestKnownValues:
    """Tests against hand-computed results."""

    def test_multiply_scenario(self):
        """Test (200,100,50) x (50,200,250) gives (39,78,49)."""
        target = rgb_pixel(200, 100, 50)
        blend(target, rgb_pixel(50, 200, 250), multiply, blend_alpha=False)
        assert target.pixels[0, 0].tolist() == [39, 78, 49]

    def test_self_multiply_squares(self, rgb8):
        """Test blending an image with itself squares each value."""
        original = rgb8.pixels.copy()
        blend(rgb8, rgb8, multiply)
        expected = np.round((original / 255.0) ** 2 * 255)
        assert np.all(np.abs(rgb8.pixels.astype(int) - expected) <= 1)
        # 128 -> 128/255 squared -> ~64
        assert abs(int(rgb8.pixels[0, 1, 1]) - 64) <= 1

    def test_results_are_clamped(self):
        """Test add and subtract saturate instead of wrapping."""
        target = rgb_pixel(200, 100, 50)
        blend(target, rgb_pixel(100, 200, 250), add)
        assert target.pixels[0, 0].tolist() == [255, 255, 255]

        target = rgb_pixel(200, 100, 50)
        blend(target, rgb_pixel(100, 200, 250), subtract)
        assert target.pixels[0, 0].tolist() == [100, 0, 0]

    def test_normal_copies_source(self):
        """Test the normal mode replaces colour."""
        target = rgb_pixel(1, 2, 3)
        blend(target, rgb_pixel(7, 8, 9), normal)
        assert target.pixels[0, 0].tolist() == [7, 8, 9]


class TestProperties:
    """Tests for general blend invariants."""

    @pytest.mark.parametrize("fn", [lighten, darken])
    def test_idempotent_self_blend(self, fn):
        """Test lighten/darken with itself leaves every format unchanged."""
        for image in all_formats():
            before = image.pixels.copy()
            blend(image, image, fn, blend_alpha=True, clamp_alpha=True)
            assert np.array_equal(image.pixels, before), image.format.name

    def test_shape_and_format_preserved(self):
        """Test only sample values change."""
        for target in all_formats(seed=1):
            for source in all_formats(seed=2):
                if source.format.is_color and not target.format.is_color:
                    continue
                t = target.copy()
                blend(t, source, multiply, blend_alpha=True, clamp_alpha=True)
                assert t.pixels.shape == target.pixels.shape
                assert t.pixels.dtype == target.pixels.dtype
                assert t.format == target.format

    def test_source_never_mutated(self, rgb8, rgba8):
        """Test the source image is read only."""
        before = rgba8.pixels.copy()
        blend(rgb8, rgba8, multiply, blend_alpha=True)
        assert np.array_equal(rgba8.pixels, before)


class TestFormatBridging:
    """Tests for blending across layouts and bit depths."""

    def test_luma_into_rgb_broadcasts(self):
        """Test a gray source acts on all three channels."""
        target = rgb_pixel(255, 255, 255)
        source = ImageBuffer(np.array([[128]], dtype=np.uint8))
        blend(target, source, multiply)
        assert target.pixels[0, 0].tolist() == [128, 128, 128]

    def test_16bit_source_into_8bit_target(self):
        """Test bit depths are bridged through 0-1."""
        target = rgb_pixel(255, 255, 255)
        source = rgb_pixel(65535, 32768, 0, dtype=np.uint16)
        blend(target, source, multiply)
        assert target.pixels[0, 0].tolist() == [255, 128, 0]

    def test_8bit_source_into_16bit_target(self):
        """Test an 8-bit white source leaves a 16-bit target alone."""
        target = rgb_pixel(1000, 2000, 3000, dtype=np.uint16)
        blend(target, rgb_pixel(255, 255, 255), multiply)
        assert target.pixels[0, 0].tolist() == [1000, 2000, 3000]

    def test_rgb_into_luma_rejected(self, l8, rgb8):
        """Test colour into grayscale fails without touching the target."""
        before = l8.pixels.copy()
        with pytest.raises(IncompatibleFormats) as exc:
            blend(l8, rgb8, multiply)
        assert "L8" in str(exc.value) and "Rgb8" in str(exc.value)
        assert np.array_equal(l8.pixels, before)

    def test_rgba_into_luma_alpha_rejected(self, la8, rgba8):
        """Test colour+alpha into gray+alpha is also rejected."""
        before = la8.pixels.copy()
        with pytest.raises(IncompatibleFormats):
            blend(la8, rgba8, multiply, blend_alpha=True)
        assert np.array_equal(la8.pixels, before)

    def test_all_format_pairs(self):
        """Test every pair either blends or raises IncompatibleFormats."""
        for target in all_formats():
            for source in all_formats(seed=3):
                t = target.copy()
                if source.format.is_color and not target.format.is_color:
                    with pytest.raises(IncompatibleFormats):
                        blend(t, source, multiply, blend_alpha=True)
                else:
                    blend(t, source, multiply, blend_alpha=True)


class TestAlphaBlending:
    """Tests for the blend_alpha and clamp_alpha switches."""

    def test_alpha_untouched_by_default(self, rgba8):
        """Test blend_alpha=False keeps alpha."""
        source = ImageBuffer(np.zeros((2, 2, 4), dtype=np.uint8))
        before = rgba8.pixels[..., 3].copy()
        blend(rgba8, source, multiply)
        assert np.array_equal(rgba8.pixels[..., 3], before)
        assert np.all(rgba8.pixels[..., :3] == 0)

    def test_alpha_blended(self, rgba8):
        """Test blend_alpha applies the function to alpha."""
        source = ImageBuffer(np.zeros((2, 2, 4), dtype=np.uint8))
        blend(rgba8, source, multiply, blend_alpha=True)
        assert np.all(rgba8.pixels[..., 3] == 0)

    def test_source_without_alpha_is_opaque(self, rgba8, rgb8):
        """Test a missing source alpha reads as 1.0."""
        before = rgba8.pixels[..., 3].copy()
        blend(rgba8, rgb8, multiply, blend_alpha=True)
        assert np.array_equal(rgba8.pixels[..., 3], before)

    def test_target_without_alpha_skips_alpha(self, rgb8, rgba8):
        """Test blend_alpha on an alpha-less target only blends colour."""
        blend(rgb8, rgba8, normal, blend_alpha=True)
        assert np.array_equal(rgb8.pixels, rgba8.pixels[..., :3])

    def test_unclamped_alpha_saturates(self):
        """Test out-of-range alpha still lands in the integer range."""
        for clamp in (True, False):
            target = ImageBuffer(np.array([[[10, 200]]], dtype=np.uint8))
            source = ImageBuffer(np.array([[[10, 200]]], dtype=np.uint8))
            blend(target, source, add, blend_alpha=True, clamp_alpha=clamp)
            assert target.pixels[0, 0].tolist() == [20, 255]

    def test_alpha_only(self, rgba8):
        """Test blend_color=False leaves colour alone."""
        source = ImageBuffer(np.zeros((2, 2, 4), dtype=np.uint8))
        before = rgba8.pixels[..., :3].copy()
        blend(rgba8, source, multiply, blend_alpha=True, blend_color=False)
        assert np.array_equal(rgba8.pixels[..., :3], before)
        assert np.all(rgba8.pixels[..., 3] == 0)

    def test_alpha_weighted(self):
        """Test source alpha weights the colour result."""
        target = ImageBuffer(np.array([[[200, 200, 200, 255]]], dtype=np.uint8))
        source = ImageBuffer(np.array([[[0, 0, 0, 0], ]], dtype=np.uint8))
        blend(target, source, normal, alpha_weighted=True)
        assert target.pixels[0, 0].tolist() == [200, 200, 200, 255]

        source = ImageBuffer(np.array([[[0, 0, 0, 255]]], dtype=np.uint8))
        blend(target, source, normal, alpha_weighted=True)
        assert target.pixels[0, 0].tolist() == [0, 0, 0, 255]

    def test_alpha_weighted_clamps_after_mixing(self):
        """Test out-of-range results are mixed by source alpha before clamping."""
        # 1.6 * 0.502 + 0.8 * 0.498 > 1
        target = ImageBuffer(np.array([[[204, 204, 204, 255]]], dtype=np.uint8))
        source = ImageBuffer(np.array([[[204, 204, 204, 128]]], dtype=np.uint8))
        blend(target, source, add, alpha_weighted=True)
        assert target.pixels[0, 0].tolist() == [255, 255, 255, 255]

        # -0.6 * 0.502 + 0.2 * 0.498 < 0
        target = ImageBuffer(np.array([[[51, 51, 51, 255]]], dtype=np.uint8))
        source = ImageBuffer(np.array([[[204, 204, 204, 128]]], dtype=np.uint8))
        blend(target, source, subtract, alpha_weighted=True)
        assert target.pixels[0, 0].tolist() == [0, 0, 0, 255]


class TestPreconditions:
    """Tests for input validation."""

    def test_dimension_mismatch(self, rgb8):
        """Test different sizes fail without touching either image."""
        other = ImageBuffer(np.zeros((3, 2, 3), dtype=np.uint8))
        before = rgb8.pixels.copy()
        with pytest.raises(DimensionMismatch) as exc:
            blend(rgb8, other, multiply)
        assert exc.value.size_a == (2, 2)
        assert exc.value.size_b == (2, 3)
        assert np.array_equal(rgb8.pixels, before)
        assert np.all(other.pixels == 0)

    def test_errors_are_value_errors(self, rgb8):
        """Test engine errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            blend(rgb8, ImageBuffer(np.zeros((1, 1, 3), dtype=np.uint8)), multiply)

    def test_non_image_rejected(self, rgb8):
        """Test raw arrays are not accepted as handles."""
        with pytest.raises(TypeError):
            blend(rgb8, np.zeros((2, 2, 3), dtype=np.uint8), multiply)

    def test_unsupported_buffer(self):
        """Test float buffers cannot be built."""
        with pytest.raises(UnsupportedFormat):
            ImageBuffer(np.zeros((2, 2, 3), dtype=np.float32))


class TestCustomFunctions:
    """Tests for user-supplied blend functions."""

    def test_scalar_function(self):
        """Test a branching scalar function is applied per sample."""
        def closest_to_gray(a, b):
            if abs(a - 0.5) < abs(b - 0.5):
                return a
            return b

        target = rgb_pixel(0, 120, 255)
        blend(target, rgb_pixel(130, 255, 0), closest_to_gray)
        # ties go to the source
        assert target.pixels[0, 0].tolist() == [130, 120, 0]

    def test_lambda(self):
        """Test lambdas work as blend functions."""
        target = rgb_pixel(100, 100, 100)
        blend(target, rgb_pixel(0, 0, 0), lambda a, b: a * 2)
        assert target.pixels[0, 0].tolist() == [200, 200, 200]

    def test_constant_function_broadcasts(self):
        """Test a vectorized function returning a scalar fills the image."""
        @vectorized
        def half(a, b):
            return 0.5

        target = rgb_pixel(0, 0, 0)
        blend(target, rgb_pixel(0, 0, 0), half)
        assert target.pixels[0, 0].tolist() == [128, 128, 128]

    def test_ufunc_used_directly(self):
        """Test numpy ufuncs are not wrapped."""
        assert as_array_function(np.maximum) is np.maximum
        assert as_array_function(multiply) is multiply

    def test_method_interface(self, rgb8):
        """Test ImageBuffer.blend matches the function."""
        other = rgb8.copy()
        expected = rgb8.copy()
        blend(expected, other, multiply)
        rgb8.blend(other, multiply)
        assert np.array_equal(rgb8.pixels, expected.pixels)
