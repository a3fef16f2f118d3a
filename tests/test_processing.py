"""
Tests for applying curves to pixels.
"""

import numpy as np
import pytest

import processing
import rendering
import spline
from curves import CurveSnapshot

INVERT = ((0.0, 255.0), (255.0, 0.0))
S_CURVE = ((0.0, 0.0), (64.0, 40.0), (192.0, 220.0), (255.0, 255.0))


@pytest.fixture
def gradient():
    """BGR uint8 image where each channel ramps 0-255 along x."""
    ramp = np.arange(256, dtype=np.uint8)
    row = np.stack([ramp, ramp, ramp], axis=-1)
    return np.repeat(row[None, :, :], 4, axis=0)


class TestBuildLut:
    """Tests for LUT construction."""

    def test_identity(self):
        lut = processing.build_lut([(0, 0), (255, 255)])
        np.testing.assert_array_equal(lut, np.arange(256))
        assert lut.dtype == np.uint8

    def test_invert(self):
        lut = processing.build_lut(INVERT)
        np.testing.assert_array_equal(lut, 255 - np.arange(256))

    def test_matches_rendered_curve(self):
        lut = processing.build_lut(S_CURVE)
        sampled = rendering.sample_curve(S_CURVE)
        np.testing.assert_array_equal(lut, np.clip(np.rint(sampled), 0, 255).astype(np.uint8))

    def test_monotone_curve_gives_monotone_lut(self):
        lut = processing.build_lut(S_CURVE).astype(int)
        assert (np.diff(lut) >= 0).all()

    def test_build_luts(self):
        luts = processing.build_luts(CurveSnapshot(red=S_CURVE))
        assert set(luts) == {'luma', 'red', 'green', 'blue'}
        assert luts['luma'] is processing.IDENTITY_LUT

    def test_repeated_x_gives_step(self):
        lut = processing.build_lut([(0, 0), (100, 50), (100, 60), (255, 255)])
        assert lut.dtype == np.uint8
        assert lut[:100].max() <= 50
        assert lut[100] == 60
        assert lut[101:].min() >= 60
        assert lut[255] == 255
        assert np.all(np.diff(lut.astype(int)) >= 0)

    def test_lut_is_read_only(self):
        lut = processing.build_lut(S_CURVE)
        assert not lut.flags.writeable
        with pytest.raises(ValueError):
            lut[0] = 1
        assert processing.build_lut(S_CURVE)[0] == 0

    def test_identity_lut_is_read_only(self):
        lut = processing.build_lut([(0, 0), (255, 255)])
        assert not lut.flags.writeable
        with pytest.raises(ValueError):
            lut[10] = 0


class TestApplyCurves:
    """Tests for apply_curves."""

    def test_identity_returns_input(self, gradient):
        assert processing.apply_curves(gradient, CurveSnapshot()) is gradient

    def test_red_curve_only_touches_red(self, gradient):
        result = processing.apply_curves(gradient, CurveSnapshot(red=INVERT))
        np.testing.assert_array_equal(result[0, :, 2], 255 - np.arange(256))
        np.testing.assert_array_equal(result[0, :, 0], np.arange(256))
        np.testing.assert_array_equal(result[0, :, 1], np.arange(256))

    def test_input_not_modified(self, gradient):
        before = gradient.copy()
        processing.apply_curves(gradient, CurveSnapshot(luma=INVERT))
        np.testing.assert_array_equal(gradient, before)

    def test_luma_applied_after_channels(self, gradient):
        # Inverting twice restores the red channel; green and blue end up inverted
        result = processing.apply_curves(gradient, CurveSnapshot(luma=INVERT, red=INVERT))
        np.testing.assert_array_equal(result[0, :, 2], np.arange(256))
        np.testing.assert_array_equal(result[0, :, 1], 255 - np.arange(256))

    def test_float_path(self):
        img = np.linspace(0, 1, 30, dtype=np.float32).reshape(2, 5, 3)
        result = processing.apply_curves(img, CurveSnapshot(green=S_CURVE))
        assert result.dtype == np.float32
        expected = spline.evaluate(S_CURVE, img[:, :, 1] * 255.0) / 255.0
        np.testing.assert_allclose(result[:, :, 1], expected, atol=1e-6)
        np.testing.assert_array_equal(result[:, :, 0], img[:, :, 0])

    def test_float_luma(self):
        img = np.full((2, 2, 3), 0.2, dtype=np.float32)
        result = processing.apply_curves(img, CurveSnapshot(luma=INVERT))
        np.testing.assert_allclose(result, 0.8, atol=1e-5)

    def test_float_repeated_x(self):
        img = np.linspace(0, 1, 12, dtype=np.float32).reshape(1, 4, 3)
        step = ((0.0, 0.0), (100.0, 50.0), (100.0, 60.0), (255.0, 255.0))
        result = processing.apply_curves(img, CurveSnapshot(luma=step))
        assert np.isfinite(result).all()
        assert result.max() == pytest.approx(1.0)

    def test_grayscale_uint8(self):
        img = np.arange(256, dtype=np.uint8).reshape(16, 16)
        result = processing.apply_curves(img, CurveSnapshot(luma=INVERT))
        np.testing.assert_array_equal(result.ravel(), 255 - np.arange(256))

    def test_unsupported_dtype(self):
        img = np.zeros((2, 2, 3), dtype=np.uint16)
        with pytest.raises(ValueError):
            processing.apply_curves(img, CurveSnapshot(luma=INVERT))
