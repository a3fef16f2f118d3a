"""
Tests for curve and histogram path rendering.
"""

import numpy as np
import pytest

import rendering
import spline


class TestCurvePath:
    """Tests for the curve path commands."""

    def test_identity_path(self):
        commands = rendering.curve_path_commands([(0, 0), (255, 255)])
        assert commands[0] == ('M', 0, 255)
        assert len(commands) == 2
        op, c1x, c1y, c2x, c2y, x, y = commands[1]
        assert op == 'C'
        assert (c1x, c1y) == pytest.approx((85.0, 170.0))
        assert (c2x, c2y) == pytest.approx((170.0, 85.0))
        assert (x, y) == (255, 0)

    def test_identity_svg(self):
        commands = rendering.curve_path_commands([(0, 0), (255, 255)])
        assert rendering.to_svg_path(commands) == "M 0 255 C 85 170, 170 85, 255 0"

    def test_one_cubic_per_segment(self):
        points = [(0, 0), (50, 80), (120, 100), (200, 220), (255, 255)]
        commands = rendering.curve_path_commands(points)
        assert [c[0] for c in commands] == ['M', 'C', 'C', 'C', 'C']

    def test_y_axis_inverted(self):
        points = [(0, 40), (128, 200), (255, 10)]
        commands = rendering.curve_path_commands(points)
        assert commands[0][2] == pytest.approx(215.0)
        assert commands[1][-1] == pytest.approx(55.0)
        assert commands[2][-1] == pytest.approx(245.0)

    def test_control_points_follow_tangents(self):
        points = [(0, 20), (100, 140), (255, 200)]
        segments = spline.solve(points)
        commands = rendering.curve_path_commands(points)
        for segment, cmd in zip(segments, commands[1:]):
            third = (segment.x1 - segment.x0) / 3
            assert cmd[1] == pytest.approx(segment.x0 + third)
            assert cmd[2] == pytest.approx(255 - (segment.y0 + segment.m0 * third))
            assert cmd[3] == pytest.approx(segment.x1 - third)
            assert cmd[4] == pytest.approx(255 - (segment.y1 - segment.m1 * third))

    def test_svg_two_decimals(self):
        commands = [('M', 0.0, 255.0), ('C', 10.123, 20.456, 30.0, 40.5, 50.0, 60.0)]
        assert rendering.to_svg_path(commands) == "M 0 255 C 10.12 20.46, 30 40.5, 50 60"

    def test_too_few_points(self):
        assert rendering.curve_path_commands([(0, 0)]) == []


class TestHistogramPath:
    """Tests for the histogram silhouette."""

    def test_none_and_empty(self):
        assert rendering.histogram_path_commands(None) == []
        assert rendering.histogram_path_commands([]) == []

    def test_all_zero_renders_nothing(self):
        assert rendering.histogram_path_commands(np.zeros(256)) == []

    def test_normalised_to_peak(self):
        counts = np.zeros(256)
        counts[10] = 50
        counts[200] = 200
        heights = rendering.histogram_heights(counts)
        assert heights.max() == 1.0
        assert heights[10] == pytest.approx(0.25)

    def test_silhouette_shape(self):
        counts = np.arange(256, dtype=float)
        commands = rendering.histogram_path_commands(counts)
        assert commands[0] == ('M', 0.0, 255.0)
        assert commands[-1] == ('Z',)
        assert commands[-2] == ('L', 255.0, 255.0)
        lines = commands[1:-2]
        assert len(lines) == 256
        # Tallest bucket reaches the top of the view box
        assert lines[-1] == ('L', 255.0, 0.0)
        assert lines[0] == ('L', 0.0, 255.0)

    def test_progress_scales_heights(self):
        counts = np.ones(256)
        half = rendering.histogram_path_commands(counts, progress=0.5)
        assert all(cmd[2] == pytest.approx(127.5) for cmd in half[1:-2])

    def test_zero_variant(self):
        counts = np.random.default_rng(3).integers(0, 1000, 256)
        zero = rendering.zero_histogram_path_commands(counts)
        full = rendering.histogram_path_commands(counts)
        assert len(zero) == len(full)
        assert all(cmd[2] == 255.0 for cmd in zero[1:-2])
        assert [c[1] for c in zero[1:-2]] == [c[1] for c in full[1:-2]]

    def test_zero_variant_matches_zero_progress(self):
        counts = np.arange(1, 257, dtype=float)
        assert rendering.zero_histogram_path_commands(counts) == \
            rendering.histogram_path_commands(counts, progress=0.0)

    def test_zero_variant_without_data(self):
        assert rendering.zero_histogram_path_commands(None) == []


class TestSampleCurve:
    """Tests for curve sampling."""

    def test_identity_samples(self):
        values = rendering.sample_curve([(0, 0), (255, 255)], samples=6)
        np.testing.assert_allclose(values, np.linspace(0, 255, 6), atol=1e-9)

    def test_matches_spline(self):
        points = [(0, 30), (90, 60), (160, 210), (255, 230)]
        values = rendering.sample_curve(points)
        np.testing.assert_allclose(values, spline.evaluate(points, np.linspace(0, 255, 256)))
