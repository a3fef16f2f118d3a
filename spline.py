"""
TONE CURVE EDITOR - Monotone Spline Solver

Fritsch-Carlson monotone cubic Hermite interpolation over curve knots.

The same tangents drive both the on-screen Bezier path and the pixel
pipeline, so what the user sees is what gets applied. Evaluation for the
pipeline and for sampled drawing goes through evaluate() only.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
from scipy.interpolate import PPoly

from curves import DOMAIN_MIN, DOMAIN_MAX, Point

# Stand-in secant for a zero-width interval
VERTICAL_SECANT = 1e6

# Intervals narrower than this are treated as zero-width
_MIN_DX = 1e-12


@dataclass(frozen=True)
class BezierSegment:
    """Cubic Bezier in curve space: start, two control points, end."""
    p0: Point
    c1: Point
    c2: Point
    p1: Point


@dataclass(frozen=True)
class HermiteSegment:
    """One interval of the spline: endpoint values and endpoint slopes."""
    x0: float
    y0: float
    x1: float
    y1: float
    m0: float
    m1: float

    def to_bezier(self) -> BezierSegment:
        third = (self.x1 - self.x0) / 3.0
        return BezierSegment(
            p0=(self.x0, self.y0),
            c1=(self.x0 + third, self.y0 + self.m0 * third),
            c2=(self.x1 - third, self.y1 - self.m1 * third),
            p1=(self.x1, self.y1),
        )

    def evaluate(self, x: float) -> float:
        h = self.x1 - self.x0
        if h <= _MIN_DX:
            return self.y1
        t = (x - self.x0) / h
        t2 = t * t
        t3 = t2 * t
        h00 = 2 * t3 - 3 * t2 + 1
        h10 = t3 - 2 * t2 + t
        h01 = -2 * t3 + 3 * t2
        h11 = t3 - t2
        return h00 * self.y0 + h10 * h * self.m0 + h01 * self.y1 + h11 * h * self.m1


def secants(points: Sequence[Point]) -> List[float]:
    """Straight-line slope of each interval."""
    deltas = []
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        dx = x1 - x0
        dy = y1 - y0
        if abs(dx) < _MIN_DX:
            if dy > 0:
                deltas.append(VERTICAL_SECANT)
            elif dy < 0:
                deltas.append(-VERTICAL_SECANT)
            else:
                deltas.append(0.0)
        else:
            deltas.append(dy / dx)
    return deltas


def tangents(points: Sequence[Point]) -> List[float]:
    """Knot slopes limited so no interval overshoots its endpoint values."""
    n = len(points)
    if n < 2:
        raise ValueError(f"Need at least 2 points, got {n}")

    deltas = secants(points)

    ms = [deltas[0]]
    for i in range(1, n - 1):
        # Sign change or flat neighbour: the knot is a local extremum or plateau
        if deltas[i - 1] * deltas[i] <= 0:
            ms.append(0.0)
        else:
            ms.append((deltas[i - 1] + deltas[i]) / 2.0)
    ms.append(deltas[n - 2])

    for i in range(n - 1):
        if deltas[i] == 0:
            ms[i] = 0.0
            ms[i + 1] = 0.0
            continue
        alpha = ms[i] / deltas[i]
        beta = ms[i + 1] / deltas[i]
        tau = alpha * alpha + beta * beta
        if tau > 9:
            scale = 3.0 / math.sqrt(tau)
            ms[i] = scale * alpha * deltas[i]
            ms[i + 1] = scale * beta * deltas[i]

    return ms


def solve(points: Sequence[Point]) -> List[HermiteSegment]:
    """Hermite segment for each of the n-1 intervals."""
    ms = tangents(points)
    return [
        HermiteSegment(x0, y0, x1, y1, ms[i], ms[i + 1])
        for i, ((x0, y0), (x1, y1)) in enumerate(zip(points, points[1:]))
    ]


def _spline(points: Sequence[Point]):
    # Piecewise cubic from solve()'s segments in local power form. Zero-width
    # segments are dropped; the step at that x takes the right-hand value,
    # the same value HermiteSegment.evaluate gives them.
    segments = [s for s in solve(points) if s.x1 - s.x0 > _MIN_DX]
    if not segments:
        return None
    h = np.array([s.x1 - s.x0 for s in segments], dtype=np.float64)
    y0 = np.array([s.y0 for s in segments], dtype=np.float64)
    y1 = np.array([s.y1 for s in segments], dtype=np.float64)
    m0 = np.array([s.m0 for s in segments], dtype=np.float64)
    m1 = np.array([s.m1 for s in segments], dtype=np.float64)
    delta = (y1 - y0) / h
    coeffs = np.vstack([
        (m0 + m1 - 2.0 * delta) / (h * h),
        (3.0 * delta - 2.0 * m0 - m1) / h,
        m0,
        y0,
    ])
    breaks = np.array([s.x0 for s in segments] + [segments[-1].x1], dtype=np.float64)
    return PPoly(coeffs, breaks, extrapolate=False)


def evaluate(points: Sequence[Point], xs) -> np.ndarray:
    """Evaluate the curve at xs (curve space, clamped to 0-255)."""
    xs = np.clip(np.asarray(xs, dtype=np.float64), DOMAIN_MIN, DOMAIN_MAX)
    poly = _spline(points)
    if poly is None:
        # Every interval is zero-width: the curve is a single step
        return np.full(xs.shape, float(points[-1][1]))
    values = poly(xs)
    # Curves are pinned to the full domain, but guard anything loaded oddly
    return np.nan_to_num(values, nan=0.0, posinf=DOMAIN_MAX, neginf=DOMAIN_MIN)
