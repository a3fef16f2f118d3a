"""
TONE CURVE EDITOR - Path Rendering

Turns spline segments and histogram counts into path commands in a 255x255
view box with the value axis pointing up (so y is drawn as 255 - y).

Commands are plain tuples:
    ('M', x, y)
    ('L', x, y)
    ('C', c1x, c1y, c2x, c2y, x, y)
    ('Z',)
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

import spline
from curves import DOMAIN_MAX, Point

PathCommand = Tuple


def _flip(y: float) -> float:
    return DOMAIN_MAX - y


def curve_path_commands(points: Sequence[Point]) -> List[PathCommand]:
    """Move to the first knot, then one cubic per segment."""
    if len(points) < 2:
        return []
    x0, y0 = points[0]
    commands = [('M', x0, _flip(y0))]
    for segment in spline.solve(points):
        bez = segment.to_bezier()
        commands.append((
            'C',
            bez.c1[0], _flip(bez.c1[1]),
            bez.c2[0], _flip(bez.c2[1]),
            bez.p1[0], _flip(bez.p1[1]),
        ))
    return commands


def _fmt(value: float) -> str:
    text = f"{value:.2f}".rstrip('0').rstrip('.')
    return '0' if text == '-0' else text


def to_svg_path(commands: Sequence[PathCommand]) -> str:
    """SVG path data for a command list."""
    parts = []
    for cmd in commands:
        op, args = cmd[0], cmd[1:]
        if not args:
            parts.append(op)
            continue
        pairs = [f"{_fmt(args[i])} {_fmt(args[i + 1])}" for i in range(0, len(args), 2)]
        parts.append(f"{op} " + ", ".join(pairs))
    return " ".join(parts)


def histogram_heights(counts) -> Optional[np.ndarray]:
    """Counts normalised so the tallest bucket is 1.0, or None if there is nothing to draw."""
    if counts is None:
        return None
    counts = np.asarray(counts, dtype=np.float64)
    if counts.size == 0:
        return None
    peak = counts.max()
    if peak <= 0:
        return None
    return counts / peak


def _silhouette(heights: np.ndarray) -> List[PathCommand]:
    last = max(len(heights) - 1, 1)
    commands = [('M', 0.0, DOMAIN_MAX)]
    for i, h in enumerate(heights):
        commands.append(('L', i / last * DOMAIN_MAX, _flip(h * DOMAIN_MAX)))
    commands.append(('L', DOMAIN_MAX, DOMAIN_MAX))
    commands.append(('Z',))
    return commands


def histogram_path_commands(counts, progress: float = 1.0) -> List[PathCommand]:
    """Filled histogram silhouette; progress scales heights for collapse/expand."""
    heights = histogram_heights(counts)
    if heights is None:
        return []
    return _silhouette(heights * max(0.0, min(1.0, progress)))


def zero_histogram_path_commands(counts) -> List[PathCommand]:
    """Same silhouette flattened onto the baseline (animation start/end state)."""
    if counts is None or len(counts) == 0:
        return []
    return _silhouette(np.zeros(len(counts)))


def sample_curve(points: Sequence[Point], samples: int = 256) -> np.ndarray:
    """Output values of the curve at evenly spaced inputs across 0-255."""
    xs = np.linspace(0.0, DOMAIN_MAX, samples)
    return spline.evaluate(points, xs)
