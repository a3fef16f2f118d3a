"""
TONE CURVE EDITOR - Curve Model

Control points for a single channel, plus the immutable snapshot type that
is handed to the image pipeline and to worker threads.
"""

import bisect
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

Point = Tuple[float, float]

# Curve domain (both axes)
DOMAIN_MIN = 0.0
DOMAIN_MAX = 255.0

# Minimum horizontal gap between two knots
EPSILON = 0.01

# Channel identifiers, in display order
CHANNELS = ('luma', 'red', 'green', 'blue')

IDENTITY_POINTS = ((DOMAIN_MIN, DOMAIN_MIN), (DOMAIN_MAX, DOMAIN_MAX))


def clamp(value: float, low: float = DOMAIN_MIN, high: float = DOMAIN_MAX) -> float:
    return max(low, min(high, value))


def _parse_point(raw) -> Point:
    """Accept {'x': .., 'y': ..} mappings or (x, y) pairs."""
    if isinstance(raw, dict):
        x, y = raw['x'], raw['y']
    else:
        x, y = raw
    x, y = float(x), float(y)
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"Non-finite control point: {raw!r}")
    return (x, y)


def validate_points(points: Iterable[Point]) -> List[Point]:
    """Return points as a list of float pairs, or raise ValueError."""
    pts = [_parse_point(p) for p in points]
    if len(pts) < 2:
        raise ValueError(f"A curve needs at least 2 points, got {len(pts)}")
    if pts[0][0] != DOMAIN_MIN or pts[-1][0] != DOMAIN_MAX:
        raise ValueError("Curve endpoints must sit at x=0 and x=255")
    for (x0, _), (x1, _) in zip(pts, pts[1:]):
        if x1 <= x0:
            raise ValueError(f"Curve x values must be strictly increasing ({x0} -> {x1})")
    return [(x, clamp(y)) for x, y in pts]


class Curve:
    """Ordered control points for one channel.

    The first and last knots are pinned to x=0 and x=255 and x values are
    strictly increasing. Interactive insert and move keep knots at least
    EPSILON apart.
    """

    def __init__(self, points: Iterable[Point] = IDENTITY_POINTS):
        self._points = validate_points(points)

    @classmethod
    def identity(cls) -> 'Curve':
        return cls(IDENTITY_POINTS)

    @classmethod
    def from_config(cls, raw) -> Optional['Curve']:
        """Build a curve from an external config entry, or None if malformed."""
        if isinstance(raw, (str, bytes)) or not hasattr(raw, '__iter__'):
            return None
        try:
            return cls(raw)
        except (ValueError, TypeError, KeyError):
            return None

    @property
    def points(self) -> Tuple[Point, ...]:
        return tuple(self._points)

    def __len__(self):
        return len(self._points)

    def __getitem__(self, index: int) -> Point:
        return self._points[index]

    def __eq__(self, other):
        if not isinstance(other, Curve):
            return NotImplemented
        return self._points == other._points

    def __repr__(self):
        return f"Curve({self._points!r})"

    def copy(self) -> 'Curve':
        curve = Curve.__new__(Curve)
        curve._points = list(self._points)
        return curve

    def is_identity(self) -> bool:
        return tuple(self._points) == IDENTITY_POINTS

    def insert(self, x: float, y: float) -> Optional[int]:
        """Insert a knot keeping ascending x. Returns its index, or None if rejected."""
        x, y = clamp(x), clamp(y)
        xs = [p[0] for p in self._points]
        index = bisect.bisect_left(xs, x)
        # Never before the first or after the last endpoint
        if index == 0 or index == len(xs):
            return None
        if x - xs[index - 1] < EPSILON or xs[index] - x < EPSILON:
            return None
        self._points.insert(index, (x, y))
        return index

    def move(self, index: int, x: float, y: float) -> Point:
        """Move a knot, clamping it between its neighbours. Returns the stored point."""
        last = len(self._points) - 1
        if index < 0 or index > last:
            raise IndexError(f"Point index {index} out of range (0..{last})")

        if index == 0 or index == last:
            # Endpoints only move vertically
            x = self._points[index][0]
        else:
            prev_x = self._points[index - 1][0]
            next_x = self._points[index + 1][0]
            x = max(prev_x + EPSILON, min(next_x - EPSILON, x))

        point = (x, clamp(y))
        self._points[index] = point
        return point

    def remove(self, index: int) -> bool:
        """Remove an interior knot. Endpoints cannot be removed."""
        last = len(self._points) - 1
        if index < 0 or index > last:
            raise IndexError(f"Point index {index} out of range (0..{last})")
        if index == 0 or index == last:
            return False
        self._points.pop(index)
        return True

    def reset(self):
        self._points = list(IDENTITY_POINTS)


@dataclass(frozen=True)
class CurveSnapshot:
    """Immutable copy of all four channel curves.

    This is what crosses from the interaction side to pixel evaluation;
    nothing mutable is ever shared.
    """
    luma: Tuple[Point, ...] = IDENTITY_POINTS
    red: Tuple[Point, ...] = IDENTITY_POINTS
    green: Tuple[Point, ...] = IDENTITY_POINTS
    blue: Tuple[Point, ...] = IDENTITY_POINTS

    def points(self, channel: str) -> Tuple[Point, ...]:
        if channel not in CHANNELS:
            raise ValueError(f"Unknown channel: {channel}. Valid channels: {list(CHANNELS)}")
        return getattr(self, channel)

    def is_identity(self) -> bool:
        return all(self.points(ch) == IDENTITY_POINTS for ch in CHANNELS)

    def to_config(self) -> dict:
        """Export in the {channel: [{'x': .., 'y': ..}]} shape used by settings and the pipeline."""
        return {
            ch: [{'x': x, 'y': y} for x, y in self.points(ch)]
            for ch in CHANNELS
        }
