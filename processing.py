"""
TONE CURVE EDITOR - Pixel Evaluation

Applies a curve snapshot to image data. Uses the same spline tangents and
evaluation routine as the editor so the preview matches the curve on screen.
"""

from functools import lru_cache
from typing import Dict, Tuple

import cv2
import numpy as np

import spline
from curves import CHANNELS, IDENTITY_POINTS, CurveSnapshot, Point, DOMAIN_MAX

IDENTITY_LUT = np.arange(256, dtype=np.uint8)
IDENTITY_LUT.setflags(write=False)

# OpenCV channel order
BGR_CHANNELS = ('blue', 'green', 'red')


@lru_cache(maxsize=64)
def _cached_lut(points: Tuple[Point, ...]) -> np.ndarray:
    values = spline.evaluate(points, np.arange(256, dtype=np.float64))
    lut = np.clip(np.rint(values), 0, 255).astype(np.uint8)
    # Shared through the cache: callers must not edit it in place
    lut.setflags(write=False)
    return lut


def build_lut(points) -> np.ndarray:
    """Build a 256-entry uint8 LUT for one channel's control points."""
    points = tuple((float(x), float(y)) for x, y in points)
    if points == IDENTITY_POINTS:
        return IDENTITY_LUT
    return _cached_lut(points)


def build_luts(snapshot: CurveSnapshot) -> Dict[str, np.ndarray]:
    """LUT per channel for a snapshot."""
    return {ch: build_lut(snapshot.points(ch)) for ch in CHANNELS}


def _apply_float(channel_data: np.ndarray, points) -> np.ndarray:
    """Evaluate the curve directly on 0-1 float data."""
    out = spline.evaluate(points, channel_data * DOMAIN_MAX) / DOMAIN_MAX
    return np.clip(out, 0.0, 1.0).astype(np.float32)


def apply_curves(img: np.ndarray, snapshot: CurveSnapshot) -> np.ndarray:
    """Apply all curves to a BGR image.

    Supports both uint8 (0-255) and float32 (0-1) input. Per-colour curves
    are applied first, then the luma curve to every channel. For float32,
    the spline is evaluated directly instead of through a LUT for full
    precision.
    """
    if snapshot.is_identity():
        return img

    result = img.copy()
    color = img.ndim == 3 and img.shape[2] >= 3

    if img.dtype == np.float32:
        if color:
            for i, channel in enumerate(BGR_CHANNELS):
                points = snapshot.points(channel)
                if points != IDENTITY_POINTS:
                    result[:, :, i] = _apply_float(result[:, :, i], points)
        if snapshot.luma != IDENTITY_POINTS:
            if color:
                result[:, :, :3] = _apply_float(result[:, :, :3], snapshot.luma)
            else:
                result = _apply_float(result, snapshot.luma)
        return result

    if img.dtype != np.uint8:
        raise ValueError(f"Unsupported image dtype: {img.dtype}. Expected uint8 or float32")

    # uint8 path: use LUT for speed
    luts = build_luts(snapshot)
    if color:
        for i, channel in enumerate(BGR_CHANNELS):
            lut = luts[channel]
            if lut is not IDENTITY_LUT:
                result[:, :, i] = cv2.LUT(np.ascontiguousarray(result[:, :, i]), lut)
    luma_lut = luts['luma']
    if luma_lut is not IDENTITY_LUT:
        if color:
            result[:, :, :3] = cv2.LUT(np.ascontiguousarray(result[:, :, :3]), luma_lut)
        else:
            result = cv2.LUT(result, luma_lut)
    return result
