"""
TONE CURVE EDITOR - Histogram Adapter

Holds the per-channel sample counts supplied by the image side. The editor
only ever reads them to draw the background silhouette.
"""

from typing import Dict, Optional

import numpy as np
from PySide6.QtCore import QObject, Signal

from curves import CHANNELS

HISTOGRAM_BINS = 256


def _as_counts(channel: str, values) -> np.ndarray:
    counts = np.array(values, dtype=np.float64).ravel()
    if counts.size != HISTOGRAM_BINS:
        raise ValueError(
            f"Histogram for '{channel}' needs {HISTOGRAM_BINS} bins, got {counts.size}")
    # Counts are non-negative by definition; repair anything else to zero
    counts[~np.isfinite(counts)] = 0.0
    np.maximum(counts, 0.0, out=counts)
    counts.setflags(write=False)
    return counts


class HistogramAdapter(QObject):
    """Read-only view over externally computed channel histograms."""

    histogramChanged = Signal()

    def __init__(self, parent: QObject = None):
        super().__init__(parent)
        self._source = None
        self._counts: Dict[str, np.ndarray] = {}

    def set_histogram(self, histogram: Optional[dict]):
        """Replace the histogram data. Same object again is a no-op."""
        if histogram is self._source:
            return
        counts = {}
        for ch in CHANNELS:
            if histogram and histogram.get(ch) is not None:
                counts[ch] = _as_counts(ch, histogram[ch])
        self._source = histogram
        self._counts = counts
        self.histogramChanged.emit()

    def counts(self, channel: str) -> Optional[np.ndarray]:
        if channel not in CHANNELS:
            raise ValueError(f"Unknown channel: {channel}. Valid channels: {list(CHANNELS)}")
        return self._counts.get(channel)

    def has_data(self, channel: str) -> bool:
        counts = self.counts(channel)
        return counts is not None and bool(counts.any())
