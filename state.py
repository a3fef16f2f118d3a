"""
TONE CURVE EDITOR - Shared State

Centralized curve state (the channel set) shared between the editor canvas,
the interaction controller and anything evaluating pixels.
"""

from typing import Optional, Tuple

from PySide6.QtCore import QObject, Signal

from curves import CHANNELS, Curve, CurveSnapshot, Point


class CurveState(QObject):
    """Per-channel tone curves with a single active channel.

    Every committed change emits curvesChanged with an immutable snapshot,
    so listeners never hold a reference to the live curves.
    """

    # Signals for state changes
    curvesChanged = Signal(object)  # CurveSnapshot
    activeChannelChanged = Signal(str)  # 'luma', 'red', 'green', 'blue'

    def __init__(self, config: Optional[dict] = None, parent: QObject = None):
        super().__init__(parent)
        self._curves = {ch: Curve.identity() for ch in CHANNELS}
        self._active_channel = 'luma'
        if config:
            self._load(config)

    @staticmethod
    def _check_channel(channel: str):
        if channel not in CHANNELS:
            raise ValueError(f"Unknown channel: {channel}. Valid channels: {list(CHANNELS)}")

    @property
    def active_channel(self) -> str:
        return self._active_channel

    @active_channel.setter
    def active_channel(self, value: str):
        self._check_channel(value)
        if self._active_channel != value:
            self._active_channel = value
            self.activeChannelChanged.emit(value)

    def curve(self, channel: Optional[str] = None) -> Curve:
        """Copy of a channel's curve (active channel by default)."""
        channel = channel or self._active_channel
        self._check_channel(channel)
        return self._curves[channel].copy()

    def points(self, channel: Optional[str] = None) -> Tuple[Point, ...]:
        channel = channel or self._active_channel
        self._check_channel(channel)
        return self._curves[channel].points

    def snapshot(self) -> CurveSnapshot:
        return CurveSnapshot(**{ch: self._curves[ch].points for ch in CHANNELS})

    def to_config(self) -> dict:
        """Get all curve data for persistence."""
        return self.snapshot().to_config()

    def has_changes(self) -> bool:
        """Check if any curve differs from identity."""
        return any(not curve.is_identity() for curve in self._curves.values())

    def _emit(self):
        self.curvesChanged.emit(self.snapshot())

    # -- Mutations on the active channel --

    def insert(self, x: float, y: float) -> Optional[int]:
        index = self._curves[self._active_channel].insert(x, y)
        if index is not None:
            self._emit()
        return index

    def move(self, index: int, x: float, y: float) -> Point:
        curve = self._curves[self._active_channel]
        before = curve[index]
        point = curve.move(index, x, y)
        if point != before:
            self._emit()
        return point

    def remove(self, index: int) -> bool:
        removed = self._curves[self._active_channel].remove(index)
        if removed:
            self._emit()
        return removed

    def reset_channel(self):
        """Reset the active channel to the identity curve."""
        curve = self._curves[self._active_channel]
        if not curve.is_identity():
            curve.reset()
            self._emit()

    def reset(self):
        """Reset all curves to identity."""
        if self.has_changes():
            for curve in self._curves.values():
                curve.reset()
            self._emit()

    def commit(self, channel: str, curve: Curve):
        """Replace a channel's curve with a copy of the given one."""
        self._check_channel(channel)
        if self._curves[channel] != curve:
            self._curves[channel] = curve.copy()
            self._emit()

    # -- Configuration --

    def _load(self, config: dict) -> bool:
        changed = False
        for ch in CHANNELS:
            if ch not in config:
                continue
            curve = Curve.from_config(config[ch])
            if curve is None:
                print(f"[CurveState] Invalid curve for '{ch}', falling back to identity")
                curve = Curve.identity()
            if curve != self._curves[ch]:
                self._curves[ch] = curve
                changed = True
        return changed

    def load(self, config: dict):
        """Restore curve data from an external settings mapping.

        Channels missing from the mapping keep their current curve; malformed
        channels are replaced with identity rather than failing the load.
        """
        if self._load(config or {}):
            self._emit()
