"""
TONE CURVE EDITOR - Interaction Controller

Translates pointer events (already mapped to curve space) into curve
mutations. Two states: Idle, and Dragging a single knot.
"""

from dataclasses import dataclass
from typing import Optional, Union

from PySide6.QtCore import Qt

from curves import Curve, clamp
from state import CurveState
from ui_constants import Dimensions


@dataclass(frozen=True)
class Idle:
    """No pointer gesture in progress."""


@dataclass
class Dragging:
    """A knot is being dragged.

    The shadow curve is the live copy being edited; every move writes it
    through to the state, so releasing has nothing left to apply.
    """
    point_index: int
    channel: str
    shadow: Curve


InteractionState = Union[Idle, Dragging]

IDLE = Idle()


class CurveInteractionController:
    """Pointer state machine for the curves canvas."""

    def __init__(self, state: CurveState, hit_radius: float = Dimensions.HIT_RADIUS):
        self._state = state
        self._hit_radius = hit_radius
        self._interaction: InteractionState = IDLE
        self._committing = False
        state.activeChannelChanged.connect(self._on_active_channel_changed)
        state.curvesChanged.connect(self._on_curves_changed)

    @property
    def state(self) -> CurveState:
        return self._state

    @property
    def interaction(self) -> InteractionState:
        return self._interaction

    @property
    def is_dragging(self) -> bool:
        return isinstance(self._interaction, Dragging)

    @property
    def dragging_index(self) -> Optional[int]:
        if isinstance(self._interaction, Dragging):
            return self._interaction.point_index
        return None

    def hit_test(self, x: float, y: float) -> Optional[int]:
        """Index of the closest knot within the hit box, or None."""
        best, best_dist = None, None
        for i, (px, py) in enumerate(self._state.points()):
            dx, dy = abs(px - x), abs(py - y)
            if dx < self._hit_radius and dy < self._hit_radius:
                dist = dx * dx + dy * dy
                if best_dist is None or dist < best_dist:
                    best, best_dist = i, dist
        return best

    def pointer_down(self, x: float, y: float, button=Qt.LeftButton) -> bool:
        """Start a gesture. Returns True if the curve or the interaction changed."""
        x, y = clamp(x), clamp(y)
        idx = self.hit_test(x, y)

        if button == Qt.RightButton:
            # Secondary click on an interior knot deletes it
            if idx is None or self.is_dragging:
                return False
            return self._state.remove(idx)

        if button != Qt.LeftButton:
            return False

        channel = self._state.active_channel
        shadow = self._state.curve(channel)
        if idx is None:
            # Empty canvas: add a point and drag it in the same gesture
            idx = shadow.insert(x, y)
            if idx is None:
                return False
            self._commit(channel, shadow)

        self._interaction = Dragging(point_index=idx, channel=channel, shadow=shadow)
        return True

    def pointer_move(self, x: float, y: float) -> bool:
        """Drag the active knot. Returns True if a drag is in progress."""
        session = self._interaction
        if not isinstance(session, Dragging):
            return False
        session.shadow.move(session.point_index, x, y)
        self._commit(session.channel, session.shadow)
        return True

    def pointer_up(self):
        """Finish the drag. Moves were already committed as they happened."""
        self._interaction = IDLE

    def pointer_cancel(self):
        self._interaction = IDLE

    def capture_lost(self):
        """Window blur, hide, or grab taken by another widget."""
        self._interaction = IDLE

    def double_click(self):
        """Reset the active channel to identity, whatever the current state."""
        self._interaction = IDLE
        self._state.reset_channel()

    def set_active_channel(self, channel: str):
        self._state.active_channel = channel
        # Also covers re-selecting the same channel
        self._interaction = IDLE

    def _on_active_channel_changed(self, channel: str):
        # Pending drag belongs to the old channel: abandon it
        self._interaction = IDLE

    def _commit(self, channel: str, curve: Curve):
        self._committing = True
        try:
            self._state.commit(channel, curve)
        finally:
            self._committing = False

    def _on_curves_changed(self, snapshot):
        # Curves replaced from outside: the shadow is stale
        if not self._committing:
            self._interaction = IDLE
