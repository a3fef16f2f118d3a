"""
TONE CURVE EDITOR - Curves Widget

Interactive curves editor: channel selector, canvas with histogram backdrop,
draggable control points.
"""

from typing import Optional

import numpy as np
from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QButtonGroup
from PySide6.QtCore import Qt, Signal, QEvent, QPointF, QRectF, QVariantAnimation, QEasingCurve
from PySide6.QtGui import QPainter, QPen, QColor, QPainterPath, QPolygonF

import processing
import rendering
from curves import CHANNELS, DOMAIN_MAX
from histogram import HistogramAdapter
from interaction import CurveInteractionController
from state import CurveState
from ui_constants import Colors, Dimensions, Timing, Styles, get_channel_button_style


def _with_alpha(color: str, alpha: int) -> QColor:
    qcolor = QColor(color)
    qcolor.setAlpha(alpha)
    return qcolor


class CurvesWidget(QWidget):
    """Interactive curves editor with luma and per-channel control."""

    curveChanged = Signal()

    def __init__(self, state: Optional[CurveState] = None,
                 histogram: Optional[HistogramAdapter] = None, parent: QWidget = None):
        super().__init__(parent)
        self.setMinimumSize(*Dimensions.CURVES_MIN_SIZE)
        self.setMouseTracking(True)

        self._state = state or CurveState(parent=self)
        self._histogram = histogram or HistogramAdapter(self)
        self._controller = CurveInteractionController(self._state)

        self._hover_point = None

        # Histogram silhouette currently drawn, and the animation driving it
        self._hist_counts = None
        self._hist_next = None
        self._hist_progress = 0.0
        self._hist_expand_pending = False
        self._hist_anim = QVariantAnimation(self)
        self._hist_anim.valueChanged.connect(self._on_histogram_progress)
        self._hist_anim.finished.connect(self._on_histogram_anim_finished)

        self._setup_ui()

        self._state.curvesChanged.connect(self._on_curves_changed)
        self._state.activeChannelChanged.connect(self._on_active_channel_changed)
        self._histogram.histogramChanged.connect(self._transition_histogram)

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(5, 5, 5, 5)

        # Channel selector buttons
        btn_layout = QHBoxLayout()
        self._channel_group = QButtonGroup(self)
        self._channel_buttons = {}

        for channel in CHANNELS:
            btn = QPushButton(channel[0].upper())
            btn.setCheckable(True)
            btn.setFixedSize(*Dimensions.BUTTON_CHANNEL)
            btn.setStyleSheet(get_channel_button_style(Colors.CHANNELS[channel]))
            btn.setChecked(channel == self._state.active_channel)
            btn.clicked.connect(lambda checked, ch=channel: self.set_channel(ch))
            self._channel_group.addButton(btn)
            self._channel_buttons[channel] = btn
            btn_layout.addWidget(btn)

        # Single reset button for current channel
        self._reset_channel_btn = QPushButton("↺")
        self._reset_channel_btn.setFixedSize(*Dimensions.BUTTON_SMALL)
        self._reset_channel_btn.clicked.connect(self._controller.double_click)
        btn_layout.addWidget(self._reset_channel_btn)

        btn_layout.addStretch()
        layout.addLayout(btn_layout)

        # Curves canvas (drawn in paintEvent)
        layout.addStretch()

        self._reset_all_btn = QPushButton("Reset All Curves")
        self._reset_all_btn.clicked.connect(self.reset)
        layout.addWidget(self._reset_all_btn)

        self._update_reset_button_style()
        self._update_reset_all_button_style()

    # -- Public API --

    @property
    def state(self) -> CurveState:
        return self._state

    @property
    def controller(self) -> CurveInteractionController:
        return self._controller

    @property
    def histogram(self) -> HistogramAdapter:
        return self._histogram

    def set_channel(self, channel: str):
        self._controller.set_active_channel(channel)
        self.update()

    def get_curves(self) -> dict:
        """Get all curve data for persistence."""
        return self._state.to_config()

    def set_curves(self, curves: dict):
        """Restore curve data from persistence."""
        self._controller.pointer_cancel()
        self._state.load(curves)

    def reset(self):
        """Reset all curves to identity."""
        self._controller.pointer_cancel()
        self._state.reset()

    def has_changes(self) -> bool:
        return self._state.has_changes()

    def get_lut(self, channel: str) -> np.ndarray:
        return processing.build_lut(self._state.points(channel))

    def apply_curves(self, img: np.ndarray) -> np.ndarray:
        """Apply all curves to a BGR image (uint8 or float32)."""
        return processing.apply_curves(img, self._state.snapshot())

    def set_histogram(self, histogram: Optional[dict]):
        """Set per-channel histogram counts (256 bins each), or None to clear."""
        self._histogram.set_histogram(histogram)

    # -- State listeners --

    def _on_curves_changed(self, snapshot):
        self._update_reset_button_style()
        self._update_reset_all_button_style()
        self.update()
        self.curveChanged.emit()

    def _on_active_channel_changed(self, channel: str):
        self._hover_point = None
        self._channel_buttons[channel].setChecked(True)
        self._update_reset_button_style()
        self._transition_histogram()
        self.update()

    def _update_reset_button_style(self):
        points = self._state.points()
        if self._state.curve().is_identity():
            self._reset_channel_btn.setStyleSheet("")
            self._reset_channel_btn.setToolTip("At default: identity")
        else:
            self._reset_channel_btn.setStyleSheet(Styles.RESET_MODIFIED)
            self._reset_channel_btn.setToolTip(f"Reset {len(points)} pts → identity")

    def _update_reset_all_button_style(self):
        if self._state.has_changes():
            self._reset_all_btn.setStyleSheet(Styles.RESET_MODIFIED)
            self._reset_all_btn.setToolTip("Reset all curves to identity (some curves modified)")
        else:
            self._reset_all_btn.setStyleSheet("")
            self._reset_all_btn.setToolTip("All curves at identity")

    # -- Histogram animation --

    def _transition_histogram(self):
        """Collapse the current silhouette, then expand the new one."""
        channel = self._state.active_channel
        # All-zero counts draw nothing, same as no histogram
        self._hist_next = None
        if self._histogram.has_data(channel):
            self._hist_next = self._histogram.counts(channel)
        self._hist_anim.stop()
        if self._hist_counts is None or self._hist_progress <= 0.0:
            self._start_histogram_expand()
        else:
            self._hist_expand_pending = True
            self._hist_anim.setStartValue(self._hist_progress)
            self._hist_anim.setEndValue(0.0)
            self._hist_anim.setDuration(Timing.HISTOGRAM_COLLAPSE_MS)
            self._hist_anim.setEasingCurve(QEasingCurve.InCubic)
            self._hist_anim.start()

    def _start_histogram_expand(self):
        self._hist_expand_pending = False
        self._hist_counts = self._hist_next
        self._hist_progress = 0.0
        if self._hist_counts is None:
            self.update()
            return
        self._hist_anim.setStartValue(0.0)
        self._hist_anim.setEndValue(1.0)
        self._hist_anim.setDuration(Timing.HISTOGRAM_EXPAND_MS)
        self._hist_anim.setEasingCurve(QEasingCurve.OutCubic)
        self._hist_anim.start()

    def _histogram_commands(self):
        if self._hist_progress <= 0.0:
            return rendering.zero_histogram_path_commands(self._hist_counts)
        return rendering.histogram_path_commands(self._hist_counts, self._hist_progress)

    def _on_histogram_progress(self, value):
        self._hist_progress = float(value)
        self.update()

    def _on_histogram_anim_finished(self):
        if self._hist_expand_pending:
            self._start_histogram_expand()

    # -- Coordinates --

    def _canvas_rect(self) -> tuple:
        """Square canvas area below the channel buttons: (x, y, width, height)."""
        margin = Dimensions.CANVAS_MARGIN
        size = min(self.width() - 2 * margin,
                   self.height() - Dimensions.CANVAS_TOP - Dimensions.CANVAS_BOTTOM)
        size = max(size, 1)
        return ((self.width() - size) // 2, Dimensions.CANVAS_TOP, size, size)

    def _canvas_to_curve(self, pos) -> tuple:
        """Convert canvas position to curve coordinates (unclamped)."""
        rx, ry, rw, rh = self._canvas_rect()
        x = (pos.x() - rx) / rw * DOMAIN_MAX
        y = (1 - (pos.y() - ry) / rh) * DOMAIN_MAX
        return (x, y)

    def _curve_to_canvas(self, point: tuple) -> QPointF:
        """Convert curve coordinates to canvas position."""
        rx, ry, rw, rh = self._canvas_rect()
        return QPointF(rx + point[0] / DOMAIN_MAX * rw, ry + (1 - point[1] / DOMAIN_MAX) * rh)

    def _view_to_canvas(self, x: float, y: float) -> QPointF:
        """Map a point in the flipped 255x255 view box onto the canvas."""
        rx, ry, rw, rh = self._canvas_rect()
        return QPointF(rx + x / DOMAIN_MAX * rw, ry + y / DOMAIN_MAX * rh)

    def _painter_path(self, commands) -> QPainterPath:
        path = QPainterPath()
        for cmd in commands:
            op = cmd[0]
            if op == 'M':
                path.moveTo(self._view_to_canvas(cmd[1], cmd[2]))
            elif op == 'L':
                path.lineTo(self._view_to_canvas(cmd[1], cmd[2]))
            elif op == 'C':
                path.cubicTo(self._view_to_canvas(cmd[1], cmd[2]),
                             self._view_to_canvas(cmd[3], cmd[4]),
                             self._view_to_canvas(cmd[5], cmd[6]))
            elif op == 'Z':
                path.closeSubpath()
        return path

    # -- Pointer events --

    def mousePressEvent(self, event):
        x, y = self._canvas_to_curve(event.position())
        if self._controller.pointer_down(x, y, event.button()):
            self._hover_point = self._controller.dragging_index
            self.update()

    def mouseMoveEvent(self, event):
        x, y = self._canvas_to_curve(event.position())
        if self._controller.pointer_move(x, y):
            return
        # Update hover state
        idx = self._controller.hit_test(x, y)
        if idx != self._hover_point:
            self._hover_point = idx
            self.update()

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton and self._controller.is_dragging:
            self._controller.pointer_up()
            self.update()

    def mouseDoubleClickEvent(self, event):
        """Double-click resets the current channel."""
        if event.button() == Qt.LeftButton:
            self._controller.double_click()
            self._hover_point = None
            self.update()

    def event(self, event):
        if event.type() == QEvent.UngrabMouse:
            self._controller.capture_lost()
        return super().event(event)

    def changeEvent(self, event):
        if event.type() == QEvent.ActivationChange and not self.isActiveWindow():
            self._controller.capture_lost()
        super().changeEvent(event)

    def hideEvent(self, event):
        self._controller.capture_lost()
        super().hideEvent(event)

    def leaveEvent(self, event):
        if self._hover_point is not None and not self._controller.is_dragging:
            self._hover_point = None
            self.update()
        super().leaveEvent(event)

    # -- Painting --

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        x, y, size, _ = self._canvas_rect()
        canvas = QRectF(x, y, size, size)

        # Draw background
        painter.fillRect(canvas, QColor(Colors.BACKGROUND_CANVAS))

        # Draw grid
        painter.setPen(QPen(QColor(Colors.GRID), 1))
        divisions = Dimensions.GRID_DIVISIONS
        for i in range(1, divisions):
            offset = i * size / divisions
            painter.drawLine(QPointF(x + offset, y), QPointF(x + offset, y + size))
            painter.drawLine(QPointF(x, y + offset), QPointF(x + size, y + offset))

        active = self._state.active_channel
        active_color = Colors.CHANNELS[active]

        # Histogram backdrop for the active channel
        hist_commands = self._histogram_commands()
        if hist_commands:
            painter.setPen(Qt.NoPen)
            painter.setBrush(_with_alpha(active_color, Colors.HISTOGRAM_ALPHA))
            painter.drawPath(self._painter_path(hist_commands))

        # Draw diagonal (identity line)
        painter.setBrush(Qt.NoBrush)
        painter.setPen(QPen(QColor(Colors.IDENTITY_LINE), 1, Qt.DashLine))
        painter.drawLine(QPointF(x, y + size), QPointF(x + size, y))

        # Inactive channels, dimmed, only where they differ from identity
        for channel in CHANNELS:
            if channel == active or self._state.curve(channel).is_identity():
                continue
            values = rendering.sample_curve(self._state.points(channel), samples=128)
            step = DOMAIN_MAX / (len(values) - 1)
            polyline = QPolygonF([
                self._curve_to_canvas((i * step, v)) for i, v in enumerate(values)
            ])
            painter.setPen(QPen(_with_alpha(Colors.CHANNELS[channel], Colors.INACTIVE_CURVE_ALPHA),
                                Dimensions.CURVE_WIDTH_INACTIVE))
            painter.drawPolyline(polyline)

        # Active curve
        points = self._state.points()
        painter.setPen(QPen(QColor(active_color), Dimensions.CURVE_WIDTH_ACTIVE))
        painter.drawPath(self._painter_path(rendering.curve_path_commands(points)))

        # Draw control points (only for active channel)
        painter.setBrush(QColor(active_color))
        painter.setPen(QPen(QColor(Colors.HANDLE_OUTLINE), 2))
        for i, p in enumerate(points):
            radius = Dimensions.POINT_RADIUS_HOVER if i == self._hover_point else Dimensions.POINT_RADIUS
            painter.drawEllipse(self._curve_to_canvas(p), radius, radius)

        # Draw border
        painter.setBrush(Qt.NoBrush)
        painter.setPen(QPen(QColor(Colors.BORDER), 1))
        painter.drawRect(canvas)
        painter.end()
