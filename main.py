#!/usr/bin/env python3
"""
TONE CURVE EDITOR - GUI Application

PySide6 window hosting the curves editor next to a live preview that is
evaluated on a background thread.
"""

import os
os.environ["QT_LOGGING_RULES"] = "qt.qpa.fonts=false"

import sys
import json
import argparse
import cv2
import numpy as np
from PySide6.QtWidgets import QApplication, QMainWindow, QWidget, QHBoxLayout, QLabel, QSizePolicy
from PySide6.QtCore import Qt
from PySide6.QtGui import QImage, QPixmap, QPalette, QColor

from curves import CHANNELS
from services import PreviewService
from state import CurveState
from widgets import CurvesWidget


def make_test_image(width: int = 512, height: int = 256) -> np.ndarray:
    """Horizontal grey ramp blended into a vertical hue sweep (BGR uint8)."""
    ramp = np.tile(np.linspace(0, 255, width, dtype=np.float32), (height, 1))
    hue = np.tile(np.linspace(0, 179, height, dtype=np.float32)[:, None], (1, width))
    hsv = np.dstack([hue, np.full_like(hue, 160), ramp]).astype(np.uint8)
    return cv2.cvtColor(hsv, cv2.COLOR_HSV2BGR)


def compute_histogram(img: np.ndarray) -> dict:
    """Per-channel 256-bin histograms for a BGR uint8 image."""
    hist = {}
    for i, channel in enumerate(('blue', 'green', 'red')):
        hist[channel] = cv2.calcHist([img], [i], None, [256], [0, 256]).ravel()
    gray = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
    hist['luma'] = cv2.calcHist([gray], [0], None, [256], [0, 256]).ravel()
    return hist


class CurvesWindow(QMainWindow):
    """Main application window."""

    def __init__(self, state: CurveState, image: np.ndarray):
        super().__init__()
        self.setWindowTitle("TONE CURVE EDITOR")
        self.setMinimumSize(900, 420)

        self._state = state
        self._preview_service = PreviewService(self)
        self._preview_service.set_image(image)

        central = QWidget()
        layout = QHBoxLayout(central)

        self._preview = QLabel()
        self._preview.setAlignment(Qt.AlignCenter)
        self._preview.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        layout.addWidget(self._preview, stretch=1)

        self.curves = CurvesWidget(state)
        self.curves.set_histogram(compute_histogram(image))
        layout.addWidget(self.curves)

        self.setCentralWidget(central)

        self._state.curvesChanged.connect(self._preview_service.request)
        self._preview_service.previewReady.connect(self._on_preview_ready)
        self._preview_service.errorOccurred.connect(
            lambda request_id, msg: print(f"[Preview] Request {request_id} failed: {msg}"))

        self._preview_service.request(self._state.snapshot())

    def _on_preview_ready(self, request_id: int, img: np.ndarray):
        img_rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
        h, w = img_rgb.shape[:2]
        qimg = QImage(img_rgb.data, w, h, w * 3, QImage.Format_RGB888)
        self._preview.setPixmap(QPixmap.fromImage(qimg.copy()))

    def closeEvent(self, event):
        self._preview_service.shutdown()
        super().closeEvent(event)


def main():
    # Parse arguments before QApplication consumes sys.argv
    parser = argparse.ArgumentParser(description='Tone Curve Editor')
    parser.add_argument('--channel', choices=CHANNELS, default='luma',
                        help='Channel selected at startup')
    parser.add_argument('--curves', type=json.loads, default=None,
                        help='Initial curves as JSON: {"luma": [{"x": 0, "y": 0}, ...], ...}')
    parser.add_argument('--print-curves', action='store_true',
                        help='Print the final curves as JSON on exit')
    args = parser.parse_args()

    app = QApplication(sys.argv)
    app.setStyle('Fusion')

    palette = QPalette()
    palette.setColor(QPalette.Window, QColor(53, 53, 53))
    palette.setColor(QPalette.WindowText, Qt.white)
    palette.setColor(QPalette.Base, QColor(25, 25, 25))
    palette.setColor(QPalette.Button, QColor(53, 53, 53))
    palette.setColor(QPalette.ButtonText, Qt.white)
    palette.setColor(QPalette.Text, Qt.white)
    palette.setColor(QPalette.ToolTipBase, QColor(40, 40, 40))
    palette.setColor(QPalette.ToolTipText, Qt.white)
    palette.setColor(QPalette.Highlight, QColor(230, 126, 34))  # Orange accent
    palette.setColor(QPalette.HighlightedText, Qt.white)
    app.setPalette(palette)

    state = CurveState(args.curves)
    state.active_channel = args.channel

    window = CurvesWindow(state, make_test_image())
    window.show()

    exit_code = app.exec()
    if args.print_curves:
        print(json.dumps(state.to_config(), indent=2))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
