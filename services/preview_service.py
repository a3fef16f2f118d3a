"""
TONE CURVE EDITOR - Preview Service

Applies curve snapshots to a preview image on a background QThread so pixel
evaluation never blocks pointer handling. Only immutable CurveSnapshot
values cross the thread boundary.
"""

from typing import Optional

import cv2
import numpy as np
from PySide6.QtCore import QObject, Signal, QThread

from curves import CurveSnapshot
from processing import apply_curves


class PreviewWorker(QObject):
    """
    Worker that evaluates curves in a QThread.

    Requests older than the most recent one are skipped, so a burst of drag
    updates only costs one evaluation once the worker catches up.
    """

    finished = Signal(int, object)    # request_id, image
    error = Signal(int, str)          # request_id, error message

    def __init__(self):
        super().__init__()
        self.latest_id = 0

    def process(self, request_id: int, image: np.ndarray, snapshot: CurveSnapshot):
        """Evaluate one request (runs in the worker thread)."""
        if request_id < self.latest_id:
            return
        try:
            result = apply_curves(image, snapshot)
        except (ValueError, cv2.error) as e:
            self.error.emit(request_id, str(e))
            return
        self.finished.emit(request_id, result)


class PreviewService(QObject):
    """
    Coordinates background preview evaluation.

    Call set_image() once per source image, then request() with each new
    snapshot. previewReady fires only for the most recent request.
    """

    # Public signals for UI integration
    previewReady = Signal(int, object)    # request_id, image
    errorOccurred = Signal(int, str)      # request_id, error message

    # Internal: queued across to the worker thread
    _requested = Signal(int, object, object)

    def __init__(self, parent: QObject = None):
        super().__init__(parent)
        self._image: Optional[np.ndarray] = None
        self._request_id = 0

        self._thread = QThread()
        self._worker = PreviewWorker()
        self._worker.moveToThread(self._thread)

        self._requested.connect(self._worker.process)
        self._worker.finished.connect(self._on_finished)
        self._worker.error.connect(self.errorOccurred.emit)

        self._thread.start()

    def set_image(self, image: Optional[np.ndarray]):
        """Set the source image. The service keeps its own copy."""
        self._image = None if image is None else image.copy()

    def request(self, snapshot: CurveSnapshot) -> Optional[int]:
        """Queue evaluation of a snapshot. Returns the request id, or None without an image."""
        if self._image is None:
            return None
        self._request_id += 1
        self._worker.latest_id = self._request_id
        self._requested.emit(self._request_id, self._image, snapshot)
        return self._request_id

    def _on_finished(self, request_id: int, image: np.ndarray):
        if request_id == self._request_id:
            self.previewReady.emit(request_id, image)

    def shutdown(self):
        """Stop the worker thread."""
        if self._thread is not None:
            self._thread.quit()
            if not self._thread.wait(5000):  # 5 second timeout
                print("[PreviewService] Thread did not quit cleanly")
                self._thread.terminate()
            self._thread = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.isRunning()
