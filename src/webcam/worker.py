"""
Background worker for MediaPipe hand tracking and sign recognition.
Runs in a separate QThread to avoid blocking the UI.
"""
import time
from typing import Optional
from PyQt5.QtCore import QObject, pyqtSignal

from solfege.errors import InputError, ModelError
from solfege.pipeline import GesturePipeline, monotonic_ms

from .display import draw_overlay
from .hand_tracker import HandTracker


class RecognitionWorker(QObject):
    """
    Worker class that runs capture and the recognition pipeline.
    Emits signals for UI and audio updates.
    """
    # Signals
    gesture_event = pyqtSignal(object)      # Emits GestureEvent, in order
    frame_ready = pyqtSignal(object)        # Emits numpy array (BGR frame with overlay)
    error = pyqtSignal(str)

    def __init__(self, config, parent=None):
        super().__init__(parent)
        self._config = config
        self._tracker: Optional[HandTracker] = None
        self._pipeline: Optional[GesturePipeline] = None
        self._is_running = False

    def start_process(self):
        """Main processing loop. Runs in worker thread."""
        self._tracker = HandTracker(self._config)
        try:
            self._pipeline = GesturePipeline(
                config=self._config.recognition,
                listeners=[self.gesture_event.emit],
            )
        except ModelError as e:
            self.error.emit(str(e))
            return

        if not self._tracker.start():
            self.error.emit("Could not open camera")
            return

        self._is_running = True

        last_frame_time = 0.0
        frame_interval = 1.0 / 15  # Preview rate

        try:
            while self._is_running:
                landmarks = self._tracker.get_landmarks()

                try:
                    self._pipeline.on_frame(landmarks, monotonic_ms())
                except InputError as e:
                    self.error.emit(f"Bad landmarks: {e}")
                    continue

                now = time.perf_counter()
                if self._config.ui.show_preview and now - last_frame_time >= frame_interval:
                    image = self._tracker.last_frame
                    if image is not None:
                        self.frame_ready.emit(draw_overlay(
                            image, landmarks,
                            self._pipeline.confidences,
                            self._pipeline.active_gesture,
                        ))
                    last_frame_time = now

        except Exception as e:
            self.error.emit(f"Worker Exception: {str(e)}")
        finally:
            self._is_running = False
            if self._tracker:
                self._tracker.stop()

    def stop_process(self):
        """Signal the loop to stop and release resources in worker thread."""
        self._is_running = False

    @property
    def pipeline(self) -> Optional[GesturePipeline]:
        return self._pipeline
