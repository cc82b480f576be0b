"""
The recognition pipeline: smoother -> features -> classifier -> gate -> events.
"""
import logging
import time
from typing import Callable, Iterable, List, Optional

from .classifier import Classifier, build_classifier
from .config import RecognitionConfig
from .confidence import ConfidenceVector, GestureClass
from .errors import InputError
from .events import EventEmitter, GestureEvent, Listener
from .features import FeatureSet, extract
from .landmarks import LandmarkFrame
from .smoother import LandmarkSmoother
from .stability import StabilityGate, StabilityState

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class GesturePipeline:
    """
    Turns a stream of landmark frames into Enter/Leave gesture events.

    One instance per tracked hand/session. Call on_frame() once per
    detection cycle with the landmarks, or None when no hand is visible.
    Events are delivered synchronously to subscribed listeners before
    on_frame() returns, and are also returned.
    """

    def __init__(
        self,
        config: Optional[RecognitionConfig] = None,
        classifier: Optional[Classifier] = None,
        listeners: Iterable[Listener] = (),
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Args:
            config: Recognition settings; defaults if None
            classifier: Overrides the classifier selected by config
            listeners: Called with every GestureEvent, in order
            clock: Millisecond monotonic clock used when on_frame() gets no timestamp
        """
        self._config = config or RecognitionConfig()
        self._classifier = classifier or build_classifier(self._config)
        self._smoother = LandmarkSmoother(self._config.smoothing_factor)
        self._gate = StabilityGate(
            threshold=self._config.detection_threshold,
            hold_delay_ms=self._config.hold_delay_ms,
        )
        self._emitter = EventEmitter()
        for listener in listeners:
            self._emitter.subscribe(listener)
        self._clock = clock or monotonic_ms

        self._features: FeatureSet = FeatureSet.empty()
        self._confidences: ConfidenceVector = ConfidenceVector.zeros()
        self._frame_count = 0
        self._rejected_count = 0

    def on_frame(
        self,
        frame: Optional[LandmarkFrame],
        timestamp_ms: Optional[float] = None,
    ) -> List[GestureEvent]:
        """
        Process one detection cycle.

        Args:
            frame: Landmarks of the tracked hand (LandmarkFrame or any 21x3
                   sequence), or None if no hand was detected
            timestamp_ms: Monotonic time of the frame; the clock if None

        Returns:
            Events produced by this frame, in delivery order.

        Raises:
            InputError: The frame is malformed. Nothing in the pipeline changes.
        """
        now = self._clock() if timestamp_ms is None else float(timestamp_ms)

        if frame is None:
            self._smoother.reset()
            features = FeatureSet.empty()
            confidences = ConfidenceVector.zeros()
        else:
            try:
                landmarks = LandmarkFrame.coerce(frame)
            except InputError as e:
                self._rejected_count += 1
                logger.warning("Rejected landmark frame: %s", e)
                raise
            smoothed = self._smoother.update(landmarks)
            features = extract(smoothed)
            confidences = self._classifier.classify(features)

        self._frame_count += 1
        self._features = features
        self._confidences = confidences

        events = self._gate.update(confidences, now)
        for event in events:
            logger.debug("Gesture event: %s", event)
            self._emitter.emit(event)
        return events

    def subscribe(self, listener: Listener) -> Listener:
        return self._emitter.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._emitter.unsubscribe(listener)

    def reset(self) -> None:
        """Drop all per-session state without emitting events."""
        self._smoother.reset()
        self._gate.reset()
        self._features = FeatureSet.empty()
        self._confidences = ConfidenceVector.zeros()

    @property
    def confidences(self) -> ConfidenceVector:
        """Confidences of the last accepted frame (read-only, for display)."""
        return self._confidences

    @property
    def features(self) -> FeatureSet:
        return self._features

    @property
    def state(self) -> StabilityState:
        return self._gate.state

    @property
    def active_gesture(self) -> Optional[GestureClass]:
        return self._gate.active

    @property
    def config(self) -> RecognitionConfig:
        return self._config

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def rejected_count(self) -> int:
        return self._rejected_count
