import numpy as np
import pytest

from conftest import do_hand, mi_hand, re_hand
from solfege.config import RecognitionConfig
from solfege.confidence import ConfidenceVector, GestureClass
from solfege.errors import InputError
from solfege.events import EventChannel, EventKind, GestureEvent
from solfege.pipeline import GesturePipeline

MI = GestureClass.MI
DO = GestureClass.DO


class FixedClassifier:
    """Reports the same confidences for every valid frame."""

    def __init__(self, confidences):
        self.confidences = confidences
        self.calls = 0

    def classify(self, features):
        self.calls += 1
        if not features.valid:
            return ConfidenceVector.zeros()
        return self.confidences


@pytest.fixture
def received():
    return []


@pytest.fixture
def pipeline(received):
    return GesturePipeline(listeners=[received.append])


def test_mi_then_hand_lost(received):
    classifier = FixedClassifier(ConfidenceVector({MI: 0.95}))
    pipeline = GesturePipeline(classifier=classifier, listeners=[received.append])
    hand = mi_hand()

    for i in range(10):
        pipeline.on_frame(hand, i * 33)
    assert received == [GestureEvent.enter(MI, 231)]

    events = pipeline.on_frame(None, 330)
    assert events == [GestureEvent.leave(MI, 330)]
    assert received == [GestureEvent.enter(MI, 231), GestureEvent.leave(MI, 330)]


def test_real_flat_hand_enters_mi(pipeline, received):
    hand = mi_hand()
    for i in range(10):
        pipeline.on_frame(hand, i * 50)
    pipeline.on_frame(None, 500)

    assert [(e.kind, e.gesture) for e in received] == [
        (EventKind.ENTER, MI),
        (EventKind.LEAVE, MI),
    ]
    assert received[0].timestamp_ms == 200


def test_sustained_fist_enters_do_once(pipeline, received):
    hand = do_hand()
    for t in range(0, 2000, 33):
        pipeline.on_frame(hand, t)
        assert pipeline.confidences[DO] >= 0.9
    assert [e.kind for e in received] == [EventKind.ENTER]
    assert pipeline.active_gesture == DO

    pipeline.on_frame(None, 2000)
    assert [e.kind for e in received] == [EventKind.ENTER, EventKind.LEAVE]


def test_switching_signs(received):
    pipeline = GesturePipeline(RecognitionConfig(smoothing_factor=0.0),
                               listeners=[received.append])
    for t in range(0, 300, 50):
        pipeline.on_frame(mi_hand(), t)
    for t in range(300, 600, 50):
        pipeline.on_frame(re_hand(), t)

    assert [(e.kind, e.gesture) for e in received] == [
        (EventKind.ENTER, MI),
        (EventKind.LEAVE, MI),
        (EventKind.ENTER, GestureClass.RE),
    ]


def test_open_hand_produces_no_events(pipeline, received, open_hand):
    for t in range(0, 1000, 50):
        pipeline.on_frame(open_hand, t)
    assert received == []
    assert pipeline.state.is_idle


def test_malformed_frame_changes_nothing(pipeline, received):
    hand = mi_hand()
    for t in range(0, 250, 50):
        pipeline.on_frame(hand, t)
    state = pipeline.state
    confidences = pipeline.confidences
    frames = pipeline.frame_count

    with pytest.raises(InputError):
        pipeline.on_frame(np.zeros((20, 3)), 300)

    assert pipeline.state == state
    assert pipeline.confidences == confidences
    assert pipeline.frame_count == frames
    assert pipeline.rejected_count == 1
    assert [e.kind for e in received] == [EventKind.ENTER]


def test_none_frame_reports_zero_confidences(pipeline):
    pipeline.on_frame(mi_hand(), 0)
    pipeline.on_frame(None, 33)
    assert pipeline.confidences == ConfidenceVector.zeros()
    assert not pipeline.features.valid


def test_hand_lost_resets_smoothing():
    pipeline = GesturePipeline(RecognitionConfig(smoothing_factor=0.9))
    pipeline.on_frame(mi_hand(), 0)
    # Heavy smoothing keeps the blend on the flat hand
    pipeline.on_frame(do_hand(), 33)
    assert pipeline.confidences.top() == MI
    # After losing the hand the next frame is taken as-is
    pipeline.on_frame(None, 132)
    pipeline.on_frame(do_hand(), 165)
    assert pipeline.confidences.top() == DO


def test_confidences_in_unit_range(pipeline):
    for hand in (mi_hand(), do_hand(), re_hand()):
        pipeline.on_frame(hand)
        assert all(0.0 <= v <= 1.0 for v in pipeline.confidences.as_array())


def test_listeners_receive_events_in_order():
    calls = []
    pipeline = GesturePipeline(RecognitionConfig(hold_delay_ms=0, smoothing_factor=0.0))
    pipeline.subscribe(lambda e: calls.append(("first", e.kind)))
    pipeline.subscribe(lambda e: calls.append(("second", e.kind)))

    pipeline.on_frame(mi_hand(), 0)
    pipeline.on_frame(do_hand(), 10)

    assert calls == [
        ("first", EventKind.ENTER), ("second", EventKind.ENTER),
        ("first", EventKind.LEAVE), ("second", EventKind.LEAVE),
        ("first", EventKind.ENTER), ("second", EventKind.ENTER),
    ]


def test_failing_listener_does_not_starve_the_others(received, caplog):
    def flaky(event):
        if event.kind is EventKind.LEAVE:
            raise RuntimeError("audio glitch")

    pipeline = GesturePipeline(RecognitionConfig(hold_delay_ms=0, smoothing_factor=0.0),
                               listeners=[flaky, received.append])
    pipeline.on_frame(mi_hand(), 0)
    events = pipeline.on_frame(do_hand(), 10)

    assert [(e.kind, e.gesture) for e in received] == [
        (EventKind.ENTER, MI),
        (EventKind.LEAVE, MI),
        (EventKind.ENTER, DO),
    ]
    assert events == received[1:]
    assert pipeline.active_gesture == DO
    assert [r.levelname for r in caplog.records if r.name == "solfege.events"] == ["ERROR"]


def test_unsubscribe(pipeline, received):
    pipeline.unsubscribe(received.append)
    for t in range(0, 500, 50):
        pipeline.on_frame(mi_hand(), t)
    assert received == []


def test_events_through_channel():
    channel = EventChannel()
    pipeline = GesturePipeline(listeners=[channel])
    for t in range(0, 300, 50):
        pipeline.on_frame(mi_hand(), t)
    pipeline.on_frame(None, 300)

    assert channel.get(timeout=0.1) == GestureEvent.enter(MI, 200)
    assert channel.drain() == [GestureEvent.leave(MI, 300)]
    assert channel.empty()
    assert channel.get(timeout=0.01) is None


def test_clock_used_without_timestamp():
    now = [0.0]
    classifier = FixedClassifier(ConfidenceVector({MI: 0.95}))
    pipeline = GesturePipeline(RecognitionConfig(hold_delay_ms=100),
                               classifier=classifier, clock=lambda: now[0])
    pipeline.on_frame(mi_hand())
    now[0] = 100.0
    assert pipeline.on_frame(mi_hand()) == [GestureEvent.enter(MI, 100.0)]


def test_reset_clears_state_silently(received):
    classifier = FixedClassifier(ConfidenceVector({MI: 0.95}))
    pipeline = GesturePipeline(classifier=classifier, listeners=[received.append])
    for t in range(0, 300, 50):
        pipeline.on_frame(mi_hand(), t)
    pipeline.reset()
    assert pipeline.state.is_idle
    assert pipeline.confidences == ConfidenceVector.zeros()
    assert len(received) == 1


def test_independent_pipelines_share_nothing():
    a = GesturePipeline(RecognitionConfig(hold_delay_ms=0))
    b = GesturePipeline(RecognitionConfig(hold_delay_ms=0))
    a.on_frame(mi_hand(), 0)
    assert a.active_gesture == MI
    assert b.active_gesture is None
    assert b.confidences == ConfidenceVector.zeros()
