"""
Debounce state machine turning per-frame confidences into gesture events.

States:
    Idle                  no sign detected
    Candidate(c, since)   c is the best sign, not yet held long enough
    Active(c)             c has been held for the hold delay; Enter(c) sent

A single noisy frame never produces an event: a candidate must stay the top
class for hold_delay_ms before it is promoted. Losing the hand or switching
class ends the active sign immediately.
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .confidence import ConfidenceVector, GestureClass
from .errors import ConfigError
from .events import GestureEvent


@dataclass(frozen=True)
class StabilityState:
    candidate_class: Optional[GestureClass] = None
    candidate_since: Optional[float] = None
    active_class: Optional[GestureClass] = None

    @property
    def is_idle(self) -> bool:
        return self.candidate_class is None and self.active_class is None

    @property
    def is_candidate(self) -> bool:
        return self.candidate_class is not None

    @property
    def is_active(self) -> bool:
        return self.active_class is not None

    def __str__(self) -> str:
        if self.is_active:
            return f"Active({self.active_class.value})"
        if self.is_candidate:
            return f"Candidate({self.candidate_class.value}, {self.candidate_since:.0f})"
        return "Idle"


IDLE = StabilityState()


def step(
    state: StabilityState,
    confidences: ConfidenceVector,
    now_ms: float,
    threshold: float = 0.7,
    hold_delay_ms: float = 200.0,
) -> Tuple[StabilityState, List[GestureEvent]]:
    """
    Advance the gate by one frame.

    Returns the new state and the events (0, 1 or 2, in order) the
    transition produced.
    """
    top = confidences.top(threshold)
    events: List[GestureEvent] = []

    if top is None:
        if state.active_class is not None:
            events.append(GestureEvent.leave(state.active_class, now_ms))
        return IDLE, events

    if state.active_class is not None:
        if top == state.active_class:
            return state, events
        events.append(GestureEvent.leave(state.active_class, now_ms))
        state = IDLE

    if state.candidate_class != top:
        state = StabilityState(candidate_class=top, candidate_since=now_ms)

    if now_ms - state.candidate_since >= hold_delay_ms:
        events.append(GestureEvent.enter(top, now_ms))
        state = StabilityState(active_class=top)

    return state, events


class StabilityGate:
    """Owns a StabilityState and advances it with step()."""

    def __init__(self, threshold: float = 0.7, hold_delay_ms: float = 200.0):
        if not 0.0 <= threshold <= 1.0:
            raise ConfigError(f"detection threshold must be in [0, 1], got {threshold}")
        if hold_delay_ms < 0:
            raise ConfigError(f"hold delay must be >= 0, got {hold_delay_ms}")
        self._threshold = threshold
        self._hold_delay_ms = hold_delay_ms
        self._state = IDLE

    @property
    def state(self) -> StabilityState:
        return self._state

    @property
    def active(self) -> Optional[GestureClass]:
        return self._state.active_class

    def update(self, confidences: ConfidenceVector, now_ms: float) -> List[GestureEvent]:
        self._state, events = step(
            self._state, confidences, now_ms, self._threshold, self._hold_delay_ms
        )
        return events

    def reset(self) -> None:
        """Return to Idle without emitting anything."""
        self._state = IDLE
