"""
Gesture events and their delivery to collaborators (audio, UI).
"""
import logging
import queue
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, List, Optional

from .confidence import GestureClass

logger = logging.getLogger(__name__)


class EventKind(Enum):
    ENTER = auto()  # A sign became active
    LEAVE = auto()  # The active sign ended


@dataclass(frozen=True)
class GestureEvent:
    """
    One transition of the active sign.

    Attributes:
        kind: ENTER or LEAVE
        gesture: The sign entered, or the sign being left
        timestamp_ms: Monotonic time of the frame that caused it
    """
    kind: EventKind
    gesture: GestureClass
    timestamp_ms: float

    @classmethod
    def enter(cls, gesture: GestureClass, timestamp_ms: float) -> "GestureEvent":
        return cls(EventKind.ENTER, gesture, timestamp_ms)

    @classmethod
    def leave(cls, gesture: GestureClass, timestamp_ms: float) -> "GestureEvent":
        return cls(EventKind.LEAVE, gesture, timestamp_ms)

    @property
    def is_enter(self) -> bool:
        return self.kind is EventKind.ENTER

    def __str__(self) -> str:
        return f"{self.kind.name} {self.gesture.value} @ {self.timestamp_ms:.0f}ms"


Listener = Callable[[GestureEvent], None]


class EventEmitter:
    """
    Forwards every event, synchronously and in order, to each listener.
    Listeners are called in subscription order. A listener that raises is
    logged and skipped; the others still get the event.
    """

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Listener:
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event: GestureEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed on %s", listener, event)

    def __len__(self) -> int:
        return len(self._listeners)


class EventChannel:
    """
    Single-producer/single-consumer hand-off of events to another thread.

    Subscribe the channel to an EventEmitter on the producer side and call
    get() or drain() on the consumer side. Events come out in the order they
    went in; nothing is dropped or merged.
    """

    def __init__(self):
        self._queue: "queue.SimpleQueue[GestureEvent]" = queue.SimpleQueue()

    def put(self, event: GestureEvent) -> None:
        self._queue.put(event)

    __call__ = put

    def get(self, timeout: Optional[float] = None) -> Optional[GestureEvent]:
        """Next event, waiting up to timeout seconds; None if there is none."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> List[GestureEvent]:
        """All pending events without blocking."""
        events = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except queue.Empty:
                return events

    def empty(self) -> bool:
        return self._queue.empty()
