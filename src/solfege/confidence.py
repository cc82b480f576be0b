"""
Gesture classes and the per-frame confidence vector.
"""
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

import numpy as np


class GestureClass(Enum):
    """The seven Curwen solfege hand signs, in scale order."""
    DO = "Do"
    RE = "Re"
    MI = "Mi"
    FA = "Fa"
    SOL = "Sol"
    LA = "La"
    TI = "Ti"


GESTURE_CLASSES: Tuple[GestureClass, ...] = tuple(GestureClass)


class ConfidenceVector:
    """
    Immutable mapping from GestureClass to a confidence in [0, 1].

    Values are clamped on construction; missing classes are 0.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[GestureClass, float]] = None):
        arr = np.zeros(len(GESTURE_CLASSES), dtype=np.float64)
        if values:
            for gesture, value in values.items():
                arr[GESTURE_CLASSES.index(GestureClass(gesture))] = float(value)
        arr = np.nan_to_num(arr, nan=0.0, posinf=1.0, neginf=0.0)
        arr = np.clip(arr, 0.0, 1.0)
        arr.flags.writeable = False
        self._values = arr

    @classmethod
    def zeros(cls) -> "ConfidenceVector":
        return cls()

    @classmethod
    def from_array(cls, values) -> "ConfidenceVector":
        """Build from a sequence ordered like GESTURE_CLASSES."""
        values = list(values)
        if len(values) != len(GESTURE_CLASSES):
            raise ValueError(
                f"Expected {len(GESTURE_CLASSES)} confidences, got {len(values)}"
            )
        return cls(dict(zip(GESTURE_CLASSES, values)))

    def __getitem__(self, gesture: GestureClass) -> float:
        return float(self._values[GESTURE_CLASSES.index(gesture)])

    def __iter__(self) -> Iterator[GestureClass]:
        return iter(GESTURE_CLASSES)

    def __len__(self) -> int:
        return len(GESTURE_CLASSES)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ConfidenceVector):
            return NotImplemented
        return bool(np.array_equal(self._values, other._values))

    def __repr__(self) -> str:
        body = ", ".join(f"{g.value}={v:.2f}" for g, v in self.items())
        return f"ConfidenceVector({body})"

    def items(self) -> List[Tuple[GestureClass, float]]:
        return [(g, float(v)) for g, v in zip(GESTURE_CLASSES, self._values)]

    def as_array(self) -> np.ndarray:
        return self._values

    def as_dict(self) -> Dict[str, float]:
        """Sign name -> confidence, e.g. for display."""
        return {g.value: v for g, v in self.items()}

    def ranked(self) -> List[Tuple[GestureClass, float]]:
        """Classes by descending confidence; ties keep scale order."""
        return sorted(self.items(), key=lambda item: -item[1])

    def top(self, threshold: float = 0.0) -> Optional[GestureClass]:
        """Best class if its confidence strictly exceeds threshold, else None."""
        gesture, value = self.ranked()[0]
        if value > threshold:
            return gesture
        return None
