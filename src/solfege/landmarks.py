"""
Hand landmark containers.

A LandmarkFrame is the fixed-size record of the 21 points MediaPipe reports
for one hand; HandAnnotations is a read-only per-finger view over it.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence, Tuple, Union

import numpy as np

from .errors import InputError

NUM_LANDMARKS = 21


class Finger(IntEnum):
    """Fingers in landmark order."""
    THUMB = 0
    INDEX = 1
    MIDDLE = 2
    RING = 3
    PINKY = 4


class Joint(IntEnum):
    """Joints of a finger, from palm to fingertip."""
    MCP = 0
    PIP = 1
    DIP = 2
    TIP = 3


# First landmark index of each finger; a finger spans 4 consecutive points
_FINGER_START = {
    Finger.THUMB: 1,
    Finger.INDEX: 5,
    Finger.MIDDLE: 9,
    Finger.RING: 13,
    Finger.PINKY: 17,
}


@dataclass(frozen=True, eq=False)
class LandmarkFrame:
    """
    One frame of hand landmarks.

    Attributes:
        points: Read-only (21, 3) float array of (x, y, z). Image-normalized,
                x to the right, y down, z negative towards the camera.
        handedness: 'Right' or 'Left' as reported by the tracker
    """
    points: np.ndarray
    handedness: str = "Right"

    # MediaPipe landmark indices for convenience
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20

    def __post_init__(self):
        try:
            arr = np.array(self.points, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InputError(f"Landmarks are not numeric: {e}") from e

        if arr.ndim != 2 or arr.shape[1] != 3:
            raise InputError(f"Expected (x, y, z) points, got shape {arr.shape}")
        if arr.shape[0] != NUM_LANDMARKS:
            raise InputError(
                f"Expected {NUM_LANDMARKS} landmarks, got {arr.shape[0]}"
            )
        if not np.isfinite(arr).all():
            raise InputError("Landmark coordinates must be finite")

        arr.flags.writeable = False
        object.__setattr__(self, "points", arr)

    @classmethod
    def from_points(cls, points, handedness: str = "Right") -> "LandmarkFrame":
        """
        Build a validated frame from any (21, 3) sequence of numbers.

        Raises:
            InputError: wrong landmark count, wrong dimensionality or a
                        non-finite coordinate.
        """
        return cls(points=points, handedness=handedness)

    @classmethod
    def coerce(cls, frame: Union["LandmarkFrame", Sequence]) -> "LandmarkFrame":
        """Return frame unchanged if it is already a LandmarkFrame, else validate it."""
        if isinstance(frame, LandmarkFrame):
            return frame
        return cls.from_points(frame)

    def get(self, index: int) -> np.ndarray:
        """Get landmark by index."""
        return self.points[index]

    def as_tuples(self) -> Tuple[Tuple[float, float, float], ...]:
        return tuple((float(x), float(y), float(z)) for x, y, z in self.points)

    @property
    def annotations(self) -> "HandAnnotations":
        return HandAnnotations(self)

    @property
    def wrist(self) -> np.ndarray:
        return self.points[self.WRIST]

    @property
    def palm_center(self) -> np.ndarray:
        """Approximate palm center from MCP joints."""
        return self.points[[5, 9, 13, 17]].mean(axis=0)


class HandAnnotations:
    """
    Per-finger view over a LandmarkFrame.

    Each finger is a read-only (4, 3) slice in MCP, PIP, DIP, TIP order.
    For the thumb the four slots are landmarks 1-4 (CMC, MCP, IP, TIP).
    """

    __slots__ = ("_frame",)

    def __init__(self, frame: LandmarkFrame):
        self._frame = frame

    def finger(self, finger: Finger) -> np.ndarray:
        start = _FINGER_START[Finger(finger)]
        return self._frame.points[start:start + 4]

    def joint(self, finger: Finger, joint: Joint) -> np.ndarray:
        return self._frame.points[_FINGER_START[Finger(finger)] + Joint(joint)]

    @property
    def wrist(self) -> np.ndarray:
        return self._frame.wrist

    def tips(self) -> np.ndarray:
        """Fingertips of all five fingers, thumb first."""
        return self._frame.points[[4, 8, 12, 16, 20]]


# Hand connections for drawing (same as MediaPipe's HAND_CONNECTIONS)
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),      # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),      # Index
    (0, 9), (9, 10), (10, 11), (11, 12), # Middle
    (0, 13), (13, 14), (14, 15), (15, 16), # Ring
    (0, 17), (17, 18), (18, 19), (19, 20), # Pinky
    (5, 9), (9, 13), (13, 17),           # Palm
]
