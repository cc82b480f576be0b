"""
Exponential smoothing of landmark frames to suppress tracking jitter.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import ConfigError
from .landmarks import LandmarkFrame


@dataclass(frozen=True, eq=False)
class SmoothingState:
    """Most recent smoothed frame, or nothing before the first frame."""
    frame: Optional[LandmarkFrame] = None
    initialized: bool = False


def smooth(
    previous: SmoothingState,
    incoming,
    alpha: float,
) -> Tuple[LandmarkFrame, SmoothingState]:
    """
    Blend an incoming frame into the running average.

    smoothed = smoothed * alpha + incoming * (1 - alpha), per coordinate.
    alpha = 1 freezes the output, alpha = 0 passes every frame through.
    The first frame after (re)initialization is returned verbatim.

    Raises:
        InputError: incoming is malformed. previous is left untouched.
        ConfigError: alpha is outside [0, 1].
    """
    if not 0.0 <= alpha <= 1.0:
        raise ConfigError(f"smoothing factor must be in [0, 1], got {alpha}")

    frame = LandmarkFrame.coerce(incoming)

    if not previous.initialized or previous.frame is None:
        return frame, SmoothingState(frame=frame, initialized=True)

    blended = previous.frame.points * alpha + frame.points * (1.0 - alpha)
    out = LandmarkFrame.from_points(blended, handedness=frame.handedness)
    return out, SmoothingState(frame=out, initialized=True)


class LandmarkSmoother:
    """Owns a SmoothingState and advances it one frame at a time."""

    def __init__(self, alpha: float = 0.7):
        if not 0.0 <= alpha <= 1.0:
            raise ConfigError(f"smoothing factor must be in [0, 1], got {alpha}")
        self._alpha = alpha
        self._state = SmoothingState()

    @property
    def alpha(self) -> float:
        return self._alpha

    @property
    def state(self) -> SmoothingState:
        return self._state

    def update(self, incoming) -> LandmarkFrame:
        frame, self._state = smooth(self._state, incoming, self._alpha)
        return frame

    def reset(self) -> None:
        """Forget the running average; the next frame is taken as-is."""
        self._state = SmoothingState()
