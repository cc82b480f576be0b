"""
3D vector helpers used by feature extraction.

Every function here is total: degenerate input (zero-length vectors,
zero-width ranges) yields a defined value instead of NaN or an exception.
"""
import math

import numpy as np

# Reference axes in image coordinates (x right, y down, z away from the camera)
UP = np.array([0.0, -1.0, 0.0])
RIGHT = np.array([1.0, 0.0, 0.0])
CAMERA_FORWARD = np.array([0.0, 0.0, 1.0])
TOWARD_CAMERA = -CAMERA_FORWARD

_EPSILON = 1e-12


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def map_range(value: float, in_min: float, in_max: float,
              out_min: float = 0.0, out_max: float = 1.0) -> float:
    """
    Linearly map value from [in_min, in_max] onto [out_min, out_max].

    The result is clamped to the output range, so values below the input
    range land on out_min and values above it on out_max. Reversed ranges
    (in_min > in_max) are supported.
    """
    if in_max == in_min:
        return out_min if value < in_min else out_max
    t = (value - in_min) / (in_max - in_min)
    mapped = out_min + t * (out_max - out_min)
    return clamp(mapped, min(out_min, out_max), max(out_min, out_max))


def distance(a, b) -> float:
    """Euclidean distance between two 3D points."""
    return float(np.linalg.norm(np.asarray(b, dtype=float) - np.asarray(a, dtype=float)))


def normalize(v) -> np.ndarray:
    """Unit vector in the direction of v; the zero vector maps to itself."""
    v = np.asarray(v, dtype=float)
    mag = float(np.linalg.norm(v))
    if mag < _EPSILON:
        return np.zeros_like(v)
    return v / mag


def direction(start, end) -> np.ndarray:
    """Unit vector pointing from start to end."""
    return normalize(np.asarray(end, dtype=float) - np.asarray(start, dtype=float))


def angle_between(a, b) -> float:
    """Angle between two vectors in degrees, 0 if either has zero length."""
    ua = normalize(a)
    ub = normalize(b)
    if not ua.any() or not ub.any():
        return 0.0
    dot = clamp(float(np.dot(ua, ub)), -1.0, 1.0)
    return math.degrees(math.acos(dot))


def angle_at(vertex, a, b) -> float:
    """Interior angle at vertex of the path a -> vertex -> b (180 = straight)."""
    vertex = np.asarray(vertex, dtype=float)
    return angle_between(np.asarray(a, dtype=float) - vertex,
                         np.asarray(b, dtype=float) - vertex)
