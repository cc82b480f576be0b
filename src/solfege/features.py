"""
Feature extraction from smoothed hand landmarks.

Derives finger extension, palm and hand orientation, finger spread and the
shape detectors used by the Curwen hand-sign scorer. Everything here is a
pure function of one LandmarkFrame.
"""
from dataclasses import dataclass, fields, replace
from typing import Tuple

import numpy as np

from .geometry import (
    CAMERA_FORWARD,
    RIGHT,
    TOWARD_CAMERA,
    UP,
    angle_at,
    clamp,
    direction,
    distance,
    map_range,
    normalize,
)
from .landmarks import Finger, Joint, LandmarkFrame

# Joint angle range mapped onto extension [0, 1]
EXTENSION_MIN_ANGLE = 120.0
EXTENSION_MAX_ANGLE = 170.0

# Adjacent fingertip distance (relative to hand size) mapped onto spread [0, 1]
SPREAD_MIN = 0.10
SPREAD_MAX = 0.25

# Cosine-similarity thresholds for orientation flags
PALM_FACING_THRESHOLD = 0.6
HAND_AXIS_THRESHOLD = 0.7
HAND_POINTING_THRESHOLD = 0.7
HAND_FORWARD_THRESHOLD = 0.6
PINKY_SIDE_THRESHOLD = 0.6
THUMB_DOWN_THRESHOLD = 0.6
INDEX_UP_THRESHOLD = 0.7
INDEX_STRAIGHT_THRESHOLD = 0.9

# Mean curl band of a cupped hand
CUP_CURL_MIN = 0.3
CUP_CURL_MAX = 0.8

_MIN_HAND_SIZE = 1e-6


@dataclass(frozen=True)
class FeatureSet:
    """
    Per-frame features. Extensions are 0 (curled) to 1 (straight); the
    *_dot fields are cosines against the reference axes in geometry.
    """
    valid: bool = False

    thumb_extension: float = 0.0
    index_extension: float = 0.0
    middle_extension: float = 0.0
    ring_extension: float = 0.0
    pinky_extension: float = 0.0

    # Palm normal (leaves the back of the hand) against reference axes
    palm_dot_forward: float = 0.0
    palm_dot_up: float = 0.0
    palm_dot_right: float = 0.0

    # Thumb-MCP -> pinky-MCP side vector
    side_dot_up: float = 0.0
    side_dot_right: float = 0.0
    side_dot_toward: float = 0.0

    # Wrist -> middle-MCP direction
    hand_dot_up: float = 0.0
    hand_dot_toward: float = 0.0

    thumb_dot_up: float = 0.0
    index_dot_up: float = 0.0

    spread: float = 0.0

    cup_shape: float = 0.0
    flat_horizontal: float = 0.0
    fist_thumb_out: float = 0.0
    index_angle: float = 0.0

    @classmethod
    def empty(cls) -> "FeatureSet":
        return cls()

    @classmethod
    def names(cls) -> Tuple[str, ...]:
        """Numeric feature names in vector order."""
        return tuple(f.name for f in fields(cls) if f.name != "valid")

    def as_vector(self) -> np.ndarray:
        return np.array([getattr(self, name) for name in self.names()], dtype=np.float64)

    # -- finger shape -------------------------------------------------------

    @property
    def extensions(self) -> Tuple[float, float, float, float, float]:
        return (self.thumb_extension, self.index_extension, self.middle_extension,
                self.ring_extension, self.pinky_extension)

    @property
    def mean_extension(self) -> float:
        """Mean extension of the four non-thumb fingers."""
        return (self.index_extension + self.middle_extension
                + self.ring_extension + self.pinky_extension) / 4

    @property
    def mean_curl(self) -> float:
        """Mean curl of the four non-thumb fingers."""
        return 1.0 - self.mean_extension

    @property
    def others_curl(self) -> float:
        """Mean curl of middle, ring and pinky."""
        return 1.0 - (self.middle_extension + self.ring_extension + self.pinky_extension) / 3

    @property
    def fingers_together(self) -> float:
        return 1.0 - self.spread

    # -- orientation flags --------------------------------------------------

    @property
    def palm_facing_camera(self) -> bool:
        return self.palm_dot_forward > PALM_FACING_THRESHOLD

    @property
    def back_of_hand_visible(self) -> bool:
        return self.palm_dot_forward < -PALM_FACING_THRESHOLD

    @property
    def palm_facing_down(self) -> bool:
        return self.palm_dot_up > PALM_FACING_THRESHOLD

    @property
    def palm_facing_side(self) -> bool:
        return abs(self.palm_dot_right) > PALM_FACING_THRESHOLD

    @property
    def hand_vertical(self) -> bool:
        return abs(self.side_dot_up) > HAND_AXIS_THRESHOLD

    @property
    def hand_horizontal(self) -> bool:
        return abs(self.side_dot_right) > HAND_AXIS_THRESHOLD

    @property
    def pinky_side_facing_camera(self) -> bool:
        return self.side_dot_toward > PINKY_SIDE_THRESHOLD

    @property
    def hand_pointing_up(self) -> bool:
        return self.hand_dot_up > HAND_POINTING_THRESHOLD

    @property
    def hand_pointing_down(self) -> bool:
        return self.hand_dot_up < -HAND_POINTING_THRESHOLD

    @property
    def hand_pointing_forward(self) -> bool:
        return self.hand_dot_toward > HAND_FORWARD_THRESHOLD

    @property
    def thumb_pointing_down(self) -> bool:
        return self.thumb_dot_up < -THUMB_DOWN_THRESHOLD

    @property
    def index_pointing_up(self) -> bool:
        return self.index_dot_up > INDEX_UP_THRESHOLD

    @property
    def index_straight_up(self) -> bool:
        return self.index_dot_up > INDEX_STRAIGHT_THRESHOLD


def finger_extension(mcp, pip, tip) -> float:
    """
    Map the interior angle at the PIP joint onto [0, 1].

    A straight finger (180 degrees) is 1, anything bent to 120 degrees or
    more is 0. Coincident joints give an angle of 0 and so an extension of 0.
    """
    angle = angle_at(pip, mcp, tip)
    return map_range(angle, EXTENSION_MIN_ANGLE, EXTENSION_MAX_ANGLE, 0.0, 1.0)


def palm_normal(frame: LandmarkFrame) -> np.ndarray:
    """
    Unit normal of the palm plane.

    For a right hand in the mirrored image it leaves the back of the hand;
    the sign is flipped for a left hand so both hands share one convention.
    """
    wrist_to_middle = frame.get(LandmarkFrame.MIDDLE_MCP) - frame.wrist
    index_to_pinky = frame.get(LandmarkFrame.PINKY_MCP) - frame.get(LandmarkFrame.INDEX_MCP)
    normal = normalize(np.cross(wrist_to_middle, index_to_pinky))
    if frame.handedness == "Left":
        normal = -normal
    return normal


def finger_spread(frame: LandmarkFrame) -> float:
    """Mean adjacent fingertip gap relative to hand size, mapped onto [0, 1]."""
    hand_size = distance(frame.wrist, frame.get(LandmarkFrame.MIDDLE_MCP))
    if hand_size < _MIN_HAND_SIZE:
        return 0.0
    tips = [frame.get(i) for i in (LandmarkFrame.INDEX_TIP, LandmarkFrame.MIDDLE_TIP,
                                   LandmarkFrame.RING_TIP, LandmarkFrame.PINKY_TIP)]
    gaps = [distance(a, b) / hand_size for a, b in zip(tips, tips[1:])]
    return map_range(sum(gaps) / len(gaps), SPREAD_MIN, SPREAD_MAX, 0.0, 1.0)


def cup_shape(features: FeatureSet) -> float:
    """Fingers half bent and held together, palm down (La)."""
    if not features.palm_facing_down:
        return 0.0
    curl = features.mean_curl
    if curl < CUP_CURL_MIN or curl > CUP_CURL_MAX:
        return 0.0
    centre = (CUP_CURL_MIN + CUP_CURL_MAX) / 2
    half_width = (CUP_CURL_MAX - CUP_CURL_MIN) / 2
    band = 1.0 - abs(curl - centre) / half_width
    return clamp(band * clamp(features.fingers_together * 2))


def flat_horizontal(features: FeatureSet) -> float:
    """Straight fingers held together across the body (Mi)."""
    if not features.hand_horizontal:
        return 0.0
    straight = map_range(features.mean_extension, 0.6, 1.0)
    return clamp(straight * clamp(features.fingers_together * 2))


def fist_thumb_out(features: FeatureSet) -> float:
    """Tight fist with the thumb partly out, pinky side to the camera (Do)."""
    if not features.pinky_side_facing_camera:
        return 0.0
    tight = map_range(features.mean_curl, 0.6, 1.0)
    thumb = map_range(features.thumb_extension, 0.2, 0.6)
    return tight * thumb


def index_angle(features: FeatureSet) -> float:
    """Index up, other fingers partly curled, thumb partly out (Ti)."""
    if features.index_extension <= 0.7 or not features.index_pointing_up:
        return 0.0
    others = map_range(features.others_curl, 0.3, 0.7)
    thumb = map_range(features.thumb_extension, 0.2, 0.6)
    return others * thumb


def extract(frame: LandmarkFrame) -> FeatureSet:
    """
    Compute the FeatureSet of one frame.

    A hand with zero size (wrist on top of the middle knuckle) has no usable
    geometry and yields the empty, invalid FeatureSet.
    """
    frame = LandmarkFrame.coerce(frame)
    hand = frame.annotations

    if distance(frame.wrist, frame.get(LandmarkFrame.MIDDLE_MCP)) < _MIN_HAND_SIZE:
        return FeatureSet.empty()

    extensions = {
        finger: finger_extension(
            hand.joint(finger, Joint.MCP),
            hand.joint(finger, Joint.PIP),
            hand.joint(finger, Joint.TIP),
        )
        for finger in Finger
    }

    normal = palm_normal(frame)
    side = direction(hand.joint(Finger.THUMB, Joint.MCP), hand.joint(Finger.PINKY, Joint.MCP))
    hand_dir = direction(frame.wrist, frame.get(LandmarkFrame.MIDDLE_MCP))
    thumb_dir = direction(hand.joint(Finger.THUMB, Joint.MCP), hand.joint(Finger.THUMB, Joint.TIP))
    index_dir = direction(hand.joint(Finger.INDEX, Joint.MCP), hand.joint(Finger.INDEX, Joint.TIP))

    base = FeatureSet(
        valid=True,
        thumb_extension=extensions[Finger.THUMB],
        index_extension=extensions[Finger.INDEX],
        middle_extension=extensions[Finger.MIDDLE],
        ring_extension=extensions[Finger.RING],
        pinky_extension=extensions[Finger.PINKY],
        palm_dot_forward=float(np.dot(normal, CAMERA_FORWARD)),
        palm_dot_up=float(np.dot(normal, UP)),
        palm_dot_right=float(np.dot(normal, RIGHT)),
        side_dot_up=float(np.dot(side, UP)),
        side_dot_right=float(np.dot(side, RIGHT)),
        side_dot_toward=float(np.dot(side, TOWARD_CAMERA)),
        hand_dot_up=float(np.dot(hand_dir, UP)),
        hand_dot_toward=float(np.dot(hand_dir, TOWARD_CAMERA)),
        thumb_dot_up=float(np.dot(thumb_dir, UP)),
        index_dot_up=float(np.dot(index_dir, UP)),
        spread=finger_spread(frame),
    )
    return with_shapes(base)


def with_shapes(features: FeatureSet) -> FeatureSet:
    """Fill in the shape detectors from the primary features."""
    return replace(
        features,
        cup_shape=cup_shape(features),
        flat_horizontal=flat_horizontal(features),
        fist_thumb_out=fist_thumb_out(features),
        index_angle=index_angle(features),
    )
