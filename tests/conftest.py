"""
Synthetic hands for the recognition tests.

make_hand() lays out a right hand from two unit vectors: u points from the
wrist along the fingers and v across the knuckles from index to pinky.
u x v is the normal leaving the back of the hand.
"""
import math

import numpy as np
import pytest

from solfege.confidence import GestureClass
from solfege.geometry import RIGHT, TOWARD_CAMERA, UP, normalize
from solfege.landmarks import Finger, LandmarkFrame

DOWN = -UP
LEFT = -RIGHT

_KNUCKLE_OFFSETS = {
    Finger.INDEX: -0.025,
    Finger.MIDDLE: 0.0,
    Finger.RING: 0.025,
    Finger.PINKY: 0.05,
}
_FINGER_START = {Finger.INDEX: 5, Finger.MIDDLE: 9, Finger.RING: 13, Finger.PINKY: 17}
_BEND = math.radians(35)


def make_hand(u, v, fingers=None, thumb="tucked", tip_scale=1.0,
              origin=(0.5, 0.5, 0.0), handedness="Right") -> LandmarkFrame:
    """
    Args:
        u: Wrist -> fingertips direction
        v: Index -> pinky direction, perpendicular to u
        fingers: Finger -> "extended" (straight), "bent" (about half) or
                 "curled" (into the palm). Missing fingers are extended.
        thumb: "tucked" across the palm, or (direction, bend in degrees)
        tip_scale: Fingertip spacing relative to the knuckles; 0.8 keeps
                   the fingers together, 2.0 fans them out
    """
    u = normalize(u)
    v = normalize(v)
    n = np.cross(u, v)
    o = np.asarray(origin, dtype=float)
    fingers = fingers or {}

    pts = np.zeros((21, 3))
    pts[0] = o

    for finger, offset in _KNUCKLE_OFFSETS.items():
        mcp = o + 0.2 * u + offset * v
        lateral = offset * (tip_scale - 1.0) * v
        pose = fingers.get(finger, "extended")
        if pose == "extended":
            tip = mcp + 0.12 * u + lateral
            pip = mcp + 0.5 * (tip - mcp)
            dip = mcp + 0.75 * (tip - mcp)
        elif pose == "bent":
            pip = mcp + 0.05 * u
            tip = pip + 0.05 * (math.cos(_BEND) * u - math.sin(_BEND) * n) + lateral
            dip = (pip + tip) / 2
        elif pose == "curled":
            pip = mcp + 0.05 * u
            tip = pip - 0.02 * u - 0.035 * n
            dip = (pip + tip) / 2
        else:
            raise ValueError(pose)
        start = _FINGER_START[finger]
        pts[start:start + 4] = [mcp, pip, dip, tip]

    base = o + 0.12 * u - 0.06 * v
    if thumb == "tucked":
        second = base + 0.03 * u
        tip = second + 0.03 * normalize(v - n)
    else:
        t, bend = thumb
        t = normalize(t)
        p = -n - np.dot(-n, t) * t
        p = normalize(p)
        b = math.radians(bend)
        second = base + 0.03 * t
        tip = second + 0.05 * (math.cos(b) * t + math.sin(b) * p)
    pts[1:5] = [base, second, (second + tip) / 2, tip]

    return LandmarkFrame.from_points(pts, handedness=handedness)


def mi_hand():
    # Flat hand across the body, palm down, fingers pointing at the camera
    return make_hand(TOWARD_CAMERA, RIGHT, tip_scale=0.8)


def do_hand():
    # Fist, thumb up, pinky side towards the camera
    curled = {f: "curled" for f in _KNUCKLE_OFFSETS}
    return make_hand(UP, TOWARD_CAMERA, fingers=curled, thumb=(UP, 0))


def fa_hand():
    # Palm to the camera, fingers and thumb pointing down
    return make_hand(DOWN, LEFT, thumb=(DOWN, 0))


def sol_hand():
    # Back of the hand half turned to the camera, fingers angled towards it
    u = np.array([math.sqrt(0.5), 0.0, -math.sqrt(0.5)])
    return make_hand(u, UP, tip_scale=0.8)


def la_hand():
    # Mi orientation with the fingers half bent into a cup
    bent = {f: "bent" for f in _KNUCKLE_OFFSETS}
    return make_hand(TOWARD_CAMERA, RIGHT, fingers=bent, tip_scale=0.8)


def re_hand():
    # Index straight up, other fingers curled, thumb tucked
    curled = {Finger.MIDDLE: "curled", Finger.RING: "curled", Finger.PINKY: "curled"}
    return make_hand(UP, RIGHT, fingers=curled)


def ti_hand():
    # Hand tilted 30 degrees, index up, others curled, thumb half out
    u = np.array([0.5, -math.sqrt(3) / 2, 0.0])
    v = np.array([math.sqrt(3) / 2, 0.5, 0.0])
    curled = {Finger.MIDDLE: "curled", Finger.RING: "curled", Finger.PINKY: "curled"}
    return make_hand(u, v, fingers=curled, thumb=(-v, 35))


POSES = {
    GestureClass.DO: do_hand,
    GestureClass.RE: re_hand,
    GestureClass.MI: mi_hand,
    GestureClass.FA: fa_hand,
    GestureClass.SOL: sol_hand,
    GestureClass.LA: la_hand,
    GestureClass.TI: ti_hand,
}


@pytest.fixture
def poses():
    """GestureClass -> synthetic LandmarkFrame of that sign."""
    return {gesture: build() for gesture, build in POSES.items()}


@pytest.fixture
def open_hand():
    """Upright open palm facing the camera, fingers fanned."""
    return make_hand(UP, RIGHT, thumb=(LEFT, 0), tip_scale=2.0)


@pytest.fixture
def collapsed_frame():
    """All 21 landmarks on one point."""
    return LandmarkFrame.from_points(np.full((21, 3), 0.5))
