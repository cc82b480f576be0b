import numpy as np
import pytest

from conftest import do_hand, fa_hand, la_hand, make_hand, mi_hand, re_hand, sol_hand, ti_hand
from solfege.features import (
    FeatureSet,
    extract,
    finger_extension,
    finger_spread,
    palm_normal,
)
from solfege.geometry import CAMERA_FORWARD, RIGHT, TOWARD_CAMERA, UP


def test_straight_finger_is_fully_extended():
    assert finger_extension((0, 0, 0), (0, 1, 0), (0, 2, 0)) == pytest.approx(1.0)


def test_right_angle_finger_is_curled():
    assert finger_extension((0, 0, 0), (0, 1, 0), (1, 1, 0)) == 0.0


def test_coincident_joints_do_not_fail():
    assert finger_extension((0, 0, 0), (0, 0, 0), (0, 0, 0)) == 0.0


def test_collapsed_hand_is_invalid(collapsed_frame):
    features = extract(collapsed_frame)
    assert not features.valid
    assert features == FeatureSet.empty()


def test_empty_feature_set():
    empty = FeatureSet.empty()
    assert not empty.valid
    assert np.array_equal(empty.as_vector(), np.zeros(len(FeatureSet.names())))
    assert "valid" not in FeatureSet.names()


def test_palm_normal_leaves_back_of_hand():
    # Palm towards the camera: the back faces away
    assert np.allclose(palm_normal(re_hand()), CAMERA_FORWARD)
    # Palm down: the back faces up
    assert np.allclose(palm_normal(mi_hand()), UP)


def test_left_hand_flips_palm_normal():
    right = make_hand(UP, RIGHT)
    left = make_hand(UP, RIGHT, handedness="Left")
    assert np.allclose(palm_normal(left), -palm_normal(right))


def test_spread_together_and_fanned():
    assert finger_spread(make_hand(UP, RIGHT, tip_scale=0.8)) == pytest.approx(0.0, abs=1e-9)
    assert finger_spread(make_hand(UP, RIGHT, tip_scale=2.0)) == pytest.approx(1.0)


def test_flat_hand_features():
    f = extract(mi_hand())
    assert f.valid
    assert f.mean_extension == pytest.approx(1.0)
    assert f.thumb_extension == 0.0
    assert f.palm_facing_down
    assert f.hand_horizontal
    assert f.hand_pointing_forward
    assert f.fingers_together == pytest.approx(1.0)
    assert f.flat_horizontal == pytest.approx(1.0)
    assert f.cup_shape == 0.0


def test_fist_features():
    f = extract(do_hand())
    assert f.mean_curl == pytest.approx(1.0)
    assert f.thumb_extension == pytest.approx(1.0)
    assert f.pinky_side_facing_camera
    assert f.palm_facing_side
    assert f.fist_thumb_out == pytest.approx(1.0)


def test_pointing_down_features():
    f = extract(fa_hand())
    assert f.palm_facing_camera
    assert f.hand_pointing_down
    assert f.thumb_pointing_down
    assert not f.back_of_hand_visible


def test_back_of_hand_features():
    f = extract(sol_hand())
    assert f.back_of_hand_visible
    assert f.hand_pointing_forward
    assert not f.palm_facing_down


def test_cupped_hand_features():
    f = extract(la_hand())
    assert 0.3 < f.mean_curl < 0.8
    assert f.cup_shape > 0.8
    assert f.flat_horizontal == 0.0


def test_index_up_features():
    f = extract(re_hand())
    assert f.index_extension == pytest.approx(1.0)
    assert f.index_straight_up
    assert f.others_curl == pytest.approx(1.0)
    # Tucked thumb leaves no angle between index and thumb
    assert f.index_angle == 0.0


def test_angled_index_features():
    f = extract(ti_hand())
    assert f.index_pointing_up
    assert not f.index_straight_up
    assert f.thumb_extension == pytest.approx(0.5, abs=1e-6)
    assert f.index_angle == pytest.approx(0.75, abs=1e-6)


def test_feature_vector_matches_names():
    f = extract(mi_hand())
    vector = f.as_vector()
    assert vector.shape == (len(FeatureSet.names()),)
    assert vector[FeatureSet.names().index("flat_horizontal")] == pytest.approx(1.0)


def test_extract_is_translation_invariant():
    a = extract(make_hand(TOWARD_CAMERA, RIGHT, origin=(0.2, 0.3, 0.0)))
    b = extract(make_hand(TOWARD_CAMERA, RIGHT, origin=(0.7, 0.6, -0.1)))
    assert np.allclose(a.as_vector(), b.as_vector())
