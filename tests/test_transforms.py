import math

import numpy as np
import pytest

from lidarimu.transforms import (
    euler_ypr_from_quaternion,
    matrix_to_pose,
    quaternion_to_matrix,
    transform_to_matrix,
)

QUATERNIONS = [
    (0.0, 0.0, 0.0, 1.0),
    (0.1, -0.2, 0.3, 0.9),
    (1.0, 0.0, 0.0, 0.0),
    (0.0, 0.0, math.sin(0.5), math.cos(0.5)),
    (-0.4, 0.5, 0.6, -0.2),
]


def _unit(q):
    n = math.sqrt(sum(v * v for v in q))
    return tuple(v / n for v in q)


def test_identity_quaternion_gives_identity_matrix():
    assert np.allclose(quaternion_to_matrix(0.0, 0.0, 0.0, 1.0), np.eye(3))


def test_zero_quaternion_rejected():
    with pytest.raises(ValueError):
        quaternion_to_matrix(0.0, 0.0, 0.0, 0.0)


@pytest.mark.parametrize("q", QUATERNIONS)
def test_rotation_matrix_is_orthonormal(q):
    r = quaternion_to_matrix(*q)
    assert np.allclose(r @ r.T, np.eye(3))
    assert np.isclose(np.linalg.det(r), 1.0)


def test_scaled_quaternion_same_rotation():
    q = (0.1, -0.2, 0.3, 0.9)
    assert np.allclose(quaternion_to_matrix(*q), quaternion_to_matrix(*(3.0 * v for v in q)))


def test_yaw_only_rotation():
    angle = 0.7
    yaw, pitch, roll = euler_ypr_from_quaternion(0.0, 0.0, math.sin(angle / 2), math.cos(angle / 2))
    assert yaw == pytest.approx(angle)
    assert pitch == pytest.approx(0.0, abs=1e-12)
    assert roll == pytest.approx(0.0, abs=1e-12)


def test_roll_only_rotation():
    angle = -0.3
    yaw, pitch, roll = euler_ypr_from_quaternion(math.sin(angle / 2), 0.0, 0.0, math.cos(angle / 2))
    assert roll == pytest.approx(angle)
    assert yaw == pytest.approx(0.0, abs=1e-12)


def test_pitch_at_gimbal_lock():
    half = math.pi / 4
    _, pitch, _ = euler_ypr_from_quaternion(0.0, math.sin(half), 0.0, math.cos(half))
    assert pitch == pytest.approx(math.pi / 2, abs=1e-6)


@pytest.mark.parametrize("q", QUATERNIONS)
def test_transform_rotation_matches_quaternion(q):
    m = transform_to_matrix((1.0, 2.0, 3.0), q)
    assert np.allclose(m[:3, :3], quaternion_to_matrix(*q))
    assert np.allclose(m[3], [0.0, 0.0, 0.0, 1.0])
    assert np.allclose(m[:3, 3], [1.0, 2.0, 3.0])


@pytest.mark.parametrize("q", QUATERNIONS)
def test_matrix_to_pose_round_trip(q):
    translation = (-4.0, 0.5, 10.0)
    m = transform_to_matrix(translation, q)
    pose = matrix_to_pose(m)
    assert pose.position == pytest.approx(translation)
    expected = np.array(_unit(q))
    got = np.array(pose.orientation)
    assert np.allclose(got, expected, atol=1e-9) or np.allclose(got, -expected, atol=1e-9)
    assert np.allclose(quaternion_to_matrix(*pose.orientation), m[:3, :3])


def test_matrix_to_pose_identity():
    pose = matrix_to_pose(np.eye(4))
    assert pose.position == (0.0, 0.0, 0.0)
    assert pose.orientation == pytest.approx((0.0, 0.0, 0.0, 1.0))


def test_matrix_to_pose_rejects_wrong_shape():
    with pytest.raises(ValueError):
        matrix_to_pose(np.eye(3))