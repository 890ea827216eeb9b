"""Rigid-body transform helpers: quaternions, Euler angles and 4x4 matrices."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

__all__ = [
    "Pose",
    "quaternion_to_matrix",
    "euler_ypr_from_quaternion",
    "transform_to_matrix",
    "matrix_to_pose",
]


@dataclass(frozen=True)
class Pose:
    """Position and orientation (quaternion as x, y, z, w) of a frame."""

    position: tuple[float, float, float]
    orientation: tuple[float, float, float, float]


def quaternion_to_matrix(x, y, z, w) -> np.ndarray:
    """Return the 3x3 rotation matrix of the quaternion (x, y, z, w).

    The quaternion need not be unit length; it is scaled implicitly.
    """
    norm_sq = x * x + y * y + z * z + w * w
    if norm_sq == 0.0:
        raise ValueError("zero-length quaternion has no rotation")
    s = 2.0 / norm_sq
    xs, ys, zs = x * s, y * s, z * s
    wx, wy, wz = w * xs, w * ys, w * zs
    xx, xy, xz = x * xs, x * ys, x * zs
    yy, yz, zz = y * ys, y * zs, z * zs
    return np.array(
        [
            [1.0 - (yy + zz), xy - wz, xz + wy],
            [xy + wz, 1.0 - (xx + zz), yz - wx],
            [xz - wy, yz + wx, 1.0 - (xx + yy)],
        ]
    )


def _euler_ypr_from_matrix(m: np.ndarray) -> tuple[float, float, float]:
    if abs(m[2, 0]) >= 1.0:
        yaw = 0.0
        if m[2, 0] < 0.0:
            pitch = math.pi / 2.0
            roll = math.atan2(m[0, 1], m[0, 2])
        else:
            pitch = -math.pi / 2.0
            roll = math.atan2(-m[0, 1], -m[0, 2])
        return yaw, pitch, roll
    pitch = -math.asin(m[2, 0])
    cos_pitch = math.cos(pitch)
    roll = math.atan2(m[2, 1] / cos_pitch, m[2, 2] / cos_pitch)
    yaw = math.atan2(m[1, 0] / cos_pitch, m[0, 0] / cos_pitch)
    return yaw, pitch, roll


def euler_ypr_from_quaternion(x, y, z, w) -> tuple[float, float, float]:
    """Return (yaw, pitch, roll) in radians of the quaternion's rotation."""
    return _euler_ypr_from_matrix(quaternion_to_matrix(x, y, z, w))


def _axis_rotation(axis: int, angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    if axis == 0:
        return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])
    if axis == 1:
        return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def transform_to_matrix(translation: Sequence[float], quaternion: Sequence[float]) -> np.ndarray:
    """Build the 4x4 homogeneous matrix taking the child frame into the base frame.

    ``translation`` is (x, y, z); ``quaternion`` is (x, y, z, w).
    """
    tx, ty, tz = (float(v) for v in translation)
    qx, qy, qz, qw = (float(v) for v in quaternion)
    yaw, pitch, roll = euler_ypr_from_quaternion(qx, qy, qz, qw)
    rotation = _axis_rotation(2, yaw) @ _axis_rotation(1, pitch) @ _axis_rotation(0, roll)
    matrix = np.eye(4)
    matrix[:3, :3] = rotation
    matrix[:3, 3] = (tx, ty, tz)
    return matrix


def _matrix_to_quaternion(m: np.ndarray) -> tuple[float, float, float, float]:
    trace = m[0, 0] + m[1, 1] + m[2, 2]
    if trace > 0.0:
        t = math.sqrt(trace + 1.0)
        w = 0.5 * t
        t = 0.5 / t
        return (
            float((m[2, 1] - m[1, 2]) * t),
            float((m[0, 2] - m[2, 0]) * t),
            float((m[1, 0] - m[0, 1]) * t),
            float(w),
        )
    i = 0
    if m[1, 1] > m[0, 0]:
        i = 1
    if m[2, 2] > m[i, i]:
        i = 2
    j = (i + 1) % 3
    k = (j + 1) % 3
    q = [0.0, 0.0, 0.0]
    t = math.sqrt(m[i, i] - m[j, j] - m[k, k] + 1.0)
    q[i] = 0.5 * t
    t = 0.5 / t
    w = (m[k, j] - m[j, k]) * t
    q[j] = (m[j, i] + m[i, j]) * t
    q[k] = (m[k, i] + m[i, k]) * t
    return float(q[0]), float(q[1]), float(q[2]), float(w)


def matrix_to_pose(transform_matrix) -> Pose:
    """Split a 4x4 homogeneous matrix into position and orientation quaternion."""
    m = np.asarray(transform_matrix, dtype=float)
    if m.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {m.shape}")
    position = (float(m[0, 3]), float(m[1, 3]), float(m[2, 3]))
    return Pose(position=position, orientation=_matrix_to_quaternion(m[:3, :3]))