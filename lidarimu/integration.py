"""Quaternion integration of gyroscope readings with a fourth-order Runge-Kutta scheme.

Quaternions are stored as (w, x, y, z).
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from .triad import DataInterval, TriadData, check_interval

__all__ = [
    "normalize_quaternion",
    "omega_skew",
    "quat_integration_step_rk4",
    "quaternion_to_rotation",
    "integrate_gyro_interval",
    "integrate_gyro_interval_rotation",
]

_IDENTITY_QUATERNION = (1.0, 0.0, 0.0, 0.0)


def _as_array(values, size: int, name: str) -> np.ndarray:
    array = np.asarray(values, dtype=float).reshape(-1)
    if array.shape != (size,):
        raise ValueError(f"{name} must have {size} elements, got {array.size}")
    return array


def normalize_quaternion(quat) -> np.ndarray:
    """Return ``quat`` scaled to unit length."""
    q = _as_array(quat, 4, "quaternion")
    norm = np.linalg.norm(q)
    if norm == 0.0:
        raise ValueError("zero-length quaternion cannot be normalized")
    return q / norm


def omega_skew(omega) -> np.ndarray:
    """Return the 4x4 matrix Omega such that dq/dt = 0.5 * Omega @ q for angular rate ``omega``."""
    wx, wy, wz = _as_array(omega, 3, "angular velocity")
    return np.array(
        [
            [0.0, -wx, -wy, -wz],
            [wx, 0.0, wz, -wy],
            [wy, -wz, 0.0, wx],
            [wz, wy, -wx, 0.0],
        ]
    )


def quat_integration_step_rk4(quat, omega0, omega1, dt) -> np.ndarray:
    """Advance ``quat`` by one RK4 step of length ``dt``.

    ``omega0`` and ``omega1`` are the angular rates at the start and end of the
    step; their mean is used at the midpoint. The result is normalized.
    """
    q = _as_array(quat, 4, "quaternion")
    w0 = _as_array(omega0, 3, "omega0")
    w1 = _as_array(omega1, 3, "omega1")
    dt = float(dt)

    skew0 = omega_skew(w0)
    skew01 = omega_skew(0.5 * (w0 + w1))
    skew1 = omega_skew(w1)

    k1 = 0.5 * skew0 @ q
    k2 = 0.5 * skew01 @ (q + 0.5 * dt * k1)
    k3 = 0.5 * skew01 @ (q + 0.5 * dt * k2)
    k4 = 0.5 * skew1 @ (q + dt * k3)
    result = q + dt * (k1 / 6.0 + k2 / 3.0 + k3 / 3.0 + k4 / 6.0)
    return normalize_quaternion(result)


def quaternion_to_rotation(quat) -> np.ndarray:
    """Return the 3x3 rotation matrix of a (w, x, y, z) quaternion of any non-zero length."""
    a, b, c, d = _as_array(quat, 4, "quaternion")
    aa, ab, ac, ad = a * a, a * b, a * c, a * d
    bb, bc, bd = b * b, b * c, b * d
    cc, cd = c * c, c * d
    dd = d * d
    norm_sq = aa + bb + cc + dd
    if norm_sq == 0.0:
        raise ValueError("zero-length quaternion has no rotation")
    scaled = np.array(
        [
            [aa + bb - cc - dd, 2.0 * (bc - ad), 2.0 * (ac + bd)],
            [2.0 * (ad + bc), aa - bb + cc - dd, 2.0 * (cd - ab)],
            [2.0 * (bd - ac), 2.0 * (ab + cd), aa - bb - cc + dd],
        ]
    )
    return scaled / norm_sq


def integrate_gyro_interval(
    gyro_samples: Sequence[TriadData],
    data_dt: float = -1.0,
    interval: Optional[DataInterval] = None,
) -> np.ndarray:
    """Integrate angular rates over ``interval`` starting from the identity rotation.

    A positive ``data_dt`` is used as the fixed step; otherwise each step uses
    the difference of consecutive timestamps. An unset or invalid interval
    covers the whole sequence. Returns the final (w, x, y, z) quaternion.
    """
    checked = check_interval(gyro_samples, interval if interval is not None else DataInterval())
    quat = np.array(_IDENTITY_QUATERNION)
    window = gyro_samples[checked.start_idx : checked.end_idx + 1]
    for current, following in zip(window, window[1:]):
        dt = data_dt if data_dt > 0 else following.timestamp - current.timestamp
        quat = quat_integration_step_rk4(quat, current.data, following.data, dt)
    return quat


def integrate_gyro_interval_rotation(
    gyro_samples: Sequence[TriadData],
    data_dt: float = -1.0,
    interval: Optional[DataInterval] = None,
) -> np.ndarray:
    """Like :func:`integrate_gyro_interval` but return a 3x3 rotation matrix."""
    return quaternion_to_rotation(integrate_gyro_interval(gyro_samples, data_dt, interval))