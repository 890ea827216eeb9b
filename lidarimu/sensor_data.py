"""Timestamped sensor records and their time synchronisation."""

from __future__ import annotations

import logging
import math
from collections.abc import MutableSequence
from dataclasses import dataclass, field
from typing import ClassVar, Optional, TypeVar

import numpy as np

from .geodesy import LocalCartesian
from .transforms import quaternion_to_matrix

__all__ = [
    "MAX_SYNC_GAP",
    "Vector3",
    "Orientation",
    "CloudData",
    "GNSSData",
    "IMUData",
    "VelocityData",
]

_log = logging.getLogger(__name__)

MAX_SYNC_GAP = 0.2
"""Largest allowed distance in seconds between a sync time and a neighbouring sample."""

_T = TypeVar("_T")


@dataclass
class Vector3:
    """Three-component vector such as a velocity or an acceleration."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class Orientation:
    """Orientation quaternion stored as x, y, z, w."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0

    def normalize(self) -> None:
        """Scale the quaternion to unit length in place."""
        norm = math.sqrt(self.x**2 + self.y**2 + self.z**2 + self.w**2)
        self.x /= norm
        self.y /= norm
        self.z /= norm
        self.w /= norm


@dataclass
class CloudData:
    """A lidar scan: its timestamp and an (N, 3) array of points."""

    time: float = 0.0
    points: np.ndarray = field(default_factory=lambda: np.empty((0, 3)))


def _find_bracket(unsynced_data: MutableSequence, sync_time: float) -> Optional[tuple]:
    """Locate the two samples surrounding ``sync_time``.

    Samples older than the bracket are dropped from the front of
    ``unsynced_data``. Returns (front, back) or None when no usable pair exists.
    """
    while len(unsynced_data) >= 2:
        if unsynced_data[0].time > sync_time:
            return None
        if unsynced_data[1].time < sync_time:
            del unsynced_data[0]
            continue
        if sync_time - unsynced_data[0].time > MAX_SYNC_GAP:
            del unsynced_data[0]
            return None
        if unsynced_data[1].time - sync_time > MAX_SYNC_GAP:
            return None
        break
    if len(unsynced_data) < 2:
        return None
    return unsynced_data[0], unsynced_data[1]


def _scales(front_time: float, back_time: float, sync_time: float) -> tuple[float, float]:
    span = back_time - front_time
    return (back_time - sync_time) / span, (sync_time - front_time) / span


def _lerp_vector(front: Vector3, back: Vector3, fs: float, bs: float) -> Vector3:
    return Vector3(
        front.x * fs + back.x * bs,
        front.y * fs + back.y * bs,
        front.z * fs + back.z * bs,
    )


@dataclass
class GNSSData:
    """A satellite fix with its position in the shared local ENU frame."""

    time: float = 0.0
    longitude: float = 0.0
    latitude: float = 0.0
    altitude: float = 0.0
    local_E: float = 0.0
    local_N: float = 0.0
    local_U: float = 0.0
    status: int = 0
    service: int = 0

    _geo_converter: ClassVar[LocalCartesian] = LocalCartesian()
    _origin_position_inited: ClassVar[bool] = False

    def init_origin_position(self) -> None:
        """Make this fix the origin of the local frame shared by all fixes."""
        GNSSData._geo_converter.reset(self.latitude, self.longitude, self.altitude)
        GNSSData._origin_position_inited = True

    def update_xyz(self) -> None:
        """Compute local east, north and up from latitude, longitude and altitude."""
        if not GNSSData._origin_position_inited:
            _log.warning("GeoConverter has not set origin position")
        self.local_E, self.local_N, self.local_U = GNSSData._geo_converter.forward(
            self.latitude, self.longitude, self.altitude
        )

    @classmethod
    def sync_data(cls, unsynced_data, synced_data, sync_time) -> bool:
        """Interpolate a fix at ``sync_time`` and append it to ``synced_data``."""
        bracket = _find_bracket(unsynced_data, sync_time)
        if bracket is None:
            return False
        front, back = bracket
        fs, bs = _scales(front.time, back.time, sync_time)
        synced_data.append(
            cls(
                time=sync_time,
                status=back.status,
                longitude=front.longitude * fs + back.longitude * bs,
                latitude=front.latitude * fs + back.latitude * bs,
                altitude=front.altitude * fs + back.altitude * bs,
                local_E=front.local_E * fs + back.local_E * bs,
                local_N=front.local_N * fs + back.local_N * bs,
                local_U=front.local_U * fs + back.local_U * bs,
            )
        )
        return True


@dataclass
class IMUData:
    """An inertial measurement: acceleration, angular rate and orientation."""

    time: float = 0.0
    linear_acceleration: Vector3 = field(default_factory=Vector3)
    angular_velocity: Vector3 = field(default_factory=Vector3)
    orientation: Orientation = field(default_factory=Orientation)

    def orientation_matrix(self) -> np.ndarray:
        """Return the 3x3 rotation matrix of the orientation."""
        o = self.orientation
        return quaternion_to_matrix(o.x, o.y, o.z, o.w)

    @classmethod
    def sync_data(cls, unsynced_data, synced_data, sync_time) -> bool:
        """Interpolate a measurement at ``sync_time`` and append it to ``synced_data``."""
        bracket = _find_bracket(unsynced_data, sync_time)
        if bracket is None:
            return False
        front, back = bracket
        fs, bs = _scales(front.time, back.time, sync_time)
        fo, bo = front.orientation, back.orientation
        # Neighbouring attitudes differ little, so linear interpolation plus
        # renormalisation is as accurate as slerp here.
        orientation = Orientation(
            fo.x * fs + bo.x * bs,
            fo.y * fs + bo.y * bs,
            fo.z * fs + bo.z * bs,
            fo.w * fs + bo.w * bs,
        )
        orientation.normalize()
        synced_data.append(
            cls(
                time=sync_time,
                linear_acceleration=_lerp_vector(
                    front.linear_acceleration, back.linear_acceleration, fs, bs
                ),
                angular_velocity=_lerp_vector(front.angular_velocity, back.angular_velocity, fs, bs),
                orientation=orientation,
            )
        )
        return True


@dataclass
class VelocityData:
    """A twist measurement: linear and angular velocity."""

    time: float = 0.0
    linear_velocity: Vector3 = field(default_factory=Vector3)
    angular_velocity: Vector3 = field(default_factory=Vector3)

    @classmethod
    def sync_data(cls, unsynced_data, synced_data, sync_time) -> bool:
        """Interpolate a twist at ``sync_time`` and append it to ``synced_data``."""
        bracket = _find_bracket(unsynced_data, sync_time)
        if bracket is None:
            return False
        front, back = bracket
        fs, bs = _scales(front.time, back.time, sync_time)
        synced_data.append(
            cls(
                time=sync_time,
                linear_velocity=_lerp_vector(front.linear_velocity, back.linear_velocity, fs, bs),
                angular_velocity=_lerp_vector(front.angular_velocity, back.angular_velocity, fs, bs),
            )
        )
        return True