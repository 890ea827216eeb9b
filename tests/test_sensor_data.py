import math
from collections import deque

import numpy as np
import pytest

from lidarimu.sensor_data import (
    CloudData,
    GNSSData,
    IMUData,
    Orientation,
    Vector3,
    VelocityData,
)


def _vel(t, vx):
    return VelocityData(time=t, linear_velocity=Vector3(vx, 0.0, 0.0))


def test_orientation_normalize_scales_to_unit():
    o = Orientation(1.0, 1.0, 1.0, 1.0)
    o.normalize()
    assert (o.x, o.y, o.z, o.w) == pytest.approx((0.5, 0.5, 0.5, 0.5))


def test_orientation_normalize_pure_w():
    o = Orientation(0.0, 0.0, 0.0, 2.0)
    o.normalize()
    assert (o.x, o.y, o.z, o.w) == pytest.approx((0.0, 0.0, 0.0, 1.0))


def test_cloud_data_defaults_are_independent():
    a, b = CloudData(), CloudData()
    assert a.time == 0.0
    assert a.points.shape == (0, 3)
    a.points = np.ones((2, 3))
    assert b.points.shape == (0, 3)


def test_imu_orientation_matrix_identity():
    imu = IMUData(orientation=Orientation(0.0, 0.0, 0.0, 1.0))
    np.testing.assert_allclose(imu.orientation_matrix(), np.eye(3), atol=1e-12)


def test_imu_orientation_matrix_yaw_90():
    h = math.sqrt(0.5)
    imu = IMUData(orientation=Orientation(0.0, 0.0, h, h))
    expected = np.array([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
    np.testing.assert_allclose(imu.orientation_matrix(), expected, atol=1e-12)


def test_sync_fails_when_first_sample_after_sync_time():
    unsynced = deque([_vel(2.0, 1.0), _vel(2.1, 2.0)])
    synced = deque()
    assert VelocityData.sync_data(unsynced, synced, 1.9) is False
    assert len(unsynced) == 2
    assert len(synced) == 0


def test_sync_fails_with_fewer_than_two_samples():
    unsynced = deque([_vel(1.0, 1.0)])
    synced = deque()
    assert VelocityData.sync_data(unsynced, synced, 1.0) is False
    assert len(synced) == 0


def test_sync_drops_stale_samples_and_interpolates():
    unsynced = deque([_vel(0.8, 0.0), _vel(0.9, 0.0), _vel(1.0, 1.0), _vel(1.1, 3.0)])
    synced = deque()
    assert VelocityData.sync_data(unsynced, synced, 1.05) is True
    assert [d.time for d in unsynced] == [1.0, 1.1]
    assert len(synced) == 1
    assert synced[0].time == 1.05
    assert synced[0].linear_velocity.x == pytest.approx(2.0)


def test_sync_pops_front_when_front_gap_too_large():
    unsynced = deque([_vel(1.0, 0.0), _vel(1.5, 1.0)])
    synced = deque()
    assert VelocityData.sync_data(unsynced, synced, 1.3) is False
    assert [d.time for d in unsynced] == [1.5]
    assert len(synced) == 0


def test_sync_keeps_data_when_back_gap_too_large():
    unsynced = deque([_vel(1.0, 0.0), _vel(1.5, 1.0)])
    synced = deque()
    assert VelocityData.sync_data(unsynced, synced, 1.1) is False
    assert [d.time for d in unsynced] == [1.0, 1.5]
    assert len(synced) == 0


def test_velocity_sync_interpolates_angular_velocity():
    front = VelocityData(time=0.0, angular_velocity=Vector3(0.0, 2.0, -4.0))
    back = VelocityData(time=0.2, angular_velocity=Vector3(4.0, 2.0, 0.0))
    synced = []
    assert VelocityData.sync_data(deque([front, back]), synced, 0.05) is True
    av = synced[0].angular_velocity
    assert (av.x, av.y, av.z) == pytest.approx((1.0, 2.0, -3.0))


def test_imu_sync_interpolates_and_normalizes_orientation():
    front = IMUData(
        time=1.0,
        linear_acceleration=Vector3(0.0, 0.0, 9.0),
        orientation=Orientation(0.0, 0.0, 0.0, 1.0),
    )
    back = IMUData(
        time=1.1,
        linear_acceleration=Vector3(2.0, 0.0, 11.0),
        orientation=Orientation(0.0, 0.0, 1.0, 0.0),
    )
    synced = deque()
    assert IMUData.sync_data(deque([front, back]), synced, 1.05) is True
    result = synced[0]
    la = result.linear_acceleration
    assert (la.x, la.y, la.z) == pytest.approx((1.0, 0.0, 10.0))
    h = math.sqrt(0.5)
    o = result.orientation
    assert (o.x, o.y, o.z, o.w) == pytest.approx((0.0, 0.0, h, h))


def test_gnss_sync_interpolates_fields_and_takes_back_status():
    front = GNSSData(time=0.0, latitude=48.0, longitude=11.0, altitude=500.0,
                     local_E=0.0, local_N=10.0, local_U=1.0, status=0, service=1)
    back = GNSSData(time=0.1, latitude=49.0, longitude=12.0, altitude=520.0,
                    local_E=4.0, local_N=20.0, local_U=3.0, status=2, service=1)
    synced = deque()
    assert GNSSData.sync_data(deque([front, back]), synced, 0.025) is True
    g = synced[0]
    assert g.time == 0.025
    assert g.latitude == pytest.approx(48.25)
    assert g.longitude == pytest.approx(11.25)
    assert g.altitude == pytest.approx(505.0)
    assert (g.local_E, g.local_N, g.local_U) == pytest.approx((1.0, 12.5, 1.5))
    assert g.status == 2
    assert g.service == 0


def test_gnss_origin_maps_to_zero():
    # As in the frame node: the first fix becomes the origin of the local frame.
    origin = GNSSData(latitude=49.0, longitude=8.4, altitude=110.0)
    origin.init_origin_position()
    origin.update_xyz()
    assert (origin.local_E, origin.local_N, origin.local_U) == pytest.approx(
        (0.0, 0.0, 0.0), abs=1e-6
    )


def test_gnss_point_north_and_east_of_origin():
    GNSSData(latitude=49.0, longitude=8.4, altitude=110.0).init_origin_position()
    north = GNSSData(latitude=49.001, longitude=8.4, altitude=110.0)
    north.update_xyz()
    assert 100.0 < north.local_N < 120.0
    assert abs(north.local_E) < 1e-6
    east = GNSSData(latitude=49.0, longitude=8.401, altitude=110.0)
    east.update_xyz()
    assert 60.0 < east.local_E < 80.0
    assert abs(east.local_N) < 0.01


def test_gnss_origin_is_shared_between_fixes():
    GNSSData(latitude=10.0, longitude=20.0, altitude=0.0).init_origin_position()
    other = GNSSData(latitude=10.0, longitude=20.0, altitude=5.0)
    other.update_xyz()
    assert other.local_U == pytest.approx(5.0, abs=1e-6)


def test_frame_node_odometry_matrix_from_gnss_and_imu():
    GNSSData(latitude=49.0, longitude=8.4, altitude=110.0).init_origin_position()
    gnss = GNSSData(latitude=49.0, longitude=8.4, altitude=112.0)
    gnss.update_xyz()
    assert (gnss.local_E, gnss.local_N, gnss.local_U) == pytest.approx(
        (0.0, 0.0, 2.0), abs=1e-6
    )
    h = math.sqrt(0.5)
    imu = IMUData(orientation=Orientation(0.0, 0.0, h, h))
    rotation = imu.orientation_matrix()
    np.testing.assert_allclose(
        rotation, [[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]], atol=1e-12
    )
    odometry = np.eye(4)
    odometry[:3, 3] = (gnss.local_E, gnss.local_N, gnss.local_U)
    odometry[:3, :3] = rotation
    point = odometry @ np.array([1.0, 0.0, 0.0, 1.0])
    np.testing.assert_allclose(point[:3], [0.0, 1.0, 2.0], atol=1e-6)


def test_sync_accepts_list_buffers():
    unsynced = [_vel(0.0, 0.0), _vel(0.1, 1.0), _vel(0.2, 3.0)]
    synced = []
    assert VelocityData.sync_data(unsynced, synced, 0.15) is True
    assert [d.time for d in unsynced] == [0.1, 0.2]
    assert synced[0].linear_velocity.x == pytest.approx(2.0)