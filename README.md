# lidarimu

Building blocks for lidar/IMU/GNSS localization pipelines and for working with
IMU triad data.

## Modules

- `lidarimu.sensor_data`: record types for sensor data.
  - `Vector3` and `Orientation`. `Orientation.normalize()` scales the quaternion to unit length in place.
  - `CloudData`: a timestamp plus an `(N, 3)` point array.
  - `GNSSData`, `IMUData` and `VelocityData`.

  Each of `GNSSData`, `IMUData` and `VelocityData` has the classmethod
  `sync_data(unsynced_data, synced_data, sync_time)`. It looks in a time-ordered
  queue for the two readings that surround `sync_time` and drops older readings
  from the front of the queue. If neither neighbour is more than `MAX_SYNC_GAP`
  (0.2 s) away, it appends a linearly interpolated reading to `synced_data` and
  returns `True`. Otherwise it returns `False`. For IMU readings the
  interpolated orientation quaternion is renormalised.

  `GNSSData` keeps one local frame that all instances share:
  - `init_origin_position()` makes a fix the origin of that frame.
  - `update_xyz()` fills `local_E`, `local_N` and `local_U`. It logs a warning if
    no origin has been set.

  `IMUData.orientation_matrix()` returns the 3x3 rotation matrix of the reading's orientation.
- `lidarimu.geodesy`: WGS84 conversions.
  - `geodetic_to_ecef(latitude, longitude, altitude)` converts degrees and metres to earth-centred coordinates.
  - `LocalCartesian` is an east-north-up frame. Move its origin with `reset(...)`; `forward(...)` returns `(east, north, up)`.

  A latitude outside [-90, 90] raises `ValueError`.
- `lidarimu.transforms`: rigid-body helpers.
  - `quaternion_to_matrix(x, y, z, w)` and `euler_ypr_from_quaternion(x, y, z, w)`.
  - `transform_to_matrix(translation, quaternion)` builds the 4x4 child-to-base matrix.
  - `matrix_to_pose(matrix)` returns a `Pose` with `position` (x, y, z) and `orientation` (x, y, z, w).
- `lidarimu.buffers`: `MessageBuffer`.
  - `push(item)` queues a message.
  - `parse_data(data_buff)` moves every queued message, in arrival order, onto the end of `data_buff` and returns how many it moved.
  - `len()` gives the number still queued.
- `lidarimu.file_manager`: file and directory helpers.
  - `create_file(path)` opens a text file for appending.
  - `create_directory(path)` creates one directory level if it is missing and returns its `Path`.

  Both log a warning and raise `OSError` on failure.
- `lidarimu.triad`: samples, intervals and statistics.
  - `TriadData` is a timestamped three-axis sample. Use `from_vector`, indexing, and the `x`/`y`/`z`/`data` properties.
  - `DataInterval` is an inclusive index range; -1 means unset. It has the classmethods `from_timestamps`, `initial_interval` and `final_interval`.
  - `check_interval`, `data_mean`, `data_variance` (with an n - 1 denominator) and `extract_intervals_samples`.
  - `decompose_rotation(rot_mat)` returns roll, pitch and yaw.
- `lidarimu.calibration`: `CalibratedTriad`, a misalignment/scale/bias model
  with the correction `X' = T K (X - B)`.
  - `normalize` computes `T K X`.
  - `unbias_normalize` computes `T K (X - B)`.
  - `unbias` computes `X - B`.

  Each of these accepts a `TriadData` or a 3-vector. `save(path)` writes the
  parameters as text and `CalibratedTriad.load(path)` reads them back.
- `lidarimu.integration`: gyroscope integration with quaternions stored as (w, x, y, z).
  - `normalize_quaternion`, `omega_skew`, `quat_integration_step_rk4` and `quaternion_to_rotation`.
  - `integrate_gyro_interval` returns a quaternion.
  - `integrate_gyro_interval_rotation` returns a 3x3 matrix.

  Both integrators start from the identity rotation. They use either a fixed
  step or the sample timestamps.

## Installation

```
pip install .
```

Install with the test extra (`pip install .[test]`), then run the tests with `pytest`.

## Example

```python
from collections import deque

from lidarimu.sensor_data import IMUData
from lidarimu.triad import DataInterval, data_mean
from lidarimu.calibration import CalibratedTriad
from lidarimu.integration import integrate_gyro_interval_rotation

# Interpolate IMU readings to a lidar timestamp
unsynced, synced = deque(imu_readings), deque()
if IMUData.sync_data(unsynced, synced, lidar_time):
    rotation = synced[-1].orientation_matrix()

# Remove the gyroscope bias estimated over a static interval, then integrate
bias = data_mean(gyro_samples, DataInterval(100, 3000))
calib = CalibratedTriad()
calib.set_bias(bias)
unbiased = [calib.unbias(s) for s in gyro_samples]
rot = integrate_gyro_interval_rotation(unbiased, -1.0, DataInterval())
```

## What it does not do

This is a library only.

- It has no command-line program.
- It does not talk to any message bus, and it does not publish or subscribe to sensor streams.
- It does not read recorded datasets from files.
- It does not filter or register point clouds.
- It does not detect static intervals.
- It does not estimate calibration parameters from data; `CalibratedTriad` only stores and applies parameters that you supply or load.
- It has no plotting or 3-D viewer.