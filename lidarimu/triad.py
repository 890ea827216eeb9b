"""Three-axis sensor samples, sample intervals and simple statistics on them."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

__all__ = [
    "TriadData",
    "DataInterval",
    "check_interval",
    "data_mean",
    "data_variance",
    "extract_intervals_samples",
    "decompose_rotation",
]


class TriadData:
    """A timestamped reading of a sensor triad (e.g. accelerometers or gyroscopes)."""

    __slots__ = ("_timestamp", "_data")

    def __init__(self, timestamp, x, y, z):
        self._timestamp = float(timestamp)
        data = np.array([float(x), float(y), float(z)])
        data.flags.writeable = False
        self._data = data

    @classmethod
    def from_vector(cls, timestamp, data) -> "TriadData":
        """Build a sample from a timestamp and a 3-element vector."""
        values = np.asarray(data, dtype=float).reshape(-1)
        if values.shape != (3,):
            raise ValueError(f"expected 3 values, got {values.size}")
        return cls(timestamp, values[0], values[1], values[2])

    @property
    def timestamp(self) -> float:
        return self._timestamp

    @property
    def data(self) -> np.ndarray:
        """The three readings as a read-only array."""
        return self._data

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    def __getitem__(self, index) -> float:
        return float(self._data[index])

    def __eq__(self, other) -> bool:
        if not isinstance(other, TriadData):
            return NotImplemented
        return self._timestamp == other._timestamp and bool(np.array_equal(self._data, other._data))

    def __hash__(self) -> int:
        return hash((self._timestamp, *self._data.tolist()))

    def __str__(self) -> str:
        return (
            f"ts : {self._timestamp:g} data : [ "
            f"{self._data[0]:g}, {self._data[1]:g}, {self._data[2]:g} ]"
        )

    def __repr__(self) -> str:
        return f"TriadData({self._timestamp!r}, {self.x!r}, {self.y!r}, {self.z!r})"


def _check_samples(samples: Sequence[TriadData]) -> None:
    if len(samples) < 3:
        raise ValueError("Invalid data samples vector")


def _time_to_index(samples: Sequence[TriadData], ts: float) -> int:
    """Index of the sample whose timestamp is nearest to ``ts``."""
    idx0, idx1 = 0, len(samples) - 1
    while idx1 - idx0 > 1:
        idxm = (idx0 + idx1) // 2
        if ts > samples[idxm].timestamp:
            idx0 = idxm
        else:
            idx1 = idxm
    if ts - samples[idx0].timestamp < samples[idx1].timestamp - ts:
        return idx0
    return idx1


@dataclass(frozen=True)
class DataInterval:
    """Inclusive range of sample indices; -1 marks an unset bound."""

    start_idx: int = -1
    end_idx: int = -1

    @classmethod
    def from_timestamps(cls, samples, start_ts, end_ts) -> "DataInterval":
        """Interval between the samples nearest to two timestamps."""
        if start_ts < 0 or end_ts <= start_ts:
            raise ValueError("Invalid timestamps")
        _check_samples(samples)
        last = len(samples) - 1
        start_idx = 0 if start_ts <= samples[0].timestamp else _time_to_index(samples, start_ts)
        end_idx = last if end_ts >= samples[last].timestamp else _time_to_index(samples, end_ts)
        return cls(start_idx, end_idx)

    @classmethod
    def initial_interval(cls, samples, duration) -> "DataInterval":
        """Interval covering the first ``duration`` seconds of the samples."""
        if duration <= 0:
            raise ValueError("Invalid interval duration")
        _check_samples(samples)
        last = len(samples) - 1
        end_ts = samples[0].timestamp + duration
        end_idx = last if end_ts >= samples[last].timestamp else _time_to_index(samples, end_ts)
        return cls(0, end_idx)

    @classmethod
    def final_interval(cls, samples, duration) -> "DataInterval":
        """Interval covering the last ``duration`` seconds of the samples."""
        if duration <= 0:
            raise ValueError("Invalid interval duration")
        _check_samples(samples)
        last = len(samples) - 1
        start_ts = samples[last].timestamp - duration
        start_idx = 0 if start_ts <= 0 else _time_to_index(samples, start_ts)
        return cls(start_idx, last)


def check_interval(samples, interval) -> DataInterval:
    """Clamp ``interval`` to the valid index range of ``samples``."""
    start_idx, end_idx = interval.start_idx, interval.end_idx
    last = len(samples) - 1
    if start_idx < 0:
        start_idx = 0
    if end_idx < start_idx or end_idx > last:
        end_idx = last
    return DataInterval(start_idx, end_idx)


def _interval_matrix(samples, interval: Optional[DataInterval]) -> np.ndarray:
    checked = check_interval(samples, interval if interval is not None else DataInterval())
    return np.array([s.data for s in samples[checked.start_idx : checked.end_idx + 1]])


def data_mean(samples, interval=None) -> np.ndarray:
    """Per-axis mean of the samples, restricted to ``interval`` when it is valid."""
    return _interval_matrix(samples, interval).mean(axis=0)


def data_variance(samples, interval=None) -> np.ndarray:
    """Per-axis sample variance (n - 1 denominator) inside ``interval``."""
    values = _interval_matrix(samples, interval)
    diff = values - values.mean(axis=0)
    return (diff * diff).sum(axis=0) / (len(values) - 1)


def extract_intervals_samples(
    samples, intervals, interval_n_samps=100, only_means=False
) -> tuple[list[TriadData], list[DataInterval]]:
    """Pick samples from every interval holding at least ``interval_n_samps`` samples.

    Returns the extracted samples and the intervals that were used. With
    ``only_means`` each used interval contributes one sample: its mean,
    stamped with the timestamp of the interval's centre sample; otherwise it
    contributes its first ``interval_n_samps`` samples.
    """
    extracted_samples: list[TriadData] = []
    extracted_intervals: list[DataInterval] = []
    for interval in intervals:
        interval_size = interval.end_idx - interval.start_idx + 1
        if interval_size < interval_n_samps:
            continue
        extracted_intervals.append(interval)
        if only_means:
            timestamp = samples[interval.start_idx + interval_size // 2].timestamp
            mean = data_mean(samples, DataInterval(interval.start_idx, interval.end_idx))
            extracted_samples.append(TriadData.from_vector(timestamp, mean))
        else:
            extracted_samples.extend(
                samples[interval.start_idx : interval.start_idx + interval_n_samps]
            )
    return extracted_samples, extracted_intervals


def decompose_rotation(rot_mat) -> np.ndarray:
    """Return (roll, pitch, yaw) in radians of a 3x3 rotation matrix."""
    m = np.asarray(rot_mat, dtype=float)
    if m.shape != (3, 3):
        raise ValueError(f"expected a 3x3 matrix, got shape {m.shape}")
    roll = math.atan2(m[2, 1], m[2, 2])
    pitch = math.atan2(-m[2, 0], math.sqrt(m[2, 1] * m[2, 1] + m[2, 2] * m[2, 2]))
    yaw = math.atan2(m[1, 0], m[0, 0])
    return np.array([roll, pitch, yaw])