"""Calibration parameters of an orthogonal sensor triad.

The triad model corrects a raw reading X into X' = T K (X - B), where T is the
misalignment matrix, K the diagonal scale matrix and B the bias vector::

        [    1     -mis_yz   mis_zy  ]       [ s_x   0    0  ]       [ b_x ]
    T = [  mis_xz     1     -mis_zx  ]   K = [  0   s_y   0  ]   B = [ b_y ]
        [ -mis_xy   mis_yx     1     ]       [  0    0   s_z ]       [ b_z ]
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

import numpy as np

from .triad import TriadData

__all__ = ["CalibratedTriad"]

_Reading = Union[TriadData, np.ndarray]


def _format_number(value: float) -> str:
    return f"{float(value):.6g}"


def _format_matrix(matrix: np.ndarray) -> str:
    """Lay out a matrix as right-aligned columns of six-significant-digit numbers."""
    rows = np.atleast_2d(matrix)
    if rows.shape[0] == 1 and np.ndim(matrix) == 1:
        rows = rows.T
    cells = [[_format_number(v) for v in row] for row in rows]
    width = max(len(cell) for row in cells for cell in row)
    return "\n".join(" ".join(cell.rjust(width) for cell in row) for row in cells)


def _as_vector(values, name: str) -> np.ndarray:
    vector = np.asarray(values, dtype=float).reshape(-1)
    if vector.shape != (3,):
        raise ValueError(f"{name} must have 3 elements, got {vector.size}")
    return vector


class CalibratedTriad:
    """Misalignment, scale and bias of a sensor triad, applied to raw readings."""

    def __init__(
        self,
        mis_yz=0.0,
        mis_zy=0.0,
        mis_zx=0.0,
        mis_xz=0.0,
        mis_xy=0.0,
        mis_yx=0.0,
        s_x=1.0,
        s_y=1.0,
        s_z=1.0,
        b_x=0.0,
        b_y=0.0,
        b_z=0.0,
    ):
        self._mis_mat = np.array(
            [
                [1.0, -float(mis_yz), float(mis_zy)],
                [float(mis_xz), 1.0, -float(mis_zx)],
                [-float(mis_xy), float(mis_yx), 1.0],
            ]
        )
        self._scale_mat = np.diag([float(s_x), float(s_y), float(s_z)])
        self._bias_vec = np.array([float(b_x), float(b_y), float(b_z)])
        self._update()

    def _update(self) -> None:
        self._ms_mat = self._mis_mat @ self._scale_mat

    @property
    def mis_yz(self) -> float:
        return float(-self._mis_mat[0, 1])

    @property
    def mis_zy(self) -> float:
        return float(self._mis_mat[0, 2])

    @property
    def mis_zx(self) -> float:
        return float(-self._mis_mat[1, 2])

    @property
    def mis_xz(self) -> float:
        return float(self._mis_mat[1, 0])

    @property
    def mis_xy(self) -> float:
        return float(-self._mis_mat[2, 0])

    @property
    def mis_yx(self) -> float:
        return float(self._mis_mat[2, 1])

    @property
    def scale_x(self) -> float:
        return float(self._scale_mat[0, 0])

    @property
    def scale_y(self) -> float:
        return float(self._scale_mat[1, 1])

    @property
    def scale_z(self) -> float:
        return float(self._scale_mat[2, 2])

    @property
    def bias_x(self) -> float:
        return float(self._bias_vec[0])

    @property
    def bias_y(self) -> float:
        return float(self._bias_vec[1])

    @property
    def bias_z(self) -> float:
        return float(self._bias_vec[2])

    @property
    def misalignment_matrix(self) -> np.ndarray:
        return self._mis_mat.copy()

    @property
    def scale_matrix(self) -> np.ndarray:
        return self._scale_mat.copy()

    @property
    def bias_vector(self) -> np.ndarray:
        return self._bias_vec.copy()

    def set_scale(self, s_vec) -> None:
        """Replace the diagonal of the scale matrix."""
        values = _as_vector(s_vec, "scale vector")
        for axis, value in enumerate(values):
            self._scale_mat[axis, axis] = value
        self._update()

    def set_bias(self, b_vec) -> None:
        """Replace the bias vector."""
        self._bias_vec = _as_vector(b_vec, "bias vector").copy()
        self._update()

    @classmethod
    def load(cls, filename: Union[str, os.PathLike]) -> "CalibratedTriad":
        """Read parameters saved by :meth:`save`.

        The file holds the misalignment and scale matrices (row by row) followed
        by the bias vector, all separated by whitespace.
        """
        tokens = Path(filename).read_text(encoding="utf-8").split()
        if len(tokens) < 21:
            raise ValueError(f"{filename}: expected 21 numbers, found {len(tokens)}")
        try:
            values = [float(token) for token in tokens[:21]]
        except ValueError as exc:
            raise ValueError(f"{filename}: {exc}") from None
        triad = cls()
        triad._mis_mat = np.array(values[0:9]).reshape(3, 3)
        triad._scale_mat = np.array(values[9:18]).reshape(3, 3)
        triad._bias_vec = np.array(values[18:21])
        triad._update()
        return triad

    def save(self, filename: Union[str, os.PathLike]) -> None:
        """Write the misalignment matrix, scale matrix and bias vector as text."""
        text = (
            f"{_format_matrix(self._mis_mat)}\n\n"
            f"{_format_matrix(self._scale_mat)}\n\n"
            f"{_format_matrix(self._bias_vec)}\n\n"
        )
        Path(filename).write_text(text, encoding="utf-8")

    def _apply(self, raw_data: _Reading, transform) -> _Reading:
        if isinstance(raw_data, TriadData):
            return TriadData.from_vector(raw_data.timestamp, transform(raw_data.data))
        return transform(_as_vector(raw_data, "raw data"))

    def normalize(self, raw_data):
        """Correct misalignment and scale: T K X."""
        return self._apply(raw_data, lambda x: self._ms_mat @ x)

    def unbias_normalize(self, raw_data):
        """Remove the bias, then correct misalignment and scale: T K (X - B)."""
        return self._apply(raw_data, lambda x: self._ms_mat @ (x - self._bias_vec))

    def unbias(self, raw_data):
        """Remove the bias: X - B."""
        return self._apply(raw_data, lambda x: x - self._bias_vec)

    def __eq__(self, other) -> bool:
        if not isinstance(other, CalibratedTriad):
            return NotImplemented
        return (
            np.array_equal(self._mis_mat, other._mis_mat)
            and np.array_equal(self._scale_mat, other._scale_mat)
            and np.array_equal(self._bias_vec, other._bias_vec)
        )

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return (
            "Misalignment Matrix\n"
            f"{_format_matrix(self._mis_mat)}\n"
            "Scale Matrix\n"
            f"{_format_matrix(self._scale_mat)}\n"
            "Bias Vector\n"
            f"{_format_matrix(self._bias_vec)}\n"
        )

    def __repr__(self) -> str:
        return (
            "CalibratedTriad("
            f"mis={self._mis_mat.tolist()!r}, "
            f"scale={np.diag(self._scale_mat).tolist()!r}, "
            f"bias={self._bias_vec.tolist()!r})"
        )