"""WGS84 geodetic to local east-north-up conversion."""

from __future__ import annotations

import math

import numpy as np

__all__ = ["WGS84_A", "WGS84_F", "LocalCartesian", "geodetic_to_ecef"]

WGS84_A = 6378137.0
WGS84_F = 1.0 / 298.257223563
_E2 = WGS84_F * (2.0 - WGS84_F)


def _check_latitude(latitude: float) -> None:
    if not -90.0 <= latitude <= 90.0:
        raise ValueError(f"latitude {latitude} outside [-90, 90]")


def geodetic_to_ecef(latitude, longitude, altitude) -> tuple[float, float, float]:
    """Convert latitude/longitude (degrees) and altitude (m) to earth-centred coordinates."""
    _check_latitude(latitude)
    phi = math.radians(latitude)
    lam = math.radians(longitude)
    sphi, cphi = math.sin(phi), math.cos(phi)
    slam, clam = math.sin(lam), math.cos(lam)
    n = WGS84_A / math.sqrt(1.0 - _E2 * sphi * sphi)
    x = (n + altitude) * cphi * clam
    y = (n + altitude) * cphi * slam
    z = (n * (1.0 - _E2) + altitude) * sphi
    return x, y, z


class LocalCartesian:
    """Local east-north-up frame anchored at a geodetic origin."""

    def __init__(self, latitude=0.0, longitude=0.0, altitude=0.0):
        self.reset(latitude, longitude, altitude)

    def reset(self, latitude, longitude, altitude) -> None:
        """Move the origin of the local frame."""
        _check_latitude(latitude)
        self.latitude = float(latitude)
        self.longitude = float(longitude)
        self.altitude = float(altitude)
        self._origin = np.array(geodetic_to_ecef(latitude, longitude, altitude))
        phi = math.radians(latitude)
        lam = math.radians(longitude)
        sphi, cphi = math.sin(phi), math.cos(phi)
        slam, clam = math.sin(lam), math.cos(lam)
        self._rotation = np.array(
            [
                [-slam, clam, 0.0],
                [-sphi * clam, -sphi * slam, cphi],
                [cphi * clam, cphi * slam, sphi],
            ]
        )

    def forward(self, latitude, longitude, altitude) -> tuple[float, float, float]:
        """Return (east, north, up) in metres of a geodetic point."""
        delta = np.array(geodetic_to_ecef(latitude, longitude, altitude)) - self._origin
        east, north, up = self._rotation @ delta
        return float(east), float(north), float(up)