"""Sensor data synchronisation, geodesy, transforms and IMU triad calibration utilities."""

__version__ = "0.1.0"

__all__ = [
    "buffers",
    "calibration",
    "file_manager",
    "geodesy",
    "integration",
    "sensor_data",
    "transforms",
    "triad",
]