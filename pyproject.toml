[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lidarimu"
version = "0.1.0"
description = "Sensor data synchronisation, geodetic conversion, rigid transforms and IMU triad calibration utilities"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["imu", "lidar", "gnss", "calibration", "localization", "quaternion", "enu"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["lidarimu"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
