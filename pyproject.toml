[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "healthbeacon"
version = "0.1.0"
description = "Wearable health monitor logic: body temperature, pulse oximetry, GPS position and cloud property reports."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "iot",
    "health",
    "pulse-oximeter",
    "spo2",
    "max30102",
    "max30205",
    "i2c",
    "gps",
    "nmea",
    "telemetry",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Home Automation",
    "Topic :: Scientific/Engineering :: Medical Science Apps.",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["healthbeacon"]

[tool.hatch.build.targets.sdist]
include = ["healthbeacon", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
