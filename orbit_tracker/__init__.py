"""
Plan13 Satellite Tracking Package

Real-time satellite and Sun pointing for antenna rotators and displays,
based on the Plan13 orbit prediction algorithm by James Miller G3RUH.

Modules:
    epoch: Compact day-number time representation
    observer: Ground station reference frame
    tle_parser: TLE parsing into orbital element sets
    kepler: Bounded Newton-Raphson Kepler solver
    satellite: Orbit propagation and look angles
    sun: Closed-form Sun position
    tracker: Multi-satellite tracking and pass search

References:
    Miller, J. (1990). Satellite Orbit Prediction (Plan13).
    http://www.g6lvb.com/Articles/LVBTracker2/index.htm
"""

from .epoch import Epoch
from .exceptions import (
    ConvergenceFailure,
    DegenerateGeometry,
    InvalidElementSet,
    TimeRangeError,
    TrackingError,
)
from .geometry import LookAngles
from .observer import Observer
from .satellite import Satellite, SatelliteState
from .sun import Sun, SunState
from .tle_parser import ElementSet, parse_tle
from .tracker import LiveTracker

__version__ = "1.0.0"

__all__ = [
    "ConvergenceFailure",
    "DegenerateGeometry",
    "ElementSet",
    "Epoch",
    "InvalidElementSet",
    "LiveTracker",
    "LookAngles",
    "Observer",
    "Satellite",
    "SatelliteState",
    "Sun",
    "SunState",
    "TimeRangeError",
    "TrackingError",
    "parse_tle",
]
