"""
Physical and Astronomical Constants

Read-only constants shared by every component of the tracker. Values follow
the Plan13 algorithm by James Miller G3RUH, with the sidereal and solar data
refreshed for 2014 onwards.

Nothing in the package mutates these values; treat the module as an
immutable configuration table.

References:
    Miller, J. (1990). Satellite Orbit Prediction (Plan13).
    http://www.g6lvb.com/Articles/LVBTracker2/index.htm
"""

import math

# Earth shape (WGS-84 ellipsoid)
EARTH_RADIUS_KM: float = 6378.137  # Equatorial radius (km)
FLATTENING: float = 1.0 / 298.257224  # Ellipsoid flattening
POLAR_RADIUS_KM: float = EARTH_RADIUS_KM * (1.0 - FLATTENING)  # (km)

# Gravity field
GRAVITATIONAL_PARAMETER: float = 3.986e5  # GM (km³/s²)
J2: float = 1.08263e-3  # Second zonal harmonic coefficient

# Time and rotation
MEAN_YEAR_DAYS: float = 365.25  # Mean year (days)
TROPICAL_YEAR_DAYS: float = 365.2421874  # Tropical year (days)
SUN_MEAN_MOTION_RAD_DAY: float = 2.0 * math.pi / TROPICAL_YEAR_DAYS  # (rad/day)
EARTH_ROTATION_RAD_DAY: float = 2.0 * math.pi + SUN_MEAN_MOTION_RAD_DAY  # (rad/day)
EARTH_ROTATION_RAD_S: float = EARTH_ROTATION_RAD_DAY / 86400.0  # (rad/s)
SECONDS_PER_DAY: float = 86400.0

# Sidereal and solar data, valid to roughly 2030
REFERENCE_YEAR: int = 2014  # GHA Aries reference, Jan 0.0 of this year
GHA_ARIES_REFERENCE_DEG: float = 99.5828  # GHA Aries at reference (deg)
SUN_MEAN_ANOMALY_DEG: float = 356.4105  # Sun mean anomaly at reference (deg)
SUN_MEAN_ANOMALY_RATE_DEG: float = 0.98560028  # (deg/day)
OBLIQUITY_RAD: float = math.radians(23.4375)  # Obliquity of the ecliptic
SUN_EQC1: float = 0.03340  # Equation of centre, sin(M) term (rad)
SUN_EQC2: float = 0.00035  # Equation of centre, sin(2M) term (rad)
ASTRONOMICAL_UNIT_KM: float = 149.597870700e6  # Mean Earth-Sun distance (km)

SPEED_OF_LIGHT_KMS: float = 299792.0  # (km/s)

# Kepler solver
KEPLER_TOLERANCE: float = 1e-5  # Newton correction threshold (rad)
KEPLER_MAX_ITERATIONS: int = 20

# Calendar conversion is exact between 1900 Mar 01 and 2100 Feb 28
MIN_CALENDAR_DATE = (1900, 3, 1)
MAX_CALENDAR_DATE = (2100, 2, 28)

# Two-digit TLE epoch years below this pivot belong to the 21st century
EPOCH_YEAR_PIVOT: int = 58
