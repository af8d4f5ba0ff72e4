"""
Shared Frame Geometry

Helpers used by both the Satellite and the Sun models: rotation from the
celestial (inertial) frame into the Earth-fixed frame, sub-point latitude
and longitude, and the observer-relative look-angle projection.
"""

import math
from typing import NamedTuple, Optional, Tuple

import numpy as np

from .constants import SPEED_OF_LIGHT_KMS
from .exceptions import DegenerateGeometry


class LookAngles(NamedTuple):
    """Observer-relative pointing angles (degrees) with range (km) and range rate (km/s)."""

    altitude: float
    azimuth: float
    range: float
    range_rate: float


def celestial_to_earth_fixed(vector: np.ndarray, greenwich_hour_angle: float) -> np.ndarray:
    """
    Rotate a celestial-frame vector into the Earth-fixed frame.

    Only x and y rotate (about the polar axis); z is unchanged.

    Args:
        vector: 3-vector in the celestial frame
        greenwich_hour_angle: GHA of Aries (rad)

    Returns:
        3-vector in the Earth-fixed rotating frame
    """
    cg = math.cos(-greenwich_hour_angle)
    sg = math.sin(-greenwich_hour_angle)
    rotation = np.array([
        [cg, -sg, 0.0],
        [sg, cg, 0.0],
        [0.0, 0.0, 1.0],
    ])
    return rotation @ vector


def subpoint(position: np.ndarray, radius: Optional[float] = None) -> Tuple[float, float]:
    """
    Geocentric latitude and longitude (degrees) below an Earth-fixed position.

    Args:
        position: Earth-fixed 3-vector
        radius: Length of ``position`` if already known

    Returns:
        Tuple of (latitude_deg, longitude_deg), longitude in [-180, 180]
    """
    if radius is None:
        radius = float(np.linalg.norm(position))
    latitude = math.degrees(math.asin(position[2] / radius))
    longitude = math.degrees(math.atan2(position[1], position[0]))
    return latitude, longitude


def look_angles(position: np.ndarray, observer, velocity: Optional[np.ndarray] = None) -> LookAngles:
    """
    Project the line of sight from ``observer`` to ``position`` onto the
    observer's Up/East/North triad.

    Args:
        position: Target position, Earth-fixed frame (km)
        observer: Observer providing position, velocity and the local triad
        velocity: Target velocity, Earth-fixed frame (km/s); range rate is
            reported as 0.0 when omitted

    Returns:
        LookAngles with azimuth normalised into [0, 360)

    Raises:
        DegenerateGeometry: If the target coincides with the observer
    """
    line_of_sight = np.asarray(position, dtype=float) - observer.position
    distance = float(np.linalg.norm(line_of_sight))
    if distance == 0.0 or not math.isfinite(distance):
        raise DegenerateGeometry(f"Line of sight has no direction (length {distance})")

    unit = line_of_sight / distance
    u = float(np.dot(unit, observer.up))
    e = float(np.dot(unit, observer.east))
    n = float(np.dot(unit, observer.north))

    azimuth = math.degrees(math.atan2(e, n))
    if azimuth < 0.0:
        azimuth += 360.0
    # atan2 of a tiny negative east component rounds to exactly 360 after the shift
    if azimuth >= 360.0:
        azimuth -= 360.0
    altitude = math.degrees(math.asin(max(-1.0, min(1.0, u))))

    range_rate = 0.0
    if velocity is not None:
        range_rate = float(np.dot(np.asarray(velocity, dtype=float) - observer.velocity, unit))

    return LookAngles(altitude, azimuth, distance, range_rate)


def doppler(frequency_mhz: float, range_rate: float, uplink: bool = False) -> float:
    """
    Doppler-corrected frequency for a given range rate.

    Args:
        frequency_mhz: Nominal frequency (MHz)
        range_rate: Range rate (km/s), positive when receding
        uplink: True to pre-compensate a transmit frequency

    Returns:
        Frequency (MHz) to receive on, or to transmit on when ``uplink``
    """
    shift = -frequency_mhz * range_rate / SPEED_OF_LIGHT_KMS
    if uplink:
        return frequency_mhz - shift
    return frequency_mhz + shift
