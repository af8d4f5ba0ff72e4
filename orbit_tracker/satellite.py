"""
Satellite Propagation (Plan13)

Propagates a parsed element set to an arbitrary Epoch using the Plan13
algorithm by James Miller G3RUH: secular drag and J2 corrections, a Newton
solution of Kepler's equation, then rotation from the orbital plane into the
celestial frame and on into the Earth-fixed frame.

Accuracy is antenna-pointing grade (well under a degree for LEO within a
few days of the element epoch), not precision ephemeris.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .constants import (
    EARTH_RADIUS_KM,
    EARTH_ROTATION_RAD_DAY,
    GHA_ARIES_REFERENCE_DEG,
    REFERENCE_YEAR,
)
from .epoch import Epoch, day_number
from .geometry import LookAngles, celestial_to_earth_fixed, doppler, look_angles, subpoint
from .kepler import solve_kepler_equation
from .tle_parser import ElementSet, parse_tle

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


@dataclass(frozen=True, eq=False)
class SatelliteState:
    """Snapshot written by Satellite.propagate()."""

    epoch: Epoch
    elapsed_days: float
    position_celestial: np.ndarray
    velocity_celestial: np.ndarray
    position: np.ndarray
    velocity: np.ndarray
    range: float
    semi_major_axis: float
    mean_anomaly: float
    eccentric_anomaly: float
    orbit_number: int


class Satellite:
    """
    One tracked object: an element set plus its most recent propagated state.

    Instances share nothing mutable with each other, so separate threads may
    propagate separate satellites freely.
    """

    def __init__(self, name: str, line1: str, line2: str, strict: bool = True):
        """
        Args:
            name: Satellite name
            line1: First line of TLE
            line2: Second line of TLE
            strict: Reject non-numeric TLE fields instead of reading zero
        """
        self.tle(name, line1, line2, strict=strict)

    @classmethod
    def from_elements(cls, elements: ElementSet) -> "Satellite":
        satellite = cls.__new__(cls)
        satellite._set_elements(elements)
        return satellite

    def tle(self, name: str, line1: str, line2: str, strict: bool = True) -> ElementSet:
        """Load a new element set, discarding any previous state."""
        self._set_elements(parse_tle(name, line1, line2, strict=strict))
        return self.elements

    def _set_elements(self, elements: ElementSet) -> None:
        self.elements = elements
        self.name = elements.name
        self.state: Optional[SatelliteState] = None

        # GHA of Aries at the element epoch
        teg = elements.epoch.days_since(Epoch(day_number(REFERENCE_YEAR, 1, 0)))
        self._gha_epoch = math.radians(GHA_ARIES_REFERENCE_DEG) + teg * EARTH_ROTATION_RAD_DAY

    @property
    def catalog_number(self) -> int:
        return self.elements.catalog_number

    def propagate(self, epoch: Epoch) -> SatelliteState:
        """
        Compute position and velocity at ``epoch``.

        The result is returned and also kept as ``self.state`` for the
        read-only accessors below.

        Raises:
            ConvergenceFailure: If Kepler's equation does not converge
        """
        el = self.elements
        t = epoch.days_since(el.epoch)

        # Linear drag terms
        dt = el.drag_coefficient * t / 2.0
        kd = 1.0 + 4.0 * dt
        kdp = 1.0 - 7.0 * dt

        # Mean anomaly, whole revolutions stripped into the orbit number
        m = el.mean_anomaly + el.mean_motion * t * (1.0 - 3.0 * dt)
        revolutions = math.floor(m / TWO_PI)
        m -= revolutions * TWO_PI
        orbit_number = el.orbit_number + int(revolutions)

        ea = solve_kepler_equation(m, el.eccentricity)
        c_ea = math.cos(ea)
        s_ea = math.sin(ea)
        dnom = 1.0 - el.eccentricity * c_ea

        a = el.semi_major_axis * kd
        b = el.semi_minor_axis * kd
        rs = a * dnom

        # Position and velocity in the plane of the ellipse
        n0 = el.mean_motion_rad_s
        plane_position = np.array([a * (c_ea - el.eccentricity), b * s_ea, 0.0])
        plane_velocity = np.array([-a * s_ea / dnom * n0, b * c_ea / dnom * n0, 0.0])

        rotation = self._plane_to_celestial(el.arg_perigee + el.perigee_rate * t * kdp,
                                            el.raan + el.node_rate * t * kdp,
                                            el.inclination)
        position_celestial = rotation @ plane_position
        velocity_celestial = rotation @ plane_velocity

        gha = self._gha_epoch + EARTH_ROTATION_RAD_DAY * t
        self.state = SatelliteState(
            epoch=epoch,
            elapsed_days=t,
            position_celestial=position_celestial,
            velocity_celestial=velocity_celestial,
            position=celestial_to_earth_fixed(position_celestial, gha),
            velocity=celestial_to_earth_fixed(velocity_celestial, gha),
            range=rs,
            semi_major_axis=a,
            mean_anomaly=m,
            eccentric_anomaly=ea,
            orbit_number=orbit_number,
        )
        logger.debug(f"{self.name} at {epoch}: T={t:.6f} d, range={rs:.1f} km, orbit {orbit_number}")
        return self.state

    predict = propagate

    @staticmethod
    def _plane_to_celestial(arg_perigee: float, raan: float, inclination: float) -> np.ndarray:
        """Rotation [RAAN][IN][AP] from perifocal to celestial coordinates."""
        cw, sw = math.cos(arg_perigee), math.sin(arg_perigee)
        cq, sq = math.cos(raan), math.sin(raan)
        ci, si = math.cos(inclination), math.sin(inclination)
        return np.array([
            [cw * cq - sw * ci * sq, -sw * cq - cw * ci * sq, si * sq],
            [cw * sq + sw * ci * cq, -sw * sq + cw * ci * cq, -si * cq],
            [sw * si, cw * si, ci],
        ])

    def _require_state(self) -> SatelliteState:
        if self.state is None:
            raise RuntimeError(f"Satellite {self.name or self.catalog_number} has not been propagated")
        return self.state

    def subpoint(self) -> Tuple[float, float]:
        """Geocentric (latitude, longitude) in degrees below the satellite."""
        state = self._require_state()
        return subpoint(state.position, state.range)

    LL = subpoint

    @property
    def altitude_km(self) -> float:
        """Height above the mean equatorial radius (km)."""
        return self._require_state().range - EARTH_RADIUS_KM

    def look_angles(self, observer) -> LookAngles:
        """
        Altitude, azimuth, slant range and range rate seen from ``observer``.

        Raises:
            DegenerateGeometry: If the observer sits exactly at the satellite
        """
        state = self._require_state()
        return look_angles(state.position, observer, state.velocity)

    observer_look_angles = look_angles

    def altaz(self, observer) -> Tuple[float, float]:
        """(altitude, azimuth) in degrees seen from ``observer``."""
        angles = self.look_angles(observer)
        return angles.altitude, angles.azimuth

    def doppler(self, frequency_mhz: float, observer, uplink: bool = False) -> float:
        """Doppler-corrected frequency (MHz) for the current state."""
        return doppler(frequency_mhz, self.look_angles(observer).range_rate, uplink=uplink)

    def is_sunlit(self, sun_state) -> bool:
        """
        Whether the satellite is outside Earth's cylindrical shadow.

        Args:
            sun_state: SunState propagated to the same epoch
        """
        state = self._require_state()
        sun = sun_state.direction_celestial
        along = float(np.dot(state.position_celestial, sun))
        if along >= 0.0:
            return True
        across = float(np.linalg.norm(np.cross(state.position_celestial, sun)))
        return across > EARTH_RADIUS_KM

    def footprint(self, points: int = 32) -> List[Tuple[float, float]]:
        """
        Visibility circle on the ground as (latitude, longitude) points.

        Every point on the circle sees the satellite on its horizon.
        """
        state = self._require_state()
        lat, lon = subpoint(state.position, state.range)
        radius = math.acos(min(1.0, EARTH_RADIUS_KM / state.range))
        sra, cra = math.sin(radius), math.cos(radius)
        cla, sla = math.cos(math.radians(lat)), math.sin(math.radians(lat))
        clo, slo = math.cos(math.radians(lon)), math.sin(math.radians(lon))

        circle = []
        for i in range(points):
            angle = TWO_PI * i / points
            xfp, yfp, zfp = cra, sra * math.sin(angle), sra * math.cos(angle)
            # rotate up by latitude, then around by longitude
            x = xfp * cla - zfp * sla
            y = yfp
            z = xfp * sla + zfp * cla
            xfp, yfp = x * clo - y * slo, x * slo + y * clo
            circle.append((math.degrees(math.asin(max(-1.0, min(1.0, z)))),
                           math.degrees(math.atan2(yfp, xfp))))
        return circle

    def __repr__(self) -> str:
        return f"Satellite(name={self.name!r}, catalog_number={self.catalog_number})"
