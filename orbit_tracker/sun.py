"""
Sun Position

Closed-form solar model: mean anomaly and mean longitude linear in time
since the reference epoch, a two-term equation of centre, rotation by the
obliquity of the ecliptic into the celestial frame and by the Greenwich hour
angle into the Earth-fixed frame. No Kepler iteration is involved.

The Earth-fixed direction is scaled to one astronomical unit before the
observer's position is subtracted, so the same look-angle projection used
for satellites applies unchanged.
"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .constants import (
    ASTRONOMICAL_UNIT_KM,
    EARTH_ROTATION_RAD_DAY,
    GHA_ARIES_REFERENCE_DEG,
    OBLIQUITY_RAD,
    REFERENCE_YEAR,
    SUN_EQC1,
    SUN_EQC2,
    SUN_MEAN_ANOMALY_DEG,
    SUN_MEAN_ANOMALY_RATE_DEG,
    SUN_MEAN_MOTION_RAD_DAY,
)
from .epoch import Epoch, day_number
from .geometry import LookAngles, celestial_to_earth_fixed, look_angles, subpoint

logger = logging.getLogger(__name__)

CNS = math.cos(OBLIQUITY_RAD)
SNS = math.sin(OBLIQUITY_RAD)


@dataclass(frozen=True, eq=False)
class SunState:
    """Sun unit vectors written by Sun.propagate()."""

    epoch: Epoch
    direction_celestial: np.ndarray
    direction: np.ndarray

    @property
    def position(self) -> np.ndarray:
        """Earth-fixed position at a mean distance of one AU (km)."""
        return self.direction * ASTRONOMICAL_UNIT_KM


class Sun:
    """Solar position for pointing checks (sun outages, solar panels)."""

    def __init__(self):
        self.state = None

    def propagate(self, epoch: Epoch) -> SunState:
        t = epoch.days_since(Epoch(day_number(REFERENCE_YEAR, 1, 0)))
        gha = math.radians(GHA_ARIES_REFERENCE_DEG) + t * EARTH_ROTATION_RAD_DAY
        mean_longitude = math.radians(GHA_ARIES_REFERENCE_DEG) + t * SUN_MEAN_MOTION_RAD_DAY + math.pi
        mean_anomaly = math.radians(SUN_MEAN_ANOMALY_DEG + t * SUN_MEAN_ANOMALY_RATE_DEG)
        true_longitude = (mean_longitude
                          + SUN_EQC1 * math.sin(mean_anomaly)
                          + SUN_EQC2 * math.sin(2.0 * mean_anomaly))

        c, s = math.cos(true_longitude), math.sin(true_longitude)
        celestial = np.array([c, s * CNS, s * SNS])

        self.state = SunState(epoch, celestial, celestial_to_earth_fixed(celestial, gha))
        logger.debug(f"Sun at {epoch}: true longitude {math.degrees(true_longitude) % 360.0:.3f} deg")
        return self.state

    predict = propagate

    def _require_state(self) -> SunState:
        if self.state is None:
            raise RuntimeError("Sun has not been propagated")
        return self.state

    def subpoint(self) -> Tuple[float, float]:
        """(latitude, longitude) in degrees of the sub-solar point."""
        return subpoint(self._require_state().direction, 1.0)

    LL = subpoint

    def look_angles(self, observer) -> LookAngles:
        """Altitude and azimuth of the Sun seen from ``observer``."""
        return look_angles(self._require_state().position, observer)

    observer_look_angles = look_angles

    def altaz(self, observer) -> Tuple[float, float]:
        angles = self.look_angles(observer)
        return angles.altitude, angles.azimuth
