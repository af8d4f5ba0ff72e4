"""
Ground Observer

Fixed local reference frame for a site on the WGS-84 ellipsoid. Everything
is computed once at construction and never changes afterwards, so a single
Observer can be shared by any number of Satellite and Sun lookups.
"""

import logging
import math
from typing import Any, Dict

import numpy as np

from .constants import EARTH_RADIUS_KM, EARTH_ROTATION_RAD_S, POLAR_RADIUS_KM

logger = logging.getLogger(__name__)


class Observer:
    """
    Ground station at a geodetic latitude, longitude and height.

    Attributes:
        up, east, north: Local orthonormal triad (Earth-fixed unit vectors)
        position: Site position, Earth-fixed frame (km)
        velocity: Site velocity due to Earth rotation (km/s)
    """

    def __init__(self, latitude: float, longitude: float, height: float = 0.0, name: str = ""):
        """
        Args:
            latitude: Geodetic latitude, degrees north positive
            longitude: Longitude, degrees east positive
            height: Height above the ellipsoid in metres
            name: Optional site name
        """
        set_ = super().__setattr__
        set_("name", name)
        set_("latitude", float(latitude))
        set_("longitude", float(longitude))
        set_("height", float(height))

        la = math.radians(latitude)
        lo = math.radians(longitude)
        height_km = height / 1000.0
        cl, sl = math.cos(la), math.sin(la)
        co, so = math.cos(lo), math.sin(lo)

        up = np.array([cl * co, cl * so, sl])
        east = np.array([-so, co, 0.0])
        north = np.array([-sl * co, -sl * so, cl])

        # Radii of curvature corrected for the oblate Earth
        xx = EARTH_RADIUS_KM * EARTH_RADIUS_KM
        zz = POLAR_RADIUS_KM * POLAR_RADIUS_KM
        d = math.sqrt(xx * cl * cl + zz * sl * sl)
        rx = xx / d + height_km
        rz = zz / d + height_km

        position = np.array([rx * up[0], rx * up[1], rz * up[2]])
        velocity = np.array([-position[1] * EARTH_ROTATION_RAD_S,
                             position[0] * EARTH_ROTATION_RAD_S,
                             0.0])

        for vector in (up, east, north, position, velocity):
            vector.setflags(write=False)

        set_("up", up)
        set_("east", east)
        set_("north", north)
        set_("position", position)
        set_("velocity", velocity)

        logger.debug(f"Observer {name or '<unnamed>'} at lat={latitude:.4f} lon={longitude:.4f} "
                     f"height={height:.1f} m")

    def __setattr__(self, key, value):
        raise AttributeError(f"Observer is immutable, cannot set {key!r}")

    def __delattr__(self, key):
        raise AttributeError(f"Observer is immutable, cannot delete {key!r}")

    def describe(self) -> Dict[str, Any]:
        """Summary of the site for logging and display."""
        return {
            "name": self.name,
            "latitude_deg": self.latitude,
            "longitude_deg": self.longitude,
            "height_m": self.height,
            "position_km": {"x": self.position[0], "y": self.position[1], "z": self.position[2]},
        }

    def __repr__(self) -> str:
        return (f"Observer(latitude={self.latitude!r}, longitude={self.longitude!r}, "
                f"height={self.height!r}, name={self.name!r})")
