"""
Unit Tests for the Ground Observer Frame

Run with:
    python -m pytest tests/test_observer.py -v
"""

import math
import unittest

import numpy as np

from orbit_tracker.constants import EARTH_RADIUS_KM, EARTH_ROTATION_RAD_S, POLAR_RADIUS_KM
from orbit_tracker.observer import Observer


class TestObserver(unittest.TestCase):
    """Test the local triad and Earth-fixed site vectors."""

    def test_triad_orthonormal(self):
        """Up/East/North are pairwise orthogonal unit vectors everywhere."""
        for lat in range(-90, 91, 15):
            for lon in range(-180, 181, 30):
                obs = Observer(lat, lon, 250.0)
                for v in (obs.up, obs.east, obs.north):
                    self.assertAlmostEqual(float(np.linalg.norm(v)), 1.0, delta=1e-9)
                self.assertAlmostEqual(float(np.dot(obs.up, obs.east)), 0.0, delta=1e-9)
                self.assertAlmostEqual(float(np.dot(obs.up, obs.north)), 0.0, delta=1e-9)
                self.assertAlmostEqual(float(np.dot(obs.east, obs.north)), 0.0, delta=1e-9)

    def test_triad_right_handed(self):
        obs = Observer(37.5, -122.3)
        np.testing.assert_allclose(np.cross(obs.east, obs.north), obs.up, atol=1e-12)

    def test_velocity_from_earth_rotation(self):
        for lat, lon in [(0.0, 0.0), (45.0, 90.0), (-33.9, 18.4), (89.0, -170.0)]:
            obs = Observer(lat, lon, 100.0)
            self.assertEqual(obs.velocity[2], 0.0)
            self.assertAlmostEqual(float(np.dot(obs.velocity, obs.position)), 0.0, delta=1e-9)
            horizontal = math.hypot(obs.position[0], obs.position[1])
            self.assertAlmostEqual(float(np.linalg.norm(obs.velocity)),
                                   horizontal * EARTH_ROTATION_RAD_S, delta=1e-12)

    def test_equator_and_pole_radii(self):
        equator = Observer(0.0, 0.0, 0.0)
        np.testing.assert_allclose(equator.position, [EARTH_RADIUS_KM, 0.0, 0.0], atol=1e-9)
        # Equatorial rotation speed is about 0.465 km/s
        self.assertAlmostEqual(equator.velocity[1], 0.465, places=2)

        pole = Observer(90.0, 0.0, 0.0)
        self.assertAlmostEqual(pole.position[2], POLAR_RADIUS_KM, places=6)

    def test_height_in_metres(self):
        """Height is given in metres and applied in kilometres."""
        low = Observer(0.0, 0.0, 0.0)
        high = Observer(0.0, 0.0, 1000.0)
        self.assertAlmostEqual(high.position[0] - low.position[0], 1.0, places=9)

    def test_matches_geodetic_conversion(self):
        """Position agrees with the textbook geodetic -> ECEF formula."""
        lat, lon, h = math.radians(45.0), math.radians(7.5), 0.35
        f = 1.0 / 298.257224
        e2 = 2 * f - f * f
        n = EARTH_RADIUS_KM / math.sqrt(1.0 - e2 * math.sin(lat) ** 2)
        expected = [
            (n + h) * math.cos(lat) * math.cos(lon),
            (n + h) * math.cos(lat) * math.sin(lon),
            (n * (1.0 - e2) + h) * math.sin(lat),
        ]
        np.testing.assert_allclose(Observer(45.0, 7.5, 350.0).position, expected, atol=1e-6)

    def test_immutable(self):
        obs = Observer(10.0, 20.0, 30.0, name="site")
        with self.assertRaises(AttributeError):
            obs.latitude = 11.0
        with self.assertRaises(ValueError):
            obs.position[0] = 0.0

    def test_describe(self):
        info = Observer(51.4769, 0.0, 46.0, name="Greenwich").describe()
        self.assertEqual(info["name"], "Greenwich")
        self.assertEqual(info["height_m"], 46.0)
        self.assertIn("position_km", info)


if __name__ == "__main__":
    unittest.main()
