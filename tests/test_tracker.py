"""
Tests for the Live Tracker

Tests multi-satellite loading, tracking output, pass search and the
error history kept when propagation fails.

Run with:
    python -m pytest tests/test_tracker.py -v
"""

import unittest
from unittest import mock

from orbit_tracker.epoch import Epoch
from orbit_tracker.exceptions import ConvergenceFailure, InvalidElementSet
from orbit_tracker.observer import Observer
from orbit_tracker.tle_parser import parse_tle
from orbit_tracker.tracker import MAX_ERROR_HISTORY, LiveTracker

ISS_LINE1 = "1 25544U 98067A   23259.57580000  .00012022  00000-0  21844-3 0  9995"
ISS_LINE2 = "2 25544  51.6416 220.9944 0004263 122.0101 312.2755 15.49541986415598"
ISS_NAME = "ISS (ZARYA)"
ISS_EPOCH = "2023/09/16 13:49:09"

# Same orbit filed under another catalog number
OTHER_LINE1 = ISS_LINE1.replace("25544", "99999")
OTHER_LINE2 = ISS_LINE2.replace("25544", "99999")

KEPLER_PATCH = "orbit_tracker.satellite.solve_kepler_equation"


class TestLoading(unittest.TestCase):
    """Test element set loading."""

    def setUp(self):
        self.tracker = LiveTracker(Observer(45.0, 10.0, 200.0))

    def test_load_satellite(self):
        norad_id = self.tracker.load_satellite(ISS_LINE1, ISS_LINE2, ISS_NAME)
        self.assertEqual(norad_id, 25544)
        self.assertEqual(self.tracker.satellites[25544].name, ISS_NAME)

    def test_default_name(self):
        self.tracker.load_satellite(ISS_LINE1, ISS_LINE2)
        self.assertEqual(self.tracker.satellites[25544].name, "SAT_25544")

    def test_default_name_parses_once(self):
        with mock.patch("orbit_tracker.tracker.parse_tle", wraps=parse_tle) as parse:
            self.tracker.load_satellite(ISS_LINE1, ISS_LINE2)
        self.assertEqual(parse.call_count, 1)
        elements = self.tracker.satellites[25544].elements
        self.assertEqual(elements.name, "SAT_25544")
        self.assertEqual(elements.semi_major_axis, parse_tle("", ISS_LINE1, ISS_LINE2).semi_major_axis)

    def test_reload_replaces(self):
        self.tracker.load_satellite(ISS_LINE1, ISS_LINE2, "first")
        with self.assertLogs("orbit_tracker.tracker", level="INFO"):
            self.tracker.load_satellite(ISS_LINE1, ISS_LINE2, "second")
        self.assertEqual(len(self.tracker.satellites), 1)
        self.assertEqual(self.tracker.satellites[25544].name, "second")

    def test_load_catalog(self):
        text = f"{ISS_NAME}\n{ISS_LINE1}\n{ISS_LINE2}\nCOPY\n{OTHER_LINE1}\n{OTHER_LINE2}\n"
        self.assertEqual(self.tracker.load_catalog(text), [25544, 99999])
        self.assertEqual(self.tracker.satellites[99999].name, "COPY")

    def test_invalid_element_set(self):
        bad = ISS_LINE2[:52] + " 0.00000000" + ISS_LINE2[63:]
        with self.assertRaises(InvalidElementSet):
            self.tracker.load_satellite(ISS_LINE1, bad, ISS_NAME)
        self.assertEqual(self.tracker.satellites, {})

    def test_get_elements(self):
        self.tracker.load_satellite(ISS_LINE1, ISS_LINE2, ISS_NAME)
        elements = self.tracker.get_elements(25544)
        self.assertEqual(elements["norad_id"], 25544)
        self.assertEqual(elements["epoch"], ISS_EPOCH)

    def test_unknown_satellite(self):
        with self.assertRaises(ValueError):
            self.tracker.track(12345, Epoch.parse(ISS_EPOCH))
        with self.assertRaises(ValueError):
            self.tracker.get_elements(12345)


class TestTracking(unittest.TestCase):
    """Test tracking output."""

    def setUp(self):
        self.tracker = LiveTracker(Observer(45.0, 10.0, 200.0))
        self.tracker.load_satellite(ISS_LINE1, ISS_LINE2, ISS_NAME)
        self.epoch = Epoch.parse(ISS_EPOCH)

    def test_track_fields(self):
        result = self.tracker.track(25544, self.epoch)
        for key in ("timestamp", "name", "norad_id", "latitude", "longitude", "height_km",
                    "altitude", "azimuth", "range_km", "range_rate_kms", "orbit_number",
                    "visible", "sunlit"):
            self.assertIn(key, result)
        self.assertEqual(result["timestamp"], ISS_EPOCH)
        self.assertEqual(result["orbit_number"], 41559)
        self.assertEqual(result["visible"], result["altitude"] > 0.0)
        self.assertGreater(result["height_km"], 400.0)
        self.assertLess(result["height_km"], 430.0)
        self.assertGreaterEqual(result["azimuth"], 0.0)
        self.assertLess(result["azimuth"], 360.0)

    def test_track_all(self):
        self.tracker.load_satellite(OTHER_LINE1, OTHER_LINE2, "COPY")
        results = self.tracker.track_all(self.epoch)
        self.assertEqual([r["norad_id"] for r in results], [25544, 99999])
        self.assertAlmostEqual(results[0]["azimuth"], results[1]["azimuth"], places=9)

    def test_track_sun(self):
        result = self.tracker.track_sun(self.epoch)
        for key in ("timestamp", "latitude", "longitude", "altitude", "azimuth"):
            self.assertIn(key, result)
        # mid-September: Sun just north of the equator
        self.assertGreater(result["latitude"], 0.0)
        self.assertLess(result["latitude"], 5.0)


class TestPassPrediction(unittest.TestCase):
    """Test the fixed-step pass search."""

    def setUp(self):
        self.epoch = Epoch.parse(ISS_EPOCH)

    def test_next_pass(self):
        tracker = LiveTracker(Observer(45.0, 10.0, 200.0))
        tracker.load_satellite(ISS_LINE1, ISS_LINE2, ISS_NAME)
        result = tracker.next_pass(25544, self.epoch)

        self.assertIsNotNone(result)
        self.assertIsNotNone(result["los"])
        aos, los = Epoch.parse(result["aos"]), Epoch.parse(result["los"])
        self.assertLess(aos, los)
        self.assertLess(los.days_since(aos), 20.0 / 1440.0)
        self.assertGreater(result["max_elevation"], 0.0)
        peak = Epoch.parse(result["max_elevation_time"])
        self.assertTrue(aos <= peak < los)

    def test_pass_steps_on_whole_minutes(self):
        tracker = LiveTracker(Observer(45.0, 10.0, 200.0))
        tracker.load_satellite(ISS_LINE1, ISS_LINE2, ISS_NAME)
        result = tracker.next_pass(25544, self.epoch)
        if result["aos"] != ISS_EPOCH:
            self.assertTrue(result["aos"].endswith(":00"))
        self.assertTrue(result["los"].endswith(":00"))

    def test_horizon_mask(self):
        tracker = LiveTracker(Observer(45.0, 10.0, 200.0))
        tracker.load_satellite(ISS_LINE1, ISS_LINE2, ISS_NAME)
        result = tracker.next_pass(25544, self.epoch, horizon=10.0)
        self.assertIsNotNone(result)
        self.assertGreater(result["max_elevation"], 10.0)

    def test_no_pass_at_pole(self):
        """The ISS never rises for an observer at the South Pole."""
        tracker = LiveTracker(Observer(-90.0, 0.0))
        tracker.load_satellite(ISS_LINE1, ISS_LINE2, ISS_NAME)
        self.assertIsNone(tracker.next_pass(25544, self.epoch, max_days=0.5))

    def test_scan_from_midnight_terminates(self):
        """A start on a whole minute steps forward every tick."""
        tracker = LiveTracker(Observer(-90.0, 0.0))
        tracker.load_satellite(ISS_LINE1, ISS_LINE2, ISS_NAME)
        for seconds in (60.0, 30.0, 10.0):
            with mock.patch.object(tracker.satellites[25544], "propagate",
                                   wraps=tracker.satellites[25544].propagate) as propagate:
                result = tracker.next_pass(25544, Epoch.from_calendar(2023, 9, 16), step_seconds=seconds,
                                           max_days=0.25)
            self.assertIsNone(result)
            # one tick per step; the last lands on the window edge give or take rounding
            ticks = int(round(0.25 * 86400 / seconds))
            self.assertIn(propagate.call_count, (ticks, ticks + 1))

    def test_step_too_small(self):
        tracker = LiveTracker(Observer(45.0, 10.0, 200.0))
        tracker.load_satellite(ISS_LINE1, ISS_LINE2, ISS_NAME)
        for seconds in (0.0, -60.0, 0.5):
            with self.assertRaises(ValueError):
                tracker.next_pass(25544, self.epoch, step_seconds=seconds)


class TestErrorHistory(unittest.TestCase):
    """Test failure logging and the bounded error history."""

    def setUp(self):
        self.tracker = LiveTracker(Observer(45.0, 10.0, 200.0))
        self.tracker.load_satellite(ISS_LINE1, ISS_LINE2, ISS_NAME)
        self.epoch = Epoch.parse(ISS_EPOCH)

    def test_failure_is_recorded_and_raised(self):
        with mock.patch(KEPLER_PATCH, side_effect=ConvergenceFailure("did not converge")):
            with self.assertLogs("orbit_tracker.tracker", level="ERROR"):
                with self.assertRaises(ConvergenceFailure):
                    self.tracker.track(25544, self.epoch)

        history = self.tracker.get_error_history(25544)
        self.assertEqual(len(history), 1)
        self.assertEqual(history[0]["error_type"], "ConvergenceFailure")
        self.assertEqual(history[0]["error_message"], "did not converge")
        self.assertEqual(history[0]["timestamp"], ISS_EPOCH)

    def test_history_is_bounded(self):
        with mock.patch(KEPLER_PATCH, side_effect=ConvergenceFailure("did not converge")):
            with self.assertLogs("orbit_tracker.tracker", level="ERROR"):
                for i in range(MAX_ERROR_HISTORY + 5):
                    with self.assertRaises(ConvergenceFailure):
                        self.tracker.track(25544, self.epoch.advance(i / 1440.0))

        history = self.tracker.get_error_history(25544)
        self.assertEqual(len(history), MAX_ERROR_HISTORY)
        self.assertEqual(history[-1]["timestamp"], self.epoch.advance(104 / 1440.0).ascii())

    def test_track_all_reports_failures(self):
        self.tracker.load_satellite(OTHER_LINE1, OTHER_LINE2, "COPY")
        with mock.patch(KEPLER_PATCH, side_effect=ConvergenceFailure("did not converge")):
            with self.assertLogs("orbit_tracker.tracker", level="ERROR"):
                results = self.tracker.track_all(self.epoch)
        self.assertEqual(len(results), 2)
        for result in results:
            self.assertEqual(result["error"], "did not converge")
        self.assertEqual(len(self.tracker.get_error_history(99999)), 1)

    def test_next_pass_records_failure(self):
        with mock.patch(KEPLER_PATCH, side_effect=ConvergenceFailure("did not converge")):
            with self.assertRaises(ConvergenceFailure):
                self.tracker.next_pass(25544, self.epoch)
        self.assertEqual(len(self.tracker.get_error_history(25544)), 1)

    def test_no_history_without_failures(self):
        self.tracker.track(25544, self.epoch)
        self.assertEqual(self.tracker.get_error_history(25544), [])


if __name__ == "__main__":
    unittest.main()
