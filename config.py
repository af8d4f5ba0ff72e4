"""
Tracker Configuration

Default element set and ground station used by the demo script and tests.
Physical constants live in orbit_tracker.constants.

Reference TLE Data:
    ISS element set for demonstrations and testing when no fresher data is
    supplied. Plan13 accuracy degrades with element age, so LEO elements
    should be refreshed at least weekly for live tracking.

    Current TLE epoch: 2023-09-16

    Sources for updated TLEs:
    - Space-Track.org (requires free registration)
    - CelesTrak.org (public access)
"""

import os
from typing import Any, Dict

# Reference ISS TLE for demonstrations and testing
FALLBACK_ISS_TLE: Dict[str, Any] = {
    'name': 'ISS (ZARYA)',
    'norad_id': 25544,
    'line1': '1 25544U 98067A   23259.57580000  .00012022  00000-0  21844-3 0  9995',
    'line2': '2 25544  51.6416 220.9944 0004263 122.0101 312.2755 15.49541986415598',
    'epoch': '2023/09/16 13:49:09',
    'mean_motion': 15.49541986,
    'inclination': 51.6416,
    'eccentricity': 0.0004263
}

# Default ground station, overridable from the environment
DEFAULT_OBSERVER: Dict[str, Any] = {
    'name': os.environ.get('ORBIT_TRACKER_SITE', 'Greenwich'),
    'latitude': float(os.environ.get('ORBIT_TRACKER_LAT', '51.4769')),
    'longitude': float(os.environ.get('ORBIT_TRACKER_LON', '0.0')),
    'height': float(os.environ.get('ORBIT_TRACKER_HEIGHT', '46.0')),  # metres
}

# Demo tracking table defaults
DEFAULT_STEPS: int = 10
DEFAULT_INTERVAL_SECONDS: float = 60.0
