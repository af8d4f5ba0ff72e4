"""
Live Satellite Tracking

Keeps a set of element sets keyed by catalog number for one ground station
and produces pointing data on demand: look angles, sub-point, range rate,
illumination and simple pass predictions, plus the Sun for outage checks.

Failures are logged, kept in a bounded per-satellite history and re-raised
to the caller; retry policy (e.g. fetching fresh elements) belongs to the
host application.
"""

import dataclasses
import logging
from typing import Any, Dict, List, Optional

from .epoch import Epoch
from .exceptions import TrackingError
from .observer import Observer
from .satellite import Satellite
from .sun import Sun
from .tle_parser import parse_tle, split_tle_text

logger = logging.getLogger(__name__)

MAX_ERROR_HISTORY = 100
MIN_PASS_STEP_SECONDS = 1.0


class LiveTracker:
    """
    Multi-satellite tracker for a single observer.

    Features:
    - Load satellites from TLE pairs or catalogue text
    - Look angles, range rate and sub-point at any Epoch
    - Sunlit / eclipsed state and Sun position
    - Next-pass search by fixed-step scanning
    - Error history per satellite
    """

    def __init__(self, observer: Observer):
        """
        Args:
            observer: Ground station shared by every lookup
        """
        self.observer = observer
        self.satellites: Dict[int, Satellite] = {}
        self.sun = Sun()
        self.error_history: Dict[int, List[Dict[str, Any]]] = {}

    def load_satellite(self, line1: str, line2: str, name: Optional[str] = None,
                       strict: bool = True) -> int:
        """Load (or replace) a satellite from TLE lines; returns its catalog number."""
        elements = parse_tle(name or "", line1, line2, strict=strict)
        if not elements.name:
            elements = dataclasses.replace(elements, name=f"SAT_{elements.catalog_number}")

        norad_id = elements.catalog_number
        if norad_id in self.satellites:
            logger.info(f"Replacing element set for satellite {norad_id}")
        self.satellites[norad_id] = Satellite.from_elements(elements)
        return norad_id

    def load_catalog(self, text: str, strict: bool = True) -> List[int]:
        """Load every element set in three-line catalogue text."""
        return [self.load_satellite(line1, line2, name, strict=strict)
                for name, line1, line2 in split_tle_text(text)]

    def _get(self, norad_id: int) -> Satellite:
        if norad_id not in self.satellites:
            raise ValueError(f"Satellite {norad_id} not loaded")
        return self.satellites[norad_id]

    def track(self, norad_id: int, epoch: Epoch) -> Dict[str, Any]:
        """
        Pointing data for one satellite at ``epoch``.

        Returns:
            Dictionary with timestamp, sub-point, look angles, range,
            range rate, orbit number and visibility flags
        """
        satellite = self._get(norad_id)
        try:
            state = satellite.propagate(epoch)
            angles = satellite.look_angles(self.observer)
            sun_state = self.sun.propagate(epoch)
        except TrackingError as e:
            self._log_error(norad_id, e, epoch)
            logger.error(f"Tracking failed for satellite {norad_id} at {epoch}: {e}")
            raise

        latitude, longitude = satellite.subpoint()
        return {
            "timestamp": epoch.ascii(),
            "name": satellite.name,
            "norad_id": norad_id,
            "latitude": latitude,
            "longitude": longitude,
            "height_km": satellite.altitude_km,
            "altitude": angles.altitude,
            "azimuth": angles.azimuth,
            "range_km": angles.range,
            "range_rate_kms": angles.range_rate,
            "orbit_number": state.orbit_number,
            "visible": angles.altitude > 0.0,
            "sunlit": satellite.is_sunlit(sun_state),
        }

    def track_all(self, epoch: Epoch) -> List[Dict[str, Any]]:
        """Track every loaded satellite; failures are reported per entry."""
        results = []
        for norad_id in self.satellites:
            try:
                results.append(self.track(norad_id, epoch))
            except TrackingError as e:
                results.append({"norad_id": norad_id, "error": str(e), "timestamp": epoch.ascii()})
        return results

    def track_sun(self, epoch: Epoch) -> Dict[str, Any]:
        """Sun sub-point and look angles at ``epoch``."""
        self.sun.propagate(epoch)
        latitude, longitude = self.sun.subpoint()
        angles = self.sun.look_angles(self.observer)
        return {
            "timestamp": epoch.ascii(),
            "latitude": latitude,
            "longitude": longitude,
            "altitude": angles.altitude,
            "azimuth": angles.azimuth,
        }

    def next_pass(self, norad_id: int, start: Epoch, step_seconds: float = 60.0,
                  max_days: float = 2.0, horizon: float = 0.0) -> Optional[Dict[str, Any]]:
        """
        Find the next pass above ``horizon`` by scanning in fixed steps.

        Scanning starts at ``start`` and continues on whole multiples of the
        step. A pass already in progress at ``start`` is reported with
        ``start`` as its AOS. Times are only as fine as ``step_seconds``.

        Returns:
            Dictionary with AOS/LOS timestamps and azimuths and the maximum
            elevation, or None if no pass begins within ``max_days``. LOS
            fields are None when the pass outlasts the window.

        Raises:
            ValueError: If ``step_seconds`` is below MIN_PASS_STEP_SECONDS or
                does not move the scan forward
        """
        satellite = self._get(norad_id)
        if step_seconds < MIN_PASS_STEP_SECONDS:
            raise ValueError(f"Pass search step must be at least {MIN_PASS_STEP_SECONDS} s, "
                             f"got {step_seconds}")
        step = step_seconds / 86400.0
        epoch = start
        result: Optional[Dict[str, Any]] = None

        while epoch.days_since(start) <= max_days:
            try:
                satellite.propagate(epoch)
                altitude, azimuth = satellite.altaz(self.observer)
            except TrackingError as e:
                self._log_error(norad_id, e, epoch)
                raise

            if result is None:
                if altitude > horizon:
                    result = {
                        "name": satellite.name,
                        "norad_id": norad_id,
                        "aos": epoch.ascii(),
                        "aos_azimuth": azimuth,
                        "max_elevation": altitude,
                        "max_elevation_time": epoch.ascii(),
                        "los": None,
                        "los_azimuth": None,
                    }
            elif altitude > horizon:
                if altitude > result["max_elevation"]:
                    result["max_elevation"] = altitude
                    result["max_elevation_time"] = epoch.ascii()
            else:
                result["los"] = epoch.ascii()
                result["los_azimuth"] = azimuth
                return result

            following = epoch.roundup(step)
            if following <= epoch:
                raise ValueError(f"Pass search step of {step_seconds} s does not advance from {epoch}")
            epoch = following

        if result is None:
            logger.info(f"No pass of satellite {norad_id} within {max_days} days of {start}")
        return result

    def get_elements(self, norad_id: int) -> Dict[str, Any]:
        """Orbital elements of a loaded satellite in TLE units."""
        return self._get(norad_id).elements.to_dict()

    def _log_error(self, norad_id: int, error: Exception, epoch: Epoch) -> None:
        """Record a failure for later diagnostics."""
        history = self.error_history.setdefault(norad_id, [])
        history.append({
            "error_type": type(error).__name__,
            "error_message": str(error),
            "timestamp": epoch.ascii(),
        })
        if len(history) > MAX_ERROR_HISTORY:
            self.error_history[norad_id] = history[-MAX_ERROR_HISTORY:]

    def get_error_history(self, norad_id: int) -> List[Dict[str, Any]]:
        return self.error_history.get(norad_id, [])
