"""
Plan13 Satellite Tracking Demonstration

This script demonstrates the key capabilities of the tracking package:
- TLE parsing into an orbital element set
- Propagation to a series of tracking ticks
- Azimuth/elevation, range and range rate for a ground station
- Sun position and satellite illumination
- Next pass prediction

Usage:
    python demo.py [--lat 51.48 --lon 0 --height 46] [--start "2023/09/16 14:00:00"]
                   [--steps 10] [--interval 60] [--tle-file iss.txt] [--sun] [--verbose]

Arguments:
    --tle-file: Three-line TLE file; the first element set is tracked
    --sun: Also print the Sun's position at each tick
    --verbose: Enable debug logging
"""

import argparse
import logging
import sys
from typing import List, Optional

import config
from logging_config import configure_logging, get_logger
from orbit_tracker import Epoch, LiveTracker, Observer, TrackingError
from orbit_tracker.tle_parser import split_tle_text

logger = get_logger(__name__)

HEADER = (f"{'Time (UTC)':19s}  {'Az':>7s}  {'El':>6s}  {'Range km':>9s}  "
          f"{'RR km/s':>8s}  {'Lat':>7s}  {'Lon':>8s}  Sunlit")


def format_row(row: dict) -> str:
    """Format one tracking result as a table row."""
    return (f"{row['timestamp']}  {row['azimuth']:7.2f}  {row['altitude']:6.2f}  "
            f"{row['range_km']:9.1f}  {row['range_rate_kms']:8.3f}  "
            f"{row['latitude']:7.2f}  {row['longitude']:8.2f}  {'yes' if row['sunlit'] else 'no'}")


def build_parser() -> argparse.ArgumentParser:
    site = config.DEFAULT_OBSERVER
    parser = argparse.ArgumentParser(description="Plan13 Satellite Tracking Demonstration")
    parser.add_argument("--lat", type=float, default=site["latitude"], help="Latitude, deg N")
    parser.add_argument("--lon", type=float, default=site["longitude"], help="Longitude, deg E")
    parser.add_argument("--height", type=float, default=site["height"], help="Height, metres")
    parser.add_argument("--start", default=config.FALLBACK_ISS_TLE["epoch"],
                        help='Start time "YYYY/MM/DD HH:MM:SS" (UTC)')
    parser.add_argument("--steps", type=int, default=config.DEFAULT_STEPS, help="Number of ticks")
    parser.add_argument("--interval", type=float, default=config.DEFAULT_INTERVAL_SECONDS,
                        help="Seconds between ticks")
    parser.add_argument("--tle-file", help="Three-line TLE file to track")
    parser.add_argument("--sun", action="store_true", help="Print the Sun's position too")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def load_tracker(args: argparse.Namespace) -> LiveTracker:
    """Create the tracker and load the requested element set."""
    observer = Observer(args.lat, args.lon, args.height, name=config.DEFAULT_OBSERVER["name"])
    tracker = LiveTracker(observer)

    if args.tle_file:
        with open(args.tle_file) as f:
            entries = list(split_tle_text(f.read()))
        if not entries:
            raise ValueError(f"No element sets found in {args.tle_file}")
        name, line1, line2 = entries[0]
    else:
        tle = config.FALLBACK_ISS_TLE
        name, line1, line2 = tle["name"], tle["line1"], tle["line2"]

    tracker.load_satellite(line1, line2, name)
    return tracker


def main(argv: Optional[List[str]] = None) -> int:
    """Main demonstration entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else None)

    try:
        tracker = load_tracker(args)
        start = Epoch.parse(args.start)
    except (OSError, ValueError) as e:
        logger.error(f"Cannot start tracking: {e}")
        return 1

    norad_id = next(iter(tracker.satellites))
    elements = tracker.get_elements(norad_id)
    logger.info(f"Tracking {elements['name']} ({norad_id}), element epoch {elements['epoch']}")
    logger.info(f"Observer: {tracker.observer.describe()}")

    print(HEADER)
    epoch = start
    try:
        for _ in range(args.steps):
            print(format_row(tracker.track(norad_id, epoch)))
            if args.sun:
                sun = tracker.track_sun(epoch)
                print(f"{'':19s}  Sun az {sun['azimuth']:7.2f}  el {sun['altitude']:6.2f}")
            epoch = epoch.advance(args.interval / 86400.0)

        upcoming = tracker.next_pass(norad_id, start)
    except TrackingError as e:
        logger.error(f"Tracking failed: {e}")
        return 1

    if upcoming is None:
        print("No pass within 2 days")
    else:
        print(f"Next pass: AOS {upcoming['aos']} az {upcoming['aos_azimuth']:.1f}, "
              f"max el {upcoming['max_elevation']:.1f} at {upcoming['max_elevation_time']}, "
              f"LOS {upcoming['los'] or '-'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
