"""
TLE Parser Module

Parses NORAD Two-Line Element (TLE) sets into an immutable ElementSet and
derives the constants the Plan13 propagator needs (semi-axes, J2 precession
rates, drag coefficient). Derived values are computed once per element set;
propagation only ever feeds time into them.

Fields are read from fixed columns. In strict mode (the default) a field
that is not numeric raises InvalidElementSet; in permissive mode it is read
as zero, which tolerates slightly malformed real-world sources. Physical
range checks (eccentricity, mean motion, inclination) run in both modes.
Checksums are not verified.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Tuple

from .constants import EARTH_RADIUS_KM, EPOCH_YEAR_PIVOT, GRAVITATIONAL_PARAMETER, J2, SECONDS_PER_DAY
from .epoch import Epoch, day_number
from .exceptions import InvalidElementSet

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi

# (field, line, start, end, type) with zero-based, end-exclusive columns
TLE_FIELDS = (
    ("epoch_year", 1, 18, 20, int),
    ("epoch_day", 1, 20, 32, float),
    ("decay_rate", 1, 33, 43, float),
    ("catalog_number", 2, 2, 7, int),
    ("inclination", 2, 8, 16, float),
    ("raan", 2, 17, 25, float),
    ("eccentricity", 2, 26, 33, float),
    ("arg_perigee", 2, 34, 42, float),
    ("mean_anomaly", 2, 43, 51, float),
    ("mean_motion", 2, 52, 63, float),
    ("orbit_number", 2, 63, 68, int),
)


@dataclass(frozen=True)
class ElementSet:
    """
    Canonical orbital elements parsed from a TLE.

    Angles are in radians, mean motion in rad/day and the decay rate in
    rad/day². Fields after ``line2`` are derived in ``__post_init__`` and
    cached for the lifetime of the element set.
    """

    name: str
    catalog_number: int
    epoch_year: int
    epoch_day: float
    decay_rate: float
    inclination: float
    raan: float
    eccentricity: float
    arg_perigee: float
    mean_anomaly: float
    mean_motion: float
    orbit_number: int
    line1: str = ""
    line2: str = ""

    epoch: Epoch = field(init=False)
    mean_motion_rad_s: float = field(init=False)
    semi_major_axis: float = field(init=False)
    semi_minor_axis: float = field(init=False)
    precession_constant: float = field(init=False)
    node_rate: float = field(init=False)
    perigee_rate: float = field(init=False)
    drag_coefficient: float = field(init=False)

    def __post_init__(self):
        self._validate()

        set_ = object.__setattr__
        set_(self, "epoch", Epoch(day_number(self.epoch_year, 1, 0), self.epoch_day))

        n0 = self.mean_motion / SECONDS_PER_DAY
        a0 = (GRAVITATIONAL_PARAMETER / (n0 * n0)) ** (1.0 / 3.0)
        b0 = a0 * math.sqrt(1.0 - self.eccentricity * self.eccentricity)
        pc = EARTH_RADIUS_KM * a0 / (b0 * b0)
        pc = 1.5 * J2 * pc * pc * self.mean_motion
        ci = math.cos(self.inclination)

        set_(self, "mean_motion_rad_s", n0)
        set_(self, "semi_major_axis", a0)
        set_(self, "semi_minor_axis", b0)
        set_(self, "precession_constant", pc)
        set_(self, "node_rate", -pc * ci)
        set_(self, "perigee_rate", pc * (5.0 * ci * ci - 1.0) / 2.0)
        set_(self, "drag_coefficient", -2.0 * self.decay_rate / (3.0 * self.mean_motion))

    def _validate(self) -> None:
        e = self.eccentricity
        if not (math.isfinite(e) and 0.0 <= e < 1.0):
            raise InvalidElementSet(
                f"{self.name or self.catalog_number}: eccentricity {e} outside [0, 1)",
                field="eccentricity", reason=InvalidElementSet.OUT_OF_RANGE, value=e,
            )
        if not (math.isfinite(self.mean_motion) and self.mean_motion > 0.0):
            raise InvalidElementSet(
                f"{self.name or self.catalog_number}: mean motion must be positive, "
                f"got {self.mean_motion}",
                field="mean_motion", reason=InvalidElementSet.OUT_OF_RANGE, value=self.mean_motion,
            )
        if not (math.isfinite(self.inclination) and 0.0 <= self.inclination <= math.pi):
            raise InvalidElementSet(
                f"{self.name or self.catalog_number}: inclination "
                f"{math.degrees(self.inclination)} deg outside [0, 180]",
                field="inclination", reason=InvalidElementSet.OUT_OF_RANGE, value=self.inclination,
            )

    @classmethod
    def from_tle(cls, name: str, line1: str, line2: str, strict: bool = True) -> "ElementSet":
        return parse_tle(name, line1, line2, strict=strict)

    @property
    def period_minutes(self) -> float:
        """Anomalistic period in minutes."""
        return 1440.0 * TWO_PI / self.mean_motion

    def to_dict(self) -> Dict[str, Any]:
        """Elements in TLE units (degrees, rev/day) plus the derived axes."""
        return {
            "name": self.name,
            "norad_id": self.catalog_number,
            "epoch_year": self.epoch_year,
            "epoch_days": self.epoch_day,
            "epoch": self.epoch.ascii(),
            "decay_rate_rev_day2": self.decay_rate / TWO_PI,
            "inclination_deg": math.degrees(self.inclination),
            "raan_deg": math.degrees(self.raan),
            "eccentricity": self.eccentricity,
            "arg_perigee_deg": math.degrees(self.arg_perigee),
            "mean_anomaly_deg": math.degrees(self.mean_anomaly),
            "mean_motion_rev_per_day": self.mean_motion / TWO_PI,
            "revolution_number": self.orbit_number,
            "semi_major_axis_km": self.semi_major_axis,
            "semi_minor_axis_km": self.semi_minor_axis,
            "period_minutes": self.period_minutes,
            "line1": self.line1,
            "line2": self.line2,
        }


def _read_field(lines: Dict[int, str], name: str, line_no: int, start: int, end: int,
                kind, strict: bool):
    text = lines[line_no][start:end]
    try:
        return kind(text)
    except ValueError:
        if strict:
            raise InvalidElementSet(
                f"TLE line {line_no} columns {start + 1}-{end}: {name} is not numeric ({text!r})",
                field=name, reason=InvalidElementSet.NOT_NUMERIC, value=text,
            )
        logger.warning(f"TLE field {name} is not numeric ({text!r}), reading as zero")
        return kind(0)


def parse_tle(name: str, line1: str, line2: str, strict: bool = True) -> ElementSet:
    """
    Parse a two-line element set.

    Args:
        name: Satellite name (supplied separately from the element lines)
        line1: First line of TLE
        line2: Second line of TLE
        strict: Raise on non-numeric fields instead of reading them as zero

    Returns:
        ElementSet with derived constants filled in

    Raises:
        InvalidElementSet: If a field is not numeric (strict mode) or an
            element is physically out of range
    """
    lines = {1: line1, 2: line2}
    raw = {
        fname: _read_field(lines, fname, line_no, start, end, kind, strict)
        for fname, line_no, start, end, kind in TLE_FIELDS
    }

    year = raw["epoch_year"]
    year += 2000 if year < EPOCH_YEAR_PIVOT else 1900

    elements = ElementSet(
        name=name.strip(),
        catalog_number=raw["catalog_number"],
        epoch_year=year,
        epoch_day=raw["epoch_day"],
        decay_rate=TWO_PI * raw["decay_rate"],
        inclination=math.radians(raw["inclination"]),
        raan=math.radians(raw["raan"]),
        eccentricity=raw["eccentricity"] / 1e7,
        arg_perigee=math.radians(raw["arg_perigee"]),
        mean_anomaly=math.radians(raw["mean_anomaly"]),
        mean_motion=TWO_PI * raw["mean_motion"],
        orbit_number=raw["orbit_number"],
        line1=line1,
        line2=line2,
    )

    logger.debug(f"Parsed TLE for {elements.name or elements.catalog_number}: "
                 f"epoch {elements.epoch}, a={elements.semi_major_axis:.1f} km, "
                 f"e={elements.eccentricity:.7f}")
    return elements


def split_tle_text(text: str) -> Iterator[Tuple[str, str, str]]:
    """
    Split catalogue text into (name, line1, line2) triples.

    Name lines are optional; a "0 " prefix (three-line element format) is
    stripped. Blank lines are ignored.
    """
    name = ""
    pending = None
    for raw in text.splitlines():
        line = raw.rstrip()
        if not line.strip():
            continue
        if line.startswith("1 ") and pending is None:
            pending = line
        elif line.startswith("2 ") and pending is not None:
            yield name, pending, line
            name = ""
            pending = None
        else:
            name = line[2:].strip() if line.startswith("0 ") else line.strip()
            pending = None
