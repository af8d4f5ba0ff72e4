"""
Tracking Errors

Every failure raised by the package derives from TrackingError. Each class
also inherits the closest built-in exception so callers that already catch
ValueError or ArithmeticError keep working.
"""

from typing import Any, Optional


class TrackingError(Exception):
    """Base class for all tracker failures."""


class InvalidElementSet(TrackingError, ValueError):
    """
    A two-line element set could not be turned into a usable orbit.

    Attributes:
        field: Name of the offending element (e.g. "eccentricity")
        reason: "not_numeric" when the fixed-width field could not be
            parsed, "out_of_range" when the value is physically impossible
        value: Raw text or parsed value that was rejected
    """

    NOT_NUMERIC = "not_numeric"
    OUT_OF_RANGE = "out_of_range"

    def __init__(self, message: str, field: Optional[str] = None,
                 reason: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.reason = reason
        self.value = value


class ConvergenceFailure(TrackingError, ArithmeticError):
    """Kepler's equation did not converge within the iteration cap."""

    def __init__(self, message: str, mean_anomaly: float = float("nan"),
                 eccentricity: float = float("nan"), iterations: int = 0):
        super().__init__(message)
        self.mean_anomaly = mean_anomaly
        self.eccentricity = eccentricity
        self.iterations = iterations


class DegenerateGeometry(TrackingError, ArithmeticError):
    """Line of sight has zero length, so no direction can be computed."""


class TimeRangeError(TrackingError, ValueError):
    """Date lies outside the range the day-number conversion supports."""
