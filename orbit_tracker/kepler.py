"""
Kepler's Equation Solver

Solves M = E - e*sin(E) for the eccentric anomaly E by Newton-Raphson
iteration, starting from E = M. The loop is capped so ill-conditioned input
(eccentricity close to 1, non-finite anomalies) reports ConvergenceFailure
instead of spinning forever.

References:
    Vallado, D. A. (2013). Fundamentals of Astrodynamics and Applications (4th ed.).
"""

import math

from .constants import KEPLER_MAX_ITERATIONS, KEPLER_TOLERANCE
from .exceptions import ConvergenceFailure


def solve_kepler_equation(M: float, e: float, tolerance: float = KEPLER_TOLERANCE,
                          max_iter: int = KEPLER_MAX_ITERATIONS) -> float:
    """
    Solve Kepler's equation for eccentric anomaly.

    Args:
        M: Mean anomaly (rad)
        e: Eccentricity, 0 <= e < 1
        tolerance: Stop once the Newton correction is smaller than this (rad)
        max_iter: Maximum iterations

    Returns:
        Eccentric anomaly E (rad)

    Raises:
        ConvergenceFailure: If the correction is still above tolerance
            after ``max_iter`` iterations, or the derivative vanishes first;
            ``iterations`` holds the Newton steps actually taken
    """
    E = M
    iterations = 0
    while iterations < max_iter:
        dnom = 1.0 - e * math.cos(E)
        if dnom == 0.0:
            break
        iterations += 1
        d = (E - e * math.sin(E) - M) / dnom
        E -= d
        if abs(d) < tolerance:
            return E

    raise ConvergenceFailure(
        f"Kepler iteration did not converge after {iterations} steps (M={M}, e={e})",
        mean_anomaly=M,
        eccentricity=e,
        iterations=iterations,
    )
