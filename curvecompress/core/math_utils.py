"""
Math Utilities - Numeric guards and small interpolation helpers.

All helpers absorb degenerate inputs (zero-width intervals, empty spans)
and return well-defined fallbacks instead of dividing by zero.
"""

from typing import Sequence

import numpy as np

EPSILON = 1e-6


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning `default` when the denominator is ~0."""
    if abs(denominator) < EPSILON:
        return default
    return numerator / denominator


def is_valid_time_interval(dt: float) -> bool:
    return dt > EPSILON


def safe_slope(x1: float, y1: float, x2: float, y2: float) -> float:
    """Slope between two points, 0 for vertical or coincident points."""
    return safe_divide(y2 - y1, x2 - x1, 0.0)


def safe_lerp_parameter(value: float, start: float, end: float) -> float:
    """
    Normalized position of `value` inside [start, end].

    Returns 0 when the interval is ~0 wide. Values outside the interval give
    parameters outside [0, 1].
    """
    span = end - start
    if abs(span) < EPSILON:
        return 0.0
    return (value - start) / span


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def clamp(value, low, high):
    """Clamp `value` to [low, high]; the lower bound is checked first."""
    if value < low:
        return low
    if value > high:
        return high
    return value


def clamp01(value: float) -> float:
    return clamp(value, 0.0, 1.0)


def normalized(dx: float, dy: float) -> tuple[float, float]:
    """Unit vector in the direction (dx, dy); the zero vector when too short."""
    length = float(np.hypot(dx, dy))
    if length < 1e-5:
        return 0.0, 0.0
    return dx / length, dy / length


def turning_angle(
    prev: tuple[float, float],
    curr: tuple[float, float],
    nxt: tuple[float, float],
) -> float:
    """Angle in radians between the incoming and outgoing direction at `curr`."""
    v1 = normalized(curr[0] - prev[0], curr[1] - prev[1])
    v2 = normalized(nxt[0] - curr[0], nxt[1] - curr[1])
    dot = v1[0] * v2[0] + v1[1] * v2[1]
    return float(np.arccos(clamp(dot, -1.0, 1.0)))


def hermite_interpolate(
    start_value: float,
    end_value: float,
    start_tangent: float,
    end_tangent: float,
    t: float,
) -> float:
    """
    Cubic Hermite blend on the unit interval.

    Tangents are expected already scaled by the interval width.
    """
    t2 = t * t
    t3 = t2 * t
    h1 = 2 * t3 - 3 * t2 + 1
    h2 = -2 * t3 + 3 * t2
    h3 = t3 - 2 * t2 + t
    h4 = t3 - t2
    return h1 * start_value + h2 * end_value + h3 * start_tangent + h4 * end_tangent


def linear_interpolate(times: Sequence[float], values: Sequence[float], time: float) -> float:
    """
    Piecewise-linear value of a sorted sequence at `time`.

    Outside the covered range the nearest endpoint value is returned.
    An empty sequence evaluates to 0.
    """
    if len(times) == 0:
        return 0.0
    if len(times) == 1:
        return float(values[0])
    return float(np.interp(time, times, values))


def interpolate_many(times: np.ndarray, values: np.ndarray, at: np.ndarray) -> np.ndarray:
    """Vectorized `linear_interpolate` for an array of query times."""
    at = np.asarray(at, dtype=float)
    if len(times) == 0:
        return np.zeros_like(at)
    if len(times) == 1:
        return np.full_like(at, float(values[0]))
    return np.interp(at, times, values)
