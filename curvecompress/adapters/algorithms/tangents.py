"""
Tangent Calculation - Per-point slopes for Hermite (Bezier) keyframes.
"""

from enum import Enum
from typing import Sequence

from curvecompress.core.domain.samples import Sample
from curvecompress.core.math_utils import safe_divide, safe_slope


class TangentMode(str, Enum):
    LINEAR = "linear"
    SMOOTH = "smooth"
    CATMULL_ROM = "catmull_rom"
    CARDINAL = "cardinal"


def calculate_smooth_tangents(
    points: Sequence[Sample],
    mode: TangentMode = TangentMode.SMOOTH,
    tension: float = 0.5,
) -> list[float]:
    """
    Slope at every point of a keyframe sequence.

    Args:
        points: Time-sorted keyframes
        mode: Tangent strategy; end points always use the one-sided slope
        tension: Cardinal tension, 0 behaves like Catmull-Rom

    Returns:
        One slope per point (all 0 for fewer than two points)
    """
    if len(points) < 2:
        return [0.0] * len(points)
    return [_tangent_at(points, i, mode, tension) for i in range(len(points))]


def _tangent_at(points: Sequence[Sample], index: int, mode: TangentMode, tension: float) -> float:
    last = len(points) - 1
    if index == 0:
        return _slope(points[0], points[1])
    if index == last:
        return _slope(points[last - 1], points[last])

    prev, curr, nxt = points[index - 1], points[index], points[index + 1]

    if mode == TangentMode.LINEAR:
        return _slope(curr, nxt)

    if mode == TangentMode.CATMULL_ROM:
        return _slope(prev, nxt)

    if mode == TangentMode.CARDINAL:
        return (1.0 - tension) * _slope(prev, nxt)

    # Smooth: neighbouring slopes weighted by the opposite interval
    prev_dt = curr.time - prev.time
    next_dt = nxt.time - curr.time
    total_dt = prev_dt + next_dt
    prev_weight = safe_divide(next_dt, total_dt, 0.5)
    next_weight = safe_divide(prev_dt, total_dt, 0.5)
    return _slope(prev, curr) * prev_weight + _slope(curr, nxt) * next_weight


def _slope(a: Sample, b: Sample) -> float:
    return safe_slope(a.time, a.value, b.time, b.value)
