"""
Importance Scoring - Per-sample significance used to bias RDP tolerance.

Each interior sample gets a score in [0, 1] combining four signals through
ImportanceWeights:

1. curvature: turning angle at the sample, divided by pi
2. change rate: central slope relative to the global value range
3. local variance: variance in a small window relative to the global variance
4. extreme value: prominence of local maxima/minima relative to the range

The first and last samples always score 1.
"""

import math

import numpy as np
import pandas as pd

from curvecompress.core.domain.params import ImportanceWeights
from curvecompress.core.math_utils import EPSILON, turning_angle


def importance_scores(
    times: np.ndarray,
    values: np.ndarray,
    weights: ImportanceWeights | None = None,
) -> np.ndarray:
    """
    Compute importance scores for every sample.

    Args:
        times: Sample times, sorted ascending
        values: Sample values
        weights: Signal weights (default preset when None)

    Returns:
        Array of scores, same length as the input
    """
    weights = weights or ImportanceWeights.default()
    n = len(values)
    scores = np.ones(n, dtype=float)
    if n < 3:
        return scores

    interior = slice(1, n - 1)
    scores[interior] = (
        weights.curvature * _curvature(times, values)
        + weights.change_rate * _change_rate(times, values)
        + weights.local_variance * _local_variance(values)[interior]
        + weights.extreme_value * _extreme_value(values)
    )
    return scores


def _curvature(times: np.ndarray, values: np.ndarray) -> np.ndarray:
    return np.array([
        turning_angle(
            (times[i - 1], values[i - 1]),
            (times[i], values[i]),
            (times[i + 1], values[i + 1]),
        ) / math.pi
        for i in range(1, len(values) - 1)
    ])


def _change_rate(times: np.ndarray, values: np.ndarray) -> np.ndarray:
    value_range = float(values.max() - values.min())
    if value_range == 0:
        return np.zeros(len(values) - 2)

    dv = np.abs(values[2:] - values[:-2])
    dt = times[2:] - times[:-2]
    rate = np.divide(dv, dt, out=np.zeros_like(dv), where=dt > EPSILON)
    return np.clip(rate / value_range, 0.0, 1.0)


def _local_variance(values: np.ndarray) -> np.ndarray:
    global_variance = float(values.var())
    if global_variance <= 0:
        return np.zeros(len(values))

    half_window = min(5, len(values) // 10)
    # Centered window clipped at the sequence edges, population variance
    local = (
        pd.Series(values)
        .rolling(window=2 * half_window + 1, center=True, min_periods=1)
        .var(ddof=0)
        .fillna(0.0)
        .to_numpy()
    )
    return np.clip(local / global_variance, 0.0, 1.0)


def _extreme_value(values: np.ndarray) -> np.ndarray:
    value_range = float(values.max() - values.min())
    prev, curr, nxt = values[:-2], values[1:-1], values[2:]
    is_extreme = ((curr > prev) & (curr > nxt)) | ((curr < prev) & (curr < nxt))
    if value_range <= 0:
        return np.zeros(len(curr))

    prominence = np.minimum(np.abs(curr - prev), np.abs(curr - nxt))
    return np.where(is_extreme, np.clip(prominence / value_range, 0.0, 1.0), 0.0)
