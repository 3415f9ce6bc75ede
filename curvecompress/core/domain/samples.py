"""
Sample Domain Model - Raw time/value observations.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np


@dataclass(frozen=True, order=True)
class Sample:
    """A single observation of the signal."""

    time: float
    value: float


def as_arrays(samples: Sequence[Sample]) -> tuple[np.ndarray, np.ndarray]:
    """Split samples into fresh (times, values) float arrays."""
    times = np.fromiter((s.time for s in samples), dtype=float, count=len(samples))
    values = np.fromiter((s.value for s in samples), dtype=float, count=len(samples))
    return times, values


def from_arrays(times: Iterable[float], values: Iterable[float]) -> list[Sample]:
    return [Sample(float(t), float(v)) for t, v in zip(times, values)]


def from_pairs(pairs: Iterable[tuple[float, float]]) -> list[Sample]:
    """Build samples from plain (time, value) tuples."""
    return [Sample(float(t), float(v)) for t, v in pairs]
