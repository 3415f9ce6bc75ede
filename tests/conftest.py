"""
Pytest configuration: shared synthetic signals.
"""
import numpy as np
import pytest

from curvecompress.core.domain.samples import Sample, from_arrays, from_pairs


@pytest.fixture
def peak_samples() -> list[Sample]:
    return from_pairs([(0, 0), (1, 1), (2, 0)])


@pytest.fixture
def ramp_samples() -> list[Sample]:
    """100-sample perfectly linear ramp over [0, 1]."""
    t = np.linspace(0.0, 1.0, 100)
    return from_arrays(t, t)


@pytest.fixture
def sine_samples() -> list[Sample]:
    t = np.linspace(0.0, 1.0, 200)
    return from_arrays(t, np.sin(2 * np.pi * t))


@pytest.fixture
def noisy_sine_samples() -> list[Sample]:
    rng = np.random.default_rng(42)
    t = np.linspace(0.0, 1.0, 200)
    return from_arrays(t, np.sin(2 * np.pi * t) + rng.normal(0.0, 0.002, size=t.size))
