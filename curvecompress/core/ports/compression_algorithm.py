"""
CompressionAlgorithm Port - Interface for tolerance-driven curve compressors.

This port defines the contract for turning raw samples into a compressed
curve under a given set of parameters. Implementations live in
curvecompress.adapters.algorithms.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from curvecompress.core.domain.params import CompressionMethod, CompressionParams
    from curvecompress.core.domain.samples import Sample
    from curvecompress.core.domain.segments import CompressedCurveData


class CompressionAlgorithm(ABC):
    """
    Abstract interface for compression algorithms.

    Implementations:
    - RDPCompressor: importance-weighted RDP with linear/B-spline/Bezier output
    - BSplineCompressor: adaptive B-spline segmentation
    - BezierCompressor: adaptive Bezier segmentation
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human readable algorithm name."""
        ...

    @property
    @abstractmethod
    def method(self) -> "CompressionMethod":
        """Compression method served by this algorithm."""
        ...

    @abstractmethod
    def compress(
        self,
        samples: Sequence["Sample"],
        params: "CompressionParams",
    ) -> "CompressedCurveData":
        """
        Compress samples into a curve.

        Args:
            samples: Time-sorted samples (at least two)
            params: Validated compression parameters

        Returns:
            Contiguous curve covering the samples' time range
        """
        ...
