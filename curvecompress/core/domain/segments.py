"""
Segment Domain Model - Piecewise curve representation of a compressed signal.

A compressed curve is an ordered, contiguous sequence of immutable segments.
Each segment kind owns only the data it needs:

- LinearSegment: straight line between two samples
- BSplineSegment: control polygon of 2+ (time, value) points
- BezierSegment: cubic Hermite segment with endpoint slopes
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from curvecompress.core.domain.errors import InvalidSegmentError
from curvecompress.core.domain.params import CurveType
from curvecompress.core.domain.samples import Sample
from curvecompress.core.math_utils import EPSILON, clamp, hermite_interpolate, lerp, safe_lerp_parameter


class CurveSegment(ABC):
    """Common contract of all segment kinds."""

    kind: ClassVar[CurveType]

    @property
    @abstractmethod
    def start_time(self) -> float: ...

    @property
    @abstractmethod
    def end_time(self) -> float: ...

    @property
    @abstractmethod
    def start_value(self) -> float: ...

    @property
    @abstractmethod
    def end_value(self) -> float: ...

    def contains(self, time: float) -> bool:
        return self.start_time <= time <= self.end_time

    def evaluate(self, time: float) -> float:
        """
        Value of the segment at `time`.

        Outside [start_time, end_time] the nearest boundary value is returned.
        """
        if time <= self.start_time:
            return self.start_value
        if time >= self.end_time:
            return self.end_value
        return self._evaluate_inside(safe_lerp_parameter(time, self.start_time, self.end_time))

    @abstractmethod
    def _evaluate_inside(self, t: float) -> float:
        """Evaluate at normalized parameter t in (0, 1)."""
        ...

    def _check_span(self) -> None:
        if not self.start_time < self.end_time:
            raise InvalidSegmentError(
                f"{self.kind.value} segment needs start_time < end_time, "
                f"got [{self.start_time}, {self.end_time}]"
            )


@dataclass(frozen=True)
class LinearSegment(CurveSegment):
    kind: ClassVar[CurveType] = CurveType.LINEAR

    t0: float
    v0: float
    t1: float
    v1: float

    def __post_init__(self):
        self._check_span()

    @property
    def start_time(self) -> float:
        return self.t0

    @property
    def end_time(self) -> float:
        return self.t1

    @property
    def start_value(self) -> float:
        return self.v0

    @property
    def end_value(self) -> float:
        return self.v1

    def _evaluate_inside(self, t: float) -> float:
        return lerp(self.v0, self.v1, t)


@dataclass(frozen=True)
class BSplineSegment(CurveSegment):
    """
    B-spline segment over a control polygon.

    Two control points interpolate linearly and four use the uniform cubic
    B-spline basis. Any other count is approximated piecewise-linearly over
    uniformly spaced sub-intervals of the control polygon.
    """

    kind: ClassVar[CurveType] = CurveType.BSPLINE

    control_points: tuple[tuple[float, float], ...]

    def __post_init__(self):
        points = tuple((float(t), float(v)) for t, v in self.control_points)
        if len(points) < 2:
            raise InvalidSegmentError(f"At least 2 control points are required, got {len(points)}")
        object.__setattr__(self, "control_points", points)
        self._check_span()

    @property
    def start_time(self) -> float:
        return self.control_points[0][0]

    @property
    def end_time(self) -> float:
        return self.control_points[-1][0]

    @property
    def start_value(self) -> float:
        return self.control_points[0][1]

    @property
    def end_value(self) -> float:
        return self.control_points[-1][1]

    def _evaluate_inside(self, t: float) -> float:
        values = [v for _, v in self.control_points]

        if len(values) == 2:
            return lerp(values[0], values[1], t)

        if len(values) == 4:
            t2 = t * t
            t3 = t2 * t
            b0 = (1 - t) ** 3 / 6
            b1 = (3 * t3 - 6 * t2 + 4) / 6
            b2 = (-3 * t3 + 3 * t2 + 3 * t + 1) / 6
            b3 = t3 / 6
            return b0 * values[0] + b1 * values[1] + b2 * values[2] + b3 * values[3]

        # Piecewise-linear approximation of the control polygon
        intervals = len(values) - 1
        scaled = t * intervals
        index = clamp(int(scaled), 0, intervals - 1)
        return lerp(values[index], values[index + 1], scaled - index)


@dataclass(frozen=True)
class BezierSegment(CurveSegment):
    """Cubic Hermite segment; tangents are slopes (value per unit time)."""

    kind: ClassVar[CurveType] = CurveType.BEZIER

    t0: float
    v0: float
    t1: float
    v1: float
    in_tangent: float = 0.0
    out_tangent: float = 0.0

    def __post_init__(self):
        self._check_span()

    @property
    def start_time(self) -> float:
        return self.t0

    @property
    def end_time(self) -> float:
        return self.t1

    @property
    def start_value(self) -> float:
        return self.v0

    @property
    def end_value(self) -> float:
        return self.v1

    def _evaluate_inside(self, t: float) -> float:
        dt = self.t1 - self.t0
        return hermite_interpolate(self.v0, self.v1, self.in_tangent * dt, self.out_tangent * dt, t)


@dataclass(frozen=True)
class CompressedCurveData:
    """
    Ordered, contiguous sequence of curve segments.

    Covers the single time range [segments[0].start_time, segments[-1].end_time].
    """

    segments: tuple[CurveSegment, ...] = ()

    def __post_init__(self):
        segments = tuple(self.segments)
        for prev, seg in zip(segments, segments[1:]):
            if prev.end_time > seg.start_time + EPSILON:
                raise InvalidSegmentError(
                    f"Segments overlap or are unsorted: [{prev.start_time}, {prev.end_time}] "
                    f"followed by [{seg.start_time}, {seg.end_time}]"
                )
        object.__setattr__(self, "segments", segments)

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def is_empty(self) -> bool:
        return not self.segments

    @property
    def start_time(self) -> float:
        return self.segments[0].start_time

    @property
    def end_time(self) -> float:
        return self.segments[-1].end_time

    def evaluate(self, time: float) -> float:
        """
        Value of the curve at `time`.

        The first segment containing `time` wins. Outside the covered range the
        nearest boundary value is returned; an empty curve evaluates to 0.
        """
        if not self.segments:
            return 0.0

        for segment in self.segments:
            if segment.contains(time):
                return segment.evaluate(time)

        if time < self.segments[0].start_time:
            return self.segments[0].start_value
        return self.segments[-1].end_value

    def to_samples(self, count: int) -> list[Sample]:
        """Resample uniformly across the covered range."""
        if not self.segments or count <= 0:
            return []
        if count == 1:
            return [Sample(self.start_time, self.evaluate(self.start_time))]

        start, end = self.start_time, self.end_time
        samples = []
        for i in range(count):
            time = lerp(start, end, i / (count - 1))
            samples.append(Sample(time, self.evaluate(time)))
        return samples

    def breakpoints(self) -> list[Sample]:
        """Segment boundary samples: every segment start plus the final end."""
        if not self.segments:
            return []
        points = [Sample(seg.start_time, seg.start_value) for seg in self.segments]
        last = self.segments[-1]
        points.append(Sample(last.end_time, last.end_value))
        return points
