"""
DataFrame Adapter - Converts between pandas time series frames and samples.

Frames follow the usual time series layout: a `ds` time column and a `y`
value column.
"""

import logging
from typing import Sequence

import pandas as pd

from curvecompress.core.domain.samples import Sample, from_arrays
from curvecompress.core.domain.segments import CompressedCurveData

logger = logging.getLogger(__name__)


def frame_to_samples(df: pd.DataFrame, time_col: str = "ds", value_col: str = "y") -> list[Sample]:
    """
    Convert a frame to time-sorted samples.

    Datetime times become seconds since the first timestamp. Rows with a
    missing time or value are dropped.

    Args:
        df: Input frame
        time_col: Time column name
        value_col: Value column name

    Returns:
        Samples sorted ascending by time
    """
    missing = {time_col, value_col} - set(df.columns)
    if missing:
        raise KeyError(f"Frame is missing columns: {sorted(missing)}")

    frame = df[[time_col, value_col]].dropna()
    dropped = len(df) - len(frame)
    if dropped:
        logger.warning(f"Dropped {dropped} rows with missing values")

    if frame.empty:
        return []

    frame = frame.sort_values(time_col)
    times = frame[time_col]
    if pd.api.types.is_datetime64_any_dtype(times):
        times = (times - times.iloc[0]).dt.total_seconds()

    return from_arrays(times.astype(float).to_numpy(), frame[value_col].astype(float).to_numpy())


def samples_to_frame(samples: Sequence[Sample], time_col: str = "ds", value_col: str = "y") -> pd.DataFrame:
    return pd.DataFrame({
        time_col: [s.time for s in samples],
        value_col: [s.value for s in samples],
    })


def segments_to_frame(curve: CompressedCurveData) -> pd.DataFrame:
    """One row per segment with its kind and boundary samples."""
    return pd.DataFrame([
        {
            "kind": segment.kind.value,
            "start_time": segment.start_time,
            "start_value": segment.start_value,
            "end_time": segment.end_time,
            "end_value": segment.end_value,
        }
        for segment in curve.segments
    ], columns=["kind", "start_time", "start_value", "end_time", "end_value"])
