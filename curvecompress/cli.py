"""
Command line entry point for compressing and analysing CSV time series.

Usage:
    # Compress with the adaptive Bezier fit at tolerance 0.05
    curvecompress compress data.csv --tolerance 0.05

    # Fixed count of 12 B-spline control points
    curvecompress compress data.csv --method bspline_direct --mode fixed_control_points --points 12

    # Recommended control point counts from every heuristic
    curvecompress estimate data.csv --tolerance 0.01
"""

import argparse
import json
import logging
import sys

import pandas as pd

from curvecompress.adapters.config.settings_loader import load_settings
from curvecompress.adapters.io.frames import frame_to_samples, segments_to_frame
from curvecompress.core.domain.errors import ConfigurationError
from curvecompress.core.domain.params import (
    CompressionDataType,
    CompressionMethod,
    CompressionMode,
    CompressionParams,
    EstimationMethod,
)
from curvecompress.core.services.compressor import CurveCompressor
from curvecompress.core.services.estimator import ControlPointEstimator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="curvecompress", description="Compress time series into piecewise curves")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--time-col", default="ds", help="Time column (default: ds)")
    parser.add_argument("--value-col", default="y", help="Value column (default: y)")
    sub = parser.add_subparsers(dest="command", required=True)

    comp = sub.add_parser("compress", help="Compress a CSV series")
    comp.add_argument("csv", help="Input CSV file")
    comp.add_argument("--tolerance", type=float, help="Maximum error (default from settings)")
    comp.add_argument("--method", choices=[m.value for m in CompressionMethod], help="Compression method")
    comp.add_argument("--mode", choices=[m.value for m in CompressionMode], default=CompressionMode.TOLERANCE.value)
    comp.add_argument("--data-type", choices=[d.value for d in CompressionDataType], default=CompressionDataType.ANIMATION.value)
    comp.add_argument("--importance-threshold", type=float, default=1.0)
    comp.add_argument("--points", type=int, default=10, help="Control points for fixed mode")
    comp.add_argument("--estimation", choices=[e.value for e in EstimationMethod], default=EstimationMethod.TOTAL_VARIATION.value)
    comp.add_argument("--segments", action="store_true", help="Include the segment table")

    est = sub.add_parser("estimate", help="Estimate control point counts for a CSV series")
    est.add_argument("csv", help="Input CSV file")
    est.add_argument("--tolerance", type=float, help="Target error (default from settings)")
    est.add_argument("--min-points", type=int, help="Lower search bound")
    est.add_argument("--max-points", type=int, help="Upper search bound")

    return parser


def run_compress(args, settings) -> dict:
    params = CompressionParams(
        tolerance=args.tolerance if args.tolerance is not None else settings.default_tolerance,
        importance_threshold=args.importance_threshold,
        compression_method=args.method or settings.default_method,
        compression_mode=args.mode,
        data_type=args.data_type,
        fixed_control_point_count=args.points,
        estimation_method=args.estimation,
        enable_time_measurement=True,
    )
    samples = frame_to_samples(pd.read_csv(args.csv), args.time_col, args.value_col)
    compressor = CurveCompressor(
        estimator=ControlPointEstimator(max_workers=settings.estimator_workers),
        min_points=settings.estimator_min_points,
        max_points=settings.estimator_max_points,
    )
    result = compressor.compress(samples, params)

    output = {
        "original_count": result.original_count,
        "compressed_count": result.compressed_count,
        "compression_ratio": result.compression_ratio,
        "mean_error": result.mean_error,
        "max_error": result.max_error,
        "elapsed_ms": result.elapsed_ms,
    }
    if args.segments and result.compressed_curve is not None:
        output["segments"] = segments_to_frame(result.compressed_curve).to_dict(orient="records")
    return output


def run_estimate(args, settings) -> dict:
    samples = frame_to_samples(pd.read_csv(args.csv), args.time_col, args.value_col)
    estimator = ControlPointEstimator(max_workers=settings.estimator_workers)
    results = estimator.estimate_all(
        samples,
        args.tolerance if args.tolerance is not None else settings.default_tolerance,
        args.min_points if args.min_points is not None else settings.estimator_min_points,
        args.max_points if args.max_points is not None else settings.estimator_max_points,
    )
    return {
        name: {"optimal_points": r.optimal_points, "score": r.score, "method": r.method, "metrics": r.metrics}
        for name, r in results.items()
    }


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(args.config)
    logging.basicConfig(level=settings.log_level.upper())

    try:
        if args.command == "compress":
            output = run_compress(args, settings)
        else:
            output = run_estimate(args, settings)
    except (ConfigurationError, ValueError, KeyError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 2

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
