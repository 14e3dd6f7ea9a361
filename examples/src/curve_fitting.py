#!/usr/bin/env python3
"""
Example: fitting NURBS curves through planar points.

This example demonstrates the fitting pipeline:
1. Interpolate the points with a global B-spline (with and without end tangents)
2. Build a chain of cubic Bezier segments
3. Approximate the points by least squares with fewer control points
4. Query closest points on the fitted curves

Usage:
    ./examples/src/curve_fitting.py
    ./examples/src/curve_fitting.py --degree 2 --config cagd.yaml
"""

import logging
import numpy as np
import sys
from pathlib import Path

# Add project root to path (two levels up from examples/src/)
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from watfCAGD.io.config import load_config
from watfCAGD.operation.fitting import interpolated_curve, bezier_interpolation, approximate_curve
from watfCAGD.operation.closest_point import closest_point
from watfCAGD.postprocess.sampling import sample_curve

POINTS = np.array([
    [0.0, 0.0, 0.0],
    [3.0, 4.0, 0.0],
    [-1.0, 4.0, 0.0],
    [-4.0, 0.0, 0.0],
    [-4.0, -3.0, 0.0],
])


def run(degree: int = 3,
        config: str = None,
        verbose: bool = True):
    """
    Run the curve fitting example.

    Parameters:
        degree: Polynomial degree of the interpolating curve
        config: Optional YAML file with tolerances
        verbose: Print progress information

    Returns:
        Dictionary with the fitted curves and the largest interpolation error
    """
    tol = load_config(config) if config else None

    if verbose:
        print("=" * 60)
        print("CAGD Curve Fitting Example")
        print("=" * 60)
        print(f"Points: {len(POINTS)}")
        print(f"Degree: {degree}")
        print()

    # ==========================================================================
    # 1. Global interpolation
    # ==========================================================================
    curve = interpolated_curve(POINTS, degree, tol=tol)
    error = max(np.linalg.norm(closest_point(curve, q, tol).to_array() - q) for q in POINTS)

    tangent_curve = interpolated_curve(POINTS, degree,
                                       start_tangent=(1.0, 1.0, 0.0),
                                       end_tangent=(-4.0, -2.0, 0.0), tol=tol)

    if verbose:
        print("Global interpolation:")
        print(f"  {curve}")
        print(f"  Length: {curve.length():.6f}")
        print(f"  Max distance to points: {error:.3e}")
        print(f"  With end tangents: {tangent_curve.n_control_points} control points")
        print()

    # ==========================================================================
    # 2. Bezier chain
    # ==========================================================================
    segments = bezier_interpolation(POINTS, tol=tol)

    if verbose:
        print("Bezier interpolation:")
        for i, segment in enumerate(segments):
            print(f"  Segment {i}: length {segment.length():.6f}")
        print()

    # ==========================================================================
    # 3. Least-squares approximation
    # ==========================================================================
    approx = approximate_curve(POINTS, 3, tol=tol)

    if verbose:
        print("Least-squares approximation:")
        for i, p in enumerate(approx.control_points):
            print(f"  P{i} = {p}")
        params, samples = sample_curve(approx, n_samples=5)
        print(f"  Samples: {np.round(samples[:, :2], 3).tolist()}")
        print()

    return {
        'curve': curve,
        'tangent_curve': tangent_curve,
        'segments': segments,
        'approximation': approx,
        'max_error': error,
    }


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="CAGD Curve Fitting Example")
    parser.add_argument("--degree", "-p", type=int, default=3,
                        help="Polynomial degree (default: 3)")
    parser.add_argument("--config", "-c", type=str, default=None,
                        help="YAML file with tolerance settings")
    parser.add_argument("--debug", action="store_true",
                        help="Show debug logging")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    run(degree=args.degree, config=args.config)
