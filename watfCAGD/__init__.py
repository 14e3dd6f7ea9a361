"""
CAGD - Computer-Aided Geometric Design kernel

NURBS curve representation, evaluation, fitting and closest-point queries
for CAD and engineering geometry.

Key modules:
- core: Tolerances, Vector3, error types
- discretization: Knot vectors, control points
- geometry: B-spline basis functions, NURBS curves, lines, polylines
- operation: Interpolation, approximation, closest point
- solver: Dense linear solves and scalar minimization
- quadrature: Gauss-Legendre integration (arc length)
- io: YAML tolerance configuration

Quick start:
    from watfCAGD.operation.fitting import interpolated_curve
    from watfCAGD.operation.closest_point import closest_point

    pts = [(0, 0, 0), (3, 4, 0), (-1, 4, 0), (-4, 0, 0), (-4, -3, 0)]
    curve = interpolated_curve(pts, degree=3)

    curve.point_at(0.5)
    closest_point(curve, (1, 3, 0))
"""

__version__ = "0.1.0"
__author__ = "Wataru Fukuda"

# Core imports for convenience
from .core.errors import CAGDError, InputValidationError, SingularSystemError
from .core.tolerance import Tolerance, DEFAULT_TOLERANCE
from .core.vector import Vector3
from .discretization.knot_vector import KnotVector
from .geometry.nurbs import NURBSCurve
from .geometry.line import Line
from .geometry.polyline import Polyline
from .operation.fitting import interpolated_curve, bezier_interpolation, approximate_curve
from .operation.closest_point import closest_point, closest_parameter
