"""
Discretization module for CAGD.

Provides:
- KnotVector: Knot vector representation and factories for fitting
- ControlPoint: First-class control point object
- homogenize / dehomogenize: weighted coordinate conversion
"""

from .knot_vector import (
    KnotVector,
    make_open_knot_vector,
    make_interpolation_knot_vector,
    make_approximation_knot_vector,
)
from .control_point import (
    ControlPoint,
    create_control_points_from_array,
    homogenize,
    dehomogenize,
)
