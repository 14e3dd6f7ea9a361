"""
Core value types: tolerances, vectors and errors.
"""

from .errors import CAGDError, InputValidationError, SingularSystemError
from .tolerance import Tolerance, DEFAULT_TOLERANCE, resolve_tolerance
from .vector import Vector3, as_vector, as_point_array, are_three_points_collinear
