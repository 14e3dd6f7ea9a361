"""
Geometry module for curves.
"""

from .curve import Curve
from .nurbs import NURBSCurve
from .line import Line
from .polyline import Polyline
from .primitives import make_nurbs_arc, make_nurbs_circle
