"""
Pytest configuration and shared fixtures for CAGD tests.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add the parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from watfCAGD.core.tolerance import MAX_TOLERANCE


@pytest.fixture
def tolerance():
    """Default tolerance for floating point comparisons."""
    return 1e-12


@pytest.fixture
def loose_tolerance():
    """Looser tolerance for numerical integration tests."""
    return 1e-8


@pytest.fixture
def geometric_tolerance():
    """Distance under which two points are considered coincident."""
    return MAX_TOLERANCE


@pytest.fixture
def fitting_points():
    """Planar sample points shared by the fitting tests."""
    return np.array([
        [0.0, 0.0, 0.0],
        [3.0, 4.0, 0.0],
        [-1.0, 4.0, 0.0],
        [-4.0, 0.0, 0.0],
        [-4.0, -3.0, 0.0],
    ])


@pytest.fixture
def example_line_points():
    """End points of the line used by the line tests."""
    return (5.0, 0.0, 0.0), (15.0, 15.0, 0.0)


@pytest.fixture
def example_polyline_points():
    """Vertices of the polyline used by the polyline tests."""
    return [(5.0, 0.0, 0.0), (15.0, 15.0, 0.0), (20.0, 5.0, 0.0), (30.0, 10.0, 0.0)]
