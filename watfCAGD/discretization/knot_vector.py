"""
Knot vector utilities.

A knot vector is a non-decreasing sequence of real numbers that defines
the parametric domain and basis function support for B-splines/NURBS.

Mathematical background:
- Clamped (open) knot vectors have p+1 repeated knots at each end, so the
  curve passes through its first and last control points
- The number of basis functions n = len(knots) - p - 1
- Knot spans are intervals [u_i, u_{i+1}] where u_i < u_{i+1}
- A knot of multiplicity k gives C^{p-k} continuity; interior multiplicity
  is capped at p so the curve stays continuous

Fitting builds its knots here:
- make_interpolation_knot_vector: averaging technique (NURBS Book eq. 9.8)
- make_approximation_knot_vector: least-squares knots (NURBS Book eq. 9.69)
"""

import numpy as np
from typing import List, Tuple, Sequence
from dataclasses import dataclass

from ..core.errors import InputValidationError
from ..core.tolerance import EPSILON


@dataclass
class KnotVector:
    """
    Represents a univariate knot vector.

    Attributes:
        knots: The knot values (non-decreasing sequence)
        degree: Polynomial degree p

    Properties computed:
        n_basis: Number of basis functions (= number of control points)
        n_elements: Number of non-zero measure knot spans
        elements: List of (start, end) parametric coordinates for each span
    """
    knots: np.ndarray
    degree: int

    def __post_init__(self):
        self.knots = np.array(self.knots, dtype=np.float64)
        self.knots.setflags(write=False)
        self._validate()
        self._compute_elements()

    def _validate(self):
        """Validate knot vector properties."""
        if self.degree < 0:
            raise InputValidationError(f"Degree must be non-negative, got {self.degree}.")
        if len(self.knots) < 2 * (self.degree + 1):
            raise InputValidationError(
                f"Knot vector too short for degree {self.degree}. "
                f"Need at least {2 * (self.degree + 1)} knots, got {len(self.knots)}."
            )
        if not np.all(np.diff(self.knots) >= 0):
            raise InputValidationError("Knot vector must be non-decreasing.")
        if self.knots[-1] - self.knots[0] <= 0.0:
            raise InputValidationError("Knot vector must span a non-empty domain.")

        # Continuity floor: interior knots may repeat at most p times
        lo, hi = self.domain_bounds()
        values, counts = np.unique(self.knots, return_counts=True)
        for value, count in zip(values, counts):
            if lo < value < hi and count > max(self.degree, 1):
                raise InputValidationError(
                    f"Interior knot {value} has multiplicity {count}, "
                    f"which exceeds the degree {self.degree}."
                )

    def domain_bounds(self) -> Tuple[float, float]:
        """Knots bounding the valid parameter range: (u_p, u_n)."""
        return (float(self.knots[self.degree]), float(self.knots[self.n_basis]))

    def _compute_elements(self):
        """Compute the unique non-zero knot spans."""
        lo, hi = self.domain_bounds()
        unique_knots = np.unique(self.knots)
        self._unique_knots = unique_knots
        self._elements = []

        for i in range(len(unique_knots) - 1):
            u_start = unique_knots[i]
            u_end = unique_knots[i + 1]
            if u_end > u_start and u_start >= lo and u_end <= hi:
                self._elements.append((float(u_start), float(u_end)))

    @property
    def n_basis(self) -> int:
        """Number of basis functions."""
        return len(self.knots) - self.degree - 1

    @property
    def n_elements(self) -> int:
        """Number of non-zero measure knot spans inside the domain."""
        return len(self._elements)

    @property
    def elements(self) -> List[Tuple[float, float]]:
        """List of span intervals as (u_start, u_end) tuples."""
        return self._elements.copy()

    @property
    def unique_knots(self) -> np.ndarray:
        """Unique knot values (breakpoints)."""
        return self._unique_knots.copy()

    @property
    def domain(self) -> Tuple[float, float]:
        """Parametric domain (u_p, u_n)."""
        return self.domain_bounds()

    @property
    def is_clamped(self) -> bool:
        """True if both end knots are repeated p+1 times."""
        p = self.degree
        start = np.all(self.knots[:p + 1] == self.knots[0])
        end = np.all(self.knots[-(p + 1):] == self.knots[-1])
        return bool(start and end)

    def find_span(self, u: float) -> int:
        """
        Find the knot span index containing parameter value u.

        For u in [u_i, u_{i+1}), returns i (right-continuous at interior
        knots). The last span is closed: [u_{n-1}, u_n].

        Parameters:
            u: Parameter value

        Returns:
            Span index i with p <= i <= n - 1
        """
        n = self.n_basis
        p = self.degree

        if u >= self.knots[n]:
            return n - 1
        if u <= self.knots[p]:
            return p

        low = p
        high = n
        mid = (low + high) // 2

        while u < self.knots[mid] or u >= self.knots[mid + 1]:
            if u < self.knots[mid]:
                high = mid
            else:
                low = mid
            mid = (low + high) // 2

        return mid

    def find_element(self, u: float) -> int:
        """
        Find which non-zero span contains parameter value u.

        Interior boundaries use the half-open convention [start, end); the
        last span includes its right boundary.
        """
        n_elements = len(self._elements)
        for e, (u_start, u_end) in enumerate(self._elements):
            if e == n_elements - 1:
                if u_start <= u <= u_end:
                    return e
            elif u_start <= u < u_end:
                return e
        raise InputValidationError(f"Parameter {u} outside domain {self.domain}")

    def contains(self, u: float, eps: float = EPSILON) -> bool:
        """True if u lies within the domain, with slack eps at both ends."""
        lo, hi = self.domain
        return lo - eps <= u <= hi + eps

    def multiplicity(self, u: float, tol: float = 1e-14) -> int:
        """Number of times u appears in the knot vector."""
        return int(np.sum(np.abs(self.knots - u) < tol))

    def greville_abscissae(self) -> np.ndarray:
        """
        Compute Greville abscissae (nodal parameters for basis functions).

        The i-th Greville abscissa is the average of p consecutive knots:
        g_i = (u_{i+1} + u_{i+2} + ... + u_{i+p}) / p

        Returns:
            Array of n Greville abscissae
        """
        p = self.degree
        n = self.n_basis
        if p == 0:
            return 0.5 * (self.knots[:n] + self.knots[1:n + 1])

        greville = np.zeros(n)
        for i in range(n):
            greville[i] = np.sum(self.knots[i + 1:i + p + 1]) / p

        return greville

    def normalized(self) -> "KnotVector":
        """Return a knot vector rescaled so the domain is [0, 1]."""
        lo, hi = self.domain
        return KnotVector((self.knots - lo) / (hi - lo), self.degree)

    def reversed(self) -> "KnotVector":
        """Return the knot vector of the reversed curve on the same domain."""
        a, b = self.knots[0], self.knots[-1]
        return KnotVector((a + b - self.knots)[::-1], self.degree)


def make_open_knot_vector(n_basis: int, degree: int,
                          domain: Tuple[float, float] = (0.0, 1.0)) -> KnotVector:
    """
    Create an open (clamped) uniform knot vector.

    Open knot vectors have the first and last knot repeated p+1 times,
    ensuring the curve interpolates the first and last control points.

    Parameters:
        n_basis: Number of basis functions desired
        degree: Polynomial degree p
        domain: Parametric domain (start, end)

    Returns:
        KnotVector with uniform internal knots
    """
    p = degree
    n = n_basis
    n_knots = n + p + 1
    n_internal = n_knots - 2 * (p + 1)

    if n_internal < 0:
        raise InputValidationError(
            f"Cannot create knot vector: n_basis={n_basis} too small for degree={degree}"
        )

    a, b = domain

    knots = [a] * (p + 1)
    if n_internal > 0:
        internal = np.linspace(a, b, n_internal + 2)[1:-1]
        knots.extend(internal)
    knots.extend([b] * (p + 1))

    return KnotVector(np.array(knots), degree)


def make_interpolation_knot_vector(params: Sequence[float], degree: int,
                                   with_tangents: bool = False) -> KnotVector:
    """
    Knot vector for global interpolation by the averaging technique.

    Each interior knot is the mean of `degree` consecutive parameters:

        u_{j+p} = (1/p) * sum_{i=j}^{j+p-1} t_i

    Without end tangents there are N control points and the window runs over
    j = 1 .. N-p-1. With end tangents two extra control points are needed, so
    the window is widened to j = 0 .. N-p. For degree >= 2 this keeps the
    system banded and non-singular; at degree 1 the first and last averaged
    knots repeat the end knots.

    Parameters:
        params: Interpolation parameters t_0 = 0 < ... < t_{N-1} = 1
        degree: Polynomial degree p
        with_tangents: Whether start and end tangents are constrained

    Returns:
        Clamped KnotVector on [0, 1]
    """
    t = np.asarray(params, dtype=np.float64)
    p = degree
    start = 0 if with_tangents else 1
    end = len(t) - p + 1 if with_tangents else len(t) - p

    knots = [0.0] * (p + 1)
    for j in range(start, end):
        knots.append(float(np.sum(t[j:j + p])) / p)
    knots.extend([1.0] * (p + 1))

    return KnotVector(np.array(knots), p)


def make_approximation_knot_vector(params: Sequence[float], degree: int,
                                   n_control_points: int) -> KnotVector:
    """
    Knot vector for least-squares approximation (NURBS Book eq. 9.69).

    With m sample parameters and n control points, d = m / (n - p) and the
    interior knots are

        i = int(j * d), alpha = j * d - i
        u_{p+j} = (1 - alpha) * t_{i-1} + alpha * t_i,   j = 1 .. n-p-1

    so every knot span contains at least one sample parameter.

    Parameters:
        params: Sample parameters in [0, 1]
        degree: Polynomial degree p
        n_control_points: Number of control points of the fitted curve

    Returns:
        Clamped KnotVector on [0, 1]
    """
    t = np.asarray(params, dtype=np.float64)
    p = degree
    n = n_control_points

    knots = np.zeros(n + p + 1)
    d = len(t) / (n - p)
    for j in range(1, n - p):
        i = int(j * d)
        alpha = j * d - i
        knots[j + p] = (1.0 - alpha) * t[i - 1] + alpha * t[i]
    knots[n:] = 1.0

    return KnotVector(knots, p)
