"""Kriging primitives for spatial interpolation.

Ordinary Kriging point prediction: a constant but unknown mean, with the
unbiasedness constraint (weights sum to one) carried by a Lagrange multiplier
row and column. The small augmented system is solved directly with Gaussian
elimination and partial pivoting; singular systems fall back to inverse
distance weighting.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

import numpy as np
from numba import njit

from krigsmith.objects.samples import SampleLike, VariogramParams, samples_to_arrays
from krigsmith.primitives.variogram import _check_range, _spherical_kernel
from krigsmith.utils.errors import raise_validation_error

logger = logging.getLogger(__name__)

# Pivots smaller than this mark the kriging system as singular.
SINGULAR_TOLERANCE = 1e-10
# Fallback snaps to a sample closer than this to the query.
IDW_SNAP_DISTANCE = 1e-3

_METHOD_EMPTY = 0
_METHOD_EXACT = 1
_METHOD_KRIGING = 2
_METHOD_FALLBACK = 3


class PredictionMethod(str, Enum):
    """How a prediction was produced."""

    EMPTY = "empty"
    EXACT = "exact"
    KRIGING = "kriging"
    FALLBACK_IDW = "fallback_idw"


_METHOD_BY_CODE = {
    _METHOD_EMPTY: PredictionMethod.EMPTY,
    _METHOD_EXACT: PredictionMethod.EXACT,
    _METHOD_KRIGING: PredictionMethod.KRIGING,
    _METHOD_FALLBACK: PredictionMethod.FALLBACK_IDW,
}


@dataclass(frozen=True)
class KrigingPrediction:
    """A point prediction together with how it was obtained.

    Attributes:
        value: Predicted value.
        method: Which path produced the value.
        weights: Per-sample weights (sum to one), None when there were no
            samples.
    """

    value: float
    method: PredictionMethod
    weights: Optional[np.ndarray] = None

    def __repr__(self) -> str:
        """String representation."""
        n_weights = 0 if self.weights is None else len(self.weights)
        return (
            f"KrigingPrediction(value={self.value:.4f}, "
            f"method={self.method.value}, n_weights={n_weights})"
        )


@njit(cache=True)
def _solve_gaussian(
    a: np.ndarray, b: np.ndarray, tolerance: float
) -> tuple[np.ndarray, bool]:
    """Gaussian elimination with partial pivoting on copies of a and b."""
    n = a.shape[0]
    matrix = a.copy()
    rhs = b.copy()

    for i in range(n):
        max_row = i
        for k in range(i + 1, n):
            if abs(matrix[k, i]) > abs(matrix[max_row, i]):
                max_row = k

        if max_row != i:
            for j in range(n):
                tmp = matrix[i, j]
                matrix[i, j] = matrix[max_row, j]
                matrix[max_row, j] = tmp
            tmp = rhs[i]
            rhs[i] = rhs[max_row]
            rhs[max_row] = tmp

        if abs(matrix[i, i]) < tolerance:
            return np.zeros(n), False

        for k in range(i + 1, n):
            factor = matrix[k, i] / matrix[i, i]
            for j in range(i, n):
                matrix[k, j] -= factor * matrix[i, j]
            rhs[k] -= factor * rhs[i]

    solution = np.zeros(n)
    for i in range(n - 1, -1, -1):
        acc = rhs[i]
        for j in range(i + 1, n):
            acc -= matrix[i, j] * solution[j]
        solution[i] = acc / matrix[i, i]

    return solution, True


@njit(cache=True)
def _build_system(
    qx: float,
    qy: float,
    xs: np.ndarray,
    ys: np.ndarray,
    nugget: float,
    sill: float,
    range_param: float,
) -> tuple[np.ndarray, np.ndarray]:
    n = xs.shape[0]
    a = np.zeros((n + 1, n + 1))
    b = np.zeros(n + 1)

    for i in range(n):
        for j in range(n):
            if i != j:
                dx = xs[i] - xs[j]
                dy = ys[i] - ys[j]
                a[i, j] = _spherical_kernel(
                    math.sqrt(dx * dx + dy * dy), nugget, sill, range_param
                )
        a[i, n] = 1.0
        a[n, i] = 1.0

        dx = qx - xs[i]
        dy = qy - ys[i]
        b[i] = _spherical_kernel(math.sqrt(dx * dx + dy * dy), nugget, sill, range_param)

    b[n] = 1.0
    return a, b


@njit(cache=True)
def _idw_kernel(
    qx: float, qy: float, xs: np.ndarray, ys: np.ndarray, zs: np.ndarray, snap: float
) -> tuple[float, np.ndarray]:
    n = xs.shape[0]
    weights = np.zeros(n)
    total_weight = 0.0

    for i in range(n):
        dx = qx - xs[i]
        dy = qy - ys[i]
        distance = math.sqrt(dx * dx + dy * dy)
        if distance < snap:
            exact = np.zeros(n)
            exact[i] = 1.0
            return zs[i], exact
        weights[i] = 1.0 / (distance * distance)
        total_weight += weights[i]

    if total_weight <= 0.0:
        return 0.0, weights

    value = 0.0
    for i in range(n):
        weights[i] /= total_weight
        value += weights[i] * zs[i]
    return value, weights


@njit(cache=True)
def _krige_kernel(
    qx: float,
    qy: float,
    xs: np.ndarray,
    ys: np.ndarray,
    zs: np.ndarray,
    nugget: float,
    sill: float,
    range_param: float,
    tolerance: float,
    snap: float,
) -> tuple[float, int, np.ndarray]:
    n = xs.shape[0]
    if n == 0:
        return 0.0, _METHOD_EMPTY, np.zeros(0)

    for i in range(n):
        if xs[i] == qx and ys[i] == qy:
            exact = np.zeros(n)
            exact[i] = 1.0
            return zs[i], _METHOD_EXACT, exact

    a, b = _build_system(qx, qy, xs, ys, nugget, sill, range_param)
    solution, ok = _solve_gaussian(a, b, tolerance)
    if not ok:
        value, weights = _idw_kernel(qx, qy, xs, ys, zs, snap)
        return value, _METHOD_FALLBACK, weights

    weights = solution[:n].copy()
    value = 0.0
    for i in range(n):
        value += weights[i] * zs[i]
    return value, _METHOD_KRIGING, weights


def solve_linear_system(a: np.ndarray, b: np.ndarray) -> Optional[np.ndarray]:
    """Solve ``a @ x = b`` by Gaussian elimination with partial pivoting.

    At each step the largest-magnitude entry of the remaining column is
    swapped into the pivot position. A pivot below ``SINGULAR_TOLERANCE``
    aborts the solve.

    Args:
        a: Square coefficient matrix (n, n).
        b: Right-hand side (n,).

    Returns:
        Solution vector, or None if the system is singular.

    Raises:
        DataValidationError: If shapes are inconsistent.
    """
    a = np.ascontiguousarray(a, dtype=np.float64)
    b = np.ascontiguousarray(b, dtype=np.float64)

    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise_validation_error(
            "Coefficient matrix must be square",
            expected="shape (n, n)",
            received=f"shape {a.shape}",
        )
    if b.ndim != 1 or b.shape[0] != a.shape[0]:
        raise_validation_error(
            "Right-hand side must match the matrix size",
            expected=f"shape ({a.shape[0]},)",
            received=f"shape {b.shape}",
        )

    solution, ok = _solve_gaussian(a, b, SINGULAR_TOLERANCE)
    return solution if ok else None


def build_kriging_system(
    x: float,
    y: float,
    samples: Iterable[SampleLike],
    params: VariogramParams,
) -> tuple[np.ndarray, np.ndarray]:
    """Build the augmented Ordinary Kriging system for one query point.

    Args:
        x: Query x coordinate.
        y: Query y coordinate.
        samples: Sample set (n samples).
        params: Variogram parameters.

    Returns:
        Tuple of (A, b): the (n+1, n+1) matrix of inter-sample semivariances
        bordered by the Lagrange row and column, and the (n+1,) vector of
        query-to-sample semivariances with a trailing 1.
    """
    _check_range(params)
    xs, ys, _ = samples_to_arrays(samples)
    return _build_system(
        float(x), float(y), xs, ys, params.nugget, params.sill, params.range_param
    )


def predict_point_detailed(
    x: float,
    y: float,
    samples: Iterable[SampleLike],
    params: VariogramParams,
) -> KrigingPrediction:
    """Ordinary Kriging prediction at one point, reporting the method used.

    Args:
        x: Query x coordinate.
        y: Query y coordinate.
        samples: Sample set.
        params: Variogram parameters.

    Returns:
        KrigingPrediction with the value, the method (exact sample match,
        kriging solve, inverse-distance fallback, or empty sample set) and
        the sample weights.

    Raises:
        ParameterError: If the variogram range is not positive.
    """
    _check_range(params)
    xs, ys, zs = samples_to_arrays(samples)

    value, code, weights = _krige_kernel(
        float(x),
        float(y),
        xs,
        ys,
        zs,
        params.nugget,
        params.sill,
        params.range_param,
        SINGULAR_TOLERANCE,
        IDW_SNAP_DISTANCE,
    )
    method = _METHOD_BY_CODE[code]

    if method is PredictionMethod.FALLBACK_IDW:
        logger.debug(
            f"Singular kriging system at ({x}, {y}) with {len(zs)} samples; "
            "used inverse distance weighting"
        )

    return KrigingPrediction(
        value=float(value),
        method=method,
        weights=None if method is PredictionMethod.EMPTY else weights,
    )


def predict_point(
    x: float,
    y: float,
    samples: Iterable[SampleLike],
    params: VariogramParams,
) -> float:
    """Ordinary Kriging prediction at one point.

    Returns 0 for an empty sample set and the sample value when the query
    coincides with a sample. A singular system silently falls back to
    inverse distance weighting; use ``predict_point_detailed`` to see which
    path was taken.

    Example:
        >>> from krigsmith import Sample, VariogramParams, predict_point
        >>> samples = [Sample(0, 0, 10), Sample(10, 0, 20), Sample(0, 10, 15)]
        >>> params = VariogramParams(nugget=0, sill=30, range_param=20)
        >>> predict_point(0, 0, samples, params)
        10.0
    """
    return predict_point_detailed(x, y, samples, params).value
