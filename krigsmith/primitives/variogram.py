"""Variogram analysis primitives.

Spherical variogram model, binned empirical semivariogram and a heuristic
parameter initializer. Pure operations over Layer 1 objects.
"""

import logging
import math
from typing import Iterable, Sequence

import numpy as np
import pandas as pd
from numba import njit
from scipy.spatial.distance import pdist

from krigsmith.objects.samples import (
    EmpiricalPoint,
    SampleLike,
    VariogramParams,
    samples_to_arrays,
)
from krigsmith.utils.errors import raise_parameter_error

logger = logging.getLogger(__name__)

DEFAULT_BIN_WIDTH = 5.0


@njit(cache=True)
def _spherical_kernel(
    h: float, nugget: float, sill: float, range_param: float
) -> float:
    """Scalar spherical model; shared with the kriging kernels."""
    if h == 0.0:
        return 0.0
    if h >= range_param:
        return sill
    h_scaled = h / range_param
    return nugget + (sill - nugget) * (1.5 * h_scaled - 0.5 * h_scaled**3)


def _check_range(params: VariogramParams) -> None:
    if not params.range_param > 0:
        raise_parameter_error(
            "range_param",
            params.range_param,
            constraint="range must be positive",
        )


def spherical_semivariance(distance: float, params: VariogramParams) -> float:
    """Spherical variogram model.

    The model has no nugget effect at zero separation, so kriging weights are
    exact at sample locations.

    Args:
        distance: Separation distance (lag), finite and non-negative.
        params: Variogram parameters.

    Returns:
        ``0`` at zero distance, ``sill`` at and beyond the range, and
        ``nugget + (sill - nugget) * (1.5 r - 0.5 r**3)`` with
        ``r = distance / range`` in between.

    Raises:
        ParameterError: If the range is not positive or the distance is
            negative or non-finite.
    """
    _check_range(params)
    distance = float(distance)
    if not math.isfinite(distance) or distance < 0:
        raise_parameter_error(
            "distance", distance, constraint="must be finite and non-negative"
        )
    return float(
        _spherical_kernel(distance, params.nugget, params.sill, params.range_param)
    )


def _spherical_model(
    h: np.ndarray, nugget: float, sill: float, range_param: float
) -> np.ndarray:
    """Spherical variogram model over an array of distances.

    Args:
        h: Distance (lag).
        nugget: Nugget effect.
        sill: Total sill.
        range_param: Range parameter.

    Returns:
        Semi-variance values.
    """
    gamma = np.zeros_like(h, dtype=float)

    mask = (h > 0) & (h < range_param)
    if np.any(mask):
        h_scaled = h[mask] / range_param
        gamma[mask] = nugget + (sill - nugget) * (1.5 * h_scaled - 0.5 * h_scaled**3)

    gamma[h >= range_param] = sill
    return gamma


def predict_variogram(params: VariogramParams, distances: np.ndarray) -> np.ndarray:
    """Evaluate the spherical model at many distances.

    Args:
        params: Variogram parameters.
        distances: Distances to evaluate at (any shape).

    Returns:
        Semi-variance values with the same shape as ``distances``.
    """
    _check_range(params)
    h = np.asarray(distances, dtype=np.float64)
    return _spherical_model(h, params.nugget, params.sill, params.range_param)


def compute_empirical_semivariogram(
    samples: Iterable[SampleLike],
    bin_width: float = DEFAULT_BIN_WIDTH,
) -> list[EmpiricalPoint]:
    """Compute the binned empirical semivariogram of a sample set.

    Every unordered pair contributes ``0.5 * (z_i - z_j)**2`` to the bin
    ``floor(h_ij / bin_width)``. Bins start at zero, are labelled with their
    midpoint and only populated bins are returned.

    Args:
        samples: ``Sample`` objects or ``(x, y, z)`` triples.
        bin_width: Lag bin width.

    Returns:
        Empirical points ordered by ascending distance. Empty when fewer than
        two samples are given.

    Raises:
        ParameterError: If ``bin_width`` is not a positive finite number.

    Example:
        >>> from krigsmith import Sample, compute_empirical_semivariogram
        >>> samples = [Sample(0, 0, 5), Sample(3, 0, 8), Sample(6, 0, 5)]
        >>> points = compute_empirical_semivariogram(samples, bin_width=3)
        >>> [(p.distance, p.semivariance, p.n_pairs) for p in points]
        [(4.5, 4.5, 2), (7.5, 0.0, 1)]
    """
    if not (math.isfinite(bin_width) and bin_width > 0):
        raise_parameter_error(
            "bin_width", bin_width, constraint="must be a positive finite number"
        )

    xs, ys, zs = samples_to_arrays(samples)
    if len(zs) < 2:
        logger.debug(f"Semivariogram needs at least 2 samples, got {len(zs)}")
        return []

    coordinates = np.column_stack([xs, ys])
    distances = pdist(coordinates)
    value_diffs = pdist(zs.reshape(-1, 1))
    semi_variance_pairs = 0.5 * value_diffs**2

    n_bins = int(math.ceil(distances.max() / bin_width)) + 1
    bin_index = np.floor(distances / bin_width).astype(np.int64)

    n_pairs = np.bincount(bin_index, minlength=n_bins)
    semi_variance_sum = np.bincount(
        bin_index, weights=semi_variance_pairs, minlength=n_bins
    )

    points = []
    for k in range(n_bins):
        if n_pairs[k] > 0:
            points.append(
                EmpiricalPoint(
                    distance=(k + 0.5) * bin_width,
                    semivariance=float(semi_variance_sum[k] / n_pairs[k]),
                    n_pairs=int(n_pairs[k]),
                )
            )

    logger.debug(
        f"Semivariogram: {len(zs)} samples, {len(distances)} pairs, "
        f"{len(points)} populated bins"
    )
    return points


def estimate_initial_params(empirical: Sequence[EmpiricalPoint]) -> VariogramParams:
    """Seed variogram parameters from an empirical semivariogram.

    Coarse heuristic, not a fit: nugget is a tenth of the smallest bin
    semivariance, sill is 110% of the largest, range is half the largest lag.

    Args:
        empirical: Output of ``compute_empirical_semivariogram``.

    Returns:
        Starting parameters; ``VariogramParams.default()`` for empty input.
    """
    if len(empirical) == 0:
        return VariogramParams.default()

    semivariances = [point.semivariance for point in empirical]
    max_distance = max(point.distance for point in empirical)

    return VariogramParams(
        nugget=0.1 * min(semivariances),
        sill=1.1 * max(semivariances),
        range_param=0.5 * max_distance,
    )


def semivariogram_to_frame(empirical: Sequence[EmpiricalPoint]) -> pd.DataFrame:
    """Tabulate empirical points for plotting.

    Args:
        empirical: Empirical semivariogram points.

    Returns:
        DataFrame with columns ``distance``, ``semivariance`` and ``n_pairs``.
    """
    return pd.DataFrame(
        {
            "distance": [point.distance for point in empirical],
            "semivariance": [point.semivariance for point in empirical],
            "n_pairs": [point.n_pairs for point in empirical],
        },
        columns=["distance", "semivariance", "n_pairs"],
    ).astype({"distance": float, "semivariance": float, "n_pairs": int})
