"""Surface accuracy metrics."""

import numpy as np

from krigsmith.utils.errors import raise_validation_error


def _as_surface(surface, name: str) -> np.ndarray:
    grid = np.asarray(surface, dtype=np.float64)
    if grid.size == 0:
        return grid.reshape(0, 0)
    if grid.ndim != 2:
        raise_validation_error(
            f"{name} must be a 2D grid",
            expected="shape (rows, cols)",
            received=f"shape {grid.shape}",
        )
    return grid


def rmse(surface_a, surface_b) -> float:
    """Root mean squared difference between two surfaces.

    Only the overlapping rectangle (the smaller extent in each dimension) is
    compared, cell by cell from the origin.

    Args:
        surface_a: First surface (rows, cols).
        surface_b: Second surface (rows, cols).

    Returns:
        RMSE over the overlap, or 0.0 if the overlap is empty.
    """
    a = _as_surface(surface_a, "surface_a")
    b = _as_surface(surface_b, "surface_b")

    n_rows = min(a.shape[0], b.shape[0])
    n_cols = min(a.shape[1], b.shape[1])
    if n_rows == 0 or n_cols == 0:
        return 0.0

    diff = a[:n_rows, :n_cols] - b[:n_rows, :n_cols]
    return float(np.sqrt(np.mean(diff**2)))


def std_dev(surface) -> float:
    """Population standard deviation of all cells in a surface.

    Computed as ``sqrt(max(0, E[x²] - E[x]²))``; the clamp absorbs small
    negative variances from floating-point cancellation.

    Args:
        surface: Surface (rows, cols).

    Returns:
        Standard deviation, or 0.0 for an empty surface.
    """
    grid = _as_surface(surface, "surface")
    if grid.size == 0:
        return 0.0

    mean = np.mean(grid)
    mean_sq = np.mean(grid**2)
    return float(np.sqrt(max(0.0, mean_sq - mean * mean)))
