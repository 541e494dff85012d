"""Layer 2: Primitives - Algorithm interfaces and pure operations.

Stateless functions over immutable samples and parameters. They import
numpy, scipy, numba and pandas. No file I/O or plotting.
"""

from krigsmith.primitives.kriging import (
    IDW_SNAP_DISTANCE,
    SINGULAR_TOLERANCE,
    KrigingPrediction,
    PredictionMethod,
    build_kriging_system,
    predict_point,
    predict_point_detailed,
    solve_linear_system,
)
from krigsmith.primitives.metrics import rmse, std_dev
from krigsmith.primitives.surface import predict_surface, surface_shape
from krigsmith.primitives.variogram import (
    DEFAULT_BIN_WIDTH,
    compute_empirical_semivariogram,
    estimate_initial_params,
    predict_variogram,
    semivariogram_to_frame,
    spherical_semivariance,
)

__all__ = [
    # Variogram
    "DEFAULT_BIN_WIDTH",
    "compute_empirical_semivariogram",
    "estimate_initial_params",
    "predict_variogram",
    "semivariogram_to_frame",
    "spherical_semivariance",
    # Kriging
    "IDW_SNAP_DISTANCE",
    "SINGULAR_TOLERANCE",
    "KrigingPrediction",
    "PredictionMethod",
    "build_kriging_system",
    "predict_point",
    "predict_point_detailed",
    "solve_linear_system",
    # Surface
    "predict_surface",
    "surface_shape",
    # Metrics
    "rmse",
    "std_dev",
]
