"""KrigSmith: spherical-variogram Ordinary Kriging for interactive use.

Package layers:

- ``krigsmith.objects``: immutable samples and variogram parameters
- ``krigsmith.primitives``: variogram, kriging, surface and metric operations
- ``krigsmith.workflows``: end-to-end interpolation and scoring
"""

from krigsmith.objects import EmpiricalPoint, Sample, VariogramParams
from krigsmith.primitives import (
    KrigingPrediction,
    PredictionMethod,
    compute_empirical_semivariogram,
    estimate_initial_params,
    predict_point,
    predict_point_detailed,
    predict_surface,
    predict_variogram,
    rmse,
    spherical_semivariance,
    std_dev,
)
from krigsmith.utils.errors import DataValidationError, KrigSmithError, ParameterError

__version__ = "0.1.0"

__all__ = [
    "DataValidationError",
    "EmpiricalPoint",
    "KrigSmithError",
    "KrigingPrediction",
    "ParameterError",
    "PredictionMethod",
    "Sample",
    "VariogramParams",
    "compute_empirical_semivariogram",
    "estimate_initial_params",
    "predict_point",
    "predict_point_detailed",
    "predict_surface",
    "predict_variogram",
    "rmse",
    "spherical_semivariance",
    "std_dev",
]
