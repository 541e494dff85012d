"""Layer 3: Workflows - End-to-end pipelines built from primitives."""

from krigsmith.workflows.geostatistics import (
    DEFAULT_TOLERANCE_FRACTION,
    InterpolationResult,
    SurfaceScore,
    interpolate_surface,
    score_surface,
)

__all__ = [
    "DEFAULT_TOLERANCE_FRACTION",
    "InterpolationResult",
    "SurfaceScore",
    "interpolate_surface",
    "score_surface",
]
