"""Layer 1: Objects - Immutable data representations.

This layer contains only data structures. Only standard library + numpy.
"""

from krigsmith.objects.samples import (
    EmpiricalPoint,
    Sample,
    VariogramParams,
    samples_to_arrays,
)

__all__ = [
    "EmpiricalPoint",
    "Sample",
    "VariogramParams",
    "samples_to_arrays",
]
