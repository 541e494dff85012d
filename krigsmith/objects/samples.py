"""Sample and variogram parameter objects.

Immutable value types shared by every primitive. The surrounding application
owns the session (the ordered list of samples and the current parameters);
primitives only ever read snapshots of these objects.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence, Union

import numpy as np

from krigsmith.utils.errors import raise_parameter_error, raise_validation_error

logger = logging.getLogger(__name__)

SampleLike = Union["Sample", Sequence[float]]


@dataclass(frozen=True)
class Sample:
    """A located observation.

    Attributes:
        x: Grid column coordinate.
        y: Grid row coordinate.
        z: Observed value at (x, y).
    """

    x: float
    y: float
    z: float

    def __repr__(self) -> str:
        """String representation."""
        return f"Sample(x={self.x:g}, y={self.y:g}, z={self.z:.4f})"


@dataclass(frozen=True)
class VariogramParams:
    """Spherical variogram parameters.

    Attributes:
        nugget: Semivariance just above zero separation (micro-scale noise).
        sill: Plateau semivariance reached at and beyond the range.
        range_param: Correlation range (distance where the sill is reached).
    """

    nugget: float
    sill: float
    range_param: float

    def __post_init__(self) -> None:
        """Validate VariogramParams parameters."""
        for name in ("nugget", "sill", "range_param"):
            value = float(getattr(self, name))
            if not math.isfinite(value):
                raise_parameter_error(name, value, constraint="must be finite")
            object.__setattr__(self, name, value)

        if self.nugget < 0:
            raise_parameter_error(
                "nugget", self.nugget, constraint="nugget must be non-negative"
            )

        if self.range_param <= 0:
            raise_parameter_error(
                "range_param",
                self.range_param,
                constraint="range must be positive",
                suggestion="Use a range at least as large as the sample spacing.",
            )

        # Interactive tuning can legitimately pass through this state.
        if self.sill < self.nugget:
            logger.debug(
                f"sill ({self.sill}) is below nugget ({self.nugget}); "
                "the model curve will decrease with distance"
            )

    @property
    def partial_sill(self) -> float:
        """Sill minus nugget."""
        return self.sill - self.nugget

    @classmethod
    def default(cls) -> "VariogramParams":
        """Parameters used when there is no empirical data to seed from."""
        return cls(nugget=0.0, sill=1.0, range_param=10.0)

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "VariogramParams":
        """Create from a mapping with ``nugget``, ``sill`` and ``range`` keys.

        ``range_param`` is accepted as an alias of ``range``.
        """
        if "range" in values:
            range_param = values["range"]
        elif "range_param" in values:
            range_param = values["range_param"]
        else:
            raise_validation_error(
                "Variogram parameter mapping has no range",
                expected="keys 'nugget', 'sill', 'range'",
                received=f"keys {sorted(values)}",
            )
        return cls(
            nugget=float(values["nugget"]),
            sill=float(values["sill"]),
            range_param=float(range_param),
        )

    def to_dict(self) -> dict[str, float]:
        """Convert to a plain mapping (``nugget``, ``sill``, ``range``)."""
        return {"nugget": self.nugget, "sill": self.sill, "range": self.range_param}

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"VariogramParams(nugget={self.nugget:.4f}, sill={self.sill:.4f}, "
            f"range={self.range_param:.4f})"
        )


@dataclass(frozen=True)
class EmpiricalPoint:
    """One populated lag bin of an empirical semivariogram.

    Attributes:
        distance: Bin midpoint, used as the lag distance for plotting.
        semivariance: Mean of ``0.5 * (z_i - z_j)**2`` over the bin's pairs.
        n_pairs: Number of sample pairs that fell in the bin.
    """

    distance: float
    semivariance: float
    n_pairs: int

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"EmpiricalPoint(distance={self.distance:.4f}, "
            f"semivariance={self.semivariance:.4f}, n_pairs={self.n_pairs})"
        )


def samples_to_arrays(
    samples: Iterable[SampleLike],
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Split samples into contiguous float64 x, y and z arrays.

    Args:
        samples: ``Sample`` objects or ``(x, y, z)`` triples.

    Returns:
        Tuple of (x, y, z) arrays, each of shape (n_samples,).

    Raises:
        DataValidationError: If an entry is not a Sample or an (x, y, z) triple.
    """
    rows = []
    for sample in samples:
        if isinstance(sample, Sample):
            rows.append((sample.x, sample.y, sample.z))
            continue
        if len(sample) != 3:
            raise_validation_error(
                "Sample must have exactly three components",
                expected="(x, y, z)",
                received=repr(sample),
            )
        rows.append(tuple(sample))

    if not rows:
        empty = np.zeros(0, dtype=np.float64)
        return empty, empty.copy(), empty.copy()

    data = np.asarray(rows, dtype=np.float64)
    return (
        np.ascontiguousarray(data[:, 0]),
        np.ascontiguousarray(data[:, 1]),
        np.ascontiguousarray(data[:, 2]),
    )
