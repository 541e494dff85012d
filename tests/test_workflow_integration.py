"""Integration tests for the interpolation and scoring workflow."""

import math

import numpy as np
import pytest

from krigsmith import Sample, VariogramParams, std_dev
from krigsmith.utils.errors import ParameterError
from krigsmith.workflows import (
    InterpolationResult,
    SurfaceScore,
    interpolate_surface,
    score_surface,
)


def _reference_surface(size: int = 32) -> np.ndarray:
    """Smooth reference field on a size × size grid, values in [0, 100]."""
    y, x = np.mgrid[0:size, 0:size].astype(float)
    field = np.sin(x / 6.0) + np.cos(y / 9.0) + 0.02 * x
    return (field - field.min()) / (field.max() - field.min()) * 100


def _sample_reference(truth: np.ndarray, locations) -> list[Sample]:
    return [Sample(x, y, float(truth[y, x])) for x, y in locations]


@pytest.fixture
def truth():
    return _reference_surface()


@pytest.fixture
def samples(truth):
    locations = [(2, 3), (10, 5), (25, 4), (6, 18), (17, 15), (28, 20), (4, 29), (20, 28)]
    return _sample_reference(truth, locations)


class TestInterpolateSurface:
    """Tests for interpolate_surface."""

    def test_seeds_params_when_missing(self, samples):
        """Test that parameters are seeded from the semivariogram."""
        result = interpolate_surface(samples, 32, 32)

        assert isinstance(result, InterpolationResult)
        assert result.stride == 2
        assert result.surface.shape == (16, 16)
        assert len(result.empirical) > 0
        assert result.params.range_param > 0
        assert result.params.sill >= result.params.nugget

    def test_uses_given_params(self, samples):
        """Test that caller parameters are used unchanged."""
        params = VariogramParams(nugget=0.1, sill=50.0, range_param=15.0)

        result = interpolate_surface(samples, 32, 32, params=params, stride=1)

        assert result.params is params
        assert result.surface.shape == (32, 32)

    def test_reproduces_samples(self, samples):
        """Test that sampled cells are reproduced exactly."""
        result = interpolate_surface(samples, 32, 32, stride=1)

        for sample in samples:
            assert result.surface[int(sample.y), int(sample.x)] == sample.z

    def test_single_sample(self):
        """Test the pipeline with too few samples for a semivariogram."""
        result = interpolate_surface([Sample(3, 3, 12.0)], 8, 8)

        assert result.empirical == []
        assert result.params == VariogramParams.default()
        np.testing.assert_allclose(result.surface, 12.0)

    def test_accepts_generator(self, samples):
        """Test that a one-shot iterable of samples is consumed once."""
        result = interpolate_surface((s for s in samples), 16, 16)

        assert len(result.empirical) > 0
        assert result.surface.shape == (8, 8)


class TestScoreSurface:
    """Tests for score_surface."""

    def test_perfect_prediction(self, truth):
        """Test that the reference scores itself as a pass."""
        score = score_surface(truth, truth)

        assert isinstance(score, SurfaceScore)
        assert score.rmse == 0.0
        assert score.relative_rmse == 0.0
        assert score.passed

    def test_target_from_reference_spread(self, truth):
        """Test that the target is a fraction of the reference std. dev."""
        score = score_surface(truth, np.zeros_like(truth), tolerance_fraction=0.2)

        assert score.target_rmse == pytest.approx(std_dev(truth) * 0.2)
        assert score.relative_rmse == pytest.approx(score.rmse / score.target_rmse)
        assert not score.passed

    def test_stride_alignment(self, truth):
        """Test that a strided prediction is compared with matching cells."""
        predicted = truth[::2, ::2].copy()

        score = score_surface(truth, predicted, stride=2)

        assert score.rmse == 0.0
        assert score.passed

    def test_constant_reference(self):
        """Test the zero-target edge cases."""
        truth = np.full((4, 4), 5.0)

        assert score_surface(truth, truth).relative_rmse == 0.0

        miss = score_surface(truth, np.full((4, 4), 6.0))
        assert math.isinf(miss.relative_rmse)
        assert not miss.passed

    def test_invalid_tolerance(self, truth):
        """Test that a negative tolerance fraction is rejected."""
        with pytest.raises(ParameterError, match="tolerance_fraction"):
            score_surface(truth, truth, tolerance_fraction=-0.1)

    def test_invalid_stride(self, truth):
        """Test that a stride below one is rejected."""
        with pytest.raises(ParameterError, match="stride"):
            score_surface(truth, truth, stride=0)

    def test_end_to_end(self, truth, samples):
        """Test samples → surface → score."""
        result = interpolate_surface(samples, 32, 32, stride=2)

        score = score_surface(truth, result.surface, stride=result.stride)

        assert math.isfinite(score.rmse)
        assert score.rmse >= 0.0
        assert score.passed == (score.rmse <= score.target_rmse)
