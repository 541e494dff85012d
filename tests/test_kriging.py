"""Tests for Ordinary Kriging point prediction and the linear solver."""

import math
from types import SimpleNamespace

import numpy as np
import pytest

from krigsmith.objects import Sample, VariogramParams
from krigsmith.primitives.kriging import (
    PredictionMethod,
    build_kriging_system,
    predict_point,
    predict_point_detailed,
    solve_linear_system,
)
from krigsmith.utils.errors import DataValidationError, ParameterError


@pytest.fixture
def triangle_samples():
    return [Sample(0, 0, 10), Sample(10, 0, 20), Sample(0, 10, 15)]


@pytest.fixture
def triangle_params():
    return VariogramParams(nugget=0, sill=30, range_param=20)


class TestSolveLinearSystem:
    """Tests for solve_linear_system."""

    def test_simple_system(self):
        """Test a well-conditioned 2x2 system."""
        a = np.array([[2.0, 1.0], [1.0, 3.0]])
        b = np.array([3.0, 5.0])

        x = solve_linear_system(a, b)

        np.testing.assert_allclose(x, [0.8, 1.4])

    def test_requires_pivoting(self):
        """Test a system with a zero leading entry."""
        a = np.array([[0.0, 1.0], [1.0, 0.0]])
        b = np.array([2.0, 3.0])

        x = solve_linear_system(a, b)

        np.testing.assert_allclose(x, [3.0, 2.0])

    def test_matches_numpy(self):
        """Test agreement with numpy on a random well-conditioned system."""
        rng = np.random.default_rng(0)
        a = rng.normal(size=(6, 6)) + 6 * np.eye(6)
        b = rng.normal(size=6)

        x = solve_linear_system(a, b)

        np.testing.assert_allclose(x, np.linalg.solve(a, b), rtol=1e-10)

    def test_singular(self):
        """Test that a singular system returns None."""
        a = np.array([[1.0, 2.0], [2.0, 4.0]])
        b = np.array([1.0, 2.0])

        assert solve_linear_system(a, b) is None

    def test_inputs_not_modified(self):
        """Test that the solver works on copies."""
        a = np.array([[0.0, 1.0], [1.0, 0.0]])
        b = np.array([2.0, 3.0])

        solve_linear_system(a, b)

        np.testing.assert_array_equal(a, [[0.0, 1.0], [1.0, 0.0]])
        np.testing.assert_array_equal(b, [2.0, 3.0])

    def test_non_square(self):
        """Test that a non-square matrix is rejected."""
        with pytest.raises(DataValidationError, match="square"):
            solve_linear_system(np.ones((2, 3)), np.ones(2))

    def test_mismatched_rhs(self):
        """Test that a right-hand side of the wrong length is rejected."""
        with pytest.raises(DataValidationError, match="Right-hand side"):
            solve_linear_system(np.eye(3), np.ones(2))


class TestBuildKrigingSystem:
    """Tests for build_kriging_system."""

    def test_structure(self, triangle_samples, triangle_params):
        """Test the Lagrange-bordered layout of the system."""
        a, b = build_kriging_system(5.0, 5.0, triangle_samples, triangle_params)

        assert a.shape == (4, 4)
        assert b.shape == (4,)
        np.testing.assert_array_equal(np.diag(a)[:3], 0.0)
        np.testing.assert_array_equal(a[:3, 3], 1.0)
        np.testing.assert_array_equal(a[3, :3], 1.0)
        assert a[3, 3] == 0.0
        assert b[3] == 1.0
        np.testing.assert_allclose(a, a.T)

    def test_semivariance_entries(self, triangle_samples, triangle_params):
        """Test that entries are spherical semivariances of the distances."""
        a, b = build_kriging_system(5.0, 0.0, triangle_samples, triangle_params)

        # Samples 0 and 1 are 10 apart: r = 0.5 -> 30 * 0.6875
        assert a[0, 1] == pytest.approx(30 * 0.6875)
        # Query is 5 from sample 0: r = 0.25
        r = 0.25
        assert b[0] == pytest.approx(30 * (1.5 * r - 0.5 * r**3))


class TestPredictPoint:
    """Tests for predict_point."""

    def test_empty_samples(self, triangle_params):
        """Test that an empty sample set predicts zero."""
        assert predict_point(3.0, 4.0, [], triangle_params) == 0.0

    def test_exact_at_sample(self, triangle_samples, triangle_params):
        """Test exact interpolation at every sample location."""
        for sample in triangle_samples:
            value = predict_point(sample.x, sample.y, triangle_samples, triangle_params)
            assert value == sample.z

    def test_concrete_scenario_origin(self, triangle_samples, triangle_params):
        """Test the prediction at (0, 0) equals the sample value exactly."""
        assert predict_point(0, 0, triangle_samples, triangle_params) == 10.0

    def test_far_outside_hull_is_finite(self, triangle_samples, triangle_params):
        """Test extrapolation far from the samples stays finite."""
        value = predict_point(1000.0, 1000.0, triangle_samples, triangle_params)

        assert math.isfinite(value)

    def test_single_sample(self, triangle_params):
        """Test that one sample gives its value everywhere."""
        samples = [Sample(4, 4, 7.5)]

        assert predict_point(0.0, 9.0, samples, triangle_params) == pytest.approx(7.5)

    def test_symmetric_midpoint(self):
        """Test that the midpoint of two samples gets equal weights."""
        samples = [Sample(0, 0, 0.0), Sample(10, 0, 10.0)]
        params = VariogramParams(nugget=0.0, sill=1.0, range_param=100.0)

        assert predict_point(5.0, 0.0, samples, params) == pytest.approx(5.0)

    def test_tuple_samples(self, triangle_params):
        """Test that plain (x, y, z) triples are accepted."""
        samples = [(0, 0, 10), (10, 0, 20), (0, 10, 15)]

        assert predict_point(0, 10, samples, triangle_params) == 15.0

    def test_duplicate_locations_fall_back(self):
        """Test that coincident samples trigger the inverse-distance fallback."""
        samples = [Sample(5, 5, 10.0), Sample(5, 5, 20.0)]
        params = VariogramParams(nugget=0.0, sill=10.0, range_param=20.0)

        value = predict_point(0.0, 0.0, samples, params)

        assert math.isfinite(value)
        assert value == pytest.approx(15.0)

    def test_invalid_range(self, triangle_samples):
        """Test that a degenerate range is reported, not divided by."""
        degenerate = SimpleNamespace(nugget=0.0, sill=1.0, range_param=-1.0)

        with pytest.raises(ParameterError):
            predict_point(1.0, 1.0, triangle_samples, degenerate)


class TestPredictPointDetailed:
    """Tests for predict_point_detailed."""

    def test_empty_method(self, triangle_params):
        """Test that an empty sample set is reported as such."""
        prediction = predict_point_detailed(1.0, 1.0, [], triangle_params)

        assert prediction.value == 0.0
        assert prediction.method is PredictionMethod.EMPTY
        assert prediction.weights is None

    def test_exact_method(self, triangle_samples, triangle_params):
        """Test that a sample location is reported as an exact match."""
        prediction = predict_point_detailed(10, 0, triangle_samples, triangle_params)

        assert prediction.value == 20.0
        assert prediction.method is PredictionMethod.EXACT
        np.testing.assert_array_equal(prediction.weights, [0.0, 1.0, 0.0])

    def test_kriging_method_weights_sum_to_one(
        self, triangle_samples, triangle_params
    ):
        """Test the unbiasedness constraint on solved weights."""
        prediction = predict_point_detailed(3.0, 4.0, triangle_samples, triangle_params)

        assert prediction.method is PredictionMethod.KRIGING
        assert prediction.weights.sum() == pytest.approx(1.0)
        zs = np.array([s.z for s in triangle_samples])
        assert prediction.value == pytest.approx(float(prediction.weights @ zs))

    def test_far_point_weights_sum_to_one(self, triangle_samples, triangle_params):
        """Test the constraint also holds beyond the correlation range."""
        prediction = predict_point_detailed(
            500.0, -200.0, triangle_samples, triangle_params
        )

        assert prediction.method is PredictionMethod.KRIGING
        assert prediction.weights.sum() == pytest.approx(1.0)

    def test_fallback_with_duplicates(self):
        """Test inverse-distance weights when two samples coincide."""
        samples = [Sample(5, 5, 10.0), Sample(5, 5, 20.0), Sample(10, 10, 30.0)]
        params = VariogramParams(nugget=0.0, sill=10.0, range_param=20.0)

        prediction = predict_point_detailed(0.0, 0.0, samples, params)

        # Weights 1/50, 1/50, 1/200 before normalisation
        assert prediction.method is PredictionMethod.FALLBACK_IDW
        assert prediction.value == pytest.approx(50.0 / 3.0)
        np.testing.assert_allclose(prediction.weights, [4 / 9, 4 / 9, 1 / 9])

    def test_fallback_snaps_to_near_sample(self):
        """Test that the fallback returns a sample within the snap distance."""
        samples = [Sample(5, 5, 10.0), Sample(5, 5, 20.0)]
        params = VariogramParams(nugget=0.0, sill=10.0, range_param=20.0)

        prediction = predict_point_detailed(5.0005, 5.0, samples, params)

        assert prediction.method is PredictionMethod.FALLBACK_IDW
        assert prediction.value == 10.0

    def test_flat_variogram_falls_back(self, triangle_samples):
        """Test that an all-zero variogram makes the system singular."""
        params = VariogramParams(nugget=0.0, sill=0.0, range_param=10.0)

        prediction = predict_point_detailed(2.0, 3.0, triangle_samples, params)

        assert prediction.method is PredictionMethod.FALLBACK_IDW
        assert math.isfinite(prediction.value)

    def test_value_matches_predict_point(self, triangle_samples, triangle_params):
        """Test that both entry points agree."""
        detailed = predict_point_detailed(7.0, 2.0, triangle_samples, triangle_params)

        assert detailed.value == predict_point(
            7.0, 2.0, triangle_samples, triangle_params
        )
