"""Performance benchmarks for kriging operations."""

import time
from typing import Dict

import numpy as np

from krigsmith import Sample, VariogramParams
from krigsmith.primitives.kriging import predict_point
from krigsmith.primitives.surface import predict_surface
from krigsmith.primitives.variogram import compute_empirical_semivariogram


def _random_samples(n_samples: int, size: int, seed: int = 42) -> list[Sample]:
    rng = np.random.default_rng(seed)
    coords = rng.choice(size * size, size=n_samples, replace=False)
    values = rng.uniform(0, 100, n_samples)
    return [
        Sample(float(c % size), float(c // size), float(v))
        for c, v in zip(coords, values)
    ]


def benchmark_predict_surface(
    n_samples: int = 10,
    size: int = 64,
    stride: int = 2,
    repeats: int = 20,
) -> Dict[str, float]:
    """Benchmark grid surface prediction.

    Args:
        n_samples: Number of sample points.
        size: Grid width and height.
        stride: Grid stride.
        repeats: Number of timed runs (after one warm-up run).

    Returns:
        Dictionary with timing results.
    """
    samples = _random_samples(n_samples, size)
    params = VariogramParams(nugget=0.1, sill=50.0, range_param=15.0)

    # Warm-up triggers JIT compilation
    start = time.perf_counter()
    surface = predict_surface(size, size, samples, params, stride=stride)
    compile_time = time.perf_counter() - start

    start = time.perf_counter()
    for _ in range(repeats):
        predict_surface(size, size, samples, params, stride=stride)
    predict_time = (time.perf_counter() - start) / repeats

    return {
        "n_samples": n_samples,
        "size": size,
        "stride": stride,
        "n_cells": surface.size,
        "first_call_seconds": compile_time,
        "predict_time_seconds": predict_time,
        "cells_per_second": surface.size / predict_time,
    }


def benchmark_predict_point(n_samples: int = 10, n_queries: int = 2000) -> Dict[str, float]:
    """Benchmark single-point prediction through the Python entry point.

    Args:
        n_samples: Number of sample points.
        n_queries: Number of query points.

    Returns:
        Dictionary with timing results.
    """
    samples = _random_samples(n_samples, 64)
    params = VariogramParams(nugget=0.1, sill=50.0, range_param=15.0)
    rng = np.random.default_rng(0)
    queries = rng.uniform(0, 64, (n_queries, 2))

    predict_point(0.5, 0.5, samples, params)

    start = time.perf_counter()
    for qx, qy in queries:
        predict_point(qx, qy, samples, params)
    predict_time = time.perf_counter() - start

    return {
        "n_samples": n_samples,
        "n_queries": n_queries,
        "predict_time_seconds": predict_time,
        "predictions_per_second": n_queries / predict_time,
    }


def benchmark_semivariogram(n_samples: int = 200, bin_width: float = 3.0) -> Dict[str, float]:
    """Benchmark empirical semivariogram estimation.

    Args:
        n_samples: Number of sample points.
        bin_width: Lag bin width.

    Returns:
        Dictionary with timing results.
    """
    samples = _random_samples(n_samples, 256)

    start = time.perf_counter()
    points = compute_empirical_semivariogram(samples, bin_width=bin_width)
    elapsed = time.perf_counter() - start

    return {
        "n_samples": n_samples,
        "n_bins": len(points),
        "time_seconds": elapsed,
    }


def run_all_kriging_benchmarks() -> Dict[str, Dict]:
    """Run all kriging benchmarks.

    Returns:
        Dictionary with all benchmark results.
    """
    results = {}

    print("Benchmarking surface prediction...")
    results["surface"] = {
        "interactive": benchmark_predict_surface(10, 64, 2),
        "full": benchmark_predict_surface(10, 64, 1),
        "large": benchmark_predict_surface(30, 128, 1, repeats=5),
    }

    print("Benchmarking point prediction...")
    results["point"] = benchmark_predict_point()

    print("Benchmarking semivariogram estimation...")
    results["semivariogram"] = benchmark_semivariogram()

    return results


if __name__ == "__main__":
    """Run benchmarks and print results."""
    results = run_all_kriging_benchmarks()

    print("\n" + "=" * 60)
    print("KRIGING PERFORMANCE BENCHMARKS")
    print("=" * 60)

    print("\nSurface prediction:")
    for name, data in results["surface"].items():
        print(f"  {name:12s}: {data['n_samples']:3d} samples, "
              f"{data['size']}x{data['size']} grid, stride {data['stride']}")
        print(f"            First call: {data['first_call_seconds']*1000:8.2f} ms")
        print(f"            Predict:    {data['predict_time_seconds']*1000:8.2f} ms")
        print(f"            Throughput: {data['cells_per_second']:10.0f} cells/s")

    point = results["point"]
    print(f"\nPoint prediction: {point['predictions_per_second']:8.0f} pred/s")

    vario = results["semivariogram"]
    print(f"\nSemivariogram ({vario['n_samples']} samples): "
          f"{vario['time_seconds']*1000:.2f} ms, {vario['n_bins']} bins")
