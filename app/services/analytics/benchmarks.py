"""
Benchmark comparison labels.
"""

from __future__ import annotations

from app.schemas.analytics import BenchmarkComparison

# Share of the benchmark still counted as "average".
AVERAGE_BAND = 0.8

# Point bands around an industry figure.
ON_PAR_BAND = 5.0
SIGNIFICANT_BAND = 10.0


def compare_to_benchmark(metric: str, user: float, benchmark: float) -> BenchmarkComparison:
    if user >= benchmark:
        status = "above"
    elif user >= benchmark * AVERAGE_BAND:
        status = "average"
    else:
        status = "below"
    return BenchmarkComparison(metric=metric, user=user, benchmark=benchmark, status=status)


def compare_to_industry(metric: str, user: float, benchmark: float) -> BenchmarkComparison:
    difference = user - benchmark
    if difference > SIGNIFICANT_BAND:
        status = "significantly above"
    elif difference > ON_PAR_BAND:
        status = "above"
    elif difference >= -ON_PAR_BAND:
        status = "on par with"
    elif difference >= -SIGNIFICANT_BAND:
        status = "below"
    else:
        status = "significantly below"
    return BenchmarkComparison(metric=metric, user=user, benchmark=benchmark, status=status)
