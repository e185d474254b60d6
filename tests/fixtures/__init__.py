"""Pytest fixtures housing hand-checked scenarios for the SampleFlow consumers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple


@dataclass(frozen=True)
class HistogramScenario:
    """Samples fed into a linear histogram and the counts they must produce."""

    min_value: float
    max_value: float
    n_bins: int
    samples: Tuple[float, ...]
    expected_counts: Tuple[int, ...]


@dataclass(frozen=True)
class AutocovarianceCase:
    """Scalar stream with its autocovariance worked out by hand."""

    lag_depth: int
    samples: Tuple[float, ...]
    expected: Tuple[float, ...]


def histogram_scenarios() -> List[HistogramScenario]:
    return [
        HistogramScenario(
            min_value=0.0,
            max_value=10.0,
            n_bins=5,
            samples=(1.0, 1.0, 4.0, 9.9, -5.0, 11.0),
            expected_counts=(2, 0, 1, 0, 1),
        ),
        # Both bounds are inside the range: min lands in the first bin and
        # max in the last one.
        HistogramScenario(
            min_value=-1.0,
            max_value=1.0,
            n_bins=4,
            samples=(-1.0, 1.0, 0.0, -0.5, 0.49),
            expected_counts=(1, 1, 2, 1),
        ),
    ]


def autocovariance_cases() -> List[AutocovarianceCase]:
    # Values follow from running the alpha/beta recurrences by hand.  The
    # (n - 1) / n factor must be evaluated in floating point: with truncating
    # division the [1, 2, 3] lag-1 case would come out as -8/3 instead of 0.
    return [
        AutocovarianceCase(lag_depth=1, samples=(1.0, 2.0), expected=(-0.125,)),
        AutocovarianceCase(lag_depth=1, samples=(1.0, 2.0, 3.0), expected=(0.0,)),
        AutocovarianceCase(lag_depth=2, samples=(1.0, 2.0), expected=(0.0, 0.0)),
        AutocovarianceCase(lag_depth=2, samples=(1.0, 2.0, 3.0), expected=(0.0, 1.0)),
    ]


def iter_reference_autocovariance(
    samples: Sequence[Sequence[float]], lag_depth: int
) -> Iterator[List[float]]:
    """Replay the recurrences with plain Python lists, yielding after every sample."""

    dim = len(samples[0])
    alpha = [0.0] * lag_depth
    beta = [[0.0] * dim for _ in range(lag_depth)]
    window: List[Sequence[float]] = []
    mean = [0.0] * dim
    gamma = [0.0] * lag_depth
    for n, x in enumerate(samples, start=1):
        if n == 1:
            mean = list(x)
            window = [x]
            yield list(gamma)
            continue
        for lag, partner in enumerate(window):
            dot = sum(a * b for a, b in zip(x, partner))
            alpha[lag] += (dot - alpha[lag]) / n
            for j in range(dim):
                beta[lag][j] += ((x[j] + partner[j]) - beta[lag][j]) / n
        window = [x] + window[: lag_depth - 1]
        mean = [m + (xi - m) / n for m, xi in zip(mean, x)]
        if n > lag_depth:
            mean_sq = sum(m * m for m in mean)
            gamma = [
                alpha[lag]
                - sum(m * b for m, b in zip(mean, beta[lag]))
                + (n - 1) / n * mean_sq
                for lag in range(lag_depth)
            ]
        yield list(gamma)


def reference_autocovariance(samples: Sequence[Sequence[float]], lag_depth: int) -> List[float]:
    gamma = [0.0] * lag_depth
    for gamma in iter_reference_autocovariance(samples, lag_depth):
        pass
    return gamma


__all__ = [
    "AutocovarianceCase",
    "HistogramScenario",
    "autocovariance_cases",
    "histogram_scenarios",
    "iter_reference_autocovariance",
    "reference_autocovariance",
]
