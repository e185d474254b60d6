# SPDX-License-Identifier: MIT
"""Concrete consumers bundled with SampleFlow."""

from .histogram import Histogram, HistogramRange, SubdivisionScheme
from .mean_value import MeanValue
from .spurious_autocovariance import SpuriousAutocovariance

__all__ = [
    "Histogram",
    "HistogramRange",
    "MeanValue",
    "SpuriousAutocovariance",
    "SubdivisionScheme",
]
