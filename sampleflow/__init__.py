# SPDX-License-Identifier: MIT
# Copyright (c) 2025 SampleFlow authors

__version__ = "0.1.0"
from . import consumers, types
from .consumer import Consumer
from .consumers import Histogram, HistogramRange, MeanValue, SpuriousAutocovariance, SubdivisionScheme
from .types import AuxiliaryData, SampleIndex

__all__ = [
    "AuxiliaryData",
    "Consumer",
    "Histogram",
    "HistogramRange",
    "MeanValue",
    "SampleIndex",
    "SpuriousAutocovariance",
    "SubdivisionScheme",
    "consumers",
    "types",
    "__version__",
]
