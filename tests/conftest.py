from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable

import pytest

_FIXTURES_DIR = Path(__file__).resolve().parent
if str(_FIXTURES_DIR) not in sys.path:
    sys.path.append(str(_FIXTURES_DIR))

from fixtures import (
    AutocovarianceCase,
    HistogramScenario,
    autocovariance_cases,
    histogram_scenarios,
)


@pytest.fixture(scope="session")
def hist_scenarios() -> Iterable[HistogramScenario]:
    """Hand-checked histogram scenarios."""

    return tuple(histogram_scenarios())


@pytest.fixture(scope="session")
def acov_cases() -> Iterable[AutocovarianceCase]:
    """Scalar streams whose autocovariance was worked out by hand."""

    return tuple(autocovariance_cases())
