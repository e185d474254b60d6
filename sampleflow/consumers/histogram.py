# SPDX-License-Identifier: MIT
"""Histogram of a scalar sample stream.

The value range ``[min_value, max_value]`` is split into ``n_bins`` bins,
either of equal width (linear) or of equal width in log-space
(logarithmic).  Samples outside the range are dropped without being
counted; they are not an error.  Each bin is half-open except the last one,
which also receives samples equal to ``max_value``.

If you need histograms of vector-valued samples, project each component
onto its own scalar stream and give each one its own :class:`Histogram`.
"""

from __future__ import annotations

import io
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import IO, Any, List, Tuple, Union

from ..consumer import Consumer
from ..types import AuxiliaryData, SampleIndex

logger = logging.getLogger(__name__)

__all__ = [
    "Histogram",
    "HistogramRange",
    "SubdivisionScheme",
]

# (left edge, right edge, number of samples)
HistogramBin = Tuple[float, float, SampleIndex]


class SubdivisionScheme(str, Enum):
    """How the value range is split into bins."""

    LINEAR = "linear"
    LOGARITHMIC = "logarithmic"


@dataclass(frozen=True)
class HistogramRange:
    """Immutable binning configuration.

    All validation happens here, once, so that :meth:`Histogram.consume`
    never has to check anything beyond the range bounds.
    """

    min_value: float
    max_value: float
    n_bins: int
    scheme: SubdivisionScheme = SubdivisionScheme.LINEAR

    def __post_init__(self) -> None:
        object.__setattr__(self, "scheme", SubdivisionScheme(self.scheme))
        object.__setattr__(self, "min_value", float(self.min_value))
        object.__setattr__(self, "max_value", float(self.max_value))
        if not math.isfinite(self.min_value) or not math.isfinite(self.max_value):
            raise ValueError("histogram bounds must be finite")
        if self.min_value >= self.max_value:
            raise ValueError("min_value must be smaller than max_value")
        if (
            isinstance(self.n_bins, bool)
            or not math.isfinite(self.n_bins)
            or int(self.n_bins) != self.n_bins
            or self.n_bins < 1
        ):
            raise ValueError("n_bins must be a positive integer")
        object.__setattr__(self, "n_bins", int(self.n_bins))
        if self.scheme is SubdivisionScheme.LOGARITHMIC and self.min_value <= 0.0:
            raise ValueError("logarithmic binning requires a positive min_value")

    def contains(self, value: float) -> bool:
        # NaN fails both comparisons and is treated as out of range.
        return self.min_value <= value <= self.max_value

    def bin_number(self, value: float) -> int:
        """Index of the bin ``value`` falls into, clamped to the valid range.

        Clamping absorbs floating-point round-off for values sitting exactly
        on ``max_value`` (or a hair below ``min_value`` in log-space).
        """

        if self.scheme is SubdivisionScheme.LINEAR:
            width = (self.max_value - self.min_value) / self.n_bins
            position = (value - self.min_value) / width
        else:
            log_min = math.log(self.min_value)
            width = (math.log(self.max_value) - log_min) / self.n_bins
            position = (math.log(value) - log_min) / width
        return max(0, min(self.n_bins - 1, math.floor(position)))

    def edge(self, index: int) -> float:
        """Left edge of bin ``index`` (or right edge of bin ``index - 1``)."""

        if self.scheme is SubdivisionScheme.LINEAR:
            return self.min_value + index * (self.max_value - self.min_value) / self.n_bins
        log_min = math.log(self.min_value)
        return math.exp(log_min + index * (math.log(self.max_value) - log_min) / self.n_bins)


class Histogram(Consumer[float, List[HistogramBin]]):
    """Thread-safe histogram with a fixed range and bin count.

    Parameters
    ----------
    min_value, max_value:
        Range covered by the bins.  Samples outside it are ignored.
    n_bins:
        Number of bins, at least one.
    scheme:
        :class:`SubdivisionScheme` or its string value.  Logarithmic binning
        requires ``min_value > 0``.

    Raises
    ------
    ValueError
        If the configuration cannot describe a valid set of bins.
    """

    def __init__(
        self,
        min_value: float,
        max_value: float,
        n_bins: int,
        scheme: Union[SubdivisionScheme, str] = SubdivisionScheme.LINEAR,
    ) -> None:
        super().__init__()
        self.range = HistogramRange(min_value, max_value, n_bins, SubdivisionScheme(scheme))
        self._bins: List[SampleIndex] = [0] * self.range.n_bins
        logger.debug(
            "Histogram created over [%g, %g] with %d %s bins",
            self.range.min_value,
            self.range.max_value,
            self.range.n_bins,
            self.range.scheme.value,
        )

    @property
    def min_value(self) -> float:
        return self.range.min_value

    @property
    def max_value(self) -> float:
        return self.range.max_value

    @property
    def n_bins(self) -> int:
        return self.range.n_bins

    @property
    def scheme(self) -> SubdivisionScheme:
        return self.range.scheme

    def bin_number(self, value: float) -> int:
        return self.range.bin_number(value)

    def consume(self, sample: float, aux_data: AuxiliaryData = None) -> None:
        if not self.range.contains(sample):
            return

        # The configuration is immutable, so only the increment needs the lock.
        index = self.range.bin_number(sample)
        with self._lock:
            self._bins[index] += 1
            self._n_samples += 1

    def get(self) -> List[HistogramBin]:
        edges = [self.range.edge(index) for index in range(self.range.n_bins + 1)]
        with self._lock:
            counts = list(self._bins)
        return [(edges[index], edges[index + 1], count) for index, count in enumerate(counts)]

    # ------------------------------------------------------------------
    # Export helpers
    # ------------------------------------------------------------------
    def write_gnuplot(self, stream: IO[Any]) -> None:
        """Write the histogram as rectangles for a line plot.

        Every bin becomes four ``x y`` rows (bottom-left, top-left,
        top-right, bottom-right) followed by a blank row, so a plain
        ``plot 'file' with lines`` draws the bars.  Binary streams receive
        the same text encoded as UTF-8.
        """

        rows: List[str] = []
        for left, right, count in self.get():
            rows.append(f"{left!r} 0\n")
            rows.append(f"{left!r} {count}\n")
            rows.append(f"{right!r} {count}\n")
            rows.append(f"{right!r} 0\n")
            rows.append("\n")
        payload = "".join(rows)
        if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
            stream.write(payload.encode("utf-8"))
        else:
            stream.write(payload)
        stream.flush()

    def export_gnuplot(self, path: str) -> None:
        """Persist :meth:`write_gnuplot` output to ``path``."""

        with open(path, "w", encoding="utf-8") as handle:
            self.write_gnuplot(handle)
