# SPDX-License-Identifier: MIT
"""Running estimate of the lag-``l`` autocovariance of a vector stream.

For lags ``l = 1, ..., k`` the consumer tracks

.. math::

    \\hat\\gamma(l) = \\frac{1}{n} \\sum_{t=1}^{n-l}
        (x_{t+l} - \\bar x_n)^T (x_t - \\bar x_n).

We call the result *spurious* autocovariance because it is not the
textbook estimator: the running pieces below are all averaged with the
global sample count ``n`` rather than the number of pairs at each lag, and
the correction term uses ``(n - 1) / n``.  Expanding the product gives

.. math::

    \\hat\\gamma(l) = \\alpha_n(l) - \\bar x_n^T \\beta_n(l)
        + \\frac{n-1}{n} \\bar x_n^T \\bar x_n

with :math:`\\alpha_n(l)` the running average of ``x_{t+l}^T x_t`` and
:math:`\\beta_n(l)` the running average of ``x_{t+l} + x_t``.  Both are
updated with the same Welford recurrence as the running mean, so the only
history needed is a window with the last ``k`` samples.  State is ``O(k d)``
and every update costs ``O(k d)`` for ``d``-dimensional samples.

The lag structure follows arrival order.  When several producers feed the
same instance concurrently, which samples end up ``l`` steps apart depends
on how their calls interleave; serialise submission upstream if that
matters.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import torch

from ..consumer import Consumer
from ..types import AuxiliaryData

logger = logging.getLogger(__name__)

__all__ = [
    "SpuriousAutocovariance",
]


class SpuriousAutocovariance(Consumer[Any, torch.Tensor]):
    """Thread-safe fixed-lag autocovariance estimate.

    Parameters
    ----------
    lag_depth:
        Number of lags ``k`` tracked simultaneously.  Must be at least one.
    dtype:
        Floating-point dtype used for all internal state.

    Samples are flattened to one dimension; their size is fixed by the first
    sample and a differently sized sample raises :class:`ValueError`.

    The estimate stays at zero until the window is full, i.e. for the first
    ``k`` samples.  Afterwards :meth:`get` returns the ``(k, 1)`` tensor
    whose row ``l - 1`` holds :math:`\\hat\\gamma(l)`.
    """

    def __init__(self, lag_depth: int, *, dtype: torch.dtype = torch.float64) -> None:
        if isinstance(lag_depth, bool) or int(lag_depth) != lag_depth or lag_depth < 1:
            raise ValueError("lag_depth must be a positive integer")
        if not dtype.is_floating_point:
            raise ValueError("dtype must be a floating-point dtype")
        super().__init__()
        self.lag_depth = int(lag_depth)
        self.dtype = dtype
        self._dimension: Optional[int] = None
        self._current_mean: Optional[torch.Tensor] = None
        self._alpha = torch.zeros(self.lag_depth, dtype=dtype)
        self._beta: Optional[torch.Tensor] = None
        # Row ``i`` holds the sample ``i + 1`` steps before the newest one.
        self._past_samples: Optional[torch.Tensor] = None
        self._autocovariance = torch.zeros((self.lag_depth, 1), dtype=dtype)
        logger.debug("SpuriousAutocovariance created with lag depth %d", self.lag_depth)

    def _initialise(self, sample: torch.Tensor) -> None:
        dimension = sample.numel()
        self._dimension = dimension
        self._alpha.zero_()
        self._beta = torch.zeros((self.lag_depth, dimension), dtype=self.dtype)
        self._past_samples = torch.zeros((self.lag_depth, dimension), dtype=self.dtype)
        self._past_samples[0] = sample
        self._autocovariance.zero_()
        self._current_mean = sample.clone()
        logger.debug(
            "SpuriousAutocovariance allocated %d x %d window from first sample",
            self.lag_depth,
            dimension,
        )

    def consume(self, sample: Any, aux_data: AuxiliaryData = None) -> None:
        x = torch.as_tensor(sample, dtype=self.dtype).detach().reshape(-1).clone()

        with self._lock:
            if self._n_samples == 0:
                self._n_samples = 1
                self._initialise(x)
                return

            if x.numel() != self._dimension:
                raise ValueError(
                    f"sample has {x.numel()} components, expected {self._dimension}"
                )
            assert self._beta is not None and self._past_samples is not None
            assert self._current_mean is not None

            # Lags whose partner sample is already in the window.
            lags = min(self._n_samples, self.lag_depth)
            self._n_samples += 1
            n = self._n_samples

            partners = self._past_samples[:lags]
            self._alpha[:lags] += (partners @ x - self._alpha[:lags]) / n
            self._beta[:lags] += ((partners + x) - self._beta[:lags]) / n

            self._past_samples[1:] = self._past_samples[:-1].clone()
            self._past_samples[0] = x

            self._current_mean += (x - self._current_mean) / n

            if n > self.lag_depth:
                mean = self._current_mean
                correction = ((n - 1) / n) * torch.dot(mean, mean)
                self._autocovariance[:, 0] = self._alpha - self._beta @ mean + correction

    def get(self) -> torch.Tensor:
        with self._lock:
            return self._autocovariance.clone()

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    @property
    def window_size(self) -> int:
        """Number of past samples currently retained (at most ``lag_depth``)."""

        with self._lock:
            return min(self._n_samples, self.lag_depth)

    @property
    def dimension(self) -> Optional[int]:
        """Sample size fixed by the first sample, ``None`` before it."""

        with self._lock:
            return self._dimension
