# SPDX-License-Identifier: MIT
"""Running mean of a sample stream.

The mean after ``k`` samples is updated with Welford's recurrence

.. math::

    \\bar x_1 = x_1, \\qquad
    \\bar x_k = \\bar x_{k-1} + \\frac{1}{k} (x_k - \\bar x_{k-1}),

which follows from expanding ``(1/k) * sum(x_j)`` and never keeps the
unbounded running sum around.  Each step has the same floating-point error
bound regardless of how long the stream already is.

Samples may be anything that supports subtraction, addition and division by
an ``int``: Python floats, ``torch.Tensor`` or NumPy arrays all work and are
averaged elementwise.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

import torch

from ..consumer import Consumer, _describe
from ..types import AuxiliaryData

logger = logging.getLogger(__name__)

__all__ = [
    "MeanValue",
]


def _private_copy(value: Any) -> Any:
    """Return a copy of ``value`` that the caller cannot mutate behind our back."""

    if torch.is_tensor(value):
        return value.detach().clone()
    return copy.deepcopy(value)


class MeanValue(Consumer[Any, Any]):
    """Thread-safe running mean.

    Parameters
    ----------
    default:
        Value reported by :meth:`get` before the first sample arrives.
    """

    def __init__(self, default: Any = 0.0) -> None:
        super().__init__()
        self.default = default
        self._current_mean: Any = None

    def consume(self, sample: Any, aux_data: AuxiliaryData = None) -> None:
        # Keep the running mean out of the caller's autograd graph.
        if torch.is_tensor(sample):
            sample = sample.detach()

        with self._lock:
            if self._n_samples == 0:
                self._n_samples = 1
                self._current_mean = _private_copy(sample)
                logger.debug("MeanValue initialised from first sample %s", _describe(sample))
                return

            self._n_samples += 1
            update = sample - self._current_mean
            self._current_mean = self._current_mean + update / self._n_samples

    def get(self) -> Any:
        with self._lock:
            if self._n_samples == 0:
                return _private_copy(self.default)
            return _private_copy(self._current_mean)
