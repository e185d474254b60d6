# SPDX-License-Identifier: MIT
"""Base class for incremental statistic accumulators.

A consumer ingests samples one at a time through :meth:`Consumer.consume`
and reports the statistic it maintains through :meth:`Consumer.get`.  The
surrounding pipeline may call both from any number of threads, so every
consumer owns a single :class:`threading.Lock` that guards all of its
state.  Updates are short, computation-only critical sections; nothing ever
blocks on I/O while the lock is held.

``get`` observes the state produced by some prefix of the fully applied
``consume`` calls.  Which prefix that is depends on how the lock serialises
concurrent callers.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, TypeVar

from .types import AuxiliaryData, SampleIndex

InputType = TypeVar("InputType")
OutputType = TypeVar("OutputType")

__all__ = [
    "Consumer",
]


class Consumer(ABC, Generic[InputType, OutputType]):
    """Thread-safe sink for a stream of samples."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._n_samples: SampleIndex = 0

    # ------------------------------------------------------------------
    # Mutation helpers
    # ------------------------------------------------------------------
    @abstractmethod
    def consume(self, sample: InputType, aux_data: AuxiliaryData = None) -> None:
        """Fold a single sample into the statistic."""

    def extend(self, samples: Iterable[InputType], aux_data: AuxiliaryData = None) -> None:
        """Consume multiple samples in iteration order."""

        for sample in samples:
            self.consume(sample, aux_data)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @abstractmethod
    def get(self) -> OutputType:
        """Return a snapshot of the statistic over all samples seen so far."""

    @property
    def n_samples(self) -> SampleIndex:
        """Number of samples folded into the statistic."""

        with self._lock:
            return self._n_samples

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n_samples={self.n_samples})"


def _describe(value: Any) -> str:
    shape = getattr(value, "shape", None)
    if shape is not None:
        return f"{type(value).__name__}{tuple(shape)}"
    return type(value).__name__
