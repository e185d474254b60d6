# SPDX-License-Identifier: MIT
"""Shared type aliases."""

from __future__ import annotations

from typing import Any, Mapping, Optional

# Counts samples seen so far; never negative.
SampleIndex = int

# Companion payload delivered next to every sample (weights, timestamps, ...).
# None of the bundled consumers look at it.
AuxiliaryData = Optional[Mapping[str, Any]]

__all__ = [
    "AuxiliaryData",
    "SampleIndex",
]
