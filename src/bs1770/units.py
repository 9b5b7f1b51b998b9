"""Conversion between mean-square power and loudness in LKFS."""

from __future__ import annotations

import math

# Calibrates for the gain of the K-weighting filter at 1 kHz.
LKFS_OFFSET = -0.691


def to_lkfs(power: float) -> float:
    """Return the loudness of a mean-square ``power`` in LKFS.

    Zero power is digital silence and maps to ``-inf``.
    """

    power = float(power)
    if math.isnan(power) or power < 0.0:
        raise ValueError(f"Power must be a non-negative number, got {power!r}.")
    if power == 0.0:
        return -math.inf
    return 10.0 * math.log10(power) + LKFS_OFFSET


def to_power(lkfs: float) -> float:
    """Inverse of :func:`to_lkfs`."""

    lkfs = float(lkfs)
    if math.isnan(lkfs):
        raise ValueError("Loudness must not be NaN.")
    if lkfs == -math.inf:
        return 0.0
    return 10.0 ** ((lkfs - LKFS_OFFSET) / 10.0)
