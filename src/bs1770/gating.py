"""Two-stage gating of block powers into integrated loudness."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from itertools import chain
from typing import ClassVar, Union

import numpy as np

from .units import LKFS_OFFSET, to_lkfs

ABSOLUTE_GATE_LKFS = -70.0
RELATIVE_GATE_DB = -10.0


@dataclass(frozen=True, slots=True)
class Defined:
    """Gated mean power of the blocks that survived both gates."""

    power: float

    is_defined: ClassVar[bool] = True

    @property
    def lkfs(self) -> float:
        return to_lkfs(self.power)

    def lkfs_or(self, default: float) -> float:  # noqa: ARG002
        return self.lkfs


@dataclass(frozen=True, slots=True)
class Undefined:
    """No block survived the absolute gate, so there is no loudness value."""

    is_defined: ClassVar[bool] = False

    def lkfs_or(self, default: float) -> float:
        return default


UNDEFINED = Undefined()

GatedPower = Union[Defined, Undefined]


def _block_lkfs(powers: np.ndarray) -> np.ndarray:
    # Zero power is silence and becomes -inf, which every gate rejects.
    with np.errstate(divide="ignore"):
        return 10.0 * np.log10(powers) + LKFS_OFFSET


def gated_mean(block_powers: Iterable[float]) -> GatedPower:
    """Integrated (gated) mean power of ``block_powers``.

    Blocks quieter than -70 LKFS are dropped first. Of the remaining blocks,
    those more than 10 dB below the loudness of their mean power are dropped
    as well, and the mean power of what is left is returned.
    """

    powers = np.fromiter((float(power) for power in block_powers), dtype=np.float64)
    if np.any(powers < 0.0) or np.any(np.isnan(powers)):
        raise ValueError("Block powers must be non-negative numbers.")

    loudness = _block_lkfs(powers)
    above_absolute = loudness >= ABSOLUTE_GATE_LKFS
    if not np.any(above_absolute):
        return UNDEFINED

    ungated_mean = float(np.mean(powers[above_absolute]))
    relative_threshold = to_lkfs(ungated_mean) + RELATIVE_GATE_DB
    above_relative = above_absolute & (loudness >= relative_threshold)
    return Defined(float(np.mean(powers[above_relative])))


def album_gated_mean(track_block_powers: Iterable[Iterable[float]]) -> GatedPower:
    """Gated mean over the blocks of every track pooled together."""

    return gated_mean(chain.from_iterable(track_block_powers))
