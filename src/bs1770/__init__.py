"""Public package exports for bs1770 with lazy imports."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "AlbumLoudness",
    "ChannelRole",
    "Defined",
    "GatedPower",
    "InvalidSampleRate",
    "KWeightingFilter",
    "LoudnessError",
    "PowerIntegrator",
    "TrackLoudness",
    "UNDEFINED",
    "Undefined",
    "UnsupportedChannelLayout",
    "album_gated_mean",
    "gated_mean",
    "iter_block_powers",
    "measure_album",
    "measure_track",
    "to_lkfs",
    "to_power",
]

_EXPORT_MODULES: dict[str, str] = {
    "AlbumLoudness": "bs1770.meter",
    "ChannelRole": "bs1770.channels",
    "Defined": "bs1770.gating",
    "GatedPower": "bs1770.gating",
    "InvalidSampleRate": "bs1770.errors",
    "KWeightingFilter": "bs1770.filters",
    "LoudnessError": "bs1770.errors",
    "PowerIntegrator": "bs1770.integrator",
    "TrackLoudness": "bs1770.meter",
    "UNDEFINED": "bs1770.gating",
    "Undefined": "bs1770.gating",
    "UnsupportedChannelLayout": "bs1770.errors",
    "album_gated_mean": "bs1770.gating",
    "gated_mean": "bs1770.gating",
    "iter_block_powers": "bs1770.integrator",
    "measure_album": "bs1770.meter",
    "measure_track": "bs1770.meter",
    "to_lkfs": "bs1770.units",
    "to_power": "bs1770.units",
}


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MODULES:
        raise AttributeError(f"module 'bs1770' has no attribute {name!r}")

    module = import_module(_EXPORT_MODULES[name])
    value = getattr(module, name)
    globals()[name] = value
    return value
