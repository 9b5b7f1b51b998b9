"""SVG loudness "waveform" of a track.

This does not draw the audio wave itself. It plots K-weighted power smoothed
over half a second and sampled every 100 ms, which gives a visual clue of the
interesting points in a track.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

SMOOTHING_WINDOWS = 5
_HALF_HEIGHT = 5.0
_X_STEP = 0.1


def smoothed_powers(windows: Sequence[float], span: int = SMOOTHING_WINDOWS) -> np.ndarray:
    """Moving mean of ``span`` consecutive 100 ms window powers."""

    powers = np.asarray(windows, dtype=np.float64)
    if powers.size < span:
        return np.empty(0, dtype=np.float64)
    return np.convolve(powers, np.full(span, 1.0 / span), mode="valid")


def render_waveform_svg(channel_windows: Sequence[Sequence[float]]) -> str:
    """Render the first channel above and the last channel below the centre line."""

    if not channel_windows:
        raise ValueError("At least one channel is required to render a waveform.")

    upper = smoothed_powers(channel_windows[0])
    lower = smoothed_powers(channel_windows[-1])
    peak = max(float(np.max(upper, initial=0.0)), float(np.max(lower, initial=0.0)))
    scale = 1.0 / peak if peak > 0.0 else 0.0

    points = [f"M 0 {_HALF_HEIGHT:.1f}"]
    for index, power in enumerate(upper):
        y = _HALF_HEIGHT - _HALF_HEIGHT * np.sqrt(power * scale + 1e-10)
        points.append(f"L {index * _X_STEP:.1f} {y:.1f}")
    for index in range(lower.size - 1, -1, -1):
        y = _HALF_HEIGHT + _HALF_HEIGHT * np.sqrt(lower[index] * scale + 1e-10)
        points.append(f"L {index * _X_STEP:.1f} {y:.1f}")

    width = upper.size * _X_STEP
    height = 2 * _HALF_HEIGHT
    return (
        f'<svg width="{width:.1f}" height="{height:.0f}" xmlns="http://www.w3.org/2000/svg">\n'
        f'<path d="{" ".join(points)} Z" fill="black"/>\n'
        "</svg>\n"
    )
