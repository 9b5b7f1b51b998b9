"""Errors raised when a loudness measurement cannot be set up."""

from __future__ import annotations


class LoudnessError(ValueError):
    """Base class for malformed measurement input."""


class InvalidSampleRate(LoudnessError):
    """Raised when a sample rate is not a positive, finite number of Hertz."""


class UnsupportedChannelLayout(LoudnessError):
    """Raised when a channel role has no BS.1770 weight, or a layout cannot be resolved."""
