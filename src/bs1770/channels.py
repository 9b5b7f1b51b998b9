"""Channel roles and their BS.1770-4 weighting coefficients."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum
from types import MappingProxyType

from .errors import UnsupportedChannelLayout


class ChannelRole(str, Enum):
    """Loudspeaker position a channel is intended for."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    LFE = "lfe"
    LEFT_SURROUND = "left-surround"
    RIGHT_SURROUND = "right-surround"
    LEFT_BACK = "left-back"
    RIGHT_BACK = "right-back"
    BACK_CENTER = "back-center"


# Table 3 of BS.1770-4 (the 5.1 positions). The LFE channel is excluded from
# the measurement. Back roles are not weighted: the Table 4 weights depend on
# speaker azimuth, which a role name alone does not give, so 7.1 layouts are
# rejected instead of guessed.
CHANNEL_WEIGHTS = MappingProxyType(
    {
        ChannelRole.LEFT: 1.0,
        ChannelRole.RIGHT: 1.0,
        ChannelRole.CENTER: 1.0,
        ChannelRole.LFE: 0.0,
        ChannelRole.LEFT_SURROUND: 1.41,
        ChannelRole.RIGHT_SURROUND: 1.41,
    }
)

# Channel order used by WAV and FLAC for the layouts the weight table covers.
_DEFAULT_LAYOUTS: dict[int, tuple[ChannelRole, ...]] = {
    1: (ChannelRole.CENTER,),
    2: (ChannelRole.LEFT, ChannelRole.RIGHT),
    3: (ChannelRole.LEFT, ChannelRole.RIGHT, ChannelRole.CENTER),
    5: (
        ChannelRole.LEFT,
        ChannelRole.RIGHT,
        ChannelRole.CENTER,
        ChannelRole.LEFT_SURROUND,
        ChannelRole.RIGHT_SURROUND,
    ),
    6: (
        ChannelRole.LEFT,
        ChannelRole.RIGHT,
        ChannelRole.CENTER,
        ChannelRole.LFE,
        ChannelRole.LEFT_SURROUND,
        ChannelRole.RIGHT_SURROUND,
    ),
}

_ALIASES: dict[str, ChannelRole] = {
    "l": ChannelRole.LEFT,
    "fl": ChannelRole.LEFT,
    "r": ChannelRole.RIGHT,
    "fr": ChannelRole.RIGHT,
    "c": ChannelRole.CENTER,
    "fc": ChannelRole.CENTER,
    "m": ChannelRole.CENTER,
    "mono": ChannelRole.CENTER,
    "lfe": ChannelRole.LFE,
    "ls": ChannelRole.LEFT_SURROUND,
    "sl": ChannelRole.LEFT_SURROUND,
    "rs": ChannelRole.RIGHT_SURROUND,
    "sr": ChannelRole.RIGHT_SURROUND,
    "lb": ChannelRole.LEFT_BACK,
    "bl": ChannelRole.LEFT_BACK,
    "rb": ChannelRole.RIGHT_BACK,
    "br": ChannelRole.RIGHT_BACK,
    "bc": ChannelRole.BACK_CENTER,
}


def channel_weight(role: ChannelRole) -> float:
    """Return the weight of ``role`` or raise :class:`UnsupportedChannelLayout`."""

    try:
        return CHANNEL_WEIGHTS[role]
    except KeyError:
        raise UnsupportedChannelLayout(f"Channel role '{role.value}' has no BS.1770 weight.") from None


def default_layout(channel_count: int) -> tuple[ChannelRole, ...]:
    """Return the conventional layout for ``channel_count`` interleaved channels."""

    try:
        return _DEFAULT_LAYOUTS[channel_count]
    except KeyError:
        supported = ", ".join(str(count) for count in sorted(_DEFAULT_LAYOUTS))
        raise UnsupportedChannelLayout(
            f"No default channel layout for {channel_count} channels. Supported channel counts: {supported}."
        ) from None


def parse_role(label: str | ChannelRole) -> ChannelRole:
    if isinstance(label, ChannelRole):
        return label

    normalized = label.strip().lower().replace("_", "-")
    if normalized in _ALIASES:
        return _ALIASES[normalized]
    for role in ChannelRole:
        if role.value == normalized:
            return role
    raise UnsupportedChannelLayout(f"Unknown channel role: '{label}'.")


def parse_layout(labels: Iterable[str | ChannelRole]) -> tuple[ChannelRole, ...]:
    """Parse channel labels such as ``["L", "R"]`` or ``["left", "right"]``."""

    return tuple(parse_role(label) for label in labels)


def validate_layout(layout: Sequence[ChannelRole]) -> tuple[float, ...]:
    """Return per-channel weights for ``layout``, rejecting unweighted roles."""

    if not layout:
        raise UnsupportedChannelLayout("Channel layout must contain at least one channel.")
    return tuple(channel_weight(role) for role in layout)
