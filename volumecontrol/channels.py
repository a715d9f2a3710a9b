"""Channel positions and their names for display and for the sound server."""

from __future__ import annotations

import enum
from collections.abc import Iterable


class ChannelPosition(enum.IntEnum):
    """Speaker channel positions known to the mixer."""

    UNKNOWN = 0
    MONO = 1
    FRONT_LEFT = 2
    FRONT_RIGHT = 3
    FRONT_CENTER = 4
    LFE = 5
    BACK_LEFT = 6
    BACK_RIGHT = 7
    BACK_CENTER = 8
    FRONT_LEFT_CENTER = 9
    FRONT_RIGHT_CENTER = 10
    SIDE_LEFT = 11
    SIDE_RIGHT = 12
    TOP_FRONT_LEFT = 13
    TOP_FRONT_RIGHT = 14
    TOP_FRONT_CENTER = 15
    TOP_CENTER = 16
    TOP_BACK_LEFT = 17
    TOP_BACK_RIGHT = 18
    TOP_BACK_CENTER = 19


_P = ChannelPosition

_PULSE_NAMES: dict[ChannelPosition, str] = {
    _P.MONO: "mono",
    _P.FRONT_LEFT: "front-left",
    _P.FRONT_RIGHT: "front-right",
    _P.FRONT_CENTER: "front-center",
    _P.LFE: "lfe",
    _P.BACK_LEFT: "rear-left",
    _P.BACK_RIGHT: "rear-right",
    _P.BACK_CENTER: "rear-center",
    _P.FRONT_LEFT_CENTER: "front-left-of-center",
    _P.FRONT_RIGHT_CENTER: "front-right-of-center",
    _P.SIDE_LEFT: "side-left",
    _P.SIDE_RIGHT: "side-right",
    _P.TOP_FRONT_LEFT: "top-front-left",
    _P.TOP_FRONT_RIGHT: "top-front-right",
    _P.TOP_FRONT_CENTER: "top-front-center",
    _P.TOP_CENTER: "top-center",
    _P.TOP_BACK_LEFT: "top-rear-left",
    _P.TOP_BACK_RIGHT: "top-rear-right",
    _P.TOP_BACK_CENTER: "top-rear-center",
}

_PRETTY_NAMES: dict[ChannelPosition, str] = {
    _P.UNKNOWN: "Unknown",
    _P.MONO: "Mono",
    _P.FRONT_LEFT: "Front Left",
    _P.FRONT_RIGHT: "Front Right",
    _P.FRONT_CENTER: "Front Center",
    _P.LFE: "LFE",
    _P.BACK_LEFT: "Rear Left",
    _P.BACK_RIGHT: "Rear Right",
    _P.BACK_CENTER: "Rear Center",
    _P.FRONT_LEFT_CENTER: "Front Left of Center",
    _P.FRONT_RIGHT_CENTER: "Front Right of Center",
    _P.SIDE_LEFT: "Side Left",
    _P.SIDE_RIGHT: "Side Right",
    _P.TOP_FRONT_LEFT: "Top Front Left",
    _P.TOP_FRONT_RIGHT: "Top Front Right",
    _P.TOP_FRONT_CENTER: "Top Front Center",
    _P.TOP_CENTER: "Top Center",
    _P.TOP_BACK_LEFT: "Top Rear Left",
    _P.TOP_BACK_RIGHT: "Top Rear Right",
    _P.TOP_BACK_CENTER: "Top Rear Center",
}


def _coerce(position: int) -> ChannelPosition:
    try:
        return ChannelPosition(position)
    except ValueError:
        raise ValueError(f"invalid channel position: {position!r}") from None


def position_to_pulse_string(position: int) -> str | None:
    """Return the sound server's channel name, or None for an unknown position."""
    return _PULSE_NAMES.get(_coerce(position))


def position_to_pretty_string(position: int) -> str:
    """Return a human readable name for a channel position."""
    return _PRETTY_NAMES[_coerce(position)]


_FRONT = {_P.FRONT_LEFT, _P.FRONT_RIGHT}
_QUAD = _FRONT | {_P.BACK_LEFT, _P.BACK_RIGHT}
_SURROUND_51 = _QUAD | {_P.FRONT_CENTER, _P.LFE}
_SURROUND_71 = _QUAD | {_P.FRONT_CENTER, _P.SIDE_LEFT, _P.SIDE_RIGHT, _P.LFE}


def channel_map_to_pretty_string(positions: Iterable[int]) -> str | None:
    """Name a channel layout such as "Stereo", or None if it has no common name."""
    channels = [_coerce(p) for p in positions]
    present = set(channels)
    count = len(channels)

    if count == 1:
        if _P.MONO in present:
            return "Mono"
    elif count == 2:
        if _FRONT <= present:
            return "Stereo"
    elif count == 4:
        if _QUAD <= present:
            return "Surround 4.0"
    elif count == 5:
        if _QUAD <= present:
            if _P.LFE in present:
                return "Surround 4.1"
            if _P.FRONT_CENTER in present:
                return "Surround 5.0"
    elif count == 6:
        if _SURROUND_51 <= present:
            return "Surround 5.1"
    elif count == 8:
        if _SURROUND_71 <= present:
            return "Surround 7.1"
    return None