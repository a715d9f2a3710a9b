"""Tray icon state for one stream control: icon choice, tooltip and mute handling."""

from __future__ import annotations

import enum
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from .dock import Dock, Orientation

ORIENTATION_KEY = "channel-bar-orientation"
ICON_COUNT = 4

Listener = Callable[["StreamControl", str], None]


class ControlFlags(enum.IntFlag):
    """What a stream control can report and change."""

    NONE = 0
    MUTE_READABLE = 1 << 0
    MUTE_WRITABLE = 1 << 1
    VOLUME_READABLE = 1 << 2
    VOLUME_WRITABLE = 1 << 3
    CAN_BALANCE = 1 << 4
    CAN_FADE = 1 << 5
    MOVABLE = 1 << 6
    HAS_DECIBEL = 1 << 7
    HAS_MONITOR = 1 << 8
    STORED = 1 << 9


_DEFAULT_FLAGS = (
    ControlFlags.MUTE_READABLE
    | ControlFlags.MUTE_WRITABLE
    | ControlFlags.VOLUME_READABLE
    | ControlFlags.VOLUME_WRITABLE
)


@dataclass
class StreamControl:
    """A volume control of a stream that tells listeners when it changes."""

    label: str = ""
    volume: int = 0
    normal_volume: int = 65536
    mute: bool = False
    flags: ControlFlags = _DEFAULT_FLAGS
    decibel: float = -math.inf
    _listeners: list[Listener] = field(default_factory=list, init=False, repr=False)

    def connect(self, callback: Listener) -> None:
        """Call ``callback(control, property_name)`` whenever volume or mute changes."""
        self._listeners.append(callback)

    def disconnect(self, callback: Listener) -> None:
        """Stop calling ``callback``; unknown callbacks are ignored."""
        self._listeners = [cb for cb in self._listeners if cb != callback]

    def _notify(self, prop: str) -> None:
        for callback in list(self._listeners):
            callback(self, prop)

    def set_volume(self, volume: int) -> None:
        """Change the volume and notify listeners if it differs."""
        if volume < 0:
            raise ValueError(f"volume must not be negative: {volume!r}")
        if volume != self.volume:
            self.volume = volume
            self._notify("volume")

    def set_mute(self, mute: bool) -> None:
        """Change the mute state and notify listeners if it differs."""
        mute = bool(mute)
        if mute != self.mute:
            self.mute = mute
            self._notify("mute")


def icon_index(volume: int, normal: int, muted: bool) -> int:
    """Pick an icon: 0 is the muted icon, 1 to 3 are rising volume levels."""
    if volume <= 0 or muted:
        return 0
    if normal <= 0:
        raise ValueError(f"normal volume must be positive: {normal!r}")
    return max(1, min(3, 3 * volume // normal + 1))


def _percent(volume: int, normal: int) -> int:
    if normal <= 0:
        return 0
    return int(math.floor(100.0 * volume / normal + 0.5))


def tooltip_markup(
    display_name: str | None,
    description: str | None,
    volume_percent: int,
    muted: bool,
    flags: ControlFlags,
    decibel: float,
) -> str:
    """Build the tooltip markup shown over the tray icon."""
    name = display_name or ""
    desc = description or ""
    flags = ControlFlags(flags)
    if muted:
        return f"<b>{name}: Muted at {volume_percent}%</b>\n<small>{desc}</small>"
    if flags & ControlFlags.VOLUME_READABLE:
        if flags & ControlFlags.HAS_DECIBEL:
            if decibel > -math.inf:
                return (
                    f"<b>{name}: {volume_percent}%</b>\n"
                    f"<small>{decibel:0.2f} dB\n{desc}</small>"
                )
            return (
                f"<b>{name}: {volume_percent}%</b>\n"
                f"<small>-&#8734; dB\n{desc}</small>"
            )
        return f"<b>{name}: {volume_percent}%</b>\n<small>{desc}</small>"
    return f"<b>{name}</b>\n<small>{desc}</small>"


class StreamStatusIcon:
    """The tray icon of a stream: keeps its icon, tooltip and volume bar in step."""

    def __init__(
        self,
        control: StreamControl | None,
        icon_names: Sequence[str],
    ) -> None:
        self.icon_names: list[str] = []
        self.display_name: str | None = None
        self.control: StreamControl | None = None
        self.current_icon = 0
        self.icon: str | None = None
        self.bar_image: str | None = None
        self.bar_control: StreamControl | None = None
        self.bar_percentage: int | None = None
        self.has_tooltip = False
        self.tooltip: str | None = None
        self.orientation = Orientation.VERTICAL
        self.settings: dict[str, Orientation] = {ORIENTATION_KEY: self.orientation}
        self.dock = Dock()
        self.set_icon_names(icon_names)
        self.set_control(control)

    def set_icon_names(self, names: Sequence[str]) -> None:
        """Set the four icons: muted, then low, medium and high volume."""
        if not names or not names[0]:
            raise ValueError("icon names must not be empty")
        if len(names) != ICON_COUNT:
            raise ValueError(f"expected {ICON_COUNT} icon names, got {len(names)}")
        self.icon_names = list(names)
        self.icon = self.icon_names[0]
        self.bar_image = self.icon_names[0]
        self.update()

    def set_display_name(self, name: str | None) -> None:
        """Set the stream name shown in the tooltip."""
        self.display_name = name
        self.update()

    def _on_control_notify(self, control: StreamControl, prop: str) -> None:
        if prop in ("volume", "mute"):
            self.update()

    def set_control(self, control: StreamControl | None) -> None:
        """Follow another stream control, or none."""
        if self.control is control:
            return
        if self.control is not None:
            self.control.disconnect(self._on_control_notify)
        self.control = control
        if control is not None:
            control.connect(self._on_control_notify)
            self.update()
        self.bar_control = control

    def update(self) -> None:
        """Recompute the icon and tooltip from the control's state."""
        control = self.control
        if control is None:
            self.has_tooltip = False
            return
        self.has_tooltip = True

        flags = ControlFlags(control.flags)
        muted = False
        volume = 0
        normal = 0
        n = 0
        decibel = 0.0
        if flags & ControlFlags.MUTE_READABLE:
            muted = control.mute
        if flags & ControlFlags.VOLUME_READABLE:
            volume = control.volume
            normal = control.normal_volume
            n = icon_index(volume, normal, muted)
        if flags & ControlFlags.HAS_DECIBEL:
            decibel = control.decibel

        if self.current_icon != n:
            self.icon = self.icon_names[n]
            self.bar_image = self.icon_names[n]
            self.current_icon = n

        percent = _percent(volume, normal)
        self.tooltip = tooltip_markup(
            self.display_name, control.label, percent, muted, flags, decibel
        )
        self.bar_percentage = percent

    def middle_click(self) -> bool:
        """Toggle mute as a middle click does; False when there is no control."""
        if self.control is None:
            return False
        self.control.set_mute(not self.control.mute)
        return True

    def set_mute(self, muted: bool) -> None:
        """Set the mute state from the menu's check item."""
        if self.control is not None:
            self.control.set_mute(muted)

    def set_orientation(self, horizontal: bool) -> None:
        """Lay the volume bar out horizontally or vertically and remember it."""
        self.orientation = Orientation.HORIZONTAL if horizontal else Orientation.VERTICAL
        self.settings[ORIENTATION_KEY] = self.orientation