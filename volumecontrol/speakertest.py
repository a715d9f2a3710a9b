"""Per-channel speaker test: one control per speaker that plays a test sound."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Protocol

from .channels import (
    ChannelPosition,
    position_to_pretty_string,
    position_to_pulse_string,
)

APPLICATION_ID = "org.ukui.VolumeControl"
APPLICATION_NAME = "Volume Control"
APPLICATION_VERSION = "1.12.1"
APPLICATION_ICON = "multimedia-volume-control"
DRIVER = "pulse"
FALLBACK_ICON = "audio-volume-medium"
FACE_ICON = "face-smile"

FALLBACK_EVENTS = ("audio-test-signal", "bell-window-system")


class _Player(Protocol):
    def play(self, props: dict[str, str], on_finish: Callable[[], None]) -> bool: ...

    def cancel(self) -> None: ...

    def change_device(self, name: str) -> None: ...


@dataclass(frozen=True)
class TablePosition:
    """Where a channel's control sits in the speaker grid."""

    position: ChannelPosition
    left: int
    top: int


_P = ChannelPosition

POSITIONS: tuple[TablePosition, ...] = (
    TablePosition(_P.FRONT_LEFT, 0, 0),
    TablePosition(_P.FRONT_LEFT_CENTER, 1, 0),
    TablePosition(_P.FRONT_CENTER, 2, 0),
    TablePosition(_P.MONO, 2, 0),
    TablePosition(_P.FRONT_RIGHT_CENTER, 3, 0),
    TablePosition(_P.FRONT_RIGHT, 4, 0),
    TablePosition(_P.SIDE_LEFT, 0, 1),
    TablePosition(_P.SIDE_RIGHT, 4, 1),
    TablePosition(_P.BACK_LEFT, 0, 2),
    TablePosition(_P.BACK_CENTER, 2, 2),
    TablePosition(_P.BACK_RIGHT, 4, 2),
    TablePosition(_P.LFE, 3, 2),
)

_SOUND_NAMES: dict[ChannelPosition, str] = {
    _P.FRONT_LEFT: "audio-channel-front-left",
    _P.FRONT_RIGHT: "audio-channel-front-right",
    _P.FRONT_CENTER: "audio-channel-front-center",
    _P.BACK_LEFT: "audio-channel-rear-left",
    _P.BACK_RIGHT: "audio-channel-rear-right",
    _P.BACK_CENTER: "audio-channel-rear-center",
    _P.LFE: "audio-channel-lfe",
    _P.SIDE_LEFT: "audio-channel-side-left",
    _P.SIDE_RIGHT: "audio-channel-side-right",
}

_ICON_NAMES: dict[ChannelPosition, str] = {
    _P.FRONT_LEFT: "audio-speaker-left",
    _P.FRONT_RIGHT: "audio-speaker-right",
    _P.FRONT_CENTER: "audio-speaker-center",
    _P.BACK_LEFT: "audio-speaker-left-back",
    _P.BACK_RIGHT: "audio-speaker-right-back",
    _P.BACK_CENTER: "audio-speaker-center-back",
    _P.LFE: "audio-subwoofer",
    _P.SIDE_LEFT: "audio-speaker-left-side",
    _P.SIDE_RIGHT: "audio-speaker-right-side",
}


def sound_name(position: int) -> str | None:
    """Return the event sound for a channel, or None if it has none."""
    return _SOUND_NAMES.get(ChannelPosition(position))


def icon_name(position: int, playing: bool) -> str | None:
    """Return the speaker icon for a channel, in its testing form while playing."""
    base = _ICON_NAMES.get(ChannelPosition(position))
    if base is None:
        return None
    return f"{base}-testing" if playing else base


@dataclass
class SpeakerControl:
    """The test button and image of one speaker channel."""

    position: ChannelPosition
    player: _Player | None = None
    left: int = 0
    top: int = 0
    playing: bool = False
    visible: bool = True
    _icon: str = field(init=False, default=FALLBACK_ICON)

    def __post_init__(self) -> None:
        self.position = ChannelPosition(self.position)
        self._icon = icon_name(self.position, False) or FALLBACK_ICON

    @property
    def label(self) -> str:
        """The channel's display name."""
        return position_to_pretty_string(self.position)

    @property
    def button_label(self) -> str:
        """The text of the test button."""
        return "Stop" if self.playing else "Test"

    @property
    def icon(self) -> str:
        """The icon currently shown for the speaker."""
        return self._icon

    def _update_button(self) -> None:
        self._icon = icon_name(self.position, self.playing) or FALLBACK_ICON

    def _properties(self) -> dict[str, str]:
        props = {
            "media.role": "test",
            "media.name": position_to_pretty_string(self.position),
        }
        channel = position_to_pulse_string(self.position)
        if channel is not None:
            props["canberra.force_channel"] = channel
        props["canberra.enable"] = "1"
        return props

    def _play(self, props: dict[str, str], event_id: str) -> bool:
        if self.player is None:
            return False
        props["event.id"] = event_id
        return bool(self.player.play(dict(props), self.finished))

    def toggle(self) -> bool:
        """Start the test sound, or stop it if it plays; return whether it now plays."""
        if self.player is not None:
            self.player.cancel()

        if self.playing:
            self.playing = False
        else:
            props = self._properties()
            playing = False
            name = sound_name(self.position)
            if name is not None:
                playing = self._play(props, name)
            for event_id in FALLBACK_EVENTS:
                if playing:
                    break
                playing = self._play(props, event_id)
            self.playing = playing

        self._update_button()
        return self.playing

    def finished(self) -> None:
        """Mark the test sound as done playing."""
        self.playing = False
        self._update_button()


class SpeakerTest:
    """A grid of speaker controls for the channels of one output stream."""

    def __init__(
        self,
        stream_name: str,
        channel_positions: Iterable[int],
        player: _Player | None = None,
    ) -> None:
        self.player = player
        self.driver = DRIVER
        self.properties = {
            "application.id": APPLICATION_ID,
            "application.name": APPLICATION_NAME,
            "application.version": APPLICATION_VERSION,
            "application.icon_name": APPLICATION_ICON,
        }
        self.controls = [
            SpeakerControl(entry.position, player, entry.left, entry.top)
            for entry in POSITIONS
        ]
        self.stream_name = ""
        self.set_stream(stream_name, channel_positions)

    def set_stream(self, stream_name: str, channel_positions: Iterable[int]) -> None:
        """Switch to a stream and show only the controls of its channels."""
        present = {ChannelPosition(p) for p in channel_positions}
        if self.player is not None:
            self.player.change_device(stream_name)
        for control in self.controls:
            control.visible = control.position in present
        self.stream_name = stream_name

    def visible_controls(self) -> list[SpeakerControl]:
        """The controls of the channels the stream has, in grid order."""
        return [control for control in self.controls if control.visible]