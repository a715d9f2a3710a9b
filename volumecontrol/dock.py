"""Placement and grab handling of the volume popup shown under the tray icon."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

log = logging.getLogger(__name__)

ESCAPE_KEY = "Escape"


class PanelPosition(str, enum.Enum):
    """Edge of the screen the panel sits on."""

    TOP = "top"
    BOTTOM = "bottom"


class Orientation(enum.IntEnum):
    """Orientation of the volume bar inside the popup."""

    HORIZONTAL = 0
    VERTICAL = 1


@dataclass(frozen=True)
class Rect:
    """A rectangle in screen coordinates."""

    x: int
    y: int
    width: int
    height: int


def _half(value: int) -> int:
    # Integer halving that truncates toward zero.
    return int(value / 2)


def dock_position(
    icon_area: Rect,
    dock_width: int,
    dock_height: int,
    panel_position: PanelPosition | str,
    panel_size: int,
    monitor_height: int,
) -> tuple[int, int]:
    """Return where the popup goes: centred on the icon, next to the panel."""
    try:
        edge = PanelPosition(panel_position)
    except ValueError:
        raise ValueError(f"unsupported panel position: {panel_position!r}") from None

    x = icon_area.x + _half(icon_area.width) - _half(dock_width)
    if edge is PanelPosition.TOP:
        y = panel_size
    else:
        y = monitor_height - panel_size - dock_height
    return x, y


def _always_grab() -> bool:
    return True


@dataclass
class Dock:
    """The popup window holding the volume bar, with its input grab."""

    icon_area: Rect | None = None
    width: int = 0
    height: int = 0
    panel_position: PanelPosition | str = PanelPosition.BOTTOM
    panel_size: int = 0
    monitor_height: int = 0
    grab: Callable[[], bool] = field(default=_always_grab, repr=False)
    visible: bool = False
    grabbed: bool = False
    position: tuple[int, int] | None = None

    def show(self) -> bool:
        """Place the popup and show it with the input grabbed.

        Returns False when the icon's geometry is unknown and nothing is shown.
        """
        if self.icon_area is None:
            log.warning("Unable to determine geometry of status icon")
            return False

        self.position = dock_position(
            self.icon_area,
            self.width,
            self.height,
            self.panel_position,
            self.panel_size,
            self.monitor_height,
        )
        self.visible = True
        self.grabbed = True
        if not self.grab():
            self.grabbed = False
            self.visible = False
        return True

    def hide(self) -> None:
        """Release the grab and hide the popup."""
        self.grabbed = False
        self.visible = False

    def key_release(self, key: str) -> bool:
        """Handle a released key; Escape closes the popup. The event is always consumed."""
        if key == ESCAPE_KEY:
            self.hide()
        return True

    def button_press(self) -> bool:
        """A click while the popup has the grab closes it."""
        self.hide()
        return True

    def grab_notify(self, was_grabbed: bool, has_grab: bool, grab_inside: bool) -> bool:
        """Close the popup when another window took its grab; return whether it closed."""
        if was_grabbed:
            return False
        if not has_grab:
            return False
        if grab_inside:
            return False
        self.hide()
        return True