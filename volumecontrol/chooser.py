"""Choice of the sound theme and of the alert sound played for it."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, MutableMapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .themefiles import INDEX_FILE, CustomTheme, default_user_data_dir
from .themes import (
    AlertSound,
    SoundType,
    find_themes,
    get_file_type,
    load_alert_sounds,
    load_index_theme,
)

log = logging.getLogger(__name__)

EVENT_SOUNDS_KEY = "event-sounds"
INPUT_SOUNDS_KEY = "input-feedback-sounds"
SOUND_THEME_KEY = "theme-name"

DEFAULT_ALERT_ID = "__default"
CUSTOM_THEME_NAME = "__custom"
NO_SOUNDS_THEME_NAME = "__no_sounds"
FALLBACK_THEME = "freedesktop"

ALERT_SOUNDS = ("bell-terminal", "bell-window-system")

APPLICATION_ID = "org.ukui.VolumeControl"

SETTING_DEFAULTS: dict[str, Any] = {
    EVENT_SOUNDS_KEY: True,
    INPUT_SOUNDS_KEY: False,
    SOUND_THEME_KEY: FALLBACK_THEME,
}

Player = Callable[[dict[str, str]], Any]


@dataclass
class ThemeEntry:
    """One row of the theme list."""

    display: str
    identifier: str
    parent: str | None = None


def _default_theme_dirs() -> list[Path]:
    system = os.environ.get("XDG_DATA_DIRS") or "/usr/local/share:/usr/share"
    dirs = [Path(d) / "sounds" for d in system.split(":") if d]
    dirs.append(default_user_data_dir() / "sounds")
    return dirs


class SoundThemeChooser:
    """Keeps the theme list, the alert list and the sound settings in step."""

    def __init__(
        self,
        settings: MutableMapping[str, Any],
        custom_theme: CustomTheme | None = None,
        theme_dirs: Sequence[str | os.PathLike[str]] | None = None,
        sound_set_dir: str | os.PathLike[str] | None = None,
        languages: Sequence[str] | None = None,
        player: Player | None = None,
    ) -> None:
        self.settings = settings
        self.custom_theme = custom_theme if custom_theme is not None else CustomTheme()
        self.theme_dirs = list(theme_dirs) if theme_dirs is not None else _default_theme_dirs()
        self.player = player
        self.sensitive = True
        self.selection_sensitive = True
        self.feedback_sensitive = True
        self.input_feedback = bool(self._get(INPUT_SOUNDS_KEY))
        self.themes: list[ThemeEntry] = []
        self.active: int | None = None
        self._pending: list[str] = []
        self._dispatching = False

        self.alerts: list[AlertSound] = [
            AlertSound(DEFAULT_ALERT_ID, "Default", "From theme", True)
        ]
        if sound_set_dir is not None:
            self.alerts.extend(load_alert_sounds(sound_set_dir, languages))

        self._setup_theme_selector()
        self.update_theme()

    # settings -----------------------------------------------------------

    def _get(self, key: str) -> Any:
        return self.settings.get(key, SETTING_DEFAULTS[key])

    def _write(self, key: str, value: Any) -> None:
        if self._get(key) != value or key not in self.settings:
            changed = self._get(key) != value
            self.settings[key] = value
            if changed:
                self._pending.append(key)

    def _dispatch(self) -> None:
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._pending:
                self.on_key_changed(self._pending.pop(0))
        finally:
            self._dispatching = False

    # theme list ---------------------------------------------------------

    @property
    def active_theme(self) -> ThemeEntry | None:
        """The selected theme row, if any."""
        return self.themes[self.active] if self.active is not None else None

    def _setup_theme_selector(self) -> None:
        found = find_themes(self.theme_dirs)
        if not found:
            self.sensitive = False
            log.warning("Bad setup, install the freedesktop sound theme")
            return
        self.themes.append(ThemeEntry("No sounds", NO_SOUNDS_THEME_NAME, None))
        for key, value in found.items():
            parent = None
            if key == CUSTOM_THEME_NAME:
                index = load_index_theme(self.custom_theme.path(INDEX_FILE))
                parent = index.parent if index is not None else None
            self.themes.append(ThemeEntry(value, key, parent))

    def _find(self, identifier: str) -> int | None:
        return next(
            (i for i, entry in enumerate(self.themes) if entry.identifier == identifier),
            None,
        )

    def _set_active_index(self, index: int) -> None:
        if index == self.active:
            return
        self.active = index
        self._on_theme_changed()

    def _on_theme_changed(self) -> None:
        entry = self.active_theme
        if entry is None:
            return
        # The theme name goes first: its change notification reloads the chooser.
        self._write(SOUND_THEME_KEY, entry.identifier)
        self._write(EVENT_SOUNDS_KEY, entry.identifier != NO_SOUNDS_THEME_NAME)

    def _set_active_theme(self, name: str | None) -> None:
        if not name:
            name = FALLBACK_THEME
        if not self.themes:
            return
        index = self._find(name)
        if index is not None:
            self._set_active_index(index)
        elif name != FALLBACK_THEME:
            log.debug("not found, falling back to fdo")
            self._set_active_theme(FALLBACK_THEME)

    def set_active_theme(self, name: str | None) -> None:
        """Show ``name`` as the active theme, falling back to the freedesktop one."""
        self._set_active_theme(name)
        self._dispatch()

    def select_theme(self, identifier: str) -> None:
        """Pick a theme from the list as the user would."""
        index = self._find(identifier)
        if index is None:
            raise KeyError(identifier)
        self._set_active_index(index)
        self._dispatch()

    # alerts -------------------------------------------------------------

    def _save_alert_sounds(self, alert_id: str) -> None:
        self.custom_theme.delete_old_files(ALERT_SOUNDS)
        self.custom_theme.delete_disabled_files(ALERT_SOUNDS)
        if alert_id != DEFAULT_ALERT_ID:
            self.custom_theme.add_custom_file(ALERT_SOUNDS, alert_id)
        path = self.custom_theme.path()
        try:
            os.utime(path, None)
        except OSError as exc:
            log.warning("Failed to update mtime for directory '%s': %s", path, exc.strerror)

    def _update_alert_model(self, alert_id: str) -> None:
        for alert in self.alerts:
            alert.active = alert.identifier == alert_id

    def _update_alert(self, alert_id: str) -> None:
        entry = self.active_theme
        if entry is None:
            return
        theme = entry.identifier
        parent = entry.identifier
        is_custom = theme == CUSTOM_THEME_NAME
        is_default = alert_id == DEFAULT_ALERT_ID

        add_custom = remove_custom = False
        if not is_custom and is_default:
            remove_custom = True
        elif not is_custom:
            self.custom_theme.create(parent)
            self._save_alert_sounds(alert_id)
            add_custom = True
        elif is_default:
            self._save_alert_sounds(alert_id)
            if self.custom_theme.is_empty():
                remove_custom = True
        else:
            self._save_alert_sounds(alert_id)

        if add_custom:
            self.themes.append(ThemeEntry("Custom", CUSTOM_THEME_NAME, theme))
            self._set_active_theme(CUSTOM_THEME_NAME)
        elif remove_custom:
            for index, row in enumerate(self.themes):
                if row.parent is not None and row.parent != CUSTOM_THEME_NAME:
                    del self.themes[index]
                    if self.active is not None:
                        if index == self.active:
                            self.active = None
                        elif index < self.active:
                            self.active -= 1
                    break
            self.custom_theme.delete()
            self._set_active_theme(parent)

        self._update_alert_model(alert_id)

    def update_alert(self, alert_id: str) -> None:
        """Make ``alert_id`` the alert sound, creating or removing the custom theme."""
        self._update_alert(alert_id)
        self._dispatch()

    def toggle_alert(self, index: int) -> None:
        """Toggle the radio button of an alert row; only switching it on has effect."""
        alert = self.alerts[index]
        if not alert.active:
            self.update_alert(alert.identifier)

    def preview(self, index: int) -> dict[str, str] | None:
        """Play the alert of a row; return the sound properties used, or None."""
        if not 0 <= index < len(self.alerts):
            return None
        alert_id = self.alerts[index].identifier
        parent_theme = None
        entry = self.active_theme
        if entry is not None and entry.identifier == CUSTOM_THEME_NAME:
            parent_theme = entry.parent

        props: dict[str, str] = {"application.name": "Sound Preferences"}
        if alert_id == DEFAULT_ALERT_ID:
            props["event.id"] = "bell-window-system"
            if parent_theme is not None:
                props["canberra.xdg-theme.name"] = parent_theme
        else:
            props["media.filename"] = alert_id
        props["event.description"] = "Testing event sound"
        props["canberra.cache-control"] = "never"
        props["application.id"] = APPLICATION_ID
        props["canberra.enable"] = "1"

        if self.player is not None:
            self.player(props)
        return props

    def _update_alerts_from_theme_name(self, name: str) -> None:
        if name != CUSTOM_THEME_NAME:
            self._update_alert(DEFAULT_ALERT_ID)
            return
        sound_type, link = get_file_type(self.custom_theme, "bell-terminal")
        log.debug("Found link: %s", link)
        if sound_type == SoundType.CUSTOM and link is not None:
            self._update_alert(link)

    # settings reactions -------------------------------------------------

    def set_input_feedback(self, enabled: bool) -> None:
        """Turn window and button sounds on or off."""
        self.input_feedback = bool(enabled)
        self._write(INPUT_SOUNDS_KEY, bool(enabled))
        self._dispatch()

    def on_key_changed(self, key: str) -> None:
        """React to a change of one of the sound settings."""
        if key in (EVENT_SOUNDS_KEY, SOUND_THEME_KEY, INPUT_SOUNDS_KEY):
            self.update_theme()

    def update_theme(self) -> None:
        """Reload the chooser's state from the settings."""
        self.input_feedback = bool(self._get(INPUT_SOUNDS_KEY))
        events_enabled = bool(self._get(EVENT_SOUNDS_KEY))
        theme_name = self._get(SOUND_THEME_KEY) if events_enabled else NO_SOUNDS_THEME_NAME

        self.selection_sensitive = events_enabled
        self.feedback_sensitive = events_enabled

        self._set_active_theme(theme_name)
        self._update_alerts_from_theme_name(theme_name)
        self._dispatch()