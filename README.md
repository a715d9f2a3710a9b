# volumecontrol

The logic behind a desktop volume control, written in plain Python with no
third-party dependencies. It covers sound themes, alert sounds, speaker
tests, placement of the volume popup, and the tray icon's state.

## Modules

- **`volumecontrol.channels`** defines the `ChannelPosition` enumeration and
  three functions:
  - `position_to_pulse_string` gives the sound server's channel name, such as
    `"front-left"`. It returns `None` for `UNKNOWN`.
  - `position_to_pretty_string` gives a readable label such as
    `"Front Left"`.
  - `channel_map_to_pretty_string` names a layout such as `"Stereo"` or
    `"Surround 5.1"`. It returns `None` when the layout has no common name.

  Invalid positions raise `ValueError`.
- **`volumecontrol.themefiles`**: `CustomTheme` manages the custom sound
  theme in `<data dir>/sounds/__custom`. The data directory defaults to
  `default_user_data_dir()`, which is `$XDG_DATA_HOME` or
  `~/.local/share`. A `CustomTheme` can:
  - write the theme's `index.theme`, inheriting from a parent theme
    (`create`);
  - link sounds to a custom file (`add_custom_file`);
  - add or remove `.disabled` markers (`add_disabled_files`,
    `delete_disabled_files`);
  - remove `.ogg` overrides (`delete_old_files`);
  - check whether only the index is left (`is_empty`);
  - remove the whole directory (`delete`).
- **`volumecontrol.themes`** finds what is installed and how it is set:
  - `load_index_theme` reads a theme's `index.theme` into a `ThemeIndex`
    with its name and parent. It returns `None` for hidden or unreadable
    themes.
  - `find_themes` maps theme directory names to display names across
    several sound directories.
  - `parse_alert_file` and `load_alert_sounds` read XML sound-set files
    into `AlertSound` entries. The name chosen is the one in the best
    matching language.
  - `get_file_type` tells whether a sound in the custom theme is off, built
    in or a custom link (`SoundType`).
- **`volumecontrol.chooser`**: `SoundThemeChooser` is the model behind a
  sound theme and alert picker. It is built on any mutable settings mapping
  with the keys `theme-name`, `event-sounds` and `input-feedback-sounds`.
  It keeps these in step:
  - the theme list (`themes`, `active_theme`);
  - the alert list (`alerts`);
  - the custom theme on disk.

  Its operations are `select_theme`, `set_active_theme`, `update_alert`,
  `toggle_alert`, `set_input_feedback`, `on_key_changed` and
  `update_theme`. `preview(index)` builds the sound properties for an alert
  and passes them to the optional `player` callable.
- **`volumecontrol.speakertest`**: `SpeakerTest` holds one `SpeakerControl`
  per grid position (`POSITIONS`). Only the channels of the current stream
  are visible (`set_stream`, `visible_controls`).
  - `SpeakerControl.toggle()` starts or stops a test sound. If the channel's
    own sound is missing it falls back to `audio-test-signal`, then to
    `bell-window-system`.
  - `finished()` marks playback as done.
  - `sound_name` and `icon_name` give the event and icon names for a
    channel.

  The player is any object with `play(props, on_finish) -> bool`,
  `cancel()` and `change_device(name)`.
- **`volumecontrol.dock`**:
  - `dock_position` computes where the popup goes for a top or bottom
    panel (`PanelPosition`).
  - `Dock` holds the popup's visible and grabbed state. It reacts to
    `show`, `hide`, `key_release` (Escape closes it), `button_press` and
    `grab_notify`.
- **`volumecontrol.statusicon`**:
  - `StreamControl` is a volume control that notifies connected callbacks
    when its volume or mute changes.
  - `StreamStatusIcon` follows one control. It keeps the current icon out
    of four (`icon_index`), the tooltip markup (`tooltip_markup`), the
    volume bar's percentage and the bar orientation (`set_orientation`).
    It also toggles mute on a middle click (`middle_click`).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
import tempfile

from volumecontrol.channels import ChannelPosition, channel_map_to_pretty_string
from volumecontrol.themefiles import CustomTheme

print(channel_map_to_pretty_string(
    [ChannelPosition.FRONT_LEFT, ChannelPosition.FRONT_RIGHT]))  # Stereo

with tempfile.TemporaryDirectory() as data_dir:
    theme = CustomTheme(data_dir)
    theme.create("freedesktop")
    print(theme.is_empty())  # True: only index.theme so far
    theme.add_custom_file(["bell-terminal", "bell-window-system"], "/tmp/alert.ogg")
    print(theme.is_empty())  # False
```

## What it does not do

The package has no windows, tray icon, menus or command-line program, and
it does not connect to a sound server or mixer. It plays no sounds itself.
Settings storage, sound playback, the input grab and all drawing are left to
the objects and callables you pass in. The classes only keep the state these
would display or act on.