import os

import pytest

from volumecontrol.chooser import SoundThemeChooser, ThemeEntry
from volumecontrol.themefiles import CustomTheme

BARK = "/usr/share/sounds/bark.ogg"


def _theme(root, name, display, extra=""):
    d = root / name
    d.mkdir(parents=True)
    (d / "index.theme").write_text(f"[Sound Theme]\nName={display}\n{extra}")


@pytest.fixture
def env(tmp_path):
    system = tmp_path / "system" / "sounds"
    _theme(system, "freedesktop", "Default")
    _theme(system, "ubuntu", "Ubuntu")
    data = tmp_path / "data"
    (data / "sounds").mkdir(parents=True)
    sets = tmp_path / "sets"
    sets.mkdir()
    (sets / "bark.xml").write_text(
        f"<sounds><sound><name>Bark</name><filename>{BARK}</filename></sound></sounds>"
    )
    return {
        "dirs": [system, data / "sounds"],
        "custom": CustomTheme(data),
        "sets": sets,
    }


def make(env, settings=None, player=None):
    if settings is None:
        settings = {"event-sounds": True, "theme-name": "freedesktop",
                    "input-feedback-sounds": False}
    return SoundThemeChooser(settings, env["custom"], env["dirs"], env["sets"],
                             ["C"], player)


def ids(chooser):
    return [t.identifier for t in chooser.themes]


def test_initial_list_and_active(env):
    c = make(env)
    assert c.themes[0] == ThemeEntry("No sounds", "__no_sounds", None)
    assert set(ids(c)) == {"__no_sounds", "freedesktop", "ubuntu"}
    assert c.active_theme.identifier == "freedesktop"
    assert [a.identifier for a in c.alerts] == ["__default", BARK]
    assert c.alerts[0].active and not c.alerts[1].active


def test_empty_name_falls_back_to_freedesktop(env):
    c = make(env)
    c.select_theme("ubuntu")
    c.set_active_theme("")
    assert c.active_theme.identifier == "freedesktop"


def test_unknown_name_falls_back(env):
    settings = {"event-sounds": True, "theme-name": "nosuch"}
    c = make(env, settings)
    assert c.active_theme.identifier == "freedesktop"
    assert settings["theme-name"] == "freedesktop"


def test_no_themes_makes_chooser_insensitive(tmp_path):
    c = SoundThemeChooser({}, CustomTheme(tmp_path), [tmp_path / "none"], None, ["C"])
    assert c.sensitive is False
    assert c.themes == []
    assert c.active is None


def test_select_no_sounds_disables_events(env):
    settings = {"event-sounds": True, "theme-name": "freedesktop"}
    c = make(env, settings)
    c.select_theme("__no_sounds")
    assert settings["event-sounds"] is False
    assert settings["theme-name"] == "__no_sounds"
    assert c.selection_sensitive is False
    assert c.feedback_sensitive is False


def test_select_unknown_raises(env):
    c = make(env)
    with pytest.raises(KeyError):
        c.select_theme("missing")


def test_events_disabled_shows_no_sounds(env):
    c = make(env, {"event-sounds": False, "theme-name": "ubuntu"})
    assert c.active_theme.identifier == "__no_sounds"


def test_select_named_theme_enables_events(env):
    settings = {"event-sounds": False, "theme-name": "ubuntu"}
    c = make(env, settings)
    c.select_theme("ubuntu")
    assert settings["event-sounds"] is True
    assert settings["theme-name"] == "ubuntu"
    assert c.active_theme.identifier == "ubuntu"


def test_choosing_builtin_alert_creates_custom_theme(env):
    settings = {"event-sounds": True, "theme-name": "freedesktop"}
    c = make(env, settings)
    c.update_alert(BARK)
    custom = env["custom"]
    assert custom.path("index.theme").is_file()
    assert os.readlink(custom.path("bell-terminal.ogg")) == BARK
    assert os.readlink(custom.path("bell-window-system.ogg")) == BARK
    assert c.themes[-1] == ThemeEntry("Custom", "__custom", "freedesktop")
    assert c.active_theme.identifier == "__custom"
    assert settings["theme-name"] == "__custom"
    assert [a.active for a in c.alerts] == [False, True]


def test_default_alert_removes_custom_theme(env):
    c = make(env)
    c.update_alert(BARK)
    c.update_alert("__default")
    assert "__custom" not in ids(c)
    assert not env["custom"].path().exists()
    assert c.active_theme.identifier == "freedesktop"
    assert [a.active for a in c.alerts] == [True, False]


def test_toggle_alert(env):
    c = make(env)
    c.toggle_alert(0)
    assert "__custom" not in ids(c)
    c.toggle_alert(1)
    assert c.alerts[1].active
    assert c.active_theme.identifier == "__custom"
    with pytest.raises(IndexError):
        c.toggle_alert(5)


def test_preview_default_on_named_theme(env):
    played = []
    c = make(env, player=played.append)
    props = c.preview(0)
    assert props["event.id"] == "bell-window-system"
    assert "canberra.xdg-theme.name" not in props
    assert props["application.id"] == "org.ukui.VolumeControl"
    assert played == [props]


def test_preview_builtin_uses_filename(env):
    c = make(env)
    props = c.preview(1)
    assert props["media.filename"] == BARK
    assert "event.id" not in props


def test_preview_default_on_custom_uses_parent(env):
    c = make(env)
    c.update_alert(BARK)
    props = c.preview(0)
    assert props["canberra.xdg-theme.name"] == "freedesktop"


def test_preview_out_of_range(env):
    played = []
    c = make(env, player=played.append)
    assert c.preview(9) is None
    assert played == []


def test_set_input_feedback(env):
    settings = {"event-sounds": True, "theme-name": "freedesktop",
                "input-feedback-sounds": False}
    c = make(env, settings)
    c.set_input_feedback(True)
    assert settings["input-feedback-sounds"] is True
    assert c.input_feedback is True


def test_external_key_change(env):
    settings = {"event-sounds": True, "theme-name": "freedesktop"}
    c = make(env, settings)
    settings["theme-name"] = "ubuntu"
    c.on_key_changed("unrelated")
    assert c.active_theme.identifier == "freedesktop"
    c.on_key_changed("theme-name")
    assert c.active_theme.identifier == "ubuntu"


def test_existing_custom_theme_is_loaded(env):
    custom = env["custom"]
    custom.create("ubuntu")
    custom.add_custom_file(["bell-terminal", "bell-window-system"], BARK)
    c = make(env, {"event-sounds": True, "theme-name": "__custom"})
    entry = c.themes[ids(c).index("__custom")]
    assert entry.parent == "ubuntu"
    assert c.active_theme.identifier == "__custom"
    assert [a.active for a in c.alerts] == [False, True]