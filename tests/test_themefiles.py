import configparser
import os
from pathlib import Path

import pytest

from volumecontrol.themefiles import CustomTheme, default_user_data_dir


@pytest.fixture
def theme(tmp_path):
    return CustomTheme(tmp_path)


def test_path_layout(tmp_path, theme):
    assert theme.path() == tmp_path / "sounds" / "__custom"
    assert theme.path("index.theme") == tmp_path / "sounds" / "__custom" / "index.theme"


def test_default_data_dir_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    assert default_user_data_dir() == tmp_path
    assert CustomTheme().path() == tmp_path / "sounds" / "__custom"


def test_default_data_dir_fallback(monkeypatch):
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    assert default_user_data_dir() == Path.home() / ".local" / "share"


def test_create_writes_index(theme):
    theme.create("freedesktop")
    parser = configparser.ConfigParser()
    parser.optionxform = str
    parser.read(theme.path("index.theme"))
    section = parser["Sound Theme"]
    assert section["Name"] == "Custom"
    assert section["Inherits"] == "freedesktop"
    assert section["Directories"] == "."


def test_new_theme_is_empty(theme):
    theme.create("freedesktop")
    assert theme.is_empty() is True


def test_missing_dir_counts_as_empty(theme):
    assert not theme.path().exists()
    assert theme.is_empty() is True


def test_disabled_files_roundtrip(theme):
    sounds = ["bell-terminal", "bell-window-system"]
    theme.create("freedesktop")
    theme.add_disabled_files(sounds)
    assert all(theme.path(f"{s}.disabled").is_file() for s in sounds)
    assert theme.is_empty() is False
    theme.delete_disabled_files(sounds)
    assert not any(theme.path(f"{s}.disabled").exists() for s in sounds)
    assert theme.is_empty() is True


def test_add_disabled_keeps_existing_content(theme):
    theme.create("freedesktop")
    marker = theme.path("bell-terminal.disabled")
    marker.write_text("kept")
    theme.add_disabled_files(["bell-terminal"])
    assert marker.read_text() == "kept"


def test_custom_file_links(theme, tmp_path):
    target = tmp_path / "alert.ogg"
    target.write_bytes(b"OggS")
    sounds = ["bell-terminal", "bell-window-system"]
    theme.create("freedesktop")
    theme.add_custom_file(sounds, str(target))
    for s in sounds:
        link = theme.path(f"{s}.ogg")
        assert link.is_symlink()
        assert os.readlink(link) == str(target)


def test_custom_file_replaces_existing_link(theme, tmp_path):
    first = tmp_path / "first.ogg"
    second = tmp_path / "second.ogg"
    theme.create("freedesktop")
    theme.add_custom_file(["bell-terminal"], str(first))
    theme.add_custom_file(["bell-terminal"], str(second))
    assert os.readlink(theme.path("bell-terminal.ogg")) == str(second)


def test_delete_old_files(theme, tmp_path):
    theme.create("freedesktop")
    theme.add_custom_file(["bell-terminal"], str(tmp_path / "x.ogg"))
    theme.delete_old_files(["bell-terminal"])
    assert not theme.path("bell-terminal.ogg").is_symlink()
    assert theme.is_empty() is True


def test_delete_removes_tree(theme):
    theme.create("freedesktop")
    (theme.path("sub")).mkdir()
    (theme.path("sub") / "f").write_text("x")
    theme.delete()
    assert not theme.path().exists()


def test_delete_missing_is_harmless(theme):
    theme.delete()
    assert not theme.path().exists()


def test_update_time_touches_directory(theme):
    theme.create("freedesktop")
    os.utime(theme.path(), (1000, 1000))
    theme.update_time()
    assert theme.path().stat().st_mtime > 1000