"""Discovery of installed sound themes and of the alert sounds offered for them."""

from __future__ import annotations

import enum
import os
import sys
import xml.etree.ElementTree as ET
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .themefiles import CustomTheme

THEME_GROUP = "Sound Theme"
INDEX_FILE = "index.theme"
BUILTIN_LABEL = "Built-in"

_XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"
_NO_MATCH = sys.maxsize
_NO_LANG = sys.maxsize - 1


class SoundType(enum.IntEnum):
    """Where the sound played for an event comes from."""

    UNSET = 0
    OFF = 1
    DEFAULT_FROM_THEME = 2
    BUILTIN = 3
    CUSTOM = 4


@dataclass(frozen=True)
class ThemeIndex:
    """What a theme's ``index.theme`` file says about it."""

    name: str
    parent: str | None = None


@dataclass
class AlertSound:
    """One alert sound that can be chosen for the custom theme."""

    identifier: str
    name: str
    type_label: str = BUILTIN_LABEL
    active: bool = False


class _KeyFileError(ValueError):
    pass


def _unescape(value: str) -> str:
    out = []
    chars = iter(value)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, None)
        mapping = {"s": " ", "n": "\n", "t": "\t", "r": "\r", "\\": "\\"}
        if nxt in mapping:
            out.append(mapping[nxt])
        else:
            raise _KeyFileError(f"invalid escape in value: {value!r}")
    return "".join(out)


def _parse_key_file(text: str) -> dict[str, dict[str, str]]:
    groups: dict[str, dict[str, str]] = {}
    current: dict[str, str] | None = None
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("["):
            if not line.endswith("]"):
                raise _KeyFileError(f"invalid group line: {raw!r}")
            current = groups.setdefault(line[1:-1], {})
            continue
        if current is None:
            raise _KeyFileError("key file does not start with a group")
        key, sep, value = line.partition("=")
        if not sep:
            raise _KeyFileError(f"invalid line: {raw!r}")
        current[key.strip()] = value.strip()
    return groups


def _get_boolean(group: dict[str, str], key: str) -> bool:
    value = group.get(key)
    return value in ("true", "1")


def load_index_theme(path: str | os.PathLike[str]) -> ThemeIndex | None:
    """Read a theme index file; None if it cannot be read, is hidden or has no name."""
    try:
        text = Path(path).read_text(encoding="utf-8")
        groups = _parse_key_file(text)
    except (OSError, UnicodeDecodeError, _KeyFileError):
        return None
    group = groups.get(THEME_GROUP, {})
    if _get_boolean(group, "Hidden"):
        return None
    try:
        raw_name = group.get("Name")
        if raw_name is None:
            return None
        name = _unescape(raw_name)
        raw_parent = group.get("Inherits")
        parent = _unescape(raw_parent) if raw_parent is not None else None
    except _KeyFileError:
        return None
    return ThemeIndex(name=name, parent=parent)


def find_themes(directories: Iterable[str | os.PathLike[str]]) -> dict[str, str]:
    """Map theme directory names to display names across sound directories.

    A theme found in a later directory replaces one of the same name found earlier.
    """
    themes: dict[str, str] = {}
    for directory in directories:
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError:
            continue
        for entry in entries:
            if not os.path.isdir(entry.path):
                continue
            index = load_index_theme(Path(entry.path) / INDEX_FILE)
            if index is None:
                continue
            themes[entry.name] = index.name
    return themes


def _language_variants(locale: str) -> list[str]:
    base, _, modifier = locale.partition("@")
    base, _, codeset = base.partition(".")
    lang, _, territory = base.partition("_")
    variants = []
    for with_territory in (True, False):
        if with_territory and not territory:
            continue
        for with_codeset in (True, False):
            if with_codeset and not codeset:
                continue
            for with_modifier in (True, False):
                if with_modifier and not modifier:
                    continue
                text = lang
                if with_territory:
                    text += "_" + territory
                if with_codeset:
                    text += "." + codeset
                if with_modifier:
                    text += "@" + modifier
                variants.append(text)
    variants.append(lang)
    return variants


def _default_languages() -> list[str]:
    value = None
    for var in ("LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var)
        if value:
            break
    names: list[str] = []
    for locale in (value or "C").split(":"):
        if not locale:
            continue
        for variant in _language_variants(locale):
            if variant not in names:
                names.append(variant)
    if "C" not in names:
        names.append("C")
    return names


def _pick_name(sound: ET.Element, inherited_lang: str | None,
               languages: Sequence[str]) -> str | None:
    sound_lang = sound.get(_XML_LANG, inherited_lang)
    value = None
    keep_pri = _NO_MATCH
    for child in sound:
        if child.tag != "name":
            continue
        lang = child.get(_XML_LANG, sound_lang)
        if lang is not None:
            pri = languages.index(lang) if lang in languages else _NO_MATCH
        else:
            pri = _NO_LANG
        if pri <= keep_pri:
            value = "".join(child.itertext())
            keep_pri = pri
    return value


def parse_alert_file(path: str | os.PathLike[str],
                     languages: Sequence[str] | None = None) -> list[AlertSound]:
    """Read the alert sounds described by one XML sound-set file."""
    langs = list(languages) if languages is not None else _default_languages()
    if not os.path.exists(path):
        return []
    try:
        root = ET.parse(path).getroot()
    except (ET.ParseError, OSError):
        return []
    root_lang = root.get(_XML_LANG)
    sounds = []
    for child in root:
        if child.tag != "sound":
            continue
        name = _pick_name(child, root_lang, langs)
        filename = None
        for item in child:
            if item.tag == "filename":
                filename = "".join(item.itertext())
        if filename is not None and name is not None:
            sounds.append(AlertSound(identifier=filename, name=name))
    return sounds


def load_alert_sounds(directory: str | os.PathLike[str],
                      languages: Sequence[str] | None = None) -> list[AlertSound]:
    """Read the alert sounds of every ``.xml`` file in a directory."""
    try:
        names = sorted(os.listdir(directory))
    except OSError:
        return []
    sounds: list[AlertSound] = []
    for name in names:
        if name.endswith(".xml"):
            sounds.extend(parse_alert_file(Path(directory) / name, languages))
    return sounds


def get_file_type(custom_theme: CustomTheme,
                  sound_name: str) -> tuple[SoundType, str | None]:
    """Tell how a sound is set in the custom theme, with the link target if custom."""
    if custom_theme.path(f"{sound_name}.disabled").is_file():
        return SoundType.OFF, None
    ogg = custom_theme.path(f"{sound_name}.ogg")
    if ogg.is_symlink():
        try:
            return SoundType.CUSTOM, os.readlink(ogg)
        except OSError:
            return SoundType.CUSTOM, None
    return SoundType.BUILTIN, None