"""Files of the user's custom sound theme."""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterable
from pathlib import Path

log = logging.getLogger(__name__)

CUSTOM_THEME_NAME = "__custom"
INDEX_FILE = "index.theme"


def default_user_data_dir() -> Path:
    """Return the user's data directory as the XDG rules define it."""
    env = os.environ.get("XDG_DATA_HOME")
    if env and os.path.isabs(env):
        return Path(env)
    return Path.home() / ".local" / "share"


def _escape_value(value: str) -> str:
    out = []
    for i, ch in enumerate(value):
        if ch == "\\":
            out.append("\\\\")
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\t":
            out.append("\\t")
        elif ch == "\r":
            out.append("\\r")
        elif ch == " " and i == 0:
            out.append("\\s")
        else:
            out.append(ch)
    return "".join(out)


def _delete_recursive(path: Path) -> None:
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError:
        pass


class CustomTheme:
    """The custom sound theme kept in ``<data_dir>/sounds/__custom``."""

    def __init__(self, data_dir: str | os.PathLike[str] | None = None) -> None:
        base = Path(data_dir) if data_dir is not None else default_user_data_dir()
        self.directory = base / "sounds" / CUSTOM_THEME_NAME

    def path(self, child: str | None = None) -> Path:
        """Return the theme directory, or a file inside it."""
        return self.directory if child is None else self.directory / child

    def update_time(self) -> None:
        """Touch the theme directory so that sound players reload it."""
        try:
            os.utime(self.directory, None)
        except OSError:
            pass

    def delete(self) -> None:
        """Remove the whole custom theme directory."""
        _delete_recursive(self.directory)
        log.debug("deleted the custom theme dir")

    def is_empty(self) -> bool:
        """True if the theme holds nothing besides its index file."""
        try:
            entries = os.scandir(self.directory)
        except OSError as exc:
            log.warning("Unable to enumerate files: %s", exc)
            return True
        with entries:
            return all(entry.name == INDEX_FILE for entry in entries)

    def _delete_each(self, sounds: Iterable[str], suffix: str) -> None:
        for sound in sounds:
            _delete_recursive(self.path(f"{sound}{suffix}"))

    def delete_old_files(self, sounds: Iterable[str]) -> None:
        """Remove the ``.ogg`` overrides of the given sounds."""
        self._delete_each(sounds, ".ogg")

    def delete_disabled_files(self, sounds: Iterable[str]) -> None:
        """Remove the ``.disabled`` markers of the given sounds."""
        self._delete_each(sounds, ".disabled")

    def add_disabled_files(self, sounds: Iterable[str]) -> None:
        """Create an empty ``.disabled`` marker for each sound."""
        for sound in sounds:
            try:
                with open(self.path(f"{sound}.disabled"), "x"):
                    pass
            except OSError:
                pass

    def add_custom_file(self, sounds: Iterable[str], filename: str) -> None:
        """Point the ``.ogg`` file of each sound at ``filename`` by a symbolic link."""
        for sound in sounds:
            link = self.path(f"{sound}.ogg")
            try:
                link.unlink()
            except OSError:
                pass
            try:
                os.symlink(filename, link)
            except OSError:
                pass

    def create(self, parent: str) -> None:
        """Create the theme directory and its index inheriting from ``parent``."""
        try:
            self.directory.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError:
            pass
        data = (
            "[Sound Theme]\n"
            f"Name={_escape_value('Custom')}\n"
            f"Inherits={_escape_value(parent)}\n"
            f"Directories={_escape_value('.')}\n"
        )
        try:
            self.path(INDEX_FILE).write_text(data, encoding="utf-8")
        except OSError:
            pass
        self.update_time()