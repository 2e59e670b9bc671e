"""
Bookkeeping for asset groups published into the public directory.

Every asset group copied by the installer is recorded as a ``<group>/`` line
in ``<public>/.gitignore``. The uninstaller only removes groups that have
such a line, which keeps user content with a coincidental name safe.
"""

from __future__ import annotations

import logging
import re
import threading
import weakref
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

from asset_manager.core.constants import GITIGNORE_FILENAME

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r\n|\r|\n")

# Foreign bytes survive a read-modify-write unchanged.
_ENCODING_ERRORS = "surrogateescape"

_locks: "weakref.WeakValueDictionary[Path, _PathLock]" = weakref.WeakValueDictionary()
_locks_guard = threading.Lock()


def gitignore_entry(group: str) -> str:
    """Return the .gitignore line recorded for an asset group."""
    return f"{group}/"


def split_lines(content: str) -> List[str]:
    """Split on LF, CR or CRLF, keeping empty lines (including a trailing one)."""
    return _LINE_SPLIT.split(content)


class _PathLock:
    """Re-entrant lock for one .gitignore; dropped once no caller holds it."""

    def __init__(self) -> None:
        self._lock = threading.RLock()

    def __enter__(self) -> "_PathLock":
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self._lock.release()


def _lock_for(path: Path) -> _PathLock:
    key = path.resolve()
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _PathLock()
            _locks[key] = lock
        return lock


class PublicGitignore:
    """Reads and rewrites the public directory's .gitignore."""

    def __init__(self, public_path: Path):
        self.public_path = Path(public_path)
        self.path = self.public_path / GITIGNORE_FILENAME

    def exists(self) -> bool:
        return self.path.is_file()

    @contextmanager
    def locked(self) -> Iterator["PublicGitignore"]:
        """Serialize read-modify-write cycles on this file across threads."""
        with _lock_for(self.path):
            yield self

    def read_lines(self) -> List[str]:
        """Return the current lines; a missing file reads as a single empty line."""
        if not self.path.exists():
            return [""]
        return split_lines(
            self.path.read_text(encoding="utf-8", errors=_ENCODING_ERRORS)
        )

    def write_lines(self, lines: List[str]) -> None:
        self.path.write_text(
            "\n".join(lines), encoding="utf-8", errors=_ENCODING_ERRORS
        )

    def ensure_entry(self, group: str) -> bool:
        """
        Append ``<group>/`` unless that exact line is already present.

        The file is re-read on every call so entries written by other
        packages since the last call are respected.

        Returns:
            True if .gitignore was modified, False otherwise
        """
        entry = gitignore_entry(group)
        with self.locked():
            lines = self.read_lines()
            if entry in lines:
                return False
            lines.append(entry)
            self.write_lines(lines)
        logger.debug("Added %s to %s", entry, self.path)
        return True

    def entries(self) -> List[str]:
        """Return non-blank, non-comment lines naming directories."""
        if not self.exists():
            return []
        return [
            line
            for line in self.read_lines()
            if line.endswith("/") and line.strip() and not line.startswith("#")
        ]


__all__ = [
    "PublicGitignore",
    "gitignore_entry",
    "split_lines",
]
