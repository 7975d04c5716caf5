"""Point-in-time directory enumeration shared by detection modules.

A ``ScanCache`` lists one directory's immediate entries exactly once and then
answers any number of ``DetectionRequest`` queries without touching the
filesystem again. ``ScanCacheRegistry`` owns the caches for one render pass.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import DirectoryScanError

if TYPE_CHECKING:
    from .request import DetectionRequest

logger = logging.getLogger(__name__)


def file_extensions(name: str) -> tuple[str, ...]:
    """Return every dotted suffix of ``name`` without the leading dot.

    ``index.d.ts`` yields ``("d.ts", "ts")``. Leading dots of hidden files are
    not extension separators, so ``.nvmrc`` has no extension.
    """
    stem = name.lstrip(".")
    parts = stem.split(".")
    if len(parts) < 2:
        return ()
    return tuple(".".join(parts[i:]) for i in range(1, len(parts)))


@dataclass(frozen=True)
class ScanCache:
    """Immutable snapshot of one directory's immediate entries."""

    directory: Path
    files: frozenset[str] = frozenset()
    folders: frozenset[str] = frozenset()
    extensions: frozenset[str] = frozenset()

    @classmethod
    def open(cls, directory: Path) -> ScanCache:
        """Enumerate ``directory`` once.

        Raises ``DirectoryScanError`` when the directory is missing, is not a
        directory, or cannot be read.
        """
        files: set[str] = set()
        folders: set[str] = set()
        extensions: set[str] = set()
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    try:
                        is_dir = entry.is_dir()
                    except OSError:
                        is_dir = False
                    if is_dir:
                        folders.add(entry.name)
                        continue
                    files.add(entry.name)
                    extensions.update(file_extensions(entry.name))
        except OSError as exc:
            raise DirectoryScanError(directory, exc) from exc

        logger.debug("scanned %s: %d files, %d folders", directory, len(files), len(folders))
        return cls(
            directory=Path(directory),
            files=frozenset(files),
            folders=frozenset(folders),
            extensions=frozenset(extensions),
        )

    @property
    def names(self) -> frozenset[str]:
        """All entry names, files and folders alike."""
        return self.files | self.folders

    def query(self, request: DetectionRequest) -> bool:
        """Return whether ``request`` matches this snapshot. Performs no I/O."""
        if request.excluded_folders & self.folders:
            return False
        return bool(
            request.files & self.files
            or request.extensions & self.extensions
            or request.folders & self.folders
        )


class ScanCacheRegistry:
    """Per-render owner of scan caches, keyed by resolved directory.

    Each directory is enumerated at most once, including when several module
    evaluations ask for it concurrently. Failures are remembered as well so an
    unreadable directory is only probed once per render.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._caches: dict[Path, ScanCache | DirectoryScanError] = {}
        self._key_locks: dict[Path, threading.Lock] = {}

    @staticmethod
    def _key(directory: Path) -> Path:
        try:
            return Path(directory).resolve()
        except OSError:
            return Path(directory).absolute()

    def get(self, directory: Path) -> ScanCache:
        """Return the cache for ``directory``, building it on first use."""
        key = self._key(directory)
        with self._lock:
            cached = self._caches.get(key)
            if cached is None:
                key_lock = self._key_locks.setdefault(key, threading.Lock())
        if cached is None:
            with key_lock:
                with self._lock:
                    cached = self._caches.get(key)
                if cached is None:
                    try:
                        cached = ScanCache.open(key)
                    except DirectoryScanError as exc:
                        cached = exc
                    with self._lock:
                        self._caches[key] = cached
        if isinstance(cached, DirectoryScanError):
            raise cached
        return cached

    def __len__(self) -> int:
        with self._lock:
            return len(self._caches)


__all__ = [
    "ScanCache",
    "ScanCacheRegistry",
    "file_extensions",
]
