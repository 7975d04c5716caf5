"""Detection requests: which filesystem markers make a module applicable."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .cache import ScanCache


def _normalize_extension(ext: str) -> str:
    return ext[1:] if ext.startswith(".") else ext


class DetectionRequest:
    """Accumulates file names, extensions, and folder names to look for.

    A request matches when any configured set intersects the scanned entries.
    A request with nothing configured never matches.
    """

    def __init__(self) -> None:
        self.files: set[str] = set()
        self.extensions: set[str] = set()
        self.folders: set[str] = set()
        self.excluded_folders: set[str] = set()

    def with_files(self, names: Iterable[str]) -> DetectionRequest:
        self.files.update(name for name in names if name)
        return self

    def with_extensions(self, exts: Iterable[str]) -> DetectionRequest:
        self.extensions.update(_normalize_extension(ext) for ext in exts if _normalize_extension(ext))
        return self

    def with_folders(self, names: Iterable[str]) -> DetectionRequest:
        self.folders.update(name for name in names if name)
        return self

    def exclude_folders(self, names: Iterable[str]) -> DetectionRequest:
        """Veto the match when any of ``names`` is present as a folder."""
        self.excluded_folders.update(name for name in names if name)
        return self

    def is_empty(self) -> bool:
        return not (self.files or self.extensions or self.folders)

    def is_match(self, cache: ScanCache) -> bool:
        return cache.query(self)

    def __repr__(self) -> str:
        return (
            f"DetectionRequest(files={sorted(self.files)}, extensions={sorted(self.extensions)}, "
            f"folders={sorted(self.folders)}, excluded_folders={sorted(self.excluded_folders)})"
        )


__all__ = ["DetectionRequest"]
