"""Directory scanning and detection primitives.

- ``ScanCache``: one-shot enumeration of a directory's immediate entries
- ``ScanCacheRegistry``: per-render owner of scan caches
- ``DetectionRequest``: "match if any of these markers is present"
"""

from __future__ import annotations

from .cache import ScanCache, ScanCacheRegistry, file_extensions
from .request import DetectionRequest

__all__ = [
    "ScanCache",
    "ScanCacheRegistry",
    "DetectionRequest",
    "file_extensions",
]
