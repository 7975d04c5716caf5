"""Semantic-version parsing and ``version_format`` rendering."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .errors import ResolutionError, TemplateSyntaxError, VersionParseError
from .template import ResolutionStrategies, parse_template, resolve, segments_text

logger = logging.getLogger(__name__)

DEFAULT_VERSION_FORMAT = "v${raw}"

_SEMVER_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)
RANGE_PREFIXES = ("^", "~")


@dataclass(frozen=True)
class SemanticVersion:
    major: int
    minor: int
    patch: int
    prerelease: str = ""
    build: str = ""

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text


def parse_version(text: str) -> SemanticVersion:
    """Parse ``MAJOR.MINOR.PATCH[-pre][+build]``, optionally prefixed by ``v``.

    Raises ``VersionParseError`` for anything else.
    """
    match = _SEMVER_RE.match(text.strip())
    if match is None:
        raise VersionParseError(f"not a semantic version: {text!r}")
    return SemanticVersion(
        major=int(match.group("major")),
        minor=int(match.group("minor")),
        patch=int(match.group("patch")),
        prerelease=match.group("prerelease") or "",
        build=match.group("build") or "",
    )


def strip_range_prefix(requirement: str) -> str:
    """Drop one leading ``^`` or ``~`` range marker from a dependency requirement."""
    requirement = requirement.strip()
    for prefix in RANGE_PREFIXES:
        if requirement.startswith(prefix):
            return requirement[len(prefix):]
    return requirement


def format_module_version(module_name: str, version: str, version_format: str) -> str | None:
    """Render ``version`` through ``version_format``.

    ``raw`` is always available; ``major``, ``minor`` and ``patch`` only when
    ``version`` is semantic. A broken ``version_format`` is logged and yields
    ``None`` so the caller's version group disappears.
    """
    values = {"raw": lambda: version}
    try:
        parsed = parse_version(version)
    except VersionParseError:
        parsed = None
    if parsed is not None:
        values.update(
            major=lambda: str(parsed.major),
            minor=lambda: str(parsed.minor),
            patch=lambda: str(parsed.patch),
        )

    try:
        template = parse_template(version_format)
        segments = resolve(template, ResolutionStrategies(values=values))
    except (TemplateSyntaxError, ResolutionError) as exc:
        logger.warning("invalid version_format in module `%s`: %s", module_name, exc)
        return None
    return segments_text(segments)


__all__ = [
    "DEFAULT_VERSION_FORMAT",
    "RANGE_PREFIXES",
    "SemanticVersion",
    "parse_version",
    "strip_range_prefix",
    "format_module_version",
]
