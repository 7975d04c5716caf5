"""Angular module: shows the ``@angular/core`` version of an Angular workspace."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..config import AngularConfig
from ..scan import DetectionRequest, ScanCache
from ..template import ResolutionStrategies
from ..versions import format_module_version, parse_version, strip_range_prefix
from .base import Context, PromptModule

logger = logging.getLogger(__name__)

ANGULAR_PACKAGE = "@angular/core"
DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")


def read_package_json(path: Path) -> dict[str, object] | None:
    """Load a package manifest, or ``None`` when unreadable or not an object."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.debug("cannot read %s: %s", path, exc)
        return None
    return data if isinstance(data, dict) else None


def dependency_requirement(manifest: dict[str, object], package: str) -> str | None:
    """Return the version requirement of ``package`` from runtime or dev dependencies."""
    for section in DEPENDENCY_SECTIONS:
        deps = manifest.get(section)
        if not isinstance(deps, dict):
            continue
        requirement = deps.get(package)
        if isinstance(requirement, str):
            return requirement
    return None


class AngularModule(PromptModule):
    name = "angular"

    def is_applicable(self, context: Context, config: AngularConfig, scan: ScanCache) -> bool:
        # Both markers are required; each request on its own is an OR.
        is_js_project = DetectionRequest().with_files(config.detect_package_json).is_match(scan)
        is_angular_project = DetectionRequest().with_files(config.detect_angular_json).is_match(scan)
        return is_js_project and is_angular_project

    def strategies(self, context: Context, config: AngularConfig, scan: ScanCache) -> ResolutionStrategies:
        return ResolutionStrategies(
            meta={"symbol": config.symbol},
            values={"version": lambda: self.version(config, scan)},
            styles={"style": config.style},
        )

    def version(self, config: AngularConfig, scan: ScanCache) -> str | None:
        manifest_name = next((name for name in config.detect_package_json if name in scan.files), None)
        if manifest_name is None:
            return None
        manifest = read_package_json(scan.directory / manifest_name)
        if manifest is None:
            return None
        requirement = dependency_requirement(manifest, ANGULAR_PACKAGE)
        if requirement is None:
            logger.debug("%s does not depend on %s", manifest_name, ANGULAR_PACKAGE)
            return None
        version = parse_version(strip_range_prefix(requirement))
        return format_module_version(self.name, str(version), config.version_format)


__all__ = [
    "ANGULAR_PACKAGE",
    "AngularModule",
    "dependency_requirement",
    "read_package_json",
]
