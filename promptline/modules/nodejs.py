"""Node.js module: shows the installed ``node`` version inside JavaScript projects."""

from __future__ import annotations

from ..config import NodejsConfig
from ..scan import DetectionRequest, ScanCache
from ..template import ResolutionStrategies
from ..versions import format_module_version
from .base import Context, PromptModule

NODE_VERSION_COMMAND = ("node", "--version")


class NodejsModule(PromptModule):
    name = "nodejs"

    def is_applicable(self, context: Context, config: NodejsConfig, scan: ScanCache) -> bool:
        return (
            DetectionRequest()
            .with_files(config.detect_files)
            .with_extensions(config.detect_extensions)
            .with_folders(config.detect_folders)
            .exclude_folders(config.exclude_folders)
            .is_match(scan)
        )

    def strategies(self, context: Context, config: NodejsConfig, scan: ScanCache) -> ResolutionStrategies:
        return ResolutionStrategies(
            meta={"symbol": config.symbol},
            values={"version": lambda: self.version(context, config)},
            styles={"style": config.style},
        )

    def version(self, context: Context, config: NodejsConfig) -> str | None:
        output = context.run_command(NODE_VERSION_COMMAND)
        if not output:
            return None
        raw = output.splitlines()[0].strip()
        if raw.startswith("v"):
            raw = raw[1:]
        return format_module_version(self.name, raw, config.version_format)


__all__ = [
    "NODE_VERSION_COMMAND",
    "NodejsModule",
]
