"""Prompt modules and the registry used by prompt assembly."""

from __future__ import annotations

from .angular import AngularModule
from .base import Context, ModuleOutput, ModuleRun, ModuleState, PromptModule
from .nodejs import NodejsModule

MODULES: dict[str, PromptModule] = {
    module.name: module
    for module in (AngularModule(), NodejsModule())
}


def get_module(name: str) -> PromptModule:
    """Return the registered module ``name``; raises ``KeyError`` if unknown."""
    return MODULES[name]


def render_module(name: str, context: Context) -> ModuleOutput | None:
    """Run one fresh lifecycle pass of module ``name``."""
    return ModuleRun(get_module(name), context).run()


__all__ = [
    "MODULES",
    "Context",
    "ModuleOutput",
    "ModuleRun",
    "ModuleState",
    "PromptModule",
    "AngularModule",
    "NodejsModule",
    "get_module",
    "render_module",
]
