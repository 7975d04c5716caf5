"""Module lifecycle: detect, gather values, resolve the format, or abort.

A pass moves through ``ModuleState``::

    IDLE -> SCANNING -> NOT_APPLICABLE
                     -> DETECTED -> EVALUATING -> RENDERED | ABORTED

``NOT_APPLICABLE`` is the quiet outcome (debug log); ``ABORTED`` logs a warning
with the underlying error. Both produce no output.
"""

from __future__ import annotations

import enum
import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from ..config import ModuleConfig, PromptConfig
from ..errors import DirectoryScanError, ResolutionError, TemplateSyntaxError
from ..scan import ScanCache, ScanCacheRegistry
from ..style import paint_segments
from ..template import ResolutionStrategies, Segment, parse_template, resolve

logger = logging.getLogger(__name__)


class ModuleState(enum.Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    NOT_APPLICABLE = "not_applicable"
    DETECTED = "detected"
    EVALUATING = "evaluating"
    RENDERED = "rendered"
    ABORTED = "aborted"


_TRANSITIONS: dict[ModuleState, frozenset[ModuleState]] = {
    ModuleState.IDLE: frozenset({ModuleState.SCANNING, ModuleState.NOT_APPLICABLE}),
    ModuleState.SCANNING: frozenset({ModuleState.NOT_APPLICABLE, ModuleState.DETECTED}),
    ModuleState.DETECTED: frozenset({ModuleState.EVALUATING}),
    ModuleState.EVALUATING: frozenset({ModuleState.RENDERED, ModuleState.ABORTED}),
    ModuleState.NOT_APPLICABLE: frozenset(),
    ModuleState.RENDERED: frozenset(),
    ModuleState.ABORTED: frozenset(),
}

TERMINAL_STATES = frozenset({ModuleState.NOT_APPLICABLE, ModuleState.RENDERED, ModuleState.ABORTED})


@dataclass
class Context:
    """Everything a module may consult during one render pass.

    ``scans`` is built per render and shared read-only by every module.
    """

    directory: Path
    config: PromptConfig = field(default_factory=PromptConfig)
    scans: ScanCacheRegistry = field(default_factory=ScanCacheRegistry)

    def try_begin_scan(self) -> ScanCache | None:
        """Return the scan cache for the working directory, or ``None`` if unreadable."""
        try:
            return self.scans.get(self.directory)
        except DirectoryScanError as exc:
            logger.debug("%s", exc)
            return None

    def module_config(self, name: str) -> ModuleConfig:
        return self.config.module_config(name)

    def run_command(self, argv: Sequence[str]) -> str | None:
        """Run ``argv`` and return stripped stdout, or ``None`` when it fails.

        Commands are bounded by ``command_timeout_ms`` so a slow tool cannot
        stall the prompt.
        """
        try:
            proc = subprocess.run(
                list(argv),
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                timeout=self.config.command_timeout_ms / 1000.0,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("command %s failed: %s", " ".join(argv), exc)
            return None
        return proc.stdout.strip()


@dataclass(frozen=True)
class ModuleOutput:
    """Rendered segments of one module."""

    name: str
    segments: tuple[Segment, ...]

    def text(self) -> str:
        return "".join(segment.text for segment in self.segments)

    def ansi(self, no_color: bool = False) -> str:
        return paint_segments(self.segments, no_color=no_color)


class PromptModule:
    """Base for detection modules.

    Subclasses decide applicability from the scan cache and supply the
    resolution strategies for their format string.
    """

    name: ClassVar[str] = ""

    def is_applicable(self, context: Context, config: ModuleConfig, scan: ScanCache) -> bool:
        raise NotImplementedError

    def strategies(self, context: Context, config: ModuleConfig, scan: ScanCache) -> ResolutionStrategies:
        raise NotImplementedError


class ModuleRun:
    """One lifecycle pass of ``module`` against ``context``."""

    def __init__(self, module: PromptModule, context: Context) -> None:
        self.module = module
        self.context = context
        self.state = ModuleState.IDLE
        self.history: list[ModuleState] = [ModuleState.IDLE]
        self.error: Exception | None = None

    def _enter(self, state: ModuleState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"module `{self.module.name}`: invalid transition {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def not_applicable(self, reason: str) -> None:
        self._enter(ModuleState.NOT_APPLICABLE)
        logger.debug("module `%s` not applicable: %s", self.module.name, reason)

    def abort(self, error: Exception) -> None:
        self.error = error
        self._enter(ModuleState.ABORTED)
        logger.warning("Error in module `%s`:\n%s", self.module.name, error)

    def run(self) -> ModuleOutput | None:
        if self.finished:
            raise RuntimeError(f"module `{self.module.name}`: a pass runs once; start a new ModuleRun")

        name = self.module.name
        config = self.context.module_config(name)
        if config.disabled:
            self.not_applicable("disabled")
            return None

        self._enter(ModuleState.SCANNING)
        scan = self.context.try_begin_scan()
        if scan is None:
            self.not_applicable(f"cannot scan {self.context.directory}")
            return None
        if not self.module.is_applicable(self.context, config, scan):
            self.not_applicable("no detection markers")
            return None
        self._enter(ModuleState.DETECTED)

        self._enter(ModuleState.EVALUATING)
        try:
            template = parse_template(config.format, config.META_VARIABLES)
            segments = resolve(template, self.module.strategies(self.context, config, scan))
        except (TemplateSyntaxError, ResolutionError) as exc:
            self.abort(exc)
            return None
        self._enter(ModuleState.RENDERED)

        if not segments:
            return None
        return ModuleOutput(name=name, segments=tuple(segments))


__all__ = [
    "ModuleState",
    "TERMINAL_STATES",
    "Context",
    "ModuleOutput",
    "PromptModule",
    "ModuleRun",
]
