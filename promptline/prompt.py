"""Prompt assembly: evaluate modules concurrently and join their output.

Modules share nothing but the read-only scan caches of the render context, so
they run on a small pool of daemon worker threads. Each module gets its own
time budget; one that overruns is reported as aborted and its late result is
discarded while the remaining modules keep rendering.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from queue import Empty, Queue

from .modules import MODULES, Context, ModuleOutput, render_module

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4
POLL_INTERVAL_SECONDS = 0.005

RunModule = Callable[[str, Context], "ModuleOutput | None"]


class PromptRenderer:
    """Runs modules for one render pass with a per-module timeout."""

    def __init__(
        self,
        context: Context,
        max_workers: int = DEFAULT_MAX_WORKERS,
        run_module: RunModule = render_module,
    ) -> None:
        self.context = context
        self.max_workers = max(1, max_workers)
        self._run_module = run_module

    @property
    def timeout_seconds(self) -> float:
        return self.context.config.module_timeout_ms / 1000.0

    def render(self, names: Iterable[str]) -> list[ModuleOutput]:
        """Return outputs of ``names`` in the given order, skipping empty ones."""
        names = list(names)
        if not names:
            return []

        jobs: Queue[tuple[int, str]] = Queue()
        for item in enumerate(names):
            jobs.put(item)
        results: Queue[tuple[int, ModuleOutput | None]] = Queue()
        started: dict[int, float] = {}
        lock = threading.Lock()

        def worker() -> None:
            while True:
                try:
                    index, name = jobs.get_nowait()
                except Empty:
                    return
                with lock:
                    started[index] = time.monotonic()
                try:
                    output = self._run_module(name, self.context)
                except Exception:
                    logger.exception("module `%s` crashed", name)
                    output = None
                results.put((index, output))

        def spawn_worker() -> None:
            thread = threading.Thread(target=worker, name="promptline-module-worker", daemon=True)
            thread.start()

        for _ in range(min(self.max_workers, len(names))):
            spawn_worker()

        outputs: dict[int, ModuleOutput | None] = {}
        pending = set(range(len(names)))
        timeout = self.timeout_seconds
        while pending:
            try:
                index, output = results.get(timeout=POLL_INTERVAL_SECONDS)
            except Empty:
                pass
            else:
                if index in pending:
                    pending.discard(index)
                    outputs[index] = output

            now = time.monotonic()
            with lock:
                expired = sorted(index for index in pending if index in started and now - started[index] > timeout)
            for index in expired:
                pending.discard(index)
                outputs[index] = None
                logger.warning(
                    "Error in module `%s`:\ntimed out after %d ms",
                    names[index],
                    self.context.config.module_timeout_ms,
                )
                # The stuck thread keeps its job; a fresh worker takes the queue.
                spawn_worker()

        return [output for _, output in sorted(outputs.items()) if output is not None]


def configured_modules(context: Context) -> list[str]:
    """Return configured module names that are registered, warning about the rest."""
    names: list[str] = []
    for name in context.config.modules:
        if name not in MODULES:
            logger.warning("unknown module `%s` in config", name)
            continue
        names.append(name)
    return names


def render_prompt(context: Context, no_color: bool = False, max_workers: int = DEFAULT_MAX_WORKERS) -> str:
    """Render the full prompt line for ``context``."""
    outputs = PromptRenderer(context, max_workers=max_workers).render(configured_modules(context))
    line = "".join(output.ansi(no_color=no_color) for output in outputs)
    if context.config.add_newline:
        return "\n" + line
    return line


__all__ = [
    "DEFAULT_MAX_WORKERS",
    "PromptRenderer",
    "configured_modules",
    "render_prompt",
]
