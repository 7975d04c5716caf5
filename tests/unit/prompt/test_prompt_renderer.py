"""Tests for concurrent prompt assembly with per-module timeouts."""

from __future__ import annotations

import json
import os
import tempfile
import threading
import unittest
from pathlib import Path
from unittest import mock

from promptline.config import PromptConfig
from promptline.modules import Context, ModuleOutput
from promptline.prompt import PromptRenderer, configured_modules, render_prompt
from promptline.template import Segment


def _output(name: str) -> ModuleOutput:
    return ModuleOutput(name=name, segments=(Segment(name),))


class PromptRendererTests(unittest.TestCase):
    def test_outputs_keep_configured_order_and_skip_empty_modules(self) -> None:
        def run_module(name: str, _context: Context):
            return None if name == "empty" else _output(name)

        renderer = PromptRenderer(Context(Path(".")), max_workers=3, run_module=run_module)
        outputs = renderer.render(["a", "empty", "b", "c"])
        self.assertEqual([output.name for output in outputs], ["a", "b", "c"])

    def test_no_modules_renders_nothing(self) -> None:
        self.assertEqual(PromptRenderer(Context(Path("."))).render([]), [])

    def test_slow_module_times_out_without_blocking_others(self) -> None:
        release = threading.Event()

        def run_module(name: str, _context: Context):
            if name == "slow":
                release.wait(5.0)
            return _output(name)

        config = PromptConfig(module_timeout_ms=50)
        renderer = PromptRenderer(Context(Path("."), config=config), max_workers=1, run_module=run_module)
        try:
            with self.assertLogs("promptline.prompt", level="WARNING") as logs:
                outputs = renderer.render(["slow", "fast"])
        finally:
            release.set()

        self.assertEqual([output.name for output in outputs], ["fast"])
        self.assertIn("Error in module `slow`", logs.output[0])
        self.assertIn("timed out", logs.output[0])

    def test_crashing_module_is_logged_and_skipped(self) -> None:
        def run_module(name: str, _context: Context):
            if name == "bad":
                raise RuntimeError("boom")
            return _output(name)

        renderer = PromptRenderer(Context(Path(".")), run_module=run_module)
        with self.assertLogs("promptline.prompt", level="ERROR"):
            outputs = renderer.render(["bad", "good"])
        self.assertEqual([output.name for output in outputs], ["good"])


class RenderPromptTests(unittest.TestCase):
    def test_unknown_configured_modules_are_skipped(self) -> None:
        context = Context(Path("."), config=PromptConfig(modules=("nodejs", "rust")))
        with self.assertLogs("promptline.prompt", level="WARNING"):
            self.assertEqual(configured_modules(context), ["nodejs"])

    def test_renders_all_applicable_modules_into_one_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "package.json").write_text(
                json.dumps({"dependencies": {"@angular/core": "^16.0.0"}}),
                encoding="utf-8",
            )
            (root / "angular.json").write_text("{}", encoding="utf-8")
            config = PromptConfig.from_mapping({"angular": {"symbol": "A "}, "add_newline": True})
            with mock.patch.object(Context, "run_command", return_value="v20.1.0"):
                line = render_prompt(Context(root, config=config), no_color=True)

        self.assertEqual(line, "\nvia \ue718 v20.1.0 via A v16.0.0 ")

    def test_modules_share_one_directory_scan(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "package.json").write_text("{}", encoding="utf-8")
            context = Context(root)
            with mock.patch.object(Context, "run_command", return_value=None), mock.patch(
                "promptline.scan.cache.os.scandir", wraps=os.scandir
            ) as scandir:
                render_prompt(context, no_color=True)
        self.assertEqual(scandir.call_count, 1)


if __name__ == "__main__":
    unittest.main()
