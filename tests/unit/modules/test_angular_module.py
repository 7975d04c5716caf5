"""Tests for Angular project detection and version rendering."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from promptline.config import PromptConfig
from promptline.modules import Context, render_module
from promptline.modules.angular import dependency_requirement
from promptline.template import Segment

SYMBOL = "\U000f06bf "


def _write_package_json(root: Path, data: object) -> None:
    (root / "package.json").write_text(json.dumps(data), encoding="utf-8")


def _angular_workspace(root: Path, requirement: str | None, section: str = "dependencies") -> None:
    deps = {"rxjs": "~7.8.0"}
    if requirement is not None:
        deps["@angular/core"] = requirement
    _write_package_json(root, {"name": "app", section: deps})
    (root / "angular.json").write_text("{}", encoding="utf-8")


class AngularDetectionTests(unittest.TestCase):
    def test_folder_without_markers_renders_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertIsNone(render_module("angular", Context(Path(tmp))))

    def test_package_json_alone_is_not_enough(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _write_package_json(root, {"dependencies": {"@angular/core": "^16.2.1"}})
            self.assertIsNone(render_module("angular", Context(root)))

    def test_angular_json_alone_is_not_enough(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "angular.json").write_text("{}", encoding="utf-8")
            self.assertIsNone(render_module("angular", Context(root)))

    def test_missing_directory_renders_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertIsNone(render_module("angular", Context(Path(tmp) / "gone")))


class AngularVersionTests(unittest.TestCase):
    def test_caret_requirement_renders_version(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _angular_workspace(root, "^16.2.1")
            output = render_module("angular", Context(root))

        self.assertIsNotNone(output)
        self.assertEqual(output.segments, (Segment("via "), Segment(f"{SYMBOL}v16.2.1 ", "bold green")))
        self.assertEqual(output.text(), f"via {SYMBOL}v16.2.1 ")

    def test_dev_dependency_with_tilde(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _angular_workspace(root, "~15.0.0", section="devDependencies")
            output = render_module("angular", Context(root))
        self.assertEqual(output.text(), f"via {SYMBOL}v15.0.0 ")

    def test_exact_requirement_without_range_marker(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _angular_workspace(root, "17.0.0")
            output = render_module("angular", Context(root))
        self.assertEqual(output.text(), f"via {SYMBOL}v17.0.0 ")

    def test_missing_dependency_drops_version_group(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _angular_workspace(root, None)
            output = render_module("angular", Context(root))
        self.assertEqual(output.segments, (Segment("via "),))

    def test_malformed_package_json_drops_version_group(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "package.json").write_text("{oops", encoding="utf-8")
            (root / "angular.json").write_text("{}", encoding="utf-8")
            output = render_module("angular", Context(root))
        self.assertEqual(output.segments, (Segment("via "),))

    def test_unparsable_version_aborts_with_warning(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _angular_workspace(root, "^latest")
            with self.assertLogs("promptline.modules.base", level="WARNING") as logs:
                output = render_module("angular", Context(root))

        self.assertIsNone(output)
        self.assertIn("Error in module `angular`", logs.output[0])
        self.assertIn("latest", logs.output[0])

    def test_custom_format_and_version_format(self) -> None:
        config = PromptConfig.from_mapping(
            {"angular": {"format": "[ng $version](bold red)", "version_format": "${major}"}}
        )
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _angular_workspace(root, "^16.2.1")
            output = render_module("angular", Context(root, config=config))
        self.assertEqual(output.segments, (Segment("ng 16", "bold red"),))

    def test_custom_detection_files(self) -> None:
        config = PromptConfig.from_mapping({"angular": {"detect_angular_json": ["workspace.json"]}})
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _write_package_json(root, {"dependencies": {"@angular/core": "^16.2.1"}})
            (root / "workspace.json").write_text("{}", encoding="utf-8")
            output = render_module("angular", Context(root, config=config))
        self.assertEqual(output.text(), f"via {SYMBOL}v16.2.1 ")

    def test_disabled_module_renders_nothing(self) -> None:
        config = PromptConfig.from_mapping({"angular": {"disabled": True}})
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _angular_workspace(root, "^16.2.1")
            self.assertIsNone(render_module("angular", Context(root, config=config)))


class DependencyRequirementTests(unittest.TestCase):
    def test_runtime_dependencies_win_over_dev_dependencies(self) -> None:
        manifest = {
            "dependencies": {"@angular/core": "^16.0.0"},
            "devDependencies": {"@angular/core": "^15.0.0"},
        }
        self.assertEqual(dependency_requirement(manifest, "@angular/core"), "^16.0.0")

    def test_non_string_requirements_are_ignored(self) -> None:
        manifest = {"dependencies": {"@angular/core": {"version": "1"}}, "devDependencies": []}
        self.assertIsNone(dependency_requirement(manifest, "@angular/core"))


if __name__ == "__main__":
    unittest.main()
