"""Tests for semantic-version parsing and version_format rendering."""

from __future__ import annotations

import unittest

from promptline.errors import ResolutionError, VersionParseError
from promptline.versions import SemanticVersion, format_module_version, parse_version, strip_range_prefix


class ParseVersionTests(unittest.TestCase):
    def test_full_semantic_version(self) -> None:
        version = parse_version("1.2.3-rc.1+build.5")
        self.assertEqual(version, SemanticVersion(1, 2, 3, "rc.1", "build.5"))
        self.assertEqual(str(version), "1.2.3-rc.1+build.5")

    def test_leading_v_is_accepted(self) -> None:
        self.assertEqual(str(parse_version("v12.0.0")), "12.0.0")

    def test_malformed_versions_raise(self) -> None:
        for text in ("1.2", "01.2.3", "latest", "", ">=1.0.0"):
            with self.subTest(text=text):
                with self.assertRaises(VersionParseError):
                    parse_version(text)

    def test_parse_error_is_a_resolution_error(self) -> None:
        self.assertTrue(issubclass(VersionParseError, ResolutionError))


class StripRangePrefixTests(unittest.TestCase):
    def test_strips_one_caret_or_tilde(self) -> None:
        self.assertEqual(strip_range_prefix("^16.2.1"), "16.2.1")
        self.assertEqual(strip_range_prefix("~15.0.0"), "15.0.0")
        self.assertEqual(strip_range_prefix(" 14.0.0 "), "14.0.0")

    def test_other_ranges_are_left_alone(self) -> None:
        self.assertEqual(strip_range_prefix(">=12.0.0"), ">=12.0.0")


class FormatModuleVersionTests(unittest.TestCase):
    def test_raw_substitution(self) -> None:
        self.assertEqual(format_module_version("angular", "16.2.1", "v${raw}"), "v16.2.1")

    def test_component_variables(self) -> None:
        self.assertEqual(format_module_version("angular", "16.2.1", "${major}.${minor}"), "16.2")

    def test_components_are_absent_for_non_semantic_versions(self) -> None:
        self.assertEqual(format_module_version("nodejs", "18", "v${major}"), "v")
        self.assertEqual(format_module_version("nodejs", "18", "${raw}"), "18")

    def test_broken_format_logs_and_returns_none(self) -> None:
        with self.assertLogs("promptline.versions", level="WARNING") as logs:
            self.assertIsNone(format_module_version("angular", "1.0.0", "[${raw}"))
        self.assertIn("angular", logs.output[0])


if __name__ == "__main__":
    unittest.main()
