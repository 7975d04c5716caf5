"""Tests for detection request matching semantics."""

from __future__ import annotations

import unittest
from pathlib import Path

from promptline.scan import DetectionRequest, ScanCache


def _cache(files=(), folders=(), extensions=()) -> ScanCache:
    return ScanCache(
        directory=Path("/project"),
        files=frozenset(files),
        folders=frozenset(folders),
        extensions=frozenset(extensions),
    )


class DetectionRequestTests(unittest.TestCase):
    def test_empty_request_never_matches(self) -> None:
        request = DetectionRequest()
        self.assertTrue(request.is_empty())
        self.assertFalse(request.is_match(_cache(files={"package.json"}, folders={"src"}, extensions={"js"})))

    def test_any_category_is_enough(self) -> None:
        request = DetectionRequest().with_files(["package.json"]).with_extensions(["ts"]).with_folders(["node_modules"])
        self.assertTrue(request.is_match(_cache(files={"package.json"})))
        self.assertTrue(request.is_match(_cache(extensions={"ts"})))
        self.assertTrue(request.is_match(_cache(folders={"node_modules"})))
        self.assertFalse(request.is_match(_cache(files={"Cargo.toml"}, extensions={"rs"})))

    def test_files_do_not_match_folders_with_same_name(self) -> None:
        request = DetectionRequest().with_files(["package.json"])
        self.assertFalse(request.is_match(_cache(folders={"package.json"})))

    def test_builder_calls_accumulate(self) -> None:
        request = DetectionRequest().with_files(["a"]).with_files(["b", "a"])
        self.assertEqual(request.files, {"a", "b"})

    def test_extensions_accept_leading_dot(self) -> None:
        request = DetectionRequest().with_extensions([".js", "ts", ""])
        self.assertEqual(request.extensions, {"js", "ts"})

    def test_excluded_folder_vetoes_match(self) -> None:
        request = DetectionRequest().with_files(["package.json"]).exclude_folders(["esy.lock"])
        self.assertTrue(request.is_match(_cache(files={"package.json"})))
        self.assertFalse(request.is_match(_cache(files={"package.json"}, folders={"esy.lock"})))


if __name__ == "__main__":
    unittest.main()
