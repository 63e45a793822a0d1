"""
Unit tests for search root resolution.
"""

import os
import pytest

from filehound.tools.paths import PathResolver, is_subpath, normalize_paths, reduce_paths


pytestmark = pytest.mark.skipif(os.name == "nt", reason="POSIX path syntax")


class TestNormalizePaths:
    """Test cases for normalize_paths."""

    def test_collapses_separators_and_relative_segments(self):
        assert normalize_paths(["/a//b/", "/a/./c/../d"]) == ["/a/b", "/a/d"]

    def test_deduplicates_after_normalization(self):
        assert normalize_paths(["/a", "/a/", "/a//"]) == ["/a"]

    def test_keeps_relative_paths_relative(self):
        assert normalize_paths(["src/", "./src"]) == ["src"]

    def test_preserves_order(self):
        assert normalize_paths(["/b", "/a", "/b"]) == ["/b", "/a"]


class TestReducePaths:
    """Test cases for nested root elimination."""

    def test_is_subpath(self):
        assert is_subpath("/a", "/a/b")
        assert not is_subpath("/a", "/a")
        assert not is_subpath("/a/b", "/a")
        assert not is_subpath("/a", "/ab")

    def test_is_subpath_mixes_relative_and_absolute(self):
        assert is_subpath(".", os.path.join(os.getcwd(), "child"))

    def test_drops_descendants(self):
        assert reduce_paths(["/a", "/a/b", "/a/b/c", "/d"]) == ["/a", "/d"]

    def test_sibling_prefix_is_not_descendant(self):
        assert reduce_paths(["/a", "/ab"]) == ["/a", "/ab"]


class TestPathResolver:
    """Test cases for PathResolver."""

    def test_without_depth_nested_roots_are_dropped(self):
        assert PathResolver().resolve(["/a", "/a/b"]) == ["/a"]

    def test_with_depth_nested_roots_are_kept(self):
        assert PathResolver(max_depth=2).resolve(["/a", "/a/b", "/a/"]) == ["/a", "/a/b"]

    def test_depth_zero_counts_as_configured(self):
        assert PathResolver(max_depth=0).resolve(["/a", "/a/b"]) == ["/a", "/a/b"]
