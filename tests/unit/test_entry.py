"""
Unit tests for the Entry filesystem abstraction.
"""

import os
import tempfile
import shutil
from datetime import datetime, timedelta
from pathlib import Path
import pytest

from filehound.tools.entry import Entry
from filehound.models.search_results import FileStats


class TestEntry:
    """Test cases for Entry queries."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.root = Path(self.temp_dir)

        (self.root / "sub").mkdir()
        (self.root / "sub" / "b.txt").write_text("bb")
        (self.root / "a.json").write_text("{}")
        (self.root / ".hidden").write_text("secret")
        (self.root / "README").write_text("")

    def teardown_method(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_name_and_path(self):
        entry = Entry(os.path.join(self.temp_dir, "a.json"))
        assert entry.name == "a.json"
        assert entry.path == os.path.join(self.temp_dir, "a.json")

    def test_extension(self):
        assert Entry(os.path.join(self.temp_dir, "a.json")).extension() == "json"
        assert Entry(os.path.join(self.temp_dir, "README")).extension() == ""
        assert Entry("archive.tar.gz").extension() == "gz"

    def test_depth_counts_path_components(self):
        root = Entry(self.temp_dir)
        child = Entry(os.path.join(self.temp_dir, "sub", "b.txt"))
        assert child.depth() - root.depth() == 2
        assert Entry("r").depth() == 1
        assert Entry(os.path.join("r", "a.txt")).depth() == 2

    def test_type_checks(self):
        assert Entry(os.path.join(self.temp_dir, "sub")).is_directory() is True
        assert Entry(os.path.join(self.temp_dir, "a.json")).is_directory() is False
        assert Entry(os.path.join(self.temp_dir, "a.json")).is_socket() is False

    def test_is_directory_fails_for_missing_path(self):
        with pytest.raises(OSError):
            Entry(os.path.join(self.temp_dir, "missing")).is_directory()

    @pytest.mark.skipif(os.name == 'nt', reason="dot-prefix is the only hidden marker checked here")
    def test_is_hidden(self):
        assert Entry(os.path.join(self.temp_dir, ".hidden")).is_hidden() is True
        assert Entry(os.path.join(self.temp_dir, "a.json")).is_hidden() is False
        assert Entry(".").is_hidden() is False
        assert Entry("..").is_hidden() is False

    def test_size(self):
        assert Entry(os.path.join(self.temp_dir, "sub", "b.txt")).size() == 2
        assert Entry(os.path.join(self.temp_dir, "README")).size() == 0

    def test_timestamps(self):
        path = os.path.join(self.temp_dir, "a.json")
        past = (datetime.now() - timedelta(days=3)).timestamp()
        os.utime(path, (past, past))

        entry = Entry(path)
        assert isinstance(entry.last_modified(), datetime)
        assert abs(entry.last_modified().timestamp() - past) < 1
        assert abs(entry.last_accessed().timestamp() - past) < 1
        assert isinstance(entry.last_changed(), datetime)

    def test_matches_glob_uses_name(self):
        entry = Entry(os.path.join(self.temp_dir, "sub", "b.txt"))
        assert entry.matches_glob("*.txt")
        assert entry.matches_glob("b.*")
        assert not entry.matches_glob("sub*")

    def test_list_children_sorted(self):
        children = Entry(self.temp_dir).list_children()
        assert [child.name for child in children] == sorted([".hidden", "README", "a.json", "sub"])
        assert all(child.path.startswith(self.temp_dir) for child in children)

    def test_list_children_fails_for_missing_directory(self):
        with pytest.raises(OSError):
            Entry(os.path.join(self.temp_dir, "missing")).list_children()

    @pytest.mark.asyncio
    async def test_list_children_async_matches_sync(self):
        entry = Entry(self.temp_dir)
        assert await entry.list_children_async() == entry.list_children()

    def test_stat_snapshot(self):
        stats = Entry(os.path.join(self.temp_dir, "sub", "b.txt")).stat_snapshot()
        assert isinstance(stats, FileStats)
        assert stats.size == 2
        assert stats.is_file()
        assert not stats.is_directory()

    def test_equality(self):
        path = os.path.join(self.temp_dir, "a.json")
        assert Entry(path) == Entry(path)
        assert len({Entry(path), Entry(path)}) == 1
