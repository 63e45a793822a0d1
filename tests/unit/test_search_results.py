"""
Unit tests for search result models and result formatting.
"""

import os
import stat
import tempfile
import shutil
from datetime import datetime
from pathlib import Path
import pytest
from pydantic import ValidationError

from filehound.models.search_results import FileStats, StatsMatch
from filehound.tools.entry import Entry
from filehound.tools.formatter import ResultFormatter


def make_stats(**overrides):
    now = datetime(2024, 1, 1, 12, 0, 0)
    data = {
        'size': 2048,
        'mode': stat.S_IFREG | 0o644,
        'accessed_time': now,
        'modified_time': now,
        'changed_time': now,
    }
    data.update(overrides)
    return FileStats(**data)


class TestFileStats:
    """Test cases for FileStats."""

    def test_type_helpers(self):
        stats = make_stats()
        assert stats.is_file()
        assert not stats.is_directory()
        assert not stats.is_socket()
        assert make_stats(mode=stat.S_IFDIR | 0o755).is_directory()

    def test_permissions(self):
        assert make_stats().get_permissions() == '0o644'

    def test_size_human_readable(self):
        assert make_stats(size=0).get_size_human_readable() == "0.0 B"
        assert make_stats(size=2048).get_size_human_readable() == "2.0 KB"
        assert make_stats(size=3 * 1024 ** 2).get_size_human_readable() == "3.0 MB"

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            make_stats(size=-1)

    def test_to_dict(self):
        data = make_stats().to_dict()
        assert data['size'] == 2048
        assert data['size_human'] == "2.0 KB"
        assert data['permissions'] == '0o644'
        assert data['modified_time'] == "2024-01-01T12:00:00"

    def test_from_stat_result(self):
        with tempfile.NamedTemporaryFile(delete=False) as f:
            f.write(b"abc")
            temp_path = f.name
        try:
            stats = FileStats.from_stat_result(os.stat(temp_path))
            assert stats.size == 3
            assert stats.is_file()
            assert isinstance(stats.modified_time, datetime)
        finally:
            os.unlink(temp_path)


class TestStatsMatch:
    """Test cases for StatsMatch."""

    def test_fields(self):
        match = StatsMatch(path="/r/a.txt", stats=make_stats())
        assert match.path == "/r/a.txt"
        assert match.get_filename() == "a.txt"
        assert match.to_dict()['path'] == "/r/a.txt"
        assert match.to_dict()['stats']['size'] == 2048

    def test_empty_path_rejected(self):
        with pytest.raises(ValidationError):
            StatsMatch(path="", stats=make_stats())
        with pytest.raises(ValidationError):
            StatsMatch(path="   ", stats=make_stats())

    def test_immutable(self):
        match = StatsMatch(path="/r/a.txt", stats=make_stats())
        with pytest.raises(ValidationError):
            match.path = "/r/b.txt"


class TestResultFormatter:
    """Test cases for ResultFormatter."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.file_path = os.path.join(self.temp_dir, "a.txt")
        Path(self.file_path).write_text("hello")

    def teardown_method(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_formats_path_by_default(self):
        assert ResultFormatter().format(Entry(self.file_path)) == self.file_path

    def test_formats_stats_when_requested(self):
        result = ResultFormatter(include_stats=True).format(Entry(self.file_path))
        assert isinstance(result, StatsMatch)
        assert result.path == self.file_path
        assert result.stats.size == 5

    def test_stat_failure_propagates(self):
        with pytest.raises(OSError):
            ResultFormatter(include_stats=True).format(Entry(os.path.join(self.temp_dir, "gone")))
