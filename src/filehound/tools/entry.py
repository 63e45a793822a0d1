"""
Filesystem entry abstraction for FileHound.

An Entry wraps a single path discovered during traversal and exposes the
queries the filters need: name, depth, type checks, timestamps, size and
glob matching. Every stat-backed query may raise OSError independently.
"""

import asyncio
import fnmatch
import os
import stat
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from ..models.search_results import FileStats


class Entry:
    """
    A single file, directory or special file visited by the walker.

    The path is kept exactly as it was built from the search root, so
    relative roots produce relative entry paths.

    Attributes:
        path: Full path of the entry
        name: Basename of the entry
    """

    def __init__(self, path: str):
        self.path = path
        self.name = os.path.basename(path) or path
        self._stat: Optional[os.stat_result] = None

    def __repr__(self) -> str:
        return f"Entry({self.path!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Entry) and other.path == self.path

    def __hash__(self) -> int:
        return hash(self.path)

    def _get_stat(self) -> os.stat_result:
        # Only successful lookups are cached; a failed one is retried by the next query
        if self._stat is None:
            self._stat = os.stat(self.path)
        return self._stat

    def depth(self) -> int:
        """Number of path components, used to compute depth relative to a root."""
        return len(Path(self.path).parts)

    def extension(self) -> str:
        """File extension without the leading dot, or an empty string."""
        return os.path.splitext(self.name)[1][1:]

    def is_directory(self) -> bool:
        return stat.S_ISDIR(self._get_stat().st_mode)

    def is_socket(self) -> bool:
        return stat.S_ISSOCK(self._get_stat().st_mode)

    def is_hidden(self) -> bool:
        """
        Check whether the entry is hidden.

        Dot-prefixed names are hidden everywhere ('.' and '..' excepted).
        On Windows the hidden attribute is consulted as well, which needs a stat.
        """
        if self.name.startswith('.') and self.name not in ('.', '..'):
            return True
        if os.name == 'nt':
            attributes = getattr(self._get_stat(), 'st_file_attributes', 0)
            return bool(attributes & stat.FILE_ATTRIBUTE_HIDDEN)
        return False

    def last_modified(self) -> datetime:
        return datetime.fromtimestamp(self._get_stat().st_mtime)

    def last_accessed(self) -> datetime:
        return datetime.fromtimestamp(self._get_stat().st_atime)

    def last_changed(self) -> datetime:
        return datetime.fromtimestamp(self._get_stat().st_ctime)

    def size(self) -> int:
        return self._get_stat().st_size

    def matches_glob(self, pattern: str) -> bool:
        return fnmatch.fnmatch(self.name, pattern)

    def list_children(self) -> List['Entry']:
        """
        List the immediate children of this directory.

        Returns:
            Child entries sorted by name

        Raises:
            OSError: If the directory cannot be listed
        """
        names = sorted(os.listdir(self.path))
        return [Entry(os.path.join(self.path, name)) for name in names]

    async def list_children_async(self) -> List['Entry']:
        """Same as list_children, run in the event loop's default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.list_children)

    def stat_snapshot(self) -> FileStats:
        """Take a fresh stat of the entry for result reporting."""
        return FileStats.from_stat_result(os.stat(self.path))
