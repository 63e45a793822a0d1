"""
FileHound search builder and search execution.

FileHound is a fluent builder: each configuration call records a setting
and returns the builder. build() freezes the settings into a SearchRequest,
and search() / search_sync() run a request. find() and find_sync() do both.

Example:
    files = (
        FileHound.create()
        .paths('/tmp', '/var/tmp')
        .ext('log')
        .size('>10kb')
        .find_sync()
    )
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence, Union

from pydantic import ValidationError

from .models.config import HoundConfig
from .models.search_request import SearchRequest
from .models.search_results import MatchResult
from .tools.filters import (
    FilterChain,
    Predicate,
    accessed_filter,
    changed_filter,
    discard_filter,
    empty_filter,
    extension_filter,
    glob_filter,
    modified_filter,
    size_filter,
    socket_filter,
    visible_filter,
)
from .tools.formatter import ResultFormatter
from .tools.fs_walker import FSWalker, gather_in_order
from .tools.paths import PathResolver


logger = logging.getLogger(__name__)

PathArg = Union[str, os.PathLike, Iterable[Union[str, os.PathLike]]]
SearchCallback = Callable[[Optional[BaseException], Optional[List[MatchResult]]], None]


def _one_or_many(values: Sequence[PathArg]) -> List[str]:
    """Flatten arguments that may each be a single value or a sequence of values."""
    flattened = []
    for value in values:
        if isinstance(value, (str, os.PathLike)):
            flattened.append(os.fspath(value))
        else:
            flattened.extend(os.fspath(item) for item in value)
    return flattened


@dataclass
class SearchEvents:
    """
    Callbacks notified during an asynchronous search.

    Attributes:
        on_match: Called with the path of every matching file, root by root
            once that root has been walked (never in directory-only mode)
        on_error: Called once with the error that aborted the search
        on_end: Called exactly once when the search is over, after on_error
    """
    on_match: Optional[Callable[[str], None]] = None
    on_error: Optional[Callable[[BaseException], None]] = None
    on_end: Optional[Callable[[], None]] = None

    def emit_match(self, path: str) -> None:
        if self.on_match is not None:
            self.on_match(path)

    def emit_error(self, error: BaseException) -> None:
        if self.on_error is not None:
            self.on_error(error)

    def emit_end(self) -> None:
        if self.on_end is not None:
            self.on_end()


async def search(request: SearchRequest, events: Optional[SearchEvents] = None) -> List[MatchResult]:
    """
    Run a search, walking all roots concurrently.

    Args:
        request: Frozen search settings
        events: Optional match/error/end callbacks

    Returns:
        Formatted matches, root by root in configured order

    Raises:
        OSError: If a directory cannot be listed or an entry cannot be stat'ed;
            no partial results are returned
    """
    events = events or SearchEvents()
    try:
        matcher = request.matcher()
        roots = PathResolver(request.max_depth).resolve(request.paths)
        walker = FSWalker(request, matcher)
        logger.info(f"Searching {len(roots)} root(s): {roots}")

        async def search_root(root: str):
            entries = await walker.walk_async(root)
            if not request.directories_only:
                for entry in entries:
                    events.emit_match(entry.path)
            return entries

        per_root = await gather_in_order(search_root(root) for root in roots)
        formatter = ResultFormatter(request.include_stats)
        matched = [entry for entries in per_root for entry in entries]
        loop = asyncio.get_running_loop()
        results = await loop.run_in_executor(None, formatter.format_all, matched)

        logger.info(f"Search finished with {len(results)} match(es)")
        return results

    except Exception as e:
        logger.error(f"Search failed: {e}")
        events.emit_error(e)
        raise
    finally:
        events.emit_end()


def search_sync(request: SearchRequest) -> List[MatchResult]:
    """
    Run a search with blocking calls, one root and one directory at a time.

    Raises:
        OSError: If a directory cannot be listed or an entry cannot be stat'ed
    """
    matcher = request.matcher()
    roots = PathResolver(request.max_depth).resolve(request.paths)
    walker = FSWalker(request, matcher)
    logger.info(f"Searching {len(roots)} root(s): {roots}")

    formatter = ResultFormatter(request.include_stats)
    results = []
    for root in roots:
        results.extend(formatter.format_all(walker.walk_sync(root)))

    logger.info(f"Search finished with {len(results)} match(es)")
    return results


class FileHound:
    """
    Fluent builder for filesystem searches.

    Filters combine with AND. negate() inverts the combined result, not the
    individual filters. The builder can be reused: every find() or
    find_sync() call builds a fresh SearchRequest from the current settings.
    """

    def __init__(self):
        self._search_paths: List[str] = [os.getcwd()]
        self._filters = FilterChain()
        self._max_depth: Optional[int] = None
        self._ignore_hidden_directories = False
        self._directories_only = False
        self._include_stats = False

    @staticmethod
    def create() -> 'FileHound':
        return FileHound()

    @staticmethod
    async def any(*searches: Awaitable[List[MatchResult]]) -> List[MatchResult]:
        """
        Await several searches concurrently and concatenate their matches.

        Example:
            matches = await FileHound.any(hound_a.find(), hound_b.find())
        """
        results = await gather_in_order(searches)
        return [match for result in results for match in result]

    @classmethod
    def from_config(cls, config: HoundConfig) -> 'FileHound':
        """Build a FileHound from a search profile."""
        hound = cls().paths(config.paths)

        if config.depth is not None:
            hound.depth(config.depth)
        if config.extensions:
            hound.ext(config.extensions)
        if config.globs:
            hound.glob(config.globs)
        if config.discard:
            hound.discard(config.discard)
        if config.size is not None:
            hound.size(config.size)
        if config.empty:
            hound.is_empty()
        if config.modified:
            hound.modified(config.modified)
        if config.accessed:
            hound.accessed(config.accessed)
        if config.changed:
            hound.changed(config.changed)
        if config.sockets_only:
            hound.socket()
        if config.ignore_hidden_files:
            hound.ignore_hidden_files()
        if config.ignore_hidden_directories:
            hound.ignore_hidden_directories()
        if config.directories_only:
            hound.directory()
        if config.include_file_stats:
            hound.include_file_stats()
        if config.negate:
            hound.negate()

        return hound

    # Search paths

    def paths(self, *paths: PathArg) -> 'FileHound':
        """
        Set the search paths, replacing the default (current directory).

        Accepts paths as separate arguments, as a sequence, or both.
        """
        search_paths = _one_or_many(paths)
        if not search_paths:
            raise ValueError("At least one search path must be given")
        self._search_paths = search_paths
        return self

    def path(self, *paths: PathArg) -> 'FileHound':
        """Set a single search path; only the first path given is used."""
        return self.paths(_one_or_many(paths)[:1])

    def get_search_paths(self) -> List[str]:
        """Get the roots a search would walk with the current settings."""
        return PathResolver(self._max_depth).resolve(self._search_paths)

    # Filters

    def add_filter(self, predicate: Predicate) -> 'FileHound':
        """Add a custom filter taking an Entry and returning a bool."""
        self._filters.add_filter(predicate)
        return self

    def modified(self, expression: str) -> 'FileHound':
        """Filter on modification time, e.g. "< 2 days"."""
        return self.add_filter(modified_filter(expression))

    def accessed(self, expression: str) -> 'FileHound':
        """Filter on access time, e.g. "< 10 minutes"."""
        return self.add_filter(accessed_filter(expression))

    def changed(self, expression: str) -> 'FileHound':
        """Filter on status change time."""
        return self.add_filter(changed_filter(expression))

    def discard(self, *patterns: PathArg) -> 'FileHound':
        """Drop entries whose path matches any of the regular expressions."""
        for pattern in _one_or_many(patterns):
            self.add_filter(discard_filter(pattern))
        return self

    def ext(self, *extensions: PathArg) -> 'FileHound':
        """Filter on extension; '.json' and 'json' are equivalent."""
        return self.add_filter(extension_filter(_one_or_many(extensions)))

    def size(self, expression: Union[str, int]) -> 'FileHound':
        """Filter on size, e.g. "<10kb"."""
        return self.add_filter(size_filter(expression))

    def is_empty(self) -> 'FileHound':
        return self.add_filter(empty_filter())

    def glob(self, *patterns: PathArg) -> 'FileHound':
        """Filter on name globs; an entry matching any of them passes."""
        return self.match(_one_or_many(patterns))

    def match(self, patterns: Union[str, Sequence[str]]) -> 'FileHound':
        return self.add_filter(glob_filter(patterns))

    def socket(self) -> 'FileHound':
        return self.add_filter(socket_filter())

    def ignore_hidden_files(self) -> 'FileHound':
        return self.add_filter(visible_filter())

    def negate(self) -> 'FileHound':
        self._filters.negate()
        return self

    # Traversal and output options

    def ignore_hidden_directories(self) -> 'FileHound':
        self._ignore_hidden_directories = True
        return self

    def include_file_stats(self) -> 'FileHound':
        self._include_stats = True
        return self

    def directory(self) -> 'FileHound':
        """Report matching sub-directories instead of files."""
        self._directories_only = True
        return self

    def depth(self, depth: int) -> 'FileHound':
        """Limit the search depth; 0 searches only the roots' direct children."""
        self._max_depth = depth
        return self

    # Execution

    def build(self) -> SearchRequest:
        """
        Freeze the current settings.

        Raises:
            pydantic.ValidationError: If a setting is invalid (e.g. negative depth)
        """
        return SearchRequest(
            paths=tuple(self._search_paths),
            filters=self._filters.filters,
            negated=self._filters.negated,
            max_depth=self._max_depth,
            ignore_hidden_directories=self._ignore_hidden_directories,
            directories_only=self._directories_only,
            include_stats=self._include_stats,
        )

    async def find(self, callback: Optional[SearchCallback] = None,
                   events: Optional[SearchEvents] = None) -> List[MatchResult]:
        """
        Search asynchronously.

        Args:
            callback: Optional completion callback, called as callback(None, results)
                on success or callback(error, None) on failure; the error is
                raised afterwards all the same
            events: Optional match/error/end callbacks

        Returns:
            List of matching paths, or StatsMatch objects when stats are included
        """
        try:
            try:
                request = self.build()
            except ValidationError as e:
                # search() never started, so its notifications are sent here
                logger.error(f"Invalid search settings: {e}")
                if events is not None:
                    events.emit_error(e)
                    events.emit_end()
                raise
            results = await search(request, events)
        except Exception as e:
            if callback is not None:
                callback(e, None)
            raise
        if callback is not None:
            callback(None, results)
        return results

    def find_sync(self) -> List[MatchResult]:
        """Search synchronously. No events are emitted."""
        return search_sync(self.build())
