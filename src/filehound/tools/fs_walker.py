"""
Filesystem walker for FileHound.

This module implements the recursive descent behind a search. Each root is
walked depth-first; directories are pruned by depth limit and hidden-status,
files are tested against the effective predicate as they are discovered, and
in directory-only mode the visited directories are collected and filtered
once the root has been fully walked.

Two execution paths share the same decisions: walk_sync() blocks on every
listing, walk_async() hands each blocking filesystem call to the executor
and processes sibling directories concurrently. For a static filesystem both return the same entries in the
same order.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, List, NamedTuple, TypeVar

from .entry import Entry
from .filters import Predicate
from ..models.search_request import SearchRequest


logger = logging.getLogger(__name__)

T = TypeVar('T')


class WalkResult(NamedTuple):
    """Matched files and tracked directories of a subtree, in listing order."""
    files: List[Entry]
    directories: List[Entry]


def _empty() -> WalkResult:
    return WalkResult([], [])


async def _in_executor(func: Callable[..., T], *args) -> T:
    """Run a blocking call in the running loop's default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func, *args)


async def gather_in_order(awaitables: Iterable[Awaitable[T]]) -> List[T]:
    """
    Run awaitables concurrently and return their results in input order.

    On the first failure the remaining tasks are cancelled and the failure
    is raised; if several failed, the earliest in input order wins.
    """
    tasks = [asyncio.ensure_future(awaitable) for awaitable in awaitables]
    if not tasks:
        return []

    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.wait(pending)

    for task in tasks:
        if not task.cancelled() and task.exception() is not None:
            raise task.exception()
    return [task.result() for task in tasks]


class FSWalker:
    """
    Walks search roots and collects the entries accepted by a predicate.

    Per directory visit:
    - prune it when it lies deeper than max_depth below the root, or when
      hidden directories are ignored and it is hidden
    - otherwise list it, recurse into child directories and test child
      files against the predicate

    A failure to list a directory propagates and aborts the walk. A failure
    to determine whether a child is a directory does not: the child is
    treated as a file.
    """

    def __init__(self, request: SearchRequest, matcher: Predicate):
        """
        Initialize the walker.

        Args:
            request: Search settings (depth limit, hidden directories, directory mode)
            matcher: Effective predicate, fixed for the whole run
        """
        self.request = request
        self.matcher = matcher

    def _relative_depth(self, root: Entry, directory: Entry) -> int:
        return directory.depth() - root.depth()

    def _should_prune(self, root: Entry, directory: Entry) -> bool:
        max_depth = self.request.max_depth
        if max_depth is not None and self._relative_depth(root, directory) > max_depth:
            logger.debug(f"Pruning {directory.path}: deeper than {max_depth}")
            return True
        if self.request.ignore_hidden_directories and directory.is_hidden():
            logger.debug(f"Pruning hidden directory {directory.path}")
            return True
        return False

    def _is_directory(self, entry: Entry) -> bool:
        try:
            return entry.is_directory()
        except OSError as e:
            # Entries whose type cannot be read (e.g. dangling symlinks) are filtered as files
            logger.debug(f"Cannot determine type of {entry.path}, treating it as a file: {e}")
            return False

    def _accept(self, entry: Entry) -> WalkResult:
        if self.matcher(entry):
            return WalkResult([entry], [])
        return _empty()

    def _merge(self, results: Iterable[WalkResult]) -> WalkResult:
        files: List[Entry] = []
        directories: List[Entry] = []
        for result in results:
            files.extend(result.files)
            directories.extend(result.directories)
        return WalkResult(files, directories)

    def _track(self, directory: Entry, subtree: WalkResult) -> WalkResult:
        if not self.request.directories_only:
            return subtree
        return WalkResult(subtree.files, [directory] + subtree.directories)

    def _finish(self, root: Entry, result: WalkResult) -> List[Entry]:
        if self.request.directories_only:
            matched = [directory for directory in result.directories if self.matcher(directory)]
            logger.debug(f"Root {root.path}: {len(matched)} of {len(result.directories)} directories matched")
            return matched
        logger.debug(f"Root {root.path}: {len(result.files)} files matched")
        return result.files

    # Synchronous traversal

    def walk_sync(self, root_path: str) -> List[Entry]:
        """
        Walk one root with blocking calls.

        Args:
            root_path: Normalized search root

        Returns:
            Matching files, or matching directories in directory-only mode

        Raises:
            OSError: If any directory under the root cannot be listed, or a
                filter cannot stat an entry
        """
        root = Entry(root_path)
        if self._should_prune(root, root):
            return []
        return self._finish(root, self._search_sync(root, root))

    def _search_sync(self, root: Entry, directory: Entry) -> WalkResult:
        children = directory.list_children()
        return self._merge(self._visit_sync(root, child) for child in children)

    def _visit_sync(self, root: Entry, child: Entry) -> WalkResult:
        if not self._is_directory(child):
            return self._accept(child)
        if self._should_prune(root, child):
            return _empty()
        return self._track(child, self._search_sync(root, child))

    # Concurrent traversal

    async def walk_async(self, root_path: str) -> List[Entry]:
        """
        Walk one root without blocking the event loop. See walk_sync.

        Listings, per-child type checks and predicate evaluation all run in
        the loop's default executor, so stat calls made by filters never
        block the loop thread.
        """
        root = Entry(root_path)
        if self._should_prune(root, root):
            return []
        result = await self._search_async(root, root)
        return await _in_executor(self._finish, root, result)

    async def _search_async(self, root: Entry, directory: Entry) -> WalkResult:
        children = await directory.list_children_async()
        results = await gather_in_order(self._visit_async(root, child) for child in children)
        return self._merge(results)

    async def _visit_async(self, root: Entry, child: Entry) -> WalkResult:
        if not await _in_executor(self._is_directory, child):
            return await _in_executor(self._accept, child)
        if self._should_prune(root, child):
            return _empty()
        return self._track(child, await self._search_async(root, child))
