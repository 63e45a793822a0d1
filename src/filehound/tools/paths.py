"""
Search root normalization for FileHound.

Roots are normalized and deduplicated before a search starts. Without a
depth limit, roots nested under another configured root are dropped so
their contents are not reported twice.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional


logger = logging.getLogger(__name__)


def normalize_paths(paths: Iterable[str]) -> List[str]:
    """
    Normalize paths and drop duplicates, keeping first-seen order.

    Relative segments and repeated separators are collapsed; relative
    paths stay relative.
    """
    normalized = []
    seen = set()
    for path in paths:
        clean = os.path.normpath(path)
        if clean not in seen:
            seen.add(clean)
            normalized.append(clean)
    return normalized


def is_subpath(parent: str, child: str) -> bool:
    """Check whether child is strictly below parent on the filesystem."""
    parent_parts = Path(os.path.abspath(parent)).parts
    child_parts = Path(os.path.abspath(child)).parts
    return len(child_parts) > len(parent_parts) and child_parts[:len(parent_parts)] == parent_parts


def reduce_paths(paths: List[str]) -> List[str]:
    """Remove every path that is a strict descendant of another path in the list."""
    return [
        path for path in paths
        if not any(other != path and is_subpath(other, path) for other in paths)
    ]


class PathResolver:
    """
    Resolves the configured search paths into the roots actually walked.

    When a max depth is configured the nested-root elimination is skipped
    and overlapping roots are walked independently, so their shared
    entries can appear more than once.
    """

    def __init__(self, max_depth: Optional[int] = None):
        self.max_depth = max_depth

    def resolve(self, paths: Iterable[str]) -> List[str]:
        roots = normalize_paths(paths)
        if self.max_depth is not None:
            return roots

        reduced = reduce_paths(roots)
        if len(reduced) != len(roots):
            dropped = [root for root in roots if root not in reduced]
            logger.debug(f"Dropping nested search roots: {dropped}")
        return reduced
