"""
FileHound - programmable filesystem search.

Walks one or more directory trees and returns the entries that satisfy a
composable set of filters (name, extension, size, timestamps, type,
hidden-status, depth), synchronously or with asyncio.
"""

from .hound import FileHound, SearchEvents, search, search_sync
from .models.search_request import SearchRequest
from .models.search_results import FileStats, StatsMatch, MatchResult
from .tools.entry import Entry
from .tools.expressions import ExpressionError

__version__ = "0.1.0"
__author__ = "FileHound Team"

__all__ = [
    'FileHound',
    'SearchEvents',
    'SearchRequest',
    'FileStats',
    'StatsMatch',
    'MatchResult',
    'Entry',
    'ExpressionError',
    'search',
    'search_sync',
]
