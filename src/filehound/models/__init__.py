"""
Data models for FileHound.

This module contains the search request, result and profile structures.
"""

from .search_results import FileStats, StatsMatch, MatchResult
from .search_request import SearchRequest
from .config import HoundConfig

__all__ = ['FileStats', 'StatsMatch', 'MatchResult', 'SearchRequest', 'HoundConfig']
