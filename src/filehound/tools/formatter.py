"""
Result formatting for FileHound.
"""

from typing import Iterable, List

from .entry import Entry
from ..models.search_results import MatchResult, StatsMatch


class ResultFormatter:
    """
    Turns matched entries into the values a search returns.

    Stats are only fetched here, after filtering, so rejected entries never
    cost a stat call for reporting.
    """

    def __init__(self, include_stats: bool = False):
        self.include_stats = include_stats

    def format(self, entry: Entry) -> MatchResult:
        """
        Format a matched entry.

        Returns:
            The entry's path, or a StatsMatch when stats are included

        Raises:
            OSError: If stats are included and the entry cannot be stat'ed
        """
        if self.include_stats:
            return StatsMatch(path=entry.path, stats=entry.stat_snapshot())
        return entry.path

    def format_all(self, entries: Iterable[Entry]) -> List[MatchResult]:
        return [self.format(entry) for entry in entries]
