"""
Search request data model for FileHound.

A SearchRequest is the frozen configuration a search runs against. It is
produced by FileHound.build() and consumed by search() / search_sync(),
so filters added to the builder afterwards never leak into a run that
already started.
"""

import os
from typing import Callable, Optional, Tuple, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..tools.filters import FilterChain, Predicate


class SearchRequest(BaseModel):
    """
    Immutable description of one search.

    Attributes:
        paths: Search paths as configured (normalized later by PathResolver)
        filters: Filter predicates, combined with AND
        negated: Whether the combined filter result is inverted
        max_depth: Maximum directory depth below each root (None = unlimited)
        ignore_hidden_directories: Whether hidden directories are pruned
        directories_only: Whether directories are reported instead of files
        include_stats: Whether results carry a stat snapshot
    """

    model_config = ConfigDict(frozen=True)

    paths: Tuple[str, ...] = Field(default_factory=lambda: (os.getcwd(),), min_length=1,
                                   description="Search paths")
    filters: Tuple[Callable[[Any], bool], ...] = Field(default=(), description="Filter predicates")
    negated: bool = Field(False, description="Invert the combined filter result")
    max_depth: Optional[int] = Field(None, ge=0, description="Maximum depth below each root")
    ignore_hidden_directories: bool = Field(False, description="Prune hidden directories")
    directories_only: bool = Field(False, description="Report directories instead of files")
    include_stats: bool = Field(False, description="Attach stat snapshots to results")

    @field_validator('paths')
    @classmethod
    def validate_paths(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        """Reject blank search paths."""
        for path in v:
            if not path or not path.strip():
                raise ValueError("Search paths cannot be empty")
        return v

    def has_depth_limit(self) -> bool:
        return self.max_depth is not None

    def matcher(self) -> Predicate:
        """Compose the effective predicate for a run."""
        return FilterChain(self.filters, self.negated).compose()

    def __str__(self) -> str:
        parts = [f"Paths: {len(self.paths)}"]
        parts.append(f"Filters: {len(self.filters)}{' (negated)' if self.negated else ''}")
        if self.has_depth_limit():
            parts.append(f"Max depth: {self.max_depth}")
        if self.directories_only:
            parts.append("Directories only")
        if self.include_stats:
            parts.append("With stats")
        return " | ".join(parts)
