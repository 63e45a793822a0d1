"""
Search profile configuration model for FileHound.

A HoundConfig describes a reusable search (paths, filters and traversal
options) that can be stored in a YAML file and turned into a FileHound
with FileHound.from_config().
"""

import re
from typing import Dict, List, Optional, Any, Union
from pathlib import Path
from pydantic import BaseModel, Field, field_validator

from ..tools.expressions import parse_date_expression, parse_size_expression


def _as_list(v) -> List[str]:
    if v is None:
        return []
    if isinstance(v, str):
        return [v]
    return list(v)


class HoundConfig(BaseModel):
    """
    Persisted search profile.

    Attributes:
        paths: Directories to search
        depth: Maximum directory depth below each path (None = unlimited)
        extensions: File extensions to match, with or without leading dot
        globs: Glob patterns matched against entry names (any may match)
        discard: Regular expressions; entries whose path matches are dropped
        size: Size expression such as "<10kb"
        modified: Modification time expression such as "< 2 days"
        accessed: Access time expression
        changed: Status change time expression
        empty: Only match zero-byte entries
        sockets_only: Only match sockets
        directories_only: Report directories instead of files
        ignore_hidden_files: Drop hidden entries from the results
        ignore_hidden_directories: Do not descend into hidden directories
        include_file_stats: Attach stat snapshots to the results
        negate: Invert the combined filter result
    """

    paths: List[str] = Field(default_factory=lambda: ['.'], min_length=1, description="Directories to search")
    depth: Optional[int] = Field(None, ge=0, description="Maximum directory depth")
    extensions: List[str] = Field(default_factory=list, description="File extensions to match")
    globs: List[str] = Field(default_factory=list, description="Glob patterns to match")
    discard: List[str] = Field(default_factory=list, description="Regular expressions to exclude")
    size: Optional[Union[int, str]] = Field(None, description="Size expression")
    modified: Optional[str] = Field(None, description="Modification time expression")
    accessed: Optional[str] = Field(None, description="Access time expression")
    changed: Optional[str] = Field(None, description="Status change time expression")
    empty: bool = Field(False, description="Only match zero-byte entries")
    sockets_only: bool = Field(False, description="Only match sockets")
    directories_only: bool = Field(False, description="Report directories instead of files")
    ignore_hidden_files: bool = Field(False, description="Drop hidden entries")
    ignore_hidden_directories: bool = Field(False, description="Skip hidden directories")
    include_file_stats: bool = Field(False, description="Attach stat snapshots")
    negate: bool = Field(False, description="Invert the combined filter result")

    @field_validator('paths', mode='before')
    @classmethod
    def validate_paths(cls, v) -> List[str]:
        """Accept a single path or a list, expanding '~'."""
        paths = []
        for path in _as_list(v):
            if not path or not str(path).strip():
                continue
            path = str(path).strip()
            paths.append(str(Path(path).expanduser()) if path.startswith('~') else path)
        if not paths:
            raise ValueError("At least one search path must be specified")
        return paths

    @field_validator('extensions', mode='before')
    @classmethod
    def validate_extensions(cls, v) -> List[str]:
        """Normalize extensions to their dot-less form."""
        return [str(ext).strip().lstrip('.') for ext in _as_list(v) if str(ext).strip()]

    @field_validator('globs', mode='before')
    @classmethod
    def validate_globs(cls, v) -> List[str]:
        return _as_list(v)

    @field_validator('discard', mode='before')
    @classmethod
    def validate_discard(cls, v) -> List[str]:
        """Check that every discard pattern is a valid regular expression."""
        patterns = _as_list(v)
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid discard pattern '{pattern}': {e}")
        return patterns

    @field_validator('size')
    @classmethod
    def validate_size(cls, v):
        if v is not None:
            parse_size_expression(v)
        return v

    @field_validator('modified', 'accessed', 'changed')
    @classmethod
    def validate_date_expression(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            parse_date_expression(v)
        return v

    def has_filters(self) -> bool:
        """Check whether the profile restricts matches at all."""
        return bool(
            self.extensions or self.globs or self.discard or self.size is not None
            or self.modified or self.accessed or self.changed
            or self.empty or self.sockets_only or self.ignore_hidden_files
        )

    def validate_configuration(self) -> List[str]:
        """
        Check the profile for settings that are valid but probably unintended.

        Returns:
            List of warning messages
        """
        warnings = []

        for path in self.paths:
            if not Path(path).exists():
                warnings.append(f"Search path does not exist: {path}")
            elif not Path(path).is_dir():
                warnings.append(f"Search path is not a directory: {path}")

        if self.directories_only:
            file_filters = []
            if self.extensions:
                file_filters.append('extensions')
            if self.empty or self.size is not None:
                file_filters.append('size')
            if self.sockets_only:
                file_filters.append('sockets_only')
            if file_filters:
                warnings.append(
                    f"Filters {', '.join(file_filters)} are applied to directories "
                    f"in directory-only mode"
                )

        if self.empty and self.size is not None:
            warnings.append("Both 'empty' and 'size' are set; entries must satisfy both")

        if self.negate and not self.has_filters():
            warnings.append("'negate' without any filters matches nothing")

        if self.depth is not None and len(self.paths) > 1:
            warnings.append("Nested search paths are not merged when 'depth' is set; results may repeat")

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HoundConfig':
        """Create a HoundConfig instance from a dictionary."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        parts = [f"Paths: {', '.join(self.paths)}"]
        if self.depth is not None:
            parts.append(f"Depth: {self.depth}")
        if self.has_filters():
            parts.append("Filtered")
        if self.directories_only:
            parts.append("Directories only")
        return " | ".join(parts)
