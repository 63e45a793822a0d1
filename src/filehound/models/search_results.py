"""
Search result data models for FileHound.

This module defines the shapes a search hands back to its caller: a bare
path string, or a path paired with a stat snapshot when file stats are
requested.
"""

import os
import stat
from typing import Dict, Any, Union
from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class FileStats(BaseModel):
    """
    Stat snapshot of a matched entry.

    Attributes:
        size: Size in bytes
        mode: Raw st_mode bits
        inode: Inode number
        device: Device identifier
        nlink: Number of hard links
        uid: Owner user id
        gid: Owner group id
        accessed_time: Last access timestamp
        modified_time: Last modification timestamp
        changed_time: Last status change timestamp
    """

    size: int = Field(..., ge=0, description="Size in bytes")
    mode: int = Field(..., ge=0, description="Raw st_mode bits")
    inode: int = Field(0, ge=0, description="Inode number")
    device: int = Field(0, ge=0, description="Device identifier")
    nlink: int = Field(1, ge=0, description="Number of hard links")
    uid: int = Field(0, ge=0, description="Owner user id")
    gid: int = Field(0, ge=0, description="Owner group id")
    accessed_time: datetime = Field(..., description="Last access timestamp")
    modified_time: datetime = Field(..., description="Last modification timestamp")
    changed_time: datetime = Field(..., description="Last status change timestamp")

    @classmethod
    def from_stat_result(cls, stat_result: os.stat_result) -> 'FileStats':
        """Build a snapshot from an os.stat() result."""
        return cls(
            size=stat_result.st_size,
            mode=stat_result.st_mode,
            inode=stat_result.st_ino,
            device=stat_result.st_dev,
            nlink=stat_result.st_nlink,
            uid=stat_result.st_uid,
            gid=stat_result.st_gid,
            accessed_time=datetime.fromtimestamp(stat_result.st_atime),
            modified_time=datetime.fromtimestamp(stat_result.st_mtime),
            changed_time=datetime.fromtimestamp(stat_result.st_ctime),
        )

    def is_file(self) -> bool:
        return stat.S_ISREG(self.mode)

    def is_directory(self) -> bool:
        return stat.S_ISDIR(self.mode)

    def is_socket(self) -> bool:
        return stat.S_ISSOCK(self.mode)

    def get_permissions(self) -> str:
        """Get permission bits as an octal string (e.g. '0o644')."""
        return oct(stat.S_IMODE(self.mode))

    def get_size_human_readable(self) -> str:
        """Get size in human-readable format."""
        size = float(self.size)
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if size < 1024.0:
                return f"{size:.1f} {unit}"
            size /= 1024.0
        return f"{size:.1f} PB"

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary representation."""
        data = self.model_dump()
        data['size_human'] = self.get_size_human_readable()
        data['permissions'] = self.get_permissions()
        for key in ('accessed_time', 'modified_time', 'changed_time'):
            data[key] = getattr(self, key).isoformat()
        return data


class StatsMatch(BaseModel):
    """
    A matched entry reported together with its stats.

    Attributes:
        path: Path of the matched entry, as built from its search root
        stats: Stat snapshot taken after the entry passed filtering
    """

    model_config = {'frozen': True}

    path: str = Field(..., min_length=1, description="Path of the matched entry")
    stats: FileStats = Field(..., description="Stat snapshot of the entry")

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Match path cannot be empty")
        return v

    def get_filename(self) -> str:
        """Get just the filename without directory path."""
        return os.path.basename(self.path)

    def to_dict(self) -> Dict[str, Any]:
        return {'path': self.path, 'stats': self.stats.to_dict()}


# A search yields bare paths unless file stats were requested
MatchResult = Union[str, StatsMatch]
