"""
CHIN data models and structures.
"""

from dataclasses import dataclass, field
from typing import List

from chin.core.constants import DIRECTORY_MARKER


def human_size(size_bytes: float) -> str:
    """Format bytes as human-readable string."""
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.1f}{unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f}PB"


@dataclass
class Entry:
    """
    Represents a single decoded record of a CHIN archive.

    Attributes:
        path: Relative path as stored in the archive
        content: Raw file bytes (empty for directories)
    """

    path: str
    content: bytes = b""

    @property
    def content_length(self) -> int:
        return len(self.content)

    def is_directory(self) -> bool:
        """Zero-length content marks a directory."""
        return self.content_length == DIRECTORY_MARKER

    def __repr__(self) -> str:
        kind = "dir" if self.is_directory() else human_size(self.content_length)
        return f"Entry(path={self.path!r}, {kind})"


@dataclass(frozen=True)
class ArchivePlan:
    """
    Result of the validate pass, consumed by the extract pass.

    Attributes:
        entry_count: Number of complete records found
        archive_size: Length of the validated buffer
        end_offset: Offset just past the last complete record
    """

    entry_count: int
    archive_size: int
    end_offset: int

    @property
    def trailing_bytes(self) -> int:
        return self.archive_size - self.end_offset

    def __repr__(self) -> str:
        return (
            f"ArchivePlan(entries={self.entry_count}, "
            f"size={human_size(self.archive_size)}, "
            f"trailing={self.trailing_bytes})"
        )


@dataclass
class ExtractResult:
    files_created: int = 0
    directories_created: int = 0

    @property
    def total_entries(self) -> int:
        return self.files_created + self.directories_created


@dataclass
class PartInfo:
    """One on-disk fragment of a split archive."""

    path: str
    index: int
    size_bytes: int

    def __repr__(self) -> str:
        return f"PartInfo(index={self.index}, path={self.path!r}, size={human_size(self.size_bytes)})"


@dataclass
class CompressResult:
    archive_path: str
    entries_written: int
    archive_size_bytes: int
    parts: List[str] = field(default_factory=list)

    @property
    def is_split(self) -> bool:
        return bool(self.parts)
