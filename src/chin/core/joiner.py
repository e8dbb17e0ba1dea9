"""Locating, checking and joining the part files of a split archive."""

from __future__ import annotations

import os
import re
from typing import List, Optional, Tuple

from chin.core.constants import (
    OVERSIZED_LAST_PART_FACTOR,
    PART_NAME_PATTERN,
    PART_PROBE_SIZE,
    SPLIT_NAME_HINT,
)
from chin.core.errors import (
    FilesystemError,
    InvalidSplitFormatError,
    MissingPartsError,
    NoPartsFoundError,
)
from chin.core.filesystem import LocalFilesystem
from chin.core.models import PartInfo
from chin.core.observer import ProgressObserver
from chin.utils.logging import get_logger

logger = get_logger(__name__)


def looks_like_part(path: str) -> bool:
    """True when the file name ends in ``-<digits>.chin``."""
    return SPLIT_NAME_HINT.search(os.path.basename(path)) is not None


def parse_part_name(path: str) -> Tuple[str, int]:
    """
    Split a part file name into ``(base_name, index)``.

    ``base_name`` has no directory component.

    Raises:
        InvalidSplitFormatError: If the name is not ``<base>-<N>.chin``
    """
    match = PART_NAME_PATTERN.match(os.path.basename(path))
    if match is None:
        raise InvalidSplitFormatError(path)
    return match.group("base"), int(match.group("index"))


def find_missing(indices: List[int]) -> List[int]:
    """Indices absent from ``1..max(indices)``."""
    present = set(indices)
    return [n for n in range(1, max(present) + 1) if n not in present]


class PartJoiner:
    """
    Reassembles a split archive from any one of its parts.

    Usage::

        joiner = PartJoiner("backup-2.chin")
        data = joiner.join()
    """

    def __init__(
        self,
        any_part_path: str,
        fs: Optional[LocalFilesystem] = None,
        observer: Optional[ProgressObserver] = None,
    ) -> None:
        self.any_part_path = any_part_path
        self.fs = fs or LocalFilesystem()
        self.observer = observer or ProgressObserver()
        self.base_name, _index = parse_part_name(any_part_path)
        self.directory = os.path.dirname(any_part_path) or os.curdir

    def locate(self) -> List[PartInfo]:
        """
        List sibling parts sorted by index.

        Raises:
            NoPartsFoundError: If no file in the directory matches
            MissingPartsError: If the indices are not exactly ``1..count``
        """
        sibling = re.compile(rf"^{re.escape(self.base_name)}-(?P<index>[1-9]\d*)\.chin$")
        parts: List[PartInfo] = []
        for name in self.fs.list_dir(self.directory):
            match = sibling.match(name)
            if match is None:
                continue
            path = os.path.join(self.directory, name)
            _is_dir, size = self.fs.stat(path)
            parts.append(PartInfo(path=path, index=int(match.group("index")), size_bytes=size))

        if not parts:
            raise NoPartsFoundError(self.base_name, self.directory)

        parts.sort(key=lambda p: p.index)
        missing = find_missing([p.index for p in parts])
        if missing:
            raise MissingPartsError(self.base_name, missing)

        first, last = parts[0], parts[-1]
        if len(parts) > 1 and last.size_bytes > OVERSIZED_LAST_PART_FACTOR * first.size_bytes:
            self.observer.on_warning(
                f"Last part {os.path.basename(last.path)} ({last.size_bytes} bytes) is more than "
                f"{OVERSIZED_LAST_PART_FACTOR}x the first part ({first.size_bytes} bytes); "
                "parts may be missing at the end"
            )
        return parts

    def probe(self, parts: List[PartInfo]) -> None:
        """Read the first bytes of every part so unreadable files fail early."""
        for part in parts:
            try:
                self.fs.read_head(part.path, PART_PROBE_SIZE)
            except FilesystemError as exc:
                raise FilesystemError(
                    "open part file", os.path.basename(part.path), exc.cause
                ) from exc

    def join(self) -> bytes:
        """Locate, probe and concatenate all parts in index order."""
        parts = self.locate()
        self.probe(parts)
        chunks = []
        for part in parts:
            chunks.append(self.fs.read_file(part.path))
            logger.debug("part_read", part=part.path, index=part.index, size_bytes=part.size_bytes)
        data = b"".join(chunks)
        logger.info("parts_combined", base_name=self.base_name, parts=len(parts), size_bytes=len(data))
        return data


def locate_and_join(
    any_part_path: str,
    fs: Optional[LocalFilesystem] = None,
    observer: Optional[ProgressObserver] = None,
) -> bytes:
    """Return the combined archive bytes for the split set ``any_part_path`` belongs to."""
    return PartJoiner(any_part_path, fs=fs, observer=observer).join()
