"""
ChinWriter: walks source paths and streams one record per filesystem object.
"""

from __future__ import annotations

import os
from typing import Iterator, List, Optional, Sequence, Tuple

from chin.core.codec import write_entry
from chin.core.errors import FilesystemError
from chin.core.filesystem import LocalFilesystem
from chin.core.observer import ProgressObserver
from chin.core.sink import ByteSink


class ChinWriter:
    """
    Writes CHIN records into a sink.

    Path rules:
        - single source: stored paths are relative to the parent of the
          source, so a directory keeps its own name as the top-level entry
        - several sources: stored paths are relative to the current working
          directory, keeping each source's full structure

    The archive itself is never stored, even when it lives inside a walked
    directory (``exclude_path`` is compared as an absolute path).

    A failed read aborts the whole write; whatever was already appended to
    the sink stays there.
    """

    def __init__(
        self,
        sink: ByteSink,
        exclude_path: Optional[str] = None,
        fs: Optional[LocalFilesystem] = None,
        observer: Optional[ProgressObserver] = None,
    ):
        """
        Args:
            sink: Destination for the encoded records (file or memory)
            exclude_path: Archive path to skip during the walk
            fs: Filesystem collaborator (defaults to LocalFilesystem)
            observer: Receives on_entry_processed once per written entry
        """
        self.sink = sink
        self.fs = fs or LocalFilesystem()
        self.observer = observer or ProgressObserver()
        self._exclude = os.path.abspath(exclude_path) if exclude_path else None
        self.entries_written = 0

    def _is_excluded(self, path: str) -> bool:
        return self._exclude is not None and os.path.abspath(path) == self._exclude

    def _plan(
        self, sources: Sequence[str], report: bool = True
    ) -> Iterator[Tuple[str, str]]:
        """Yield ``(source, base_dir)`` pairs according to the path rules."""
        if len(sources) == 1:
            source = os.path.abspath(sources[0])
            yield source, os.path.dirname(source)
            return

        cwd = os.getcwd()
        for source in sources:
            try:
                self.fs.stat(source)
            except FilesystemError as exc:
                if report:
                    self.observer.on_warning(f"Cannot access source: {source} ({exc.cause})")
                continue
            yield source, cwd

    def _walk(self, source: str) -> Iterator[Tuple[str, bool]]:
        for path, is_dir in self.fs.walk(source):
            if self._is_excluded(path):
                continue
            yield path, is_dir

    def count_entries(self, sources: Sequence[str]) -> int:
        """Count the entries ``write(sources)`` would emit."""
        if not sources:
            return 0
        return sum(
            1 for source, _base in self._plan(sources, report=False) for _ in self._walk(source)
        )

    def add_entry(self, rel_path: str, full_path: str, is_directory: bool) -> int:
        """
        Append one entry and notify the observer.

        Returns:
            Number of bytes appended to the sink
        """
        content = b"" if is_directory else self.fs.read_file(full_path)
        written = write_entry(self.sink, rel_path, is_directory, content)
        self.entries_written += 1
        self.observer.on_entry_processed(rel_path)
        return written

    def add_tree(self, source: str, base_dir: str) -> int:
        """Append ``source`` and everything under it; return entries added."""
        added = 0
        for path, is_dir in self._walk(source):
            self.add_entry(os.path.relpath(path, base_dir), path, is_dir)
            added += 1
        return added

    def write(self, sources: Sequence[str]) -> int:
        """
        Write every source in order.

        Returns:
            Count of entries written by this call

        Raises:
            ValueError: If no sources are given
            FilesystemError: If any stat/list/read fails during the walk
        """
        if not sources:
            raise ValueError("At least one source is required")
        written: List[int] = [self.add_tree(source, base) for source, base in self._plan(sources)]
        return sum(written)
