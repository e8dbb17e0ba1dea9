"""ChinReader: two-pass decoding of a fully materialized archive."""

from __future__ import annotations

import io
import os
from typing import Iterator, Optional

from chin.core.codec import decode_entry
from chin.core.constants import (
    CONTENT_LEN_SIZE,
    CONTENT_LEN_STRUCT,
    PATH_LEN_SIZE,
    PATH_LEN_STRUCT,
)
from chin.core.errors import CorruptArchiveError, EmptyArchiveError
from chin.core.filesystem import LocalFilesystem
from chin.core.models import ArchivePlan, Entry, ExtractResult
from chin.core.observer import ProgressObserver
from chin.utils.logging import get_logger

logger = get_logger(__name__)


class ChinReader:
    """
    Reader for CHIN archive bytes.

    Decoding is split in two explicit passes over the same buffer:

    - :meth:`validate` walks every record header without touching the
      filesystem and returns an :class:`ArchivePlan`
    - :meth:`extract` consumes that plan and materializes each record

    Validation treats a header that cannot be read at the end of the buffer
    as the end of the archive. Extraction, running after a successful
    validation, treats any short read as corruption.
    """

    def __init__(
        self,
        data: bytes,
        fs: Optional[LocalFilesystem] = None,
        observer: Optional[ProgressObserver] = None,
    ) -> None:
        self.data = data
        self.fs = fs or LocalFilesystem()
        self.observer = observer or ProgressObserver()

    @classmethod
    def from_file(
        cls,
        path: str,
        fs: Optional[LocalFilesystem] = None,
        observer: Optional[ProgressObserver] = None,
    ) -> "ChinReader":
        fs = fs or LocalFilesystem()
        return cls(fs.read_file(path), fs=fs, observer=observer)

    def validate(self) -> ArchivePlan:
        """
        Count records and check every declared length fits the buffer.

        Raises:
            CorruptArchiveError: If a path or content length exceeds the remaining bytes
            EmptyArchiveError: If no complete record is found
        """
        total = len(self.data)
        view = memoryview(self.data)
        offset = 0
        end_offset = 0
        count = 0

        while True:
            if total - offset < PATH_LEN_SIZE:
                break
            (path_len,) = PATH_LEN_STRUCT.unpack_from(view, offset)
            offset += PATH_LEN_SIZE
            remaining = total - offset
            if path_len > remaining:
                raise CorruptArchiveError(
                    f"Corrupted data: path length {path_len} exceeds remaining data {remaining}",
                    offset=offset - PATH_LEN_SIZE,
                    declared=path_len,
                    available=remaining,
                )
            offset += path_len

            if total - offset < CONTENT_LEN_SIZE:
                break
            (content_len,) = CONTENT_LEN_STRUCT.unpack_from(view, offset)
            offset += CONTENT_LEN_SIZE
            remaining = total - offset
            if content_len > remaining:
                raise CorruptArchiveError(
                    f"Corrupted data: file data length {content_len} exceeds remaining data {remaining}",
                    offset=offset - CONTENT_LEN_SIZE,
                    declared=content_len,
                    available=remaining,
                )
            offset += content_len
            count += 1
            end_offset = offset

        if count == 0:
            raise EmptyArchiveError(
                f"No valid entries found in the archive data ({total} bytes)"
            )

        plan = ArchivePlan(entry_count=count, archive_size=total, end_offset=end_offset)
        if plan.trailing_bytes:
            self.observer.on_warning(
                f"{plan.trailing_bytes} trailing bytes after the last complete entry"
            )
        return plan

    def iter_entries(self) -> Iterator[Entry]:
        """Decode records from the start of the buffer until it is exhausted."""
        stream = io.BytesIO(self.data)
        while True:
            entry = decode_entry(stream)
            if entry is None:
                return
            yield entry

    def extract(self, plan: ArchivePlan, destination: str = ".") -> ExtractResult:
        """
        Materialize every record under ``destination``.

        Directory records create the directory and its ancestors; file records
        create the ancestors and overwrite any existing file. A plan whose
        entry count disagrees with the records actually decoded (one not
        produced by :meth:`validate` on this buffer) only triggers a warning.

        Raises:
            CorruptArchiveError: On a short read of a declared-length field
            FilesystemError: If a directory or file cannot be created
        """
        if plan.archive_size != len(self.data):
            raise ValueError(
                f"Plan was built for {plan.archive_size} bytes, buffer has {len(self.data)}"
            )
        self.observer.on_start(plan.entry_count)
        result = ExtractResult()

        for entry in self.iter_entries():
            target = os.path.join(destination, entry.path)
            if entry.is_directory():
                self.fs.mkdir_all(target)
                result.directories_created += 1
            else:
                self.fs.mkdir_all(os.path.dirname(target))
                self.fs.write_file(target, entry.content)
                result.files_created += 1
            self.observer.on_entry_processed(entry.path)

        if result.total_entries != plan.entry_count:
            logger.warning(
                "entry_count_mismatch",
                expected=plan.entry_count,
                processed=result.total_entries,
            )
            self.observer.on_warning(
                f"Expected {plan.entry_count} entries but processed {result.total_entries} entries"
            )
        self.observer.on_summary(
            result.files_created, result.directories_created, result.total_entries
        )
        return result
