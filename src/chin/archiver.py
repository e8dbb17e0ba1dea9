"""
Top-level compress/decompress operations.

These glue the writer, splitter, joiner and reader together and decide
archive names the way the ``chin`` command does.
"""

from __future__ import annotations

import os
from typing import Optional, Sequence

from chin.core.chin_reader import ChinReader
from chin.core.chin_writer import ChinWriter
from chin.core.constants import ARCHIVE_SUFFIX, MULTI_SOURCE_SUFFIX
from chin.core.errors import FilesystemError
from chin.core.filesystem import LocalFilesystem
from chin.core.joiner import locate_and_join, looks_like_part
from chin.core.models import CompressResult, ExtractResult, human_size
from chin.core.observer import ProgressObserver
from chin.core.sink import FileSink, MemorySink
from chin.core.splitter import split_archive
from chin.monitoring.metrics import BYTES_WRITTEN
from chin.utils.logging import get_logger, log_context

logger = get_logger(__name__)


def _stem(path: str) -> str:
    return os.path.splitext(os.path.basename(path))[0]


def archive_name_for(sources: Sequence[str], fs: Optional[LocalFilesystem] = None) -> str:
    """
    Pick the archive file name for ``sources``.

    - one directory: ``<dir name>.chin``
    - one file: ``<file name without extension>.chin``
    - several sources: ``<first source without extension>-all.chin``
    """
    if not sources:
        raise ValueError("At least one source is required")
    if len(sources) > 1:
        return _stem(os.path.abspath(sources[0])) + MULTI_SOURCE_SUFFIX + ARCHIVE_SUFFIX

    fs = fs or LocalFilesystem()
    source = os.path.abspath(sources[0])
    is_dir, _size = fs.stat(source)
    if is_dir:
        return os.path.basename(source) + ARCHIVE_SUFFIX
    return _stem(source) + ARCHIVE_SUFFIX


def compress(
    sources: Sequence[str],
    split_mb: Optional[int] = None,
    output_dir: str = ".",
    observer: Optional[ProgressObserver] = None,
    fs: Optional[LocalFilesystem] = None,
) -> CompressResult:
    """
    Pack ``sources`` into one archive, or into numbered parts when ``split_mb`` is set.

    Args:
        sources: Files and/or directories, in the order they are stored
        split_mb: Maximum part size in MiB; None writes a single archive
        output_dir: Directory receiving the archive or its parts
        observer: Progress observer

    Returns:
        CompressResult with the archive path, entry count and part paths

    Raises:
        FilesystemError: On any stat/read/write failure (a partially written
            archive is left on disk)
        ValueError: If ``split_mb`` is not positive
    """
    if split_mb is not None and split_mb <= 0:
        raise ValueError(f"Split size must be a positive number of MB, got {split_mb}")
    fs = fs or LocalFilesystem()
    observer = observer or ProgressObserver()

    archive_path = os.path.join(output_dir, archive_name_for(sources, fs))
    fs.mkdir_all(output_dir)

    with log_context(operation="compress", archive=archive_path):
        logger.info(
            "compress_started",
            sources=list(sources),
            split_mb=split_mb,
        )
        probe = ChinWriter(MemorySink(), exclude_path=archive_path, fs=fs)
        observer.on_start(probe.count_entries(sources))

        if split_mb is None:
            try:
                f = open(archive_path, "wb")
            except OSError as exc:
                raise FilesystemError("create", archive_path, exc) from exc
            with f:
                sink = FileSink(f, archive_path)
                writer = ChinWriter(sink, exclude_path=archive_path, fs=fs, observer=observer)
                entries = writer.write(sources)
            BYTES_WRITTEN.inc(len(sink))
            logger.info(
                "archive_written",
                entries=entries,
                size=human_size(len(sink)),
                size_bytes=len(sink),
            )
            return CompressResult(
                archive_path=archive_path,
                entries_written=entries,
                archive_size_bytes=len(sink),
            )

        buffer = MemorySink()
        writer = ChinWriter(buffer, exclude_path=archive_path, fs=fs, observer=observer)
        entries = writer.write(sources)
        data = buffer.getvalue()
        BYTES_WRITTEN.inc(len(data))
        logger.info(
            "splitting_archive",
            entries=entries,
            size=human_size(len(data)),
            split_mb=split_mb,
        )
        parts = split_archive(data, archive_path, split_mb, fs=fs, observer=observer)
        return CompressResult(
            archive_path=archive_path,
            entries_written=entries,
            archive_size_bytes=len(data),
            parts=parts,
        )


def decompress(
    archive_path: str,
    destination: str = ".",
    observer: Optional[ProgressObserver] = None,
    fs: Optional[LocalFilesystem] = None,
) -> ExtractResult:
    """
    Unpack ``archive_path`` (a whole archive or any part of a split one) into ``destination``.

    Raises:
        InvalidSplitFormatError: If a part-looking name is not ``<base>-<N>.chin``
        NoPartsFoundError, MissingPartsError: If the split set is incomplete
        CorruptArchiveError, EmptyArchiveError: If the bytes are not a valid archive
        FilesystemError: On any read/write failure
    """
    fs = fs or LocalFilesystem()
    observer = observer or ProgressObserver()

    with log_context(operation="decompress", archive=archive_path):
        if looks_like_part(archive_path):
            logger.info("split_archive_detected")
            data = locate_and_join(archive_path, fs=fs, observer=observer)
        else:
            logger.info("regular_archive_detected")
            data = fs.read_file(archive_path)
        logger.info("archive_loaded", size=human_size(len(data)), size_bytes=len(data))

        reader = ChinReader(data, fs=fs, observer=observer)
        plan = reader.validate()
        logger.info("archive_validated", entries=plan.entry_count)
        fs.mkdir_all(destination)
        return reader.extract(plan, destination)
