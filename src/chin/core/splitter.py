"""Positional splitting of a finished archive into numbered part files."""

from __future__ import annotations

import math
import os
from typing import List, Optional

from chin.core.constants import ARCHIVE_SUFFIX, BYTES_PER_MB
from chin.core.filesystem import LocalFilesystem
from chin.core.observer import ProgressObserver


def part_base_name(archive_path: str) -> str:
    """Strip the ``.chin`` suffix: ``out/data.chin`` -> ``out/data``."""
    if archive_path.endswith(ARCHIVE_SUFFIX):
        return archive_path[: -len(ARCHIVE_SUFFIX)]
    return archive_path


def part_name(base_name: str, index: int) -> str:
    return f"{base_name}-{index}{ARCHIVE_SUFFIX}"


def part_count(total_size: int, part_size: int) -> int:
    """Number of parts for ``total_size`` bytes; at least one."""
    return max(1, math.ceil(total_size / part_size))


def split_buffer(
    data: bytes,
    base_name: str,
    part_size: int,
    fs: Optional[LocalFilesystem] = None,
    observer: Optional[ProgressObserver] = None,
) -> List[str]:
    """
    Write ``data`` as ``<base_name>-<i>.chin`` files of at most ``part_size`` bytes.

    Slicing ignores record boundaries; concatenating the parts in index
    order gives back ``data`` byte for byte.

    Returns:
        Part file paths in index order
    """
    if part_size <= 0:
        raise ValueError(f"Part size must be positive, got {part_size}")
    fs = fs or LocalFilesystem()
    observer = observer or ProgressObserver()

    view = memoryview(data)
    parts: List[str] = []
    for i in range(part_count(len(data), part_size)):
        name = part_name(base_name, i + 1)
        chunk = view[i * part_size : (i + 1) * part_size]
        fs.write_file(name, chunk.tobytes())
        parts.append(name)
        observer.on_part_written(os.path.basename(name), len(chunk))
    return parts


def split_archive(
    data: bytes,
    archive_path: str,
    max_part_size_mb: int,
    fs: Optional[LocalFilesystem] = None,
    observer: Optional[ProgressObserver] = None,
) -> List[str]:
    """Split ``data`` into parts of ``max_part_size_mb`` MiB named after ``archive_path``."""
    if max_part_size_mb <= 0:
        raise ValueError(f"Split size must be a positive number of MB, got {max_part_size_mb}")
    return split_buffer(
        data,
        part_base_name(archive_path),
        max_part_size_mb * BYTES_PER_MB,
        fs=fs,
        observer=observer,
    )
