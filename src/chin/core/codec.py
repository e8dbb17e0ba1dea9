"""
Entry codec: one length-prefixed (path, content) record.

Layout (little endian)::

    path_len u16 | path bytes | content_len u32 | content bytes

``content_len == 0`` marks a directory and no content bytes follow.
"""

from __future__ import annotations

import os
from typing import BinaryIO, Optional

from chin.core.constants import (
    CONTENT_LEN_SIZE,
    CONTENT_LEN_STRUCT,
    DIRECTORY_MARKER,
    MAX_CONTENT_LENGTH,
    MAX_PATH_LENGTH,
    PATH_LEN_SIZE,
    PATH_LEN_STRUCT,
)
from chin.core.errors import CorruptArchiveError, FormatError
from chin.core.models import Entry
from chin.core.sink import ByteSink


def encode_path(path: str) -> bytes:
    """Encode a stored path and check it fits the 16-bit length field."""
    path_bytes = os.fsencode(path)
    if len(path_bytes) > MAX_PATH_LENGTH:
        raise FormatError(
            f"Path too long: {len(path_bytes)} bytes (max {MAX_PATH_LENGTH}): {path[:80]!r}..."
        )
    return path_bytes


def encode_entry(path: str, is_directory: bool, content: bytes = b"") -> bytes:
    """Return the full record for one entry."""
    path_bytes = encode_path(path)
    if is_directory:
        content = b""
    elif len(content) > MAX_CONTENT_LENGTH:
        raise FormatError(
            f"File too large for archive: {len(content)} bytes (max {MAX_CONTENT_LENGTH}): {path!r}"
        )
    return b"".join(
        (
            PATH_LEN_STRUCT.pack(len(path_bytes)),
            path_bytes,
            CONTENT_LEN_STRUCT.pack(DIRECTORY_MARKER if is_directory else len(content)),
            content,
        )
    )


def write_entry(
    sink: ByteSink, path: str, is_directory: bool, content: bytes = b""
) -> int:
    """Append one record to sink and return the number of bytes written."""
    record = encode_entry(path, is_directory, content)
    sink.append(record)
    return len(record)


def _read_exact(stream: BinaryIO, size: int, what: str, path: Optional[str] = None) -> bytes:
    offset = stream.tell()
    data = stream.read(size)
    if len(data) != size:
        where = f" for {path!r}" if path is not None else ""
        raise CorruptArchiveError(
            f"Failed to read {what}{where} at offset {offset}: "
            f"expected {size} bytes, got {len(data)}",
            offset=offset,
            declared=size,
            available=len(data),
        )
    return data


def decode_entry(stream: BinaryIO) -> Optional[Entry]:
    """
    Decode the next record from stream.

    Returns None when fewer than two bytes are left at a record boundary
    (end of archive). A record that starts but cannot be completed raises
    :class:`CorruptArchiveError`.
    """
    raw_len = stream.read(PATH_LEN_SIZE)
    if len(raw_len) < PATH_LEN_SIZE:
        return None
    (path_len,) = PATH_LEN_STRUCT.unpack(raw_len)
    path = os.fsdecode(_read_exact(stream, path_len, "path data"))

    (content_len,) = CONTENT_LEN_STRUCT.unpack(
        _read_exact(stream, CONTENT_LEN_SIZE, "data length", path)
    )
    if content_len == DIRECTORY_MARKER:
        return Entry(path=path)
    return Entry(path=path, content=_read_exact(stream, content_len, "file data", path))
