"""Byte sinks the writer streams records into."""

from __future__ import annotations

from typing import BinaryIO, Optional, Protocol

from chin.core.errors import FilesystemError


class ByteSink(Protocol):
    """Anything that can append bytes and report how many it holds."""

    def append(self, data: bytes) -> None:
        ...

    def __len__(self) -> int:
        ...


class FileSink:
    """Appends straight to an open binary file handle."""

    def __init__(self, f: BinaryIO, path: Optional[str] = None) -> None:
        self._f = f
        self.path = path or getattr(f, "name", "<stream>")
        self._length = 0

    def append(self, data: bytes) -> None:
        try:
            self._f.write(data)
        except OSError as exc:
            raise FilesystemError("write", str(self.path), exc) from exc
        self._length += len(data)

    def __len__(self) -> int:
        return self._length


class MemorySink:
    """Accumulates the archive in memory (used when the output is split)."""

    def __init__(self) -> None:
        self._buf = bytearray()

    def append(self, data: bytes) -> None:
        self._buf += data

    def __len__(self) -> int:
        return len(self._buf)

    def getvalue(self) -> bytes:
        return bytes(self._buf)
