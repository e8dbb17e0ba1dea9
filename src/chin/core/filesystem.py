"""Local filesystem access used by the writer, reader and joiner."""

from __future__ import annotations

import os
from typing import Iterator, List, Tuple

from chin.core.errors import FilesystemError


class LocalFilesystem:
    """
    Thin wrapper around ``os`` calls.

    Every ``OSError`` is re-raised as :class:`FilesystemError` naming the
    operation and path.
    """

    def stat(self, path: str) -> Tuple[bool, int]:
        """Return ``(is_directory, size)`` for path."""
        try:
            st = os.stat(path)
        except OSError as exc:
            raise FilesystemError("stat", path, exc) from exc
        is_dir = os.path.isdir(path)
        return is_dir, 0 if is_dir else st.st_size

    def walk(self, root: str) -> Iterator[Tuple[str, bool]]:
        """
        Yield ``(path, is_directory)`` depth-first, pre-order.

        A directory is yielded before its contents; siblings are visited in
        lexical order so archives are reproducible.
        """
        is_dir, _size = self.stat(root)
        yield root, is_dir
        if not is_dir:
            return
        for name in self.list_dir(root):
            child = os.path.join(root, name)
            if os.path.isdir(child) and not os.path.islink(child):
                yield from self.walk(child)
            else:
                yield child, False

    def read_file(self, path: str) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as exc:
            raise FilesystemError("read", path, exc) from exc

    def read_head(self, path: str, size: int) -> bytes:
        """Read at most ``size`` bytes from the start of path."""
        try:
            with open(path, "rb") as f:
                return f.read(size)
        except OSError as exc:
            raise FilesystemError("read", path, exc) from exc

    def write_file(self, path: str, data: bytes) -> None:
        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as exc:
            raise FilesystemError("write", path, exc) from exc

    def mkdir_all(self, path: str) -> None:
        if not path:
            return
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as exc:
            raise FilesystemError("create directory", path, exc) from exc

    def list_dir(self, path: str) -> List[str]:
        try:
            return sorted(os.listdir(path))
        except OSError as exc:
            raise FilesystemError("list", path, exc) from exc
