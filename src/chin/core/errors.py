"""Exception hierarchy for CHIN archives."""

from __future__ import annotations

from typing import Optional, Sequence


class ChinError(Exception):
    """Base class for CHIN-specific errors."""


class FilesystemError(ChinError):
    """A host filesystem call (stat/read/write/list/mkdir) failed."""

    def __init__(self, op: str, path: str, cause: Optional[BaseException] = None):
        self.op = op
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to {op} {path!r}{detail}")


# Format related
class FormatError(ChinError, ValueError):
    """Archive bytes do not follow the record grammar."""


class CorruptArchiveError(FormatError):
    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        declared: Optional[int] = None,
        available: Optional[int] = None,
    ):
        self.offset = offset
        self.declared = declared
        self.available = available
        super().__init__(message)


class EmptyArchiveError(FormatError):
    pass


# Split archives
class SplitArchiveError(ChinError):
    pass


class NoPartsFoundError(SplitArchiveError):
    def __init__(self, base_name: str, directory: str):
        self.base_name = base_name
        self.directory = directory
        super().__init__(f"No part files found for {base_name!r} in {directory!r}")


class MissingPartsError(SplitArchiveError):
    def __init__(self, base_name: str, missing: Sequence[int]):
        self.base_name = base_name
        self.missing = list(missing)
        names = ", ".join(f"{base_name}-{n}.chin" for n in self.missing)
        super().__init__(f"Missing part files {self.missing}: {names}")


class InvalidSplitFormatError(SplitArchiveError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Invalid split file name: {path!r} (expected <name>-<N>.chin)"
        )
