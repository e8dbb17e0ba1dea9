"""CHIN - pack files and directories into a single, optionally split, archive."""

__version__ = "1.0.0"

from .archiver import compress, decompress  # noqa: E402
from .core import (  # noqa: E402
    ChinReader,
    ChinWriter,
    PartJoiner,
    ProgressObserver,
)

__all__ = [
    "compress",
    "decompress",
    "ChinWriter",
    "ChinReader",
    "PartJoiner",
    "ProgressObserver",
]
