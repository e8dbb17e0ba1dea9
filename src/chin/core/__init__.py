"""CHIN core functionality."""

from .chin_reader import ChinReader
from .chin_writer import ChinWriter
from .codec import decode_entry, encode_entry, write_entry
from .errors import (
    ChinError,
    CorruptArchiveError,
    EmptyArchiveError,
    FilesystemError,
    FormatError,
    InvalidSplitFormatError,
    MissingPartsError,
    NoPartsFoundError,
    SplitArchiveError,
)
from .joiner import PartJoiner, locate_and_join
from .models import ArchivePlan, CompressResult, Entry, ExtractResult, PartInfo
from .observer import LoggingObserver, MetricsObserver, ObserverGroup, ProgressObserver
from .sink import FileSink, MemorySink
from .splitter import split_archive, split_buffer

__all__ = [
    "ChinWriter",
    "ChinReader",
    "PartJoiner",
    "locate_and_join",
    "split_archive",
    "split_buffer",
    "encode_entry",
    "decode_entry",
    "write_entry",
    "FileSink",
    "MemorySink",
    "Entry",
    "ArchivePlan",
    "ExtractResult",
    "CompressResult",
    "PartInfo",
    "ProgressObserver",
    "LoggingObserver",
    "MetricsObserver",
    "ObserverGroup",
    "ChinError",
    "FilesystemError",
    "FormatError",
    "CorruptArchiveError",
    "EmptyArchiveError",
    "SplitArchiveError",
    "NoPartsFoundError",
    "MissingPartsError",
    "InvalidSplitFormatError",
]
