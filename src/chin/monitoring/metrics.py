"""Prometheus metrics for CHIN operations."""

from prometheus_client import (
    REGISTRY,
    Counter,
    write_to_textfile,
)

# Counters
ENTRIES_WRITTEN = Counter(
    "chin_entries_written_total", "Number of entries written to archives"
)
BYTES_WRITTEN = Counter(
    "chin_bytes_written_total", "Total bytes written to archives and parts"
)
PARTS_WRITTEN = Counter(
    "chin_parts_written_total", "Number of split part files written"
)
ENTRIES_EXTRACTED = Counter(
    "chin_entries_extracted_total",
    "Number of entries materialized on disk",
    ["kind"],
)
WARNINGS = Counter("chin_warnings_total", "Non-fatal warnings reported")


def dump_metrics(path: str) -> None:
    """Write the default registry in Prometheus text format to path."""
    write_to_textfile(path, REGISTRY)


__all__ = [
    "ENTRIES_WRITTEN",
    "BYTES_WRITTEN",
    "PARTS_WRITTEN",
    "ENTRIES_EXTRACTED",
    "WARNINGS",
    "dump_metrics",
]
