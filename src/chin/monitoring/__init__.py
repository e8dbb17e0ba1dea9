"""
Monitoring utilities for CHIN.
"""

from chin.monitoring.metrics import (
    BYTES_WRITTEN,
    ENTRIES_EXTRACTED,
    ENTRIES_WRITTEN,
    PARTS_WRITTEN,
    WARNINGS,
    dump_metrics,
)

__all__ = [
    "ENTRIES_WRITTEN",
    "BYTES_WRITTEN",
    "PARTS_WRITTEN",
    "ENTRIES_EXTRACTED",
    "WARNINGS",
    "dump_metrics",
]
