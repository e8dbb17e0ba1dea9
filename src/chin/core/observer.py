"""Progress observers injected into each archive operation."""

from __future__ import annotations

from typing import Iterable, Optional

from chin.core.models import human_size
from chin.monitoring.metrics import (
    ENTRIES_EXTRACTED,
    ENTRIES_WRITTEN,
    PARTS_WRITTEN,
    WARNINGS,
)
from chin.utils.logging import get_logger


class ProgressObserver:
    """
    Receives progress notifications from the writer, splitter, reader and joiner.

    All methods are no-ops; subclasses override what they need. Return values
    are ignored and observers never change what the core does.
    """

    def on_start(self, total: int) -> None:
        """Called once a phase knows how many entries it will process."""

    def on_entry_processed(self, path: str) -> None:
        """Called exactly once per entry written or extracted."""

    def on_part_written(self, name: str, size: int) -> None:
        pass

    def on_warning(self, message: str) -> None:
        pass

    def on_summary(
        self, files_created: int, dirs_created: int, total_entries: int
    ) -> None:
        pass


class ObserverGroup(ProgressObserver):
    """Fans every notification out to several observers."""

    def __init__(self, observers: Iterable[Optional[ProgressObserver]]) -> None:
        self.observers = [o for o in observers if o is not None]

    def on_start(self, total: int) -> None:
        for observer in self.observers:
            observer.on_start(total)

    def on_entry_processed(self, path: str) -> None:
        for observer in self.observers:
            observer.on_entry_processed(path)

    def on_part_written(self, name: str, size: int) -> None:
        for observer in self.observers:
            observer.on_part_written(name, size)

    def on_warning(self, message: str) -> None:
        for observer in self.observers:
            observer.on_warning(message)

    def on_summary(
        self, files_created: int, dirs_created: int, total_entries: int
    ) -> None:
        for observer in self.observers:
            observer.on_summary(files_created, dirs_created, total_entries)


class LoggingObserver(ProgressObserver):
    """Turns notifications into structlog events."""

    def __init__(self, name: str = "chin") -> None:
        self.logger = get_logger(name)

    def on_start(self, total: int) -> None:
        self.logger.info("entries_found", total=total)

    def on_entry_processed(self, path: str) -> None:
        self.logger.debug("entry_processed", path=path)

    def on_part_written(self, name: str, size: int) -> None:
        self.logger.info("part_written", part=name, size=human_size(size), size_bytes=size)

    def on_warning(self, message: str) -> None:
        self.logger.warning("archive_warning", message=message)

    def on_summary(
        self, files_created: int, dirs_created: int, total_entries: int
    ) -> None:
        self.logger.info(
            "extraction_summary",
            files_extracted=files_created,
            directories_created=dirs_created,
            total_entries=total_entries,
        )


class MetricsObserver(ProgressObserver):
    """Feeds Prometheus counters; ``mode`` tells entries written from extracted."""

    def __init__(self, mode: str) -> None:
        if mode not in ("compress", "decompress"):
            raise ValueError(f"Invalid mode: {mode!r}")
        self.mode = mode

    def on_entry_processed(self, path: str) -> None:
        if self.mode == "compress":
            ENTRIES_WRITTEN.inc()

    def on_part_written(self, name: str, size: int) -> None:
        PARTS_WRITTEN.inc()

    def on_warning(self, message: str) -> None:
        WARNINGS.inc()

    def on_summary(
        self, files_created: int, dirs_created: int, total_entries: int
    ) -> None:
        ENTRIES_EXTRACTED.labels(kind="file").inc(files_created)
        ENTRIES_EXTRACTED.labels(kind="directory").inc(dirs_created)
