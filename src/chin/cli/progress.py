from __future__ import annotations

import sys
from contextlib import ExitStack
from typing import IO, Optional

import click

from chin.core.observer import ProgressObserver


class ClickProgressObserver(ProgressObserver):
    """Renders one ``click.progressbar`` per phase (write or extract)."""

    def __init__(self, label: str, file: Optional[IO[str]] = None) -> None:
        self.label = label
        self.file = file or sys.stderr
        self._stack = ExitStack()
        self._bar = None

    def on_start(self, total: int) -> None:
        self.close()
        self._bar = self._stack.enter_context(
            click.progressbar(length=total, label=self.label, file=self.file)
        )

    def on_entry_processed(self, path: str) -> None:
        if self._bar is not None:
            self._bar.update(1)

    def close(self) -> None:
        self._stack.close()
        self._bar = None
