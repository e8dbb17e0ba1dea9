import os
import sys
from pathlib import Path
from typing import Dict, Optional

import pytest

# Ensure src/ is on sys.path for local test runs without installation
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from chin.core.observer import ProgressObserver  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast unit tests")
    config.addinivalue_line(
        "markers",
        "integration: tests that touch the filesystem end-to-end or run the CLI",
    )
    config.addinivalue_line("markers", "slow: slow-running tests")


class RecordingObserver(ProgressObserver):
    """Collects every notification for assertions."""

    def __init__(self) -> None:
        self.started: list[int] = []
        self.entries: list[str] = []
        self.parts: list[tuple[str, int]] = []
        self.warnings: list[str] = []
        self.summaries: list[tuple[int, int, int]] = []

    def on_start(self, total: int) -> None:
        self.started.append(total)

    def on_entry_processed(self, path: str) -> None:
        self.entries.append(path)

    def on_part_written(self, name: str, size: int) -> None:
        self.parts.append((name, size))

    def on_warning(self, message: str) -> None:
        self.warnings.append(message)

    def on_summary(self, files_created: int, dirs_created: int, total_entries: int) -> None:
        self.summaries.append((files_created, dirs_created, total_entries))


def snapshot_tree(root: Path) -> Dict[str, Optional[bytes]]:
    """Map each relative path under root to its bytes (None for directories)."""
    result: Dict[str, Optional[bytes]] = {}
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames:
            full = Path(dirpath) / name
            result[full.relative_to(root).as_posix()] = None
        for name in filenames:
            full = Path(dirpath) / name
            result[full.relative_to(root).as_posix()] = full.read_bytes()
    return result


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    project/
        docs/a.txt
        docs/b.bin
        empty/
        notes.md
    """
    root = tmp_path / "project"
    (root / "docs").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "docs" / "a.txt").write_text("hello world\n" * 50, encoding="utf-8")
    (root / "docs" / "b.bin").write_bytes(bytes(range(256)) * 16)
    (root / "notes.md").write_text("# Title\nSome content\n", encoding="utf-8")
    return root
