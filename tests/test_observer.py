import pytest
from prometheus_client import REGISTRY

from conftest import RecordingObserver

from chin.core.observer import MetricsObserver, ObserverGroup, ProgressObserver


def _sample(name: str, **labels: str) -> float:
    return REGISTRY.get_sample_value(name, labels or None) or 0.0


@pytest.mark.unit
def test_base_observer_is_noop() -> None:
    observer = ProgressObserver()
    observer.on_start(3)
    observer.on_entry_processed("a")
    observer.on_part_written("a-1.chin", 10)
    observer.on_warning("careful")
    observer.on_summary(1, 1, 2)


@pytest.mark.unit
def test_group_fans_out_and_skips_none() -> None:
    first, second = RecordingObserver(), RecordingObserver()
    group = ObserverGroup([first, None, second])

    group.on_start(2)
    group.on_entry_processed("a")
    group.on_part_written("x-1.chin", 5)
    group.on_warning("w")
    group.on_summary(1, 0, 1)

    for observer in (first, second):
        assert observer.started == [2]
        assert observer.entries == ["a"]
        assert observer.parts == [("x-1.chin", 5)]
        assert observer.warnings == ["w"]
        assert observer.summaries == [(1, 0, 1)]


@pytest.mark.unit
def test_metrics_observer_counts() -> None:
    written = _sample("chin_entries_written_total")
    parts = _sample("chin_parts_written_total")
    warnings = _sample("chin_warnings_total")
    files = _sample("chin_entries_extracted_total", kind="file")

    compress = MetricsObserver("compress")
    compress.on_entry_processed("a")
    compress.on_part_written("a-1.chin", 10)
    compress.on_warning("w")

    decompress = MetricsObserver("decompress")
    decompress.on_entry_processed("a")
    decompress.on_summary(4, 1, 5)

    assert _sample("chin_entries_written_total") == written + 1
    assert _sample("chin_parts_written_total") == parts + 1
    assert _sample("chin_warnings_total") == warnings + 1
    assert _sample("chin_entries_extracted_total", kind="file") == files + 4


@pytest.mark.unit
def test_metrics_observer_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError):
        MetricsObserver("upload")
