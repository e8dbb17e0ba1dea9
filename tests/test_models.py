import pytest

from chin.core.models import ArchivePlan, CompressResult, Entry, ExtractResult, human_size


@pytest.mark.unit
def test_entry_kind() -> None:
    assert Entry(path="d").is_directory()
    assert not Entry(path="f", content=b"x").is_directory()
    assert Entry(path="f", content=b"abc").content_length == 3
    assert "dir" in repr(Entry(path="d"))


@pytest.mark.unit
def test_archive_plan_trailing_bytes() -> None:
    plan = ArchivePlan(entry_count=3, archive_size=100, end_offset=97)
    assert plan.trailing_bytes == 3
    assert "entries=3" in repr(plan)


@pytest.mark.unit
def test_extract_result_total() -> None:
    assert ExtractResult(files_created=2, directories_created=3).total_entries == 5


@pytest.mark.unit
def test_compress_result_is_split() -> None:
    assert not CompressResult("a.chin", 1, 10).is_split
    assert CompressResult("a.chin", 1, 10, parts=["a-1.chin"]).is_split


@pytest.mark.unit
def test_human_size() -> None:
    assert human_size(512) == "512.0B"
    assert human_size(2048) == "2.0KB"
    assert human_size(5 * 1024 * 1024) == "5.0MB"
