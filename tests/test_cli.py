import json
import logging
import os
from pathlib import Path
from typing import Iterator

import pytest
import structlog
from click.testing import CliRunner

from conftest import snapshot_tree

from chin.cli.main import cli, format_duration


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch) -> Iterator[CliRunner]:
    for name in list(os.environ):
        if name.startswith("CHIN_"):
            monkeypatch.delenv(name)
    yield CliRunner()
    # the CLI left the chin logger writing to the runner's captured stderr
    package_logger = logging.getLogger("chin")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
    structlog.reset_defaults()


@pytest.mark.integration
def test_cli_compress_then_decompress(
    runner: CliRunner, tmp_path: Path, sample_tree: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(cli, [str(sample_tree), "--no-progress"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "project.chin").is_file()

    result = runner.invoke(
        cli, ["project.chin", "--extract-dir", "restore", "--no-progress"]
    )
    assert result.exit_code == 0, result.output
    assert snapshot_tree(tmp_path / "restore" / "project") == snapshot_tree(sample_tree)


@pytest.mark.integration
def test_cli_split_flag(
    runner: CliRunner, tmp_path: Path, sample_tree: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (sample_tree / "big.bin").write_bytes(b"\xab" * (1024 * 1024 + 1))
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(cli, ["-mb", "1", str(sample_tree), "--output-dir", "out"])
    assert result.exit_code == 0, result.output
    assert sorted(os.listdir(tmp_path / "out")) == ["project-1.chin", "project-2.chin"]

    result = runner.invoke(
        cli, [str(tmp_path / "out" / "project-2.chin"), "--extract-dir", "restore"]
    )
    assert result.exit_code == 0, result.output
    assert snapshot_tree(tmp_path / "restore" / "project") == snapshot_tree(sample_tree)


@pytest.mark.integration
def test_cli_multiple_sources(
    runner: CliRunner, tmp_path: Path, sample_tree: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(sample_tree)
    result = runner.invoke(
        cli, ["notes.md", "docs", "--output-dir", str(tmp_path / "out"), "--no-progress"]
    )
    assert result.exit_code == 0, result.output
    assert (tmp_path / "out" / "notes-all.chin").is_file()


@pytest.mark.integration
def test_cli_corrupt_archive_exits_1(runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "bad.chin").write_bytes(b"\xff\xff\x00")
    result = runner.invoke(cli, ["bad.chin", "--no-progress"])
    assert result.exit_code == 1
    assert "operation_failed" in result.output
    assert "CorruptArchiveError" in result.output


@pytest.mark.integration
def test_cli_missing_source_exits_1(runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(cli, ["does-not-exist", "--no-progress"])
    assert result.exit_code == 1


@pytest.mark.integration
def test_cli_rejects_zero_split(runner: CliRunner, sample_tree: Path) -> None:
    result = runner.invoke(cli, ["-mb", "0", str(sample_tree)])
    assert result.exit_code == 2


@pytest.mark.integration
def test_cli_requires_paths(runner: CliRunner) -> None:
    result = runner.invoke(cli, [])
    assert result.exit_code == 2


@pytest.mark.integration
def test_cli_yaml_config_and_metrics_file(
    runner: CliRunner, tmp_path: Path, sample_tree: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    config = tmp_path / "chin.yaml"
    config.write_text(
        "output_dir: archives\nshow_progress: false\nmetrics_file: metrics.prom\n",
        encoding="utf-8",
    )

    result = runner.invoke(cli, ["--config", str(config), str(sample_tree)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "archives" / "project.chin").is_file()
    metrics = (tmp_path / "metrics.prom").read_text(encoding="utf-8")
    assert "chin_entries_written_total" in metrics
    assert "chin_bytes_written_total" in metrics


@pytest.mark.integration
def test_cli_invalid_yaml_config(runner: CliRunner, tmp_path: Path, sample_tree: Path) -> None:
    config = tmp_path / "chin.yaml"
    config.write_text("split_mb: -3\n", encoding="utf-8")
    result = runner.invoke(cli, ["--config", str(config), str(sample_tree)])
    assert result.exit_code == 2
    assert "Invalid configuration" in result.output


@pytest.mark.unit
def test_format_duration() -> None:
    assert format_duration(0.25) == "250ms"
    assert format_duration(3.14159) == "3.14s"


@pytest.mark.unit
def test_cli_malformed_yaml_config(runner: CliRunner, tmp_path: Path, sample_tree: Path) -> None:
    config = tmp_path / "chin.yaml"
    config.write_text("split_mb: [1\n", encoding="utf-8")
    result = runner.invoke(cli, ["--config", str(config), str(sample_tree)])
    assert result.exit_code == 2
    assert "Invalid configuration" in result.output


@pytest.mark.integration
def test_cli_log_level_silences_core_events(
    runner: CliRunner, tmp_path: Path, sample_tree: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(
        cli, [str(sample_tree), "--no-progress", "--log-level", "ERROR"]
    )
    assert result.exit_code == 0, result.output
    assert "compress_started" not in result.output
    assert "archive_written" not in result.output
    assert "entries_found" not in result.output


@pytest.mark.integration
def test_cli_json_logs_cover_core_events(
    runner: CliRunner, tmp_path: Path, sample_tree: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(cli, [str(sample_tree), "--no-progress", "--json-logs"])
    assert result.exit_code == 0, result.output

    records = [json.loads(line) for line in result.output.splitlines() if line.strip()]
    events = {record["event"]: record for record in records}
    assert {"compress_started", "archive_written", "compression_completed"} <= set(events)
    assert events["compress_started"]["operation"] == "compress"
    assert events["archive_written"]["logger"] == "chin.archiver"
    assert events["archive_written"]["service_name"] == "chin"


@pytest.mark.integration
def test_cli_json_logs_for_split_decompress(
    runner: CliRunner, tmp_path: Path, sample_tree: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    assert runner.invoke(cli, ["-mb", "1", str(sample_tree), "--no-progress"]).exit_code == 0

    result = runner.invoke(
        cli, ["project-1.chin", "--extract-dir", "restore", "--no-progress", "--json-logs"]
    )
    assert result.exit_code == 0, result.output
    records = [json.loads(line) for line in result.output.splitlines() if line.strip()]
    assert "parts_combined" in {record["event"] for record in records}
