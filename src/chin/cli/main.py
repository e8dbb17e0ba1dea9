from __future__ import annotations

import time
from typing import Optional, Tuple

import click
import yaml
from pydantic import ValidationError

from chin import __version__
from chin.archiver import compress, decompress
from chin.cli.progress import ClickProgressObserver
from chin.config.config import ChinConfig
from chin.core.constants import ARCHIVE_SUFFIX
from chin.core.errors import ChinError
from chin.core.models import human_size
from chin.core.observer import LoggingObserver, MetricsObserver, ObserverGroup
from chin.monitoring.metrics import dump_metrics
from chin.utils.logging import configure_logging, get_logger


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    return f"{seconds:.2f}s"


def _load_config(config_path: Optional[str], **overrides) -> ChinConfig:
    try:
        base = ChinConfig.from_yaml(config_path) if config_path else ChinConfig.from_env()
        return base.merged(**overrides)
    except (ValidationError, ValueError, yaml.YAMLError) as exc:
        raise click.UsageError(f"Invalid configuration: {exc}") from exc


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.option(
    "-mb",
    "--mb",
    "split_mb",
    type=click.IntRange(min=1),
    default=None,
    help="Split output into chunks of <size> MB.",
)
@click.option("--output-dir", type=click.Path(file_okay=False), default=None, help="Where new archives are written.")
@click.option("--extract-dir", type=click.Path(file_okay=False), default=None, help="Where archives are extracted.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML configuration file (defaults to CHIN_* environment variables).",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
)
@click.option("--json-logs/--console-logs", default=None, help="Log output format.")
@click.option("--progress/--no-progress", "show_progress", default=None, help="Show a progress bar.")
@click.option("--metrics-file", type=click.Path(dir_okay=False), default=None, help="Dump Prometheus metrics here.")
@click.version_option(__version__, prog_name="chin")
@click.pass_context
def cli(
    ctx: click.Context,
    paths: Tuple[str, ...],
    split_mb: Optional[int],
    output_dir: Optional[str],
    extract_dir: Optional[str],
    config_path: Optional[str],
    log_level: Optional[str],
    json_logs: Optional[bool],
    show_progress: Optional[bool],
    metrics_file: Optional[str],
) -> None:
    """Compress PATHS into a .chin archive, or decompress a .chin archive.

    \b
      chin <file/folder>                 compress one item
      chin <file1> <file2> <folder> ...  compress several items
      chin -mb 1000 <file/folder>        compress and split into 1000 MB parts
      chin <file.chin> | <file-1.chin>   decompress
    """
    config = _load_config(
        config_path,
        split_mb=split_mb,
        output_dir=output_dir,
        extract_dir=extract_dir,
        log_level=log_level,
        json_logs=json_logs,
        show_progress=show_progress,
        metrics_file=metrics_file,
    )
    configure_logging(level=config.log_level, json_output=config.json_logs)
    logger = get_logger("chin.cli")

    decompressing = paths[0].endswith(ARCHIVE_SUFFIX)
    mode = "decompress" if decompressing else "compress"
    progress = (
        ClickProgressObserver("Extracting" if decompressing else "Compressing")
        if config.show_progress
        else None
    )
    observer = ObserverGroup([LoggingObserver("chin"), MetricsObserver(mode), progress])

    start = time.monotonic()
    try:
        if decompressing:
            if len(paths) > 1:
                logger.warning("extra_paths_ignored", paths=list(paths[1:]))
            result = decompress(paths[0], destination=config.extract_dir, observer=observer)
            if progress is not None:
                progress.close()
            logger.info(
                "decompression_completed",
                files=result.files_created,
                directories=result.directories_created,
                duration=format_duration(time.monotonic() - start),
            )
        else:
            outcome = compress(
                list(paths),
                split_mb=config.split_mb,
                output_dir=config.output_dir,
                observer=observer,
            )
            if progress is not None:
                progress.close()
            logger.info(
                "compression_completed",
                archive=outcome.archive_path,
                parts=len(outcome.parts),
                entries=outcome.entries_written,
                size=human_size(outcome.archive_size_bytes),
                duration=format_duration(time.monotonic() - start),
            )
    except ChinError as exc:
        logger.error(
            "operation_failed",
            operation=mode,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        ctx.exit(1)
    finally:
        if progress is not None:
            progress.close()
        if config.metrics_file:
            dump_metrics(config.metrics_file)


def main() -> None:
    cli(prog_name="chin")


if __name__ == "__main__":
    main()
