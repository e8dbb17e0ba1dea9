"""Configuration for the chin command."""

from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    return int(raw)


class ChinConfig(BaseModel):
    """Settings shared by compress and decompress runs."""

    split_mb: Optional[int] = Field(
        None,
        ge=1,
        description="Split output into parts of this many MB (None = single archive)",
    )
    output_dir: str = Field(".", description="Directory receiving new archives")
    extract_dir: str = Field(".", description="Directory archives are extracted into")
    log_level: str = Field("INFO", description="Log level name")
    json_logs: bool = Field(False, description="Render logs as JSON instead of console")
    show_progress: bool = Field(True, description="Render a progress bar on stderr")
    metrics_file: Optional[str] = Field(
        None,
        description="Write Prometheus metrics in text format to this file after a run",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @classmethod
    def from_env(cls) -> "ChinConfig":
        return cls(
            split_mb=_env_int("CHIN_SPLIT_MB"),
            output_dir=os.getenv("CHIN_OUTPUT_DIR", "."),
            extract_dir=os.getenv("CHIN_EXTRACT_DIR", "."),
            log_level=os.getenv("CHIN_LOG_LEVEL", "INFO"),
            json_logs=_env_bool("CHIN_JSON_LOGS", False),
            show_progress=_env_bool("CHIN_SHOW_PROGRESS", True),
            metrics_file=os.getenv("CHIN_METRICS_FILE") or None,
        )

    @classmethod
    def from_yaml(cls, path: str) -> "ChinConfig":
        """Load configuration from YAML file."""
        import yaml

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def merged(self, **overrides: Any) -> "ChinConfig":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return self.model_validate({**self.model_dump(), **values})
