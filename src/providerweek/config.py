"""Configuration loading and validation using Pydantic."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


DEFAULT_EXTENSIONS = [".xlsx", ".xlsm", ".xls", ".csv", ".tsv", ".txt"]


class IngestionConfig(BaseModel):
    """Settings that steer header inference for one parse."""

    threshold: float = Field(20, gt=0, description="Visit-length threshold named in header text, e.g. 'Over 20'")
    header_scan_rows: int = Field(5, ge=1, description="Rows scanned from the top when locating the header")
    fixed_width: int = Field(3, ge=1, description="Columns per week for the fixed-width fallback")
    max_fixed_weeks: int = Field(52, ge=1, description="Upper bound on synthetic weeks in the fixed-width fallback")
    allowed_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="Input file extensions picked up from the raw directory",
    )

    @field_validator("allowed_extensions")
    @classmethod
    def normalize_extensions(cls, v):
        """Lower-case extensions and make sure each starts with a dot."""
        out = []
        for ext in v:
            ext = str(ext).strip().lower()
            if not ext:
                continue
            out.append(ext if ext.startswith(".") else f".{ext}")
        if not out:
            raise ValueError("allowed_extensions must name at least one extension")
        return out


class LoggingConfig(BaseModel):
    level: str = Field("INFO", description="Level name for the providerweek logger")
    file_name: str = Field("ingestion_log.txt", description="Log file written under paths.logs_dir")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        level = str(v).upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown logging level: {v}")
        return level


class PathsConfig(BaseModel):
    raw_dir: Optional[str] = None
    output_dir: str = "output"
    logs_dir: str = "logs"


class AppConfig(BaseModel):
    """Complete runner configuration."""

    paths: PathsConfig = Field(default_factory=PathsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)


def load_config(path: str | Path | None) -> AppConfig:
    """Load and validate a YAML configuration file.

    A missing path or an empty file gives the defaults.

    Raises:
        FileNotFoundError: If ``path`` is given but does not exist
        ValidationError: If any section holds invalid values
    """
    if path is None:
        return AppConfig()
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    with open(p, "r", encoding="utf-8") as stream:
        raw: Dict[str, Any] = yaml.safe_load(stream) or {}
    return AppConfig(**{k: v for k, v in raw.items() if v is not None})
