"""Utility functions supporting file ingestion around the pure parser."""
from __future__ import annotations

import io
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

import pandas as pd

from .config import AppConfig
from .ingestion.cells import CellValue, normalize_grid
from .records import ProviderWeekRecord, records_to_frame


LOGGER_NAME = "providerweek"

EXCEL_EXTENSIONS = {".xlsx", ".xlsm", ".xls"}
TEXT_EXTENSIONS = {".csv", ".tsv", ".txt"}

GridSource = Union[str, Path, bytes, bytearray, io.BytesIO]


def ensure_directory(directory: str | Path) -> Path:
    path = Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    return path


def setup_logging(config: AppConfig) -> logging.Logger:
    """Configure the package logger with a console and a UTF-8 file handler.

    Handlers are reset on every call so repeated runs in one process do not
    duplicate output.
    """
    logs_dir = ensure_directory(config.paths.logs_dir)
    log_path = logs_dir / config.logging.file_name

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, config.logging.level, logging.INFO))
    logger.handlers = []

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    fh = logging.FileHandler(log_path, encoding="utf-8")
    fh.setFormatter(formatter)
    logger.addHandler(fh)

    sh = logging.StreamHandler()
    sh.setFormatter(formatter)
    logger.addHandler(sh)

    logger.debug("Logging initialised. Logs will be written to %s", log_path)
    return logger


def validate_extension(path: Path, allowed: Iterable[str]) -> None:
    allowed_set = {ext.lower() for ext in allowed}
    if path.suffix.lower() not in allowed_set:
        raise ValueError(f"Unsupported file extension '{path.suffix}' for {path}. Allowed: {sorted(allowed_set)}")


def _render_cell(value: object) -> object:
    if value is None or isinstance(value, str):
        return value
    if value is pd.NaT or pd.isna(value):
        return None
    # Date-typed header cells come back as timestamps; keep only what a M/D token needs
    if isinstance(value, (datetime, date)):
        return f"{value.month}/{value.day}/{value.year}"
    return value


def _frame_to_grid(df: pd.DataFrame) -> List[List[CellValue]]:
    rows = [[_render_cell(v) for v in row] for row in df.itertuples(index=False, name=None)]
    return normalize_grid(rows)


def read_cell_grid(source: GridSource, filename: str = "", sheet: Union[int, str] = 0) -> List[List[CellValue]]:
    """Decode the first sheet of a workbook (or a delimited file) into a cell grid.

    ``source`` may be a path or the raw bytes of an upload; for bytes the
    format is taken from ``filename`` and defaults to Excel. No header is
    applied, so every row of the sheet is preserved as-is.
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Input not found: {path}")
        suffix = path.suffix.lower()
        label = str(path)
        buf: Union[Path, io.BytesIO] = path
    else:
        suffix = Path(filename).suffix.lower() if filename else ".xlsx"
        label = filename or "<upload>"
        buf = source if isinstance(source, io.BytesIO) else io.BytesIO(bytes(source))

    if suffix in EXCEL_EXTENSIONS:
        try:
            df = pd.read_excel(buf, sheet_name=sheet, header=None, dtype=object)
        except Exception as exc:
            raise ValueError(f"Failed to read Excel file {label}: {exc}") from exc
    elif suffix in TEXT_EXTENSIONS:
        try:
            df = pd.read_csv(buf, header=None, dtype=str, sep=None, engine="python", keep_default_na=False)
        except Exception as exc:
            raise ValueError(f"Failed to read delimited file {label}: {exc}") from exc
    else:
        raise ValueError(f"Unsupported input file extension for {label}")
    return _frame_to_grid(df)


def gather_input_files(config: AppConfig, explicit: Optional[Iterable[str | Path]] = None) -> List[Path]:
    """Collect the files to ingest: explicit paths, else the raw directory."""
    if explicit:
        return [Path(p) for p in explicit]
    if not config.paths.raw_dir:
        return []
    raw_dir = ensure_directory(config.paths.raw_dir)
    allowed = set(config.ingestion.allowed_extensions)
    files = [path for path in raw_dir.iterdir() if path.is_file() and path.suffix.lower() in allowed]
    return sorted(files, key=lambda p: p.name.lower())


def write_output(records: Sequence[ProviderWeekRecord], output_path: str | Path, logger: Optional[logging.Logger] = None) -> Path:
    """Write records to CSV or Parquet depending on the file suffix."""
    out = Path(output_path)
    ensure_directory(out.parent)
    df = records_to_frame(records)
    if out.suffix.lower() in (".parquet", ".pq"):
        df.to_parquet(out, index=False)
    else:
        df.to_csv(out, index=False, encoding="utf-8")
    if logger is not None:
        logger.info("Wrote %d records to %s", len(df), out)
    return out


def summarize_records(records: Sequence[ProviderWeekRecord]) -> str:
    providers = len({r.provider for r in records})
    weeks = len({r.week for r in records})
    return f"Processed {len(records)} records for {providers} providers across {weeks} weeks."
