"""Ingestion entry point: workbook files in, normalized provider/week records out."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd

from .config import AppConfig, IngestionConfig, load_config
from .dq_checks import validate_records
from .ingestion import ParseResult, analyze_grid
from .ingestion_utils import (
    ensure_directory,
    gather_input_files,
    read_cell_grid,
    setup_logging,
    summarize_records,
    validate_extension,
    write_output,
)
from .logging_utils import end_phase_timer, log_error, log_system_event, log_warning, start_phase_timer
from .records import ProviderWeekRecord, records_to_frame
from .validation_report import build_report, write_report

REPORT_FILE_NAME = "ingestion_report.json"
DEFAULT_OUTPUT_NAME = "provider_weeks.csv"
DEFAULT_CONFIG_PATH = "config.yaml"


class EmptyResultError(ValueError):
    """A file parsed cleanly but produced no provider/week records."""


def ingest_file(path: Path, config: AppConfig) -> ParseResult:
    """Parse a single workbook; raise when nothing usable came out of it."""
    validate_extension(path, config.ingestion.allowed_extensions)
    grid = read_cell_grid(path)
    result = analyze_grid(grid, config.ingestion)
    if result.is_empty:
        raise EmptyResultError(f"No data found in {path.name}. Please check the file format.")
    return result


def run_ingestion(
    config_path: Optional[str] = DEFAULT_CONFIG_PATH,
    input_files: Optional[Iterable[str]] = None,
    threshold: Optional[float] = None,
    output_path: Optional[str] = None,
) -> pd.DataFrame:
    """Execute the ingestion run and return the combined records as a DataFrame."""
    # Only the implicit default may be absent; an explicit path must exist
    if not config_path or (config_path == DEFAULT_CONFIG_PATH and not Path(config_path).exists()):
        config_path = None
    config = load_config(config_path)
    if threshold is not None:
        config.ingestion = IngestionConfig(**{**config.ingestion.model_dump(), "threshold": threshold})
    logger = setup_logging(config)
    log_system_event(logger, "Ingestion started.")
    timings: Dict[str, float] = {}

    file_paths = gather_input_files(config, input_files)
    if not file_paths:
        log_warning(logger, "No input files found for ingestion.")
        return records_to_frame([])

    results: Dict[str, ParseResult] = {}
    records: List[ProviderWeekRecord] = []
    for path in file_paths:
        logger.info("Ingesting %s", path)
        started = start_phase_timer(path.name)
        result = ingest_file(path, config)
        end_phase_timer(path.name, started, timings, logger)
        logger.info(
            "%s: header row %d, %s strategy, %d weeks, %d records",
            path.name,
            result.header_row_index,
            result.strategy,
            len(result.weeks),
            len(result.records),
        )
        results[path.name] = result
        records.extend(result.records)

    issues = [issue for result in results.values() for issue in result.coercion_issues]
    warnings = validate_records(records, issues)
    for w in warnings:
        if w.severity == "high":
            log_warning(logger, w.message)
    if warnings:
        logger.info("%d data quality warnings raised", len(warnings))

    output_dir = ensure_directory(config.paths.output_dir)
    out = write_output(records, output_path or output_dir / DEFAULT_OUTPUT_NAME, logger)
    report_path = write_report(build_report(results, warnings), output_dir / REPORT_FILE_NAME)
    logger.info("Wrote ingestion report to %s", report_path)

    summary = summarize_records(records)
    print(summary)
    logger.info(summary)
    log_system_event(logger, f"Ingestion completed. Output: {out}")
    return records_to_frame(records)


def build_arg_parser() -> argparse.ArgumentParser:
    """Create a CLI argument parser for the ingestion runner."""

    parser = argparse.ArgumentParser(description="Ingest weekly provider visit-duration workbooks")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to the configuration file")
    parser.add_argument("--threshold", type=float, default=None, help="Visit-length threshold named in the headers (default 20)")
    parser.add_argument("--output", default=None, help="Output file (.csv or .parquet)")
    parser.add_argument("inputs", nargs="*", help="Explicit input files to ingest")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""

    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        run_ingestion(
            config_path=args.config,
            input_files=args.inputs or None,
            threshold=args.threshold,
            output_path=args.output,
        )
    except (FileNotFoundError, ValueError) as exc:
        log_error(logging.getLogger("providerweek"), str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
