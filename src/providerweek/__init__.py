"""Providerweek: ingestion of weekly provider visit-duration workbooks."""
from __future__ import annotations

from .ingestion import ParseResult, analyze_grid, parse
from .ingestion_utils import read_cell_grid
from .records import ProviderWeekRecord, records_to_frame
from .week_calendar import canonical_order, normalize_week_label

__all__ = [
    "ParseResult",
    "ProviderWeekRecord",
    "analyze_grid",
    "canonical_order",
    "normalize_week_label",
    "parse",
    "read_cell_grid",
    "records_to_frame",
]

__version__ = "0.1.0"
