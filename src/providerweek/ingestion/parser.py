"""Parse a weekly provider grid into normalized ``ProviderWeekRecord`` rows.

The grid is the first sheet of a workbook decoded into rows of raw cells. The
parse is pure: no I/O, no shared state, no exceptions for malformed layouts.
A grid that yields nothing comes back as an empty result, and callers decide
how to surface that to the user.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config import IngestionConfig
from ..records import ProviderWeekRecord
from .cells import CellGrid
from .column_roles import DEFAULT_THRESHOLD
from .header_locator import locate_header
from .materializer import CoercionIssue, materialize_rows
from .strategies import CascadeContext, ResolvedWeek, run_cascade
from .week_segmenter import WeekSegment, find_week_segments

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseResult:
    records: Tuple[ProviderWeekRecord, ...] = ()
    header_row_index: int = 0
    strategy: Optional[str] = None
    segments: Tuple[WeekSegment, ...] = ()
    weeks: Tuple[ResolvedWeek, ...] = ()
    coercion_issues: Tuple[CoercionIssue, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.records

    @property
    def week_labels(self) -> List[str]:
        return [w.label for w in self.weeks]


def analyze_grid(grid: CellGrid, config: Optional[IngestionConfig] = None) -> ParseResult:
    """Run header location, the strategy cascade and row materialization."""
    cfg = config or IngestionConfig()
    if not grid:
        logger.warning("Grid has no rows; nothing to parse")
        return ParseResult()

    header_index, _ = locate_header(grid, cfg.header_scan_rows)
    segments = tuple(find_week_segments(grid, header_index))
    logger.debug("Header row %d, %d week anchors found", header_index, len(segments))

    ctx = CascadeContext(
        grid=grid,
        header_index=header_index,
        segments=segments,
        threshold=cfg.threshold,
        fixed_width=cfg.fixed_width,
        max_fixed_weeks=cfg.max_fixed_weeks,
    )
    mapping = run_cascade(ctx)
    if mapping is None:
        return ParseResult(header_row_index=header_index, segments=segments)

    records, issues = materialize_rows(grid, header_index, mapping.weeks)
    if not records:
        logger.warning("No records parsed (header row %d, %s strategy)", header_index, mapping.name)
    else:
        logger.info("Parsed %d records using %s strategy", len(records), mapping.name)
    if issues:
        logger.info("%d metric cells could not be read as numbers and were taken as 0", len(issues))

    return ParseResult(
        records=tuple(records),
        header_row_index=header_index,
        strategy=mapping.name,
        segments=segments,
        weeks=mapping.weeks,
        coercion_issues=tuple(issues),
    )


def parse(grid: CellGrid, threshold: float = DEFAULT_THRESHOLD) -> List[ProviderWeekRecord]:
    """Return the provider/week records of ``grid`` in row then week order."""
    return list(analyze_grid(grid, IngestionConfig(threshold=threshold)).records)
