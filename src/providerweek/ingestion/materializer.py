from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..records import ProviderWeekRecord
from .cells import CellGrid, CellRow, cell_at, cell_text, coerce_number, is_blank
from .column_roles import ColumnRole
from .strategies import ResolvedWeek
from .week_segmenter import PROVIDER_COLUMN

logger = logging.getLogger(__name__)

# First-cell values that echo the header or summarize the sheet
RESERVED_PROVIDER_LABELS = frozenset({"provider", "total"})


@dataclass(frozen=True)
class CoercionIssue:
    """A non-blank metric cell that could not be read as a number and became 0."""

    row_index: int
    column_index: int
    provider: str
    week: str
    role: str
    raw_value: str


def provider_name(row: CellRow) -> Optional[str]:
    """Return the provider label of a data row, or None for rows to skip."""
    name = cell_text(cell_at(row, PROVIDER_COLUMN))
    if not name or name.lower() in RESERVED_PROVIDER_LABELS:
        return None
    return name


def _read(
    row: CellRow,
    column: Optional[int],
    role: ColumnRole,
    context: Tuple[int, str, str],
    issues: List[CoercionIssue],
) -> Optional[float]:
    if column is None:
        return None
    raw = cell_at(row, column)
    value, failed = coerce_number(raw)
    if failed:
        row_index, provider, week = context
        issues.append(CoercionIssue(row_index, column, provider, week, role.value, str(raw)))
    return value


def materialize_row(
    row: CellRow,
    row_index: int,
    weeks: Sequence[ResolvedWeek],
    issues: List[CoercionIssue],
) -> List[ProviderWeekRecord]:
    """Emit one record per week with evidence for a single data row."""
    provider = provider_name(row)
    if provider is None:
        return []
    records: List[ProviderWeekRecord] = []
    for week in weeks:
        roles = week.roles
        ctx = (row_index, provider, week.label)
        total = _read(row, roles.total, ColumnRole.TOTAL, ctx, issues) or 0.0
        over = _read(row, roles.over_threshold, ColumnRole.OVER_THRESHOLD, ctx, issues) or 0.0
        percent = _read(row, roles.percent, ColumnRole.PERCENT, ctx, issues) or 0.0
        hours = None
        if roles.hours is not None and not is_blank(cell_at(row, roles.hours)):
            hours = _read(row, roles.hours, ColumnRole.HOURS, ctx, issues)
            if not hours or hours <= 0:
                hours = None

        if percent == 0 and total > 0:
            percent = over / total * 100

        if total > 0 or over > 0:
            records.append(
                ProviderWeekRecord(
                    provider=provider,
                    week=week.label,
                    total_visits=total,
                    visits_over_threshold=over,
                    percent_over_threshold=percent,
                    hours_over_threshold=hours,
                )
            )
    return records


def materialize_rows(
    grid: CellGrid,
    header_index: int,
    weeks: Sequence[ResolvedWeek],
) -> Tuple[List[ProviderWeekRecord], List[CoercionIssue]]:
    """Walk every row below the header and collect records plus coercion issues."""
    records: List[ProviderWeekRecord] = []
    issues: List[CoercionIssue] = []
    for row_index in range(header_index + 1, len(grid)):
        row = grid[row_index]
        if not row:
            continue
        records.extend(materialize_row(row, row_index, weeks, issues))
    logger.debug("Materialized %d records from %d rows", len(records), len(grid) - header_index - 1)
    return records, issues
