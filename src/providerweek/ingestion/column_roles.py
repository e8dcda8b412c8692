"""Keyword rules that assign a semantic role to each column of a week segment."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .cells import CellGrid, cell_at, cell_text, row_at
from .week_segmenter import WeekSegment

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 20


class ColumnRole(str, Enum):
    TOTAL = "total"
    OVER_THRESHOLD = "over_threshold"
    PERCENT = "percent"
    HOURS = "hours"


@dataclass(frozen=True)
class ColumnRoleMap:
    """Column index per role for one week; a role is None when unresolved."""

    total: Optional[int] = None
    over_threshold: Optional[int] = None
    percent: Optional[int] = None
    hours: Optional[int] = None

    def get(self, role: ColumnRole) -> Optional[int]:
        return getattr(self, role.value)

    def assign(self, role: ColumnRole, column: int) -> "ColumnRoleMap":
        return replace(self, **{role.value: column})

    def items(self) -> Iterator[Tuple[ColumnRole, int]]:
        for role in ColumnRole:
            col = self.get(role)
            if col is not None:
                yield role, col

    def is_empty(self) -> bool:
        return not any(True for _ in self.items())

    def as_dict(self) -> Dict[str, int]:
        return {role.value: col for role, col in self.items()}


def format_threshold(threshold: float) -> str:
    """Render the threshold the way it appears in header text (20.0 -> "20")."""
    value = float(threshold)
    return str(int(value)) if value.is_integer() else str(value)


def matching_roles(text: str, threshold: float = DEFAULT_THRESHOLD) -> List[ColumnRole]:
    """Every role whose keywords match ``text``, highest priority first.

    Priority: Total, then OverThreshold, then Percent, then Hours.
    """
    lower = text.strip().lower()
    if not lower:
        return []
    number = format_threshold(threshold)
    matches = []
    if lower == "total" or ("total" in lower and "over" not in lower and "%" not in lower):
        matches.append(ColumnRole.TOTAL)
    if "over" in lower and number in lower and "%" not in lower:
        matches.append(ColumnRole.OVER_THRESHOLD)
    if "%" in lower or (("percent" in lower or "pct" in lower) and number in lower):
        matches.append(ColumnRole.PERCENT)
    if "hour" in lower:
        matches.append(ColumnRole.HOURS)
    return matches


def classify_header_text(text: str, threshold: float = DEFAULT_THRESHOLD) -> Optional[ColumnRole]:
    """Return the highest-priority role whose keywords match ``text``."""
    matches = matching_roles(text, threshold)
    return matches[0] if matches else None


def classify_segment(
    grid: CellGrid,
    header_index: int,
    segment: WeekSegment,
    threshold: float = DEFAULT_THRESHOLD,
) -> ColumnRoleMap:
    """Assign roles to the columns of ``segment`` from header keywords.

    A blank header cell borrows its text from the row above. Each column takes
    the highest-priority matching role that is still unfilled, so "Hours Over
    20" becomes the hours column once an "Over 20" column has been seen. A
    column whose matching roles are all taken is ignored.
    """
    header = row_at(grid, header_index)
    above = row_at(grid, header_index - 1) if header_index > 0 else None
    roles = ColumnRoleMap()
    for col in segment.columns:
        text = cell_text(cell_at(header, col))
        if not text and above is not None:
            text = cell_text(cell_at(above, col))
        if not text:
            continue
        role = next((r for r in matching_roles(text, threshold) if roles.get(r) is None), None)
        if role is None:
            continue
        logger.debug("%s col %d %r -> %s", segment.label, col, text, role.value)
        roles = roles.assign(role, col)
    return roles
