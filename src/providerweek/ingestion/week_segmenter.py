from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from ..week_calendar import find_month_day_token, normalize_week_label
from .cells import CellGrid, CellRow, cell_at, cell_text, grid_width, row_at

logger = logging.getLogger(__name__)

PROVIDER_COLUMN = 0


@dataclass(frozen=True)
class WeekSegment:
    """Contiguous header columns belonging to one week.

    ``start_column`` is the anchor column that carried the date token;
    ``end_column`` is exclusive.
    """

    label: str
    start_column: int
    end_column: int

    @property
    def columns(self) -> range:
        return range(self.start_column, self.end_column)

    @property
    def gap(self) -> int:
        """Number of columns after the anchor and before the next segment."""
        return self.end_column - self.start_column - 1


def _anchor_candidates(header: CellRow, above: Optional[CellRow], width: int) -> List[Tuple[int, str]]:
    anchors: List[Tuple[int, str]] = []
    seen: Set[str] = set()
    for col in range(PROVIDER_COLUMN + 1, width):
        text = cell_text(cell_at(header, col))
        source = "header"
        token = find_month_day_token(text)
        if token is None and above is not None:
            # Two-row layouts put the date one row above its metric group
            text = cell_text(cell_at(above, col))
            source = "row above"
            token = find_month_day_token(text)
        if token is None:
            continue
        label = normalize_week_label(token)
        if label in seen:
            logger.debug("Col %d: duplicate date %s ignored as anchor", col, token)
            continue
        seen.add(label)
        logger.debug("Col %d: found %s in %s (%r)", col, label, source, text)
        anchors.append((col, label))
    return anchors


def find_week_segments(grid: CellGrid, header_index: int) -> List[WeekSegment]:
    """Scan the header row (and the row above it) for ``M/D`` week anchors.

    Segments come back ordered by anchor column. Each one runs up to the next
    anchor, the last one to the grid width. When two columns carry the same
    date the earlier column is the anchor.
    """
    header = row_at(grid, header_index)
    if header is None:
        return []
    above = row_at(grid, header_index - 1) if header_index > 0 else None
    width = grid_width(grid)
    anchors = _anchor_candidates(header, above, width)

    segments: List[WeekSegment] = []
    for i, (col, label) in enumerate(anchors):
        end = anchors[i + 1][0] if i + 1 < len(anchors) else width
        segments.append(WeekSegment(label=label, start_column=col, end_column=end))
    return segments
