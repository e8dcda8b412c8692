from __future__ import annotations

import logging
from typing import Tuple

from .cells import CellGrid, CellRow, cell_at, cell_text, is_bare_integer

logger = logging.getLogger(__name__)

PROVIDER_LABEL = "provider"
DEFAULT_HEADER_SCAN_ROWS = 5


def locate_header(grid: CellGrid, scan_rows: int = DEFAULT_HEADER_SCAN_ROWS) -> Tuple[int, CellRow]:
    """Find the primary header row among the first ``scan_rows`` rows.

    The first row whose leading cell mentions "provider" wins. Failing that,
    any row after the first whose leading cell is non-empty text other than a
    bare integer is taken. Row 0 is the fallback; an empty grid yields
    ``(0, [])``.
    """
    if not grid:
        return 0, []
    for index in range(min(scan_rows, len(grid))):
        row = grid[index] or []
        first = cell_text(cell_at(row, 0)).lower()
        if PROVIDER_LABEL in first:
            logger.debug("Header row %d matched provider label %r", index, first)
            return index, row
        if index > 0 and first and not is_bare_integer(first):
            logger.debug("Header row %d chosen by leading text %r", index, first)
            return index, row
    return 0, grid[0] or []
