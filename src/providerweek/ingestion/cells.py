"""Primitive helpers over the raw cell grid decoded from a workbook."""
from __future__ import annotations

import math
import numbers
import re
from typing import List, Optional, Sequence, Tuple, Union

CellValue = Union[None, str, int, float]
CellRow = Sequence[CellValue]
CellGrid = Sequence[CellRow]

# Everything except digits, decimal point and minus sign is noise in a numeric cell
_NON_NUMERIC_RX = re.compile(r"[^0-9.\-]")
_LEADING_NUMBER_RX = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")
_BARE_INTEGER_RX = re.compile(r"^\d+$")


def is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def cell_at(row: Optional[CellRow], column: int) -> CellValue:
    """Return the cell at ``column`` or None when the row is short or missing."""
    if row is None or column < 0 or column >= len(row):
        return None
    value = row[column]
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def row_at(grid: CellGrid, index: int) -> Optional[CellRow]:
    if index < 0 or index >= len(grid):
        return None
    return grid[index]


def cell_text(value: object) -> str:
    """Render a cell as stripped text; int-valued floats lose their trailing ``.0``."""
    if is_blank(value):
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def is_bare_integer(text: str) -> bool:
    return bool(_BARE_INTEGER_RX.match(text))


def grid_width(grid: CellGrid) -> int:
    return max((len(row) for row in grid if row is not None), default=0)


def coerce_number(value: object) -> Tuple[float, bool]:
    """Coerce a raw cell into a float.

    Returns ``(number, failed)``. Blank cells give ``(0.0, False)``; non-blank
    cells that carry no leading number give ``(0.0, True)`` so callers can
    report them without halting.
    """
    if is_blank(value):
        return 0.0, False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value), False
    cleaned = _NON_NUMERIC_RX.sub("", str(value))
    match = _LEADING_NUMBER_RX.match(cleaned)
    if not match:
        return 0.0, True
    return float(match.group(0)), False


def normalize_grid(rows: Sequence[Sequence[object]]) -> List[List[CellValue]]:
    """Copy a grid, mapping NaN to None and numpy scalars to plain numbers."""
    out: List[List[CellValue]] = []
    for row in rows:
        cleaned: List[CellValue] = []
        for value in row or ():
            if value is None or isinstance(value, str):
                cleaned.append(value)
            elif isinstance(value, bool):
                cleaned.append(str(value).lower())
            elif isinstance(value, numbers.Integral):
                cleaned.append(int(value))
            elif isinstance(value, numbers.Real):
                number = float(value)
                cleaned.append(None if math.isnan(number) else number)
            else:
                cleaned.append(str(value))
        out.append(cleaned)
    return out
