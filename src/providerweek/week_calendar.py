"""Week label canonicalization and year-boundary-aware ordering.

Week labels exported by the scheduling system carry only a ``M/D`` token
("Week of 11/29", "12/6 Total"). There is no year, so chronological order has
to be inferred from the set of labels itself:

  - A set holding both Nov/Dec and Jan-Mar dates is treated as one season that
    rolls over New Year: Nov/Dec sit in nominal year Y and every other month
    in Y + 1.
  - Any other set is ordered by ``(month, day)`` inside one nominal year.

Ordering never consults the wall clock, so the same labels always sort the
same way.
"""
from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

MONTH_DAY_PATTERN = re.compile(r"(\d{1,2})/(\d{1,2})")

# Nominal year for label sets that do not cross New Year
NOMINAL_YEAR = 0

LATE_YEAR_MONTHS = (11, 12)
EARLY_YEAR_MONTHS = (1, 2, 3)

SortKey = Tuple[int, int, int, int, str]


def find_month_day_token(text: str) -> Optional[str]:
    """Return the first raw ``M/D`` token in ``text`` or None."""
    match = MONTH_DAY_PATTERN.search(str(text or ""))
    return match.group(0) if match else None


def normalize_week_label(week: str) -> str:
    """Rewrite any label holding a ``M/D`` token as ``Week of M/D``.

    Leading zeros are dropped ("01/05" -> "Week of 1/5"). Labels without a
    token are returned unchanged.
    """
    match = MONTH_DAY_PATTERN.search(str(week))
    if not match:
        return week
    return f"Week of {int(match.group(1))}/{int(match.group(2))}"


def extract_month_day(week: str) -> Optional[Tuple[int, int]]:
    """Return ``(month, day)`` for a label, or None when it has no usable date."""
    match = MONTH_DAY_PATTERN.search(str(week))
    if not match:
        return None
    month, day = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    return month, day


def spans_year_boundary(weeks: Iterable[str]) -> bool:
    months = {md[0] for md in (extract_month_day(w) for w in weeks) if md}
    has_late = any(m in LATE_YEAR_MONTHS for m in months)
    has_early = any(m in EARLY_YEAR_MONTHS for m in months)
    return has_late and has_early


def _nominal_year(month: int, crosses_new_year: bool) -> int:
    if crosses_new_year and month not in LATE_YEAR_MONTHS:
        return NOMINAL_YEAR + 1
    return NOMINAL_YEAR


def week_sort_keys(weeks: Sequence[str]) -> Dict[str, SortKey]:
    """Map each distinct label to its sort key within this label set.

    Keys are ``(bucket, year, month, day, label)``: dated labels use bucket 0,
    undated labels bucket 1 so they follow every dated label and fall back to
    plain text order.
    """
    labels = list(weeks)
    crosses_new_year = spans_year_boundary(labels)
    keys: Dict[str, SortKey] = {}
    for label in labels:
        if label in keys:
            continue
        md = extract_month_day(label)
        if md is None:
            keys[label] = (1, 0, 0, 0, label)
        else:
            month, day = md
            keys[label] = (0, _nominal_year(month, crosses_new_year), month, day, label)
    return keys


def canonical_order(weeks: Sequence[str]) -> List[str]:
    """Return the labels in chronological order, year boundary included.

    Duplicates are kept; the sort is stable.
    """
    keys = week_sort_keys(weeks)
    return sorted(weeks, key=lambda w: keys[w])
