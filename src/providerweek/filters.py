from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .records import ProviderWeekRecord
from .week_calendar import canonical_order, normalize_week_label, week_sort_keys

TREND_DEADBAND = 0.5


@dataclass(frozen=True)
class SummaryStats:
    total_providers: int
    avg_percent_over_threshold: float
    total_visits: float
    trend: str
    trend_value: float


def unique_providers(records: Iterable[ProviderWeekRecord]) -> List[str]:
    return sorted({r.provider for r in records})


def unique_weeks(records: Iterable[ProviderWeekRecord]) -> List[str]:
    """Distinct canonical week labels in chronological order."""
    return canonical_order(sorted({normalize_week_label(r.week) for r in records}))


def filter_records(
    records: Sequence[ProviderWeekRecord],
    providers: Optional[Iterable[str]] = None,
    week_range: Optional[Tuple[str, str]] = None,
    threshold_percent: Optional[float] = None,
    min_visits: Optional[float] = None,
) -> List[ProviderWeekRecord]:
    """Select records by provider, inclusive week range and metric floors.

    The week range is resolved against one ordering built from every label in
    ``records`` plus both endpoints, so a range that crosses New Year behaves
    the same as one that does not.
    """
    wanted = set(providers or ())
    keys = None
    if week_range is not None:
        start, end = (normalize_week_label(w) for w in week_range)
        labels = [normalize_week_label(r.week) for r in records] + [start, end]
        keys = week_sort_keys(labels)
        low, high = keys[start], keys[end]

    out: List[ProviderWeekRecord] = []
    for item in records:
        if wanted and item.provider not in wanted:
            continue
        if keys is not None:
            key = keys[normalize_week_label(item.week)]
            if key < low or key > high:
                continue
        if threshold_percent is not None and item.percent_over_threshold < threshold_percent:
            continue
        if min_visits is not None and item.total_visits < min_visits:
            continue
        out.append(item)
    return out


def _avg_percent(records: Sequence[ProviderWeekRecord]) -> float:
    return float(np.mean([r.percent_over_threshold for r in records]))


def summary_stats(
    records: Sequence[ProviderWeekRecord],
    previous: Optional[Sequence[ProviderWeekRecord]] = None,
) -> SummaryStats:
    """Headline numbers for a record set, with a trend against ``previous``."""
    if not records:
        return SummaryStats(0, 0.0, 0.0, "neutral", 0.0)

    avg = _avg_percent(records)
    trend, trend_value = "neutral", 0.0
    if previous:
        trend_value = avg - _avg_percent(previous)
        if trend_value > TREND_DEADBAND:
            trend = "up"
        elif trend_value < -TREND_DEADBAND:
            trend = "down"

    return SummaryStats(
        total_providers=len({r.provider for r in records}),
        avg_percent_over_threshold=round(avg, 1),
        total_visits=sum(r.total_visits for r in records),
        trend=trend,
        trend_value=round(trend_value, 1),
    )
