"""Normalized output unit of the ingestion pipeline."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Optional

import pandas as pd

RECORD_COLUMNS = [
    "provider",
    "week",
    "total_visits",
    "visits_over_threshold",
    "percent_over_threshold",
    "hours_over_threshold",
]


@dataclass(frozen=True)
class ProviderWeekRecord:
    """One provider's visit metrics for one week.

    ``percent_over_threshold`` is on a 0-100 scale. ``hours_over_threshold``
    is None when the workbook carries no hours column for that week.
    """

    provider: str
    week: str
    total_visits: float
    visits_over_threshold: float
    percent_over_threshold: float
    hours_over_threshold: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def records_to_frame(records: Iterable[ProviderWeekRecord]) -> pd.DataFrame:
    """Tabulate records with one row per provider/week in emission order."""
    rows = [r.to_dict() for r in records]
    df = pd.DataFrame(rows, columns=RECORD_COLUMNS)
    df["provider"] = df["provider"].astype("string")
    df["week"] = df["week"].astype("string")
    for col in ("total_visits", "visits_over_threshold", "percent_over_threshold", "hours_over_threshold"):
        df[col] = pd.to_numeric(df[col], errors="coerce").astype("float64")
    return df
