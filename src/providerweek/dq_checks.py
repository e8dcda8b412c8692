"""Advisory data-quality checks over parsed records.

These checks never block ingestion; they produce warnings for the user to
review next to the parsed data.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from .ingestion.materializer import CoercionIssue
from .records import ProviderWeekRecord, records_to_frame

SEVERITY_ORDER = {"high": 3, "medium": 2, "low": 1}

# Weekly visit counts above this are more likely a data entry error than real volume
MAX_PLAUSIBLE_VISITS = 10000


@dataclass(frozen=True)
class ValidationWarning:
    type: str
    severity: str
    message: str
    provider: Optional[str] = None
    week: Optional[str] = None


def _row_warnings(df: pd.DataFrame, mask: pd.Series, kind: str, severity: str, template: str) -> List[ValidationWarning]:
    out = []
    for _, row in df.loc[mask].iterrows():
        out.append(
            ValidationWarning(
                type=kind,
                severity=severity,
                message=template.format(**row.to_dict()),
                provider=str(row["provider"]),
                week=str(row["week"]),
            )
        )
    return out


def check_inconsistent_counts(df: pd.DataFrame) -> List[ValidationWarning]:
    """Over-threshold visits that exceed, or exist without, total visits."""
    no_total = (df["total_visits"] == 0) & (df["visits_over_threshold"] > 0)
    too_many = (df["total_visits"] > 0) & (df["visits_over_threshold"] > df["total_visits"])
    return _row_warnings(
        df, no_total, "inconsistency", "high",
        "Provider {provider} has visits over threshold but zero total visits in week {week}",
    ) + _row_warnings(
        df, too_many, "inconsistency", "high",
        "Provider {provider} has more visits over threshold than total visits in week {week}",
    )


def check_suspicious_values(df: pd.DataFrame) -> List[ValidationWarning]:
    pct_high = df["percent_over_threshold"] > 100
    visits_high = df["total_visits"] > MAX_PLAUSIBLE_VISITS
    return _row_warnings(
        df, pct_high, "suspicious_value", "high",
        "Provider {provider} has percentage over 100% in week {week}",
    ) + _row_warnings(
        df, visits_high, "suspicious_value", "medium",
        "Provider {provider} has unusually high visit count ({total_visits:g}) in week {week}",
    )


def check_missing_weeks(df: pd.DataFrame) -> List[ValidationWarning]:
    """Flag providers missing some, but fewer than half, of the weeks in the data."""
    weeks = df["week"].dropna().unique()
    n_weeks = len(weeks)
    out = []
    present = df.groupby("provider", sort=False)["week"].nunique()
    for provider, count in present.items():
        missing = n_weeks - int(count)
        if 0 < missing < n_weeks / 2:
            out.append(
                ValidationWarning(
                    type="missing_data",
                    severity="low",
                    message=f"Provider {provider} is missing data for {missing} week(s)",
                    provider=str(provider),
                )
            )
    return out


def coercion_warnings(issues: Iterable[CoercionIssue]) -> List[ValidationWarning]:
    return [
        ValidationWarning(
            type="coercion_failure",
            severity="low",
            message=f"Unreadable {issue.role} value {issue.raw_value!r} for {issue.provider} in {issue.week} taken as 0",
            provider=issue.provider,
            week=issue.week,
        )
        for issue in issues
    ]


def validate_records(
    records: Sequence[ProviderWeekRecord],
    coercion_issues: Iterable[CoercionIssue] = (),
) -> List[ValidationWarning]:
    """Run every advisory check and return warnings, most severe first."""
    if not records:
        return [ValidationWarning(type="missing_data", severity="high", message="No data available")]

    df = records_to_frame(records)
    warnings: List[ValidationWarning] = []
    warnings.extend(check_inconsistent_counts(df))
    warnings.extend(check_suspicious_values(df))
    warnings.extend(check_missing_weeks(df))
    warnings.extend(coercion_warnings(coercion_issues))
    return sorted(warnings, key=lambda w: -SEVERITY_ORDER.get(w.severity, 0))


def aggregate_severity_counts(warnings: Iterable[ValidationWarning]) -> dict:
    counts = {"high": 0, "medium": 0, "low": 0}
    for w in warnings:
        counts[w.severity] = counts.get(w.severity, 0) + 1
    return counts
