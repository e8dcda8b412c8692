from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence

from .dq_checks import ValidationWarning, aggregate_severity_counts
from .filters import unique_providers, unique_weeks
from .ingestion import ParseResult


def build_file_entry(name: str, result: ParseResult) -> Dict[str, Any]:
    return {
        "file": name,
        "strategy": result.strategy,
        "header_row_index": result.header_row_index,
        "week_anchors": len(result.segments),
        "weeks": {w.label: w.roles.as_dict() for w in result.weeks},
        "records": len(result.records),
        "coercion_issues": len(result.coercion_issues),
    }


def build_report(results: Mapping[str, ParseResult], warnings: Sequence[ValidationWarning]) -> Dict[str, Any]:
    """Summarize one ingestion run: per-file inference outcome plus DQ counts."""
    records = [r for result in results.values() for r in result.records]
    report: Dict[str, Any] = {
        "summary": {
            "files": len(results),
            "records": len(records),
            "providers": len(unique_providers(records)),
            "weeks": unique_weeks(records),
        },
        "files": [build_file_entry(name, result) for name, result in results.items()],
        "dq_severity_counts": aggregate_severity_counts(warnings),
    }
    if warnings:
        report["warnings"] = [
            {
                "type": w.type,
                "severity": w.severity,
                "message": w.message,
                "provider": w.provider,
                "week": w.week,
            }
            for w in warnings
        ]
    return report


def write_report(report: Dict[str, Any], output_path: str | Path) -> Path:
    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)
    return out
