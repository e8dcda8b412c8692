from providerweek.ingestion.column_roles import ColumnRoleMap
from providerweek.ingestion.materializer import materialize_rows, provider_name
from providerweek.ingestion.strategies import ResolvedWeek

WEEKS = (
    ResolvedWeek("Week of 11/1", ColumnRoleMap(total=1, over_threshold=2, percent=3, hours=4)),
    ResolvedWeek("Week of 11/8", ColumnRoleMap(total=5, over_threshold=6, percent=7)),
)


def test_reserved_and_blank_rows_are_skipped():
    assert provider_name(["Provider", 1]) is None
    assert provider_name([" TOTAL ", 1]) is None
    assert provider_name([None, 1]) is None
    assert provider_name(["", 1]) is None
    assert provider_name(["Dr. Lee", 1]) == "Dr. Lee"


def test_percent_derived_when_missing():
    grid = [["Provider"], ["Dr. Lee", 100, 30, 30, None, 50, 5, None]]
    records, issues = materialize_rows(grid, 0, WEEKS)
    assert issues == []
    assert [(r.week, r.percent_over_threshold) for r in records] == [
        ("Week of 11/1", 30.0),
        ("Week of 11/8", 10.0),
    ]
    assert records[0].hours_over_threshold is None


def test_weeks_without_visits_are_not_emitted():
    grid = [
        ["Provider"],
        ["Dr. A", 0, 0, 0, 0, 10, 0, 0],
        ["Dr. B", 0, 0, 0, 0, 0, 0, 0],
        ["Total", 10, 0, 0, 0, 10, 0, 0],
        [],
    ]
    records, _ = materialize_rows(grid, 0, WEEKS)
    assert [(r.provider, r.week) for r in records] == [("Dr. A", "Week of 11/8")]
    assert records[0].percent_over_threshold == 0.0


def test_over_without_total_is_kept():
    grid = [["Provider"], ["Dr. A", None, 3, None]]
    records, _ = materialize_rows(grid, 0, WEEKS[:1])
    assert records[0].total_visits == 0.0
    assert records[0].visits_over_threshold == 3.0
    assert records[0].percent_over_threshold == 0.0


def test_hours_kept_only_when_positive():
    grid = [
        ["Provider"],
        ["Dr. A", 10, 2, 20, 1.5],
        ["Dr. B", 10, 2, 20, 0],
    ]
    records, _ = materialize_rows(grid, 0, WEEKS[:1])
    assert records[0].hours_over_threshold == 1.5
    assert records[1].hours_over_threshold is None


def test_unreadable_cells_become_zero_and_are_reported():
    grid = [["Provider"], ["Dr. A", "1,200", "N/A", "", None]]
    records, issues = materialize_rows(grid, 0, WEEKS[:1])
    assert records[0].total_visits == 1200.0
    assert records[0].visits_over_threshold == 0.0
    assert len(issues) == 1
    issue = issues[0]
    assert (issue.row_index, issue.column_index, issue.role, issue.raw_value) == (1, 2, "over_threshold", "N/A")
    assert issue.provider == "Dr. A"
