"""Parsing scenarios over whole grids."""
from providerweek import ParseResult, ProviderWeekRecord, analyze_grid, parse
from providerweek.config import IngestionConfig

HEADER = ["Provider", "11/1 Total", "11/1 Over 20", "11/1 %", "11/8 Total", "11/8 Over 20", "11/8 %"]


def test_keyword_layout_with_derived_percent():
    grid = [HEADER, ["Dr. Lee", 100, 30, 30, 50, 5, None]]
    records = parse(grid)
    assert records == [
        ProviderWeekRecord("Dr. Lee", "Week of 11/1", 100.0, 30.0, 30.0, None),
        ProviderWeekRecord("Dr. Lee", "Week of 11/8", 50.0, 5.0, 10.0, None),
    ]


def test_title_rows_and_summary_rows_are_ignored():
    grid = [
        ["Visit Duration Report", None],
        HEADER,
        ["Dr. Lee", 10, 2, 20, 10, 1, 10],
        ["Dr. Kim", 4, 1, "25%", 0, 0, 0],
        ["Total", 14, 3, 21, 10, 1, 10],
    ]
    result = analyze_grid(grid)
    assert result.header_row_index == 1
    assert result.strategy == "keyword"
    assert [(r.provider, r.week) for r in result.records] == [
        ("Dr. Lee", "Week of 11/1"),
        ("Dr. Lee", "Week of 11/8"),
        ("Dr. Kim", "Week of 11/1"),
    ]
    assert result.records[2].percent_over_threshold == 25.0


def test_two_row_header_with_hours():
    grid = [
        [None, "11/1", None, None, None, "11/8", None, None, None],
        ["Provider", "Total", "Over 20", "% Over 20", "Hours Over 20", "Total", "Over 20", "% Over 20", "Hours"],
        ["Dr. A", 10, 5, 50, 2.5, 20, 2, 10, 0],
    ]
    result = analyze_grid(grid)
    assert result.header_row_index == 1
    assert result.week_labels == ["Week of 11/1", "Week of 11/8"]
    first, second = result.records
    assert (first.total_visits, first.visits_over_threshold, first.percent_over_threshold) == (10, 5, 50)
    # "Hours Over 20" falls through to hours once the over-threshold column is taken
    assert first.hours_over_threshold == 2.5
    assert second.hours_over_threshold is None


def test_hours_column_is_read():
    grid = [
        ["Provider", "11/1 Total", "11/1 Over 20", "11/1 %", "11/1 Hours"],
        ["Dr. A", 10, 5, 50, 2.5],
    ]
    assert parse(grid)[0].hours_over_threshold == 2.5


def test_sequential_layout_without_keywords():
    grid = [
        ["Provider", "11/1", None, None, None, "11/8", None, None, None],
        ["Dr. A", None, 40, 10, 25, None, 20, 4, None],
    ]
    result = analyze_grid(grid)
    assert result.strategy == "sequential"
    assert [(r.week, r.total_visits, r.percent_over_threshold) for r in result.records] == [
        ("Week of 11/1", 40, 25),
        ("Week of 11/8", 20, 20.0),
    ]


def test_fixed_width_layout_without_dates_or_keywords():
    grid = [
        ["Provider", "A", "B", "C", "D", "E", "F"],
        ["Dr. A", 10, 2, 20, 8, 1, 0],
    ]
    result = analyze_grid(grid)
    assert result.strategy == "fixed_width"
    assert [(r.week, r.percent_over_threshold) for r in result.records] == [
        ("Week 1", 20),
        ("Week 2", 12.5),
    ]


def test_threshold_selects_matching_columns():
    grid = [
        ["Provider", "11/1 Total", "11/1 Over 30", "11/1 Over 20"],
        ["Dr. A", 10, 4, 2],
    ]
    assert parse(grid, threshold=30)[0].visits_over_threshold == 4
    assert parse(grid)[0].visits_over_threshold == 2
    assert analyze_grid(grid, IngestionConfig(threshold=30)).records[0].percent_over_threshold == 40


def test_coercion_issues_are_collected():
    grid = [HEADER, ["Dr. Lee", 10, "?", None, 10, 1, 10]]
    result = analyze_grid(grid)
    assert len(result.records) == 2
    assert result.records[0].visits_over_threshold == 0
    assert [(i.week, i.role) for i in result.coercion_issues] == [("Week of 11/1", "over_threshold")]


def test_degenerate_grids_yield_empty_results():
    assert analyze_grid([]) == ParseResult()
    assert analyze_grid([["Provider"]]).is_empty
    assert parse([HEADER]) == []
    assert parse([HEADER, ["Dr. Lee", 0, 0, 0, 0, 0, 0]]) == []


def test_parse_is_deterministic():
    grid = [HEADER, ["Dr. Lee", 100, 30, 30, 50, 5, None], ["Dr. Kim", 1, 1, None, 2, 0, 0]]
    assert parse(grid) == parse(grid)


def test_hours_header_naming_the_threshold_is_read_as_hours():
    grid = [
        ["Provider", "11/1 Total", "11/1 Over 20", "11/1 % Over 20", "11/1 Hours Over 20"],
        ["Dr. A", 10, 5, 50, 2.5],
    ]
    record = parse(grid)[0]
    assert record.visits_over_threshold == 5
    assert record.hours_over_threshold == 2.5
