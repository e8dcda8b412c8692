"""Unit tests for the header-inference strategy cascade."""
from providerweek import analyze_grid
from providerweek.ingestion.column_roles import ColumnRoleMap
from providerweek.ingestion.strategies import (
    CascadeContext,
    fixed_width_strategy,
    keyword_strategy,
    run_cascade,
    sequential_strategy,
)
from providerweek.ingestion.week_segmenter import find_week_segments


def _context(grid, header_index=0, **kwargs):
    segments = tuple(find_week_segments(grid, header_index))
    return CascadeContext(grid=grid, header_index=header_index, segments=segments, **kwargs)


def _spy(name, strategy, calls):
    def wrapped(ctx):
        calls.append(name)
        return strategy(ctx)

    return wrapped


def test_keyword_strategy_short_circuits_cascade():
    grid = [
        ["Provider", "11/1 Total", "11/1 Over 20", "11/1 %"],
        ["Dr. Lee", 10, 2, 20],
    ]
    calls = []
    result = run_cascade(
        _context(grid),
        [
            _spy("keyword", keyword_strategy, calls),
            _spy("sequential", sequential_strategy, calls),
            _spy("fixed_width", fixed_width_strategy, calls),
        ],
    )
    assert calls == ["keyword"]
    assert result.name == "keyword"
    assert result.weeks[0].roles == ColumnRoleMap(total=1, over_threshold=2, percent=3)


def test_sequential_offsets_after_each_anchor():
    grid = [
        ["Provider", "11/1", None, None, None, "11/8", None, None, None, None],
        ["Dr. A", None, 40, 10, 25, None, 20, 4, None, 1.5],
    ]
    ctx = _context(grid)
    assert keyword_strategy(ctx) is None
    result = sequential_strategy(ctx)
    assert result.name == "sequential"
    first, second = result.weeks
    assert first.roles == ColumnRoleMap(total=2, over_threshold=3, percent=4)
    assert second.roles == ColumnRoleMap(total=6, over_threshold=7, percent=8, hours=9)


def test_sequential_skips_narrow_segments():
    grid = [["Provider", "11/1", None, "11/8", None, None]]
    result = sequential_strategy(_context(grid))
    assert [w.label for w in result.weeks] == ["Week of 11/8"]
    assert result.weeks[0].roles == ColumnRoleMap(total=4, over_threshold=5)


def test_fixed_width_synthesizes_week_labels():
    grid = [["Provider", "A", "B", "C", "D", "E", "F", "G"]]
    result = fixed_width_strategy(_context(grid))
    assert result.name == "fixed_width"
    assert [w.label for w in result.weeks] == ["Week 1", "Week 2"]
    assert result.weeks[1].roles == ColumnRoleMap(total=4, over_threshold=5, percent=6)


def test_fixed_width_is_capped():
    grid = [["Provider"] + ["x"] * (3 * 60)]
    result = fixed_width_strategy(_context(grid, max_fixed_weeks=52))
    assert len(result.weeks) == 52


def test_cascade_falls_through_to_fixed_width():
    grid = [["Provider", "A", "B", "C"], ["Dr. A", 1, 2, 3]]
    result = run_cascade(_context(grid))
    assert result.name == "fixed_width"


def test_cascade_exhausted():
    assert run_cascade(_context([["Provider", "A"]])) is None


def test_two_column_week_leaves_percent_to_derivation():
    grid = [
        ["Provider", "11/1", None, None, "11/8", None, None, None],
        ["Dr. A", None, 20, 5, None, 10, 1, 10],
    ]
    result = analyze_grid(grid)
    assert result.strategy == "sequential"
    assert result.weeks[0].roles == ColumnRoleMap(total=2, over_threshold=3)
    assert [(r.week, r.percent_over_threshold) for r in result.records] == [
        ("Week of 11/1", 25.0),
        ("Week of 11/8", 10),
    ]
