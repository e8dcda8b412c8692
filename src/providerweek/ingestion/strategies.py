"""Fallback strategies that turn an ambiguous header into a week -> column mapping.

Strategies are tried in a fixed order and the first one that resolves at
least one week wins:

  1. keyword      - date anchors plus keyword classification per segment
  2. sequential   - date anchors plus fixed offsets after each anchor
  3. fixed_width  - no anchors at all; constant-width column chunks

Each strategy is a pure function of the parse context and returns either a
``StrategyResult`` or None.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from .cells import CellGrid, grid_width
from .column_roles import DEFAULT_THRESHOLD, ColumnRoleMap, classify_segment
from .week_segmenter import PROVIDER_COLUMN, WeekSegment

logger = logging.getLogger(__name__)

DEFAULT_FIXED_WIDTH = 3
DEFAULT_MAX_FIXED_WEEKS = 52
MIN_SEQUENTIAL_GAP = 2


@dataclass(frozen=True)
class ResolvedWeek:
    label: str
    roles: ColumnRoleMap


@dataclass(frozen=True)
class StrategyResult:
    name: str
    weeks: Tuple[ResolvedWeek, ...]


@dataclass(frozen=True)
class CascadeContext:
    """Inputs shared by every strategy for one parse call."""

    grid: CellGrid
    header_index: int
    segments: Tuple[WeekSegment, ...]
    threshold: float = DEFAULT_THRESHOLD
    fixed_width: int = DEFAULT_FIXED_WIDTH
    max_fixed_weeks: int = DEFAULT_MAX_FIXED_WEEKS


Strategy = Callable[[CascadeContext], Optional[StrategyResult]]


def _result(name: str, weeks: Sequence[ResolvedWeek]) -> Optional[StrategyResult]:
    kept = tuple(w for w in weeks if not w.roles.is_empty())
    if not kept:
        return None
    return StrategyResult(name=name, weeks=kept)


def keyword_strategy(ctx: CascadeContext) -> Optional[StrategyResult]:
    weeks = []
    for segment in ctx.segments:
        roles = classify_segment(ctx.grid, ctx.header_index, segment, ctx.threshold)
        if roles.is_empty():
            logger.debug("No metrics found for %s", segment.label)
        weeks.append(ResolvedWeek(segment.label, roles))
    return _result("keyword", weeks)


def sequential_strategy(ctx: CascadeContext) -> Optional[StrategyResult]:
    """Assume Total, Over, %, Hours sit directly after each date anchor.

    Segments narrower than two columns are skipped. Percent is only mapped
    when the segment has a third column after the anchor; with exactly two
    the anchor + 3 column belongs to the next week, so percent is left
    unset and the materializer derives it from Total and Over.
    """
    weeks = []
    for segment in ctx.segments:
        gap = segment.gap
        if gap < MIN_SEQUENTIAL_GAP:
            continue
        anchor = segment.start_column
        roles = ColumnRoleMap(
            total=anchor + 1,
            over_threshold=anchor + 2,
            percent=anchor + 3 if gap >= 3 else None,
            hours=anchor + 4 if gap >= 4 else None,
        )
        logger.debug("Sequential mapping for %s: %s", segment.label, roles.as_dict())
        weeks.append(ResolvedWeek(segment.label, roles))
    return _result("sequential", weeks)


def fixed_width_strategy(ctx: CascadeContext) -> Optional[StrategyResult]:
    """Chop the columns after the provider column into equal weekly chunks."""
    width = grid_width(ctx.grid)
    chunk = max(1, ctx.fixed_width)
    count = min(ctx.max_fixed_weeks, max(0, (width - PROVIDER_COLUMN - 1) // chunk))
    weeks = []
    for i in range(count):
        start = PROVIDER_COLUMN + 1 + i * chunk
        roles = ColumnRoleMap(
            total=start,
            over_threshold=start + 1 if chunk > 1 else None,
            percent=start + 2 if chunk > 2 else None,
        )
        weeks.append(ResolvedWeek(f"Week {i + 1}", roles))
    return _result("fixed_width", weeks)


DEFAULT_STRATEGIES: Tuple[Strategy, ...] = (
    keyword_strategy,
    sequential_strategy,
    fixed_width_strategy,
)


def run_cascade(
    ctx: CascadeContext,
    strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
) -> Optional[StrategyResult]:
    """Return the first strategy result with at least one resolved week.

    None means every strategy came up empty.
    """
    for strategy in strategies:
        result = strategy(ctx)
        if result is not None:
            logger.info("Week mapping resolved by %s strategy (%d weeks)", result.name, len(result.weeks))
            return result
        logger.debug("Strategy %s produced no mapping", getattr(strategy, "__name__", strategy))
    logger.warning("No week mapping could be resolved from the header")
    return None
