"""
Schema inference for weekly provider workbooks.

Recovers week boundaries and column meanings from loosely-keyworded,
multi-row headers and emits normalized provider/week records.
"""

from .parser import ParseResult, analyze_grid, parse

__all__ = ["ParseResult", "analyze_grid", "parse"]
