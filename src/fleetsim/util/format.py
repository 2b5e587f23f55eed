"""Formatting utilities for the results table.

Number formatting, time formatting, plain-text table rendering.
"""

from __future__ import annotations

import math

from fleetsim.models.battle import EngagementResult, SideResult


def format_time(seconds: float) -> str:
    """Format seconds into a human-readable time string."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    if seconds < 3600:
        return f"{int(seconds // 60)}m {int(seconds % 60)}s"
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    return f"{hours}h {minutes}m"


def format_number(value: float) -> str:
    """Format a number with up to two decimals; NaN prints as 'n/a'."""
    if math.isnan(value):
        return "n/a"
    if value == int(value):
        return str(int(value))
    return f"{value:.2f}"


def format_percent(value: float) -> str:
    """Format a float as percentage."""
    if math.isnan(value):
        return "n/a"
    return f"{value * 100:.0f}%"


_ROWS = (
    ("Wins", lambda s: format_number(s.wins)),
    ("Dealt", lambda s: format_number(s.report.dealt)),
    ("Tanked", lambda s: format_number(s.report.tanked)),
    ("Performance", lambda s: format_number(s.report.performance)),
    ("Supply", lambda s: format_number(s.report.supply)),
    ("Credits", lambda s: format_number(s.report.credits)),
    ("Metal", lambda s: format_number(s.report.metal)),
    ("Crystal", lambda s: format_number(s.report.crystal)),
    ("Resources", lambda s: format_number(s.report.resources)),
    ("Survival", lambda s: format_percent(s.report.survival_rate)),
    ("PPS", lambda s: format_number(s.report.pps)),
    ("PPR", lambda s: format_number(s.report.ppr)),
)


def render_result(result: EngagementResult) -> str:
    """Render an engagement result as a plain-text table, one column per side."""
    sides: tuple[SideResult, ...] = (result.side_a, result.side_b)
    rows = [("Player", *(s.name for s in sides))]
    rows.extend((label, *(fmt(s) for s in sides)) for label, fmt in _ROWS)

    widths = [max(len(row[col]) for row in rows) for col in range(len(rows[0]))]
    lines = [
        f"{result.name}: {result.repetitions} runs, {result.draws} draws, "
        f"average {format_time(result.average_duration_s)}",
    ]
    for i, row in enumerate(rows):
        lines.append(" | ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip())
        if i == 0:
            lines.append("-+-".join("-" * width for width in widths))
    return "\n".join(lines)
