"""
Week-over-week sales comparison on fixed Friday-to-Thursday weeks.
"""

from datetime import date, timedelta
from typing import List, Tuple

from coupang_insights.schemas import SalesRecord, WeeklyStats
from coupang_insights.services.dates import parse_iso


def week_bounds(reference: date) -> Tuple[date, date, date, date]:
    """
    (this_start, this_end, last_start, last_end) for the Friday-started week
    containing `reference`.
    """
    # Sunday=0 numbering: Fri->0, Sat->1, Sun->2, ... Thu->6
    day_of_week = (reference.weekday() + 1) % 7
    offset = (day_of_week + 2) % 7

    this_start = reference - timedelta(days=offset)
    this_end = this_start + timedelta(days=6)
    last_start = this_start - timedelta(days=7)
    last_end = last_start + timedelta(days=6)
    return this_start, this_end, last_start, last_end


def _label(start: date, end: date) -> str:
    return f"{start.month}/{start.day}~{end.month}/{end.day}"


def growth_rate(this_week: float, last_week: float) -> float:
    """Percentage change; 100 when starting from zero, 0 when both are zero."""
    if last_week > 0:
        return (this_week - last_week) / last_week * 100
    if this_week > 0:
        return 100.0
    return 0.0


def weekly_comparison(records: List[SalesRecord]) -> WeeklyStats:
    """Compare the week holding the latest date against the week before."""
    dated = [r for r in records or [] if r.date]
    if not dated:
        return WeeklyStats()

    latest = parse_iso(max(r.date for r in dated))
    this_start, this_end, last_start, last_end = week_bounds(latest)

    # ISO strings compare like dates
    this_range = (this_start.isoformat(), this_end.isoformat())
    last_range = (last_start.isoformat(), last_end.isoformat())

    this_week_sales = 0
    last_week_sales = 0
    for r in dated:
        if this_range[0] <= r.date <= this_range[1]:
            this_week_sales += r.sales_qty
        elif last_range[0] <= r.date <= last_range[1]:
            last_week_sales += r.sales_qty

    return WeeklyStats(
        this_week_label=_label(this_start, this_end),
        last_week_label=_label(last_start, last_end),
        this_week_start=this_start,
        this_week_end=this_end,
        last_week_start=last_start,
        last_week_end=last_end,
        this_week_sales=this_week_sales,
        last_week_sales=last_week_sales,
        growth_rate=growth_rate(this_week_sales, last_week_sales),
    )
