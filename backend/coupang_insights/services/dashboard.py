from collections import defaultdict
from typing import Dict, List

from coupang_insights.config.settings import settings
from coupang_insights.schemas import SalesRecord, DashboardStats, DailyTrend
from coupang_insights.services.aggregation import latest_date
from coupang_insights.services.forecasting.weekly import weekly_comparison

# Trailing records per product used for the rising/falling trend
TREND_WINDOW = 5


def _trend_direction(history: List[SalesRecord]) -> int:
    """Sign of the summed day-over-day sales deltas over the trend window."""
    recent = history[-TREND_WINDOW:]
    if len(recent) < 2:
        return 0
    diff_sum = sum(
        recent[i].sales_qty - recent[i - 1].sales_qty for i in range(1, len(recent))
    )
    return (diff_sum > 0) - (diff_sum < 0)


def get_dashboard_stats(records: List[SalesRecord]) -> DashboardStats:
    """
    Headline numbers. "Prev day" is the latest date present in the data,
    which is the most recent complete day of an export.
    """
    latest = latest_date(records or [])
    if latest is None:
        return DashboardStats()

    latest_rows = [r for r in records if r.date == latest]
    prev_day_sales = sum(r.sales_qty for r in latest_rows)
    prev_day_inventory = sum(r.inventory_qty for r in latest_rows)

    histories: Dict[str, List[SalesRecord]] = defaultdict(list)
    for r in sorted(records, key=lambda r: r.date):
        histories[r.product_id].append(r)

    rising = 0
    falling = 0
    warnings = 0
    for history in histories.values():
        if history[-1].inventory_qty < settings.STOCK_WARNING_THRESHOLD:
            warnings += 1
        direction = _trend_direction(history)
        if direction > 0:
            rising += 1
        elif direction < 0:
            falling += 1

    weekly = weekly_comparison(records)

    return DashboardStats(
        total_sales=prev_day_sales,
        total_revenue=prev_day_sales * settings.REVENUE_PER_UNIT,
        rising_items_count=rising,
        falling_items_count=falling,
        stock_warning_count=warnings,
        prev_day_sales=prev_day_sales,
        prev_day_inventory=prev_day_inventory,
        this_week_sales=weekly.this_week_sales,
        last_week_sales=weekly.last_week_sales,
        this_week_label=weekly.this_week_label,
        last_week_label=weekly.last_week_label,
        growth_rate=weekly.growth_rate,
    )


def get_daily_trend(records: List[SalesRecord]) -> List[DailyTrend]:
    """Total sales per date, ascending, with revenue estimated per unit."""
    totals: Dict[str, int] = defaultdict(int)
    for r in records or []:
        if r.date:
            totals[r.date] += r.sales_qty

    return [
        DailyTrend(date=day, sales=sales, revenue=sales * settings.REVENUE_PER_UNIT)
        for day, sales in sorted(totals.items())
    ]
