import pytest

from coupang_insights.services.dashboard import get_daily_trend, get_dashboard_stats


def test_dashboard_uses_latest_date(make_sales):
    records = [
        make_sales(product_id="A", date="2026-01-29", sales_qty=5, inventory_qty=40),
        make_sales(product_id="A", date="2026-01-30", sales_qty=4, inventory_qty=30),
        make_sales(product_id="B", date="2026-01-30", sales_qty=2, inventory_qty=3),
    ]
    stats = get_dashboard_stats(records)

    assert stats.prev_day_sales == 6
    assert stats.total_sales == 6
    assert stats.total_revenue == 60000
    assert stats.prev_day_inventory == 33
    assert stats.stock_warning_count == 1
    assert stats.this_week_sales == 6
    assert stats.last_week_sales == 5
    assert stats.growth_rate == pytest.approx(20.0)


def test_rising_and_falling_items(make_sales):
    records = [
        make_sales(product_id="UP", date="2026-01-01", sales_qty=1, inventory_qty=50),
        make_sales(product_id="UP", date="2026-01-02", sales_qty=5, inventory_qty=50),
        make_sales(product_id="DOWN", date="2026-01-01", sales_qty=9, inventory_qty=50),
        make_sales(product_id="DOWN", date="2026-01-02", sales_qty=2, inventory_qty=50),
        make_sales(product_id="FLAT", date="2026-01-02", sales_qty=3, inventory_qty=50),
    ]
    stats = get_dashboard_stats(records)

    assert stats.rising_items_count == 1
    assert stats.falling_items_count == 1
    assert stats.stock_warning_count == 0


def test_empty_dashboard():
    stats = get_dashboard_stats([])
    assert stats.total_sales == 0
    assert stats.this_week_label == "-"


def test_daily_trend(make_sales):
    records = [
        make_sales(product_id="A", date="2026-01-02", sales_qty=2),
        make_sales(product_id="B", date="2026-01-02", sales_qty=3),
        make_sales(product_id="A", date="2026-01-01", sales_qty=1),
    ]
    trend = get_daily_trend(records)

    assert [t.date for t in trend] == ["2026-01-01", "2026-01-02"]
    assert [t.sales for t in trend] == [1, 5]
    assert trend[1].revenue == 50000
