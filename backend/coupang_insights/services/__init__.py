# Services module
from coupang_insights.services.dates import normalize_date
from coupang_insights.services.columns import ColumnMapping, MissingColumnsError, detect_columns
from coupang_insights.services.ingest import SheetIngestService
from coupang_insights.services.repository import RecordRepository
from coupang_insights.services.aggregation import (
    build_product_summaries, group_products_by_name, sort_product_groups
)
from coupang_insights.services.forecasting import analyze_inventory_risk, weekly_comparison
from coupang_insights.services.dashboard import get_dashboard_stats, get_daily_trend
from coupang_insights.services.analytics import AnalyticsService
from coupang_insights.services.sheets import load_grid

__all__ = [
    "normalize_date",
    "ColumnMapping",
    "MissingColumnsError",
    "detect_columns",
    "SheetIngestService",
    "RecordRepository",
    "build_product_summaries",
    "group_products_by_name",
    "sort_product_groups",
    "analyze_inventory_risk",
    "weekly_comparison",
    "get_dashboard_stats",
    "get_daily_trend",
    "AnalyticsService",
    "load_grid"
]
