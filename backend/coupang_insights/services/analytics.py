from typing import List, Optional

from coupang_insights.schemas import (
    DashboardStats, DailyTrend, InventoryRisk, ProductGroup, RiskStatus
)
from coupang_insights.services.aggregation import (
    available_dates, build_product_summaries, group_products_by_name, sort_product_groups
)
from coupang_insights.services.dashboard import get_dashboard_stats, get_daily_trend
from coupang_insights.services.forecasting.risk import analyze_inventory_risk
from coupang_insights.services.repository import RecordRepository


class AnalyticsService:
    """
    Read-side projections over the persisted record sets.
    Everything is recomputed from current state on each call.
    """

    def __init__(self, repository: RecordRepository):
        self.repository = repository

    def dashboard_stats(self) -> DashboardStats:
        return get_dashboard_stats(self.repository.load_sales())

    def daily_trend(self) -> List[DailyTrend]:
        return get_daily_trend(self.repository.load_sales())

    def dates(self) -> List[str]:
        return available_dates(self.repository.load_sales())

    def product_groups(
        self,
        sort_key: str = "cumulative_sales",
        descending: bool = True
    ) -> List[ProductGroup]:
        summaries = build_product_summaries(
            self.repository.load_sales(), self.repository.load_master()
        )
        return sort_product_groups(group_products_by_name(summaries), sort_key, descending)

    def inventory_risks(self, status: Optional[RiskStatus] = None) -> List[InventoryRisk]:
        return analyze_inventory_risk(
            self.repository.load_sales(),
            self.repository.load_master(),
            self.repository.load_inbound(),
            status=status,
        )
