# Forecasting module
from coupang_insights.services.forecasting.risk import (
    DemandProjection, analyze_inventory_risk, classify_balance,
    inbound_by_product_name, project_demand
)
from coupang_insights.services.forecasting.weekly import growth_rate, week_bounds, weekly_comparison

__all__ = [
    "DemandProjection",
    "analyze_inventory_risk",
    "classify_balance",
    "inbound_by_product_name",
    "project_demand",
    "growth_rate",
    "week_bounds",
    "weekly_comparison"
]
