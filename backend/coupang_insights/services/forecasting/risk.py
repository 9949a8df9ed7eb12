"""
7-day inventory depletion risk.

Start simple, stay boring. Demand is a fixed linear blend:
    avg_7_days          = sales over the last 7 distinct sale dates / 7
    weighted_daily_avg  = (avg_7_days + prev_day_sales) / 2
    expected_demand     = weighted_daily_avg * 7
    expected_balance    = inventory + inbound - expected_demand

The divisor stays 7 even when fewer sale dates exist, so young datasets
under-state demand. No seasonality, no model fitting.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from coupang_insights.config.settings import settings
from coupang_insights.schemas import (
    SalesRecord, ProductMaster, InboundRecord,
    InventoryRisk, InventoryRiskItem, RiskStatus
)
from coupang_insights.services.aggregation import build_product_summaries, group_products_by_name

logger = logging.getLogger(__name__)


@dataclass
class DemandProjection:
    """Projected stock position for one product or barcode."""
    avg_7_days: float
    prev_day_sales: int
    weighted_daily_avg: float
    expected_demand_7_days: float
    expected_balance_7_days: float
    status: RiskStatus


def classify_balance(balance: float, weighted_daily_avg: float) -> RiskStatus:
    """
    Danger when stock runs out within the horizon, Warning when what is left
    covers less than WARNING_COVER_DAYS of demand.
    """
    if balance < 0:
        return RiskStatus.DANGER
    if balance < weighted_daily_avg * settings.WARNING_COVER_DAYS:
        return RiskStatus.WARNING
    return RiskStatus.SAFE


def project_demand(
    daily_sales: Dict[str, int],
    inventory: int,
    inbound: int,
    latest: str,
    recent_dates: Sequence[str]
) -> DemandProjection:
    horizon = settings.FORECAST_HORIZON_DAYS

    prev_day_sales = daily_sales.get(latest, 0)
    avg_7_days = sum(daily_sales.get(d, 0) for d in recent_dates) / settings.RECENT_SALE_DATES
    weighted_daily_avg = (avg_7_days + prev_day_sales) / 2
    expected_demand = weighted_daily_avg * horizon
    expected_balance = (inventory + inbound) - expected_demand

    return DemandProjection(
        avg_7_days=avg_7_days,
        prev_day_sales=prev_day_sales,
        weighted_daily_avg=weighted_daily_avg,
        expected_demand_7_days=expected_demand,
        expected_balance_7_days=expected_balance,
        status=classify_balance(expected_balance, weighted_daily_avg),
    )


def inbound_by_product_name(inbound: Optional[List[InboundRecord]]) -> Dict[str, int]:
    """
    Total scheduled supply per product name.
    Matching is by exact name, not barcode: products sharing a display name
    share their inbound quantity.
    """
    totals: Dict[str, int] = defaultdict(int)
    for r in inbound or []:
        totals[r.product_name] += r.inbound_qty
    return dict(totals)


def analyze_inventory_risk(
    records: List[SalesRecord],
    master: Optional[List[ProductMaster]] = None,
    inbound: Optional[List[InboundRecord]] = None,
    status: Optional[RiskStatus] = None
) -> List[InventoryRisk]:
    """
    Risk row per product group, most urgent (lowest balance) first.

    Args:
        records: Persisted sales records
        master: Product master used for the barcode join
        inbound: Scheduled supply, matched by product name
        status: Only return rows with this status
    """
    if not records:
        return []

    dates = sorted({r.date for r in records if r.date})
    if not dates:
        return []

    latest = dates[-1]
    recent_dates = dates[-settings.RECENT_SALE_DATES:]

    groups = group_products_by_name(build_product_summaries(records, master))
    inbound_map = inbound_by_product_name(inbound)

    risks: List[InventoryRisk] = []
    for group in groups:
        inbound_qty = inbound_map.get(group.group_name, 0)
        projection = project_demand(
            group.daily_sales_map, group.total_coupang_inventory, inbound_qty,
            latest, recent_dates
        )

        items = []
        for item in group.items:
            # Inbound is only known per product name, so items carry none
            item_projection = project_demand(
                item.daily_sales_map, item.coupang_inventory, 0, latest, recent_dates
            )
            items.append(InventoryRiskItem(
                product_name=item.product_name,
                barcode=item.barcode,
                image_url=item.image_url,
                current_inventory=item.coupang_inventory,
                inbound_qty=0,
                **vars(item_projection)
            ))

        risks.append(InventoryRisk(
            product_name=group.group_name,
            image_url=group.image_url,
            current_inventory=group.total_coupang_inventory,
            inbound_qty=inbound_qty,
            items=items,
            **vars(projection)
        ))

    risks.sort(key=lambda r: r.expected_balance_7_days)

    danger = sum(1 for r in risks if r.status == RiskStatus.DANGER)
    logger.info(f"Risk analysis: {len(risks)} products, {danger} in danger (latest date {latest})")

    if status is not None:
        risks = [r for r in risks if r.status == status]
    return risks
