"""
Product rollups: sales joined with the product master by barcode.

Summaries are keyed by trimmed barcode. Groups fold every barcode that
shares a product name (one product sold as several SKUs/options).
"""

from typing import Dict, Iterable, List, Optional

from coupang_insights.schemas import (
    SalesRecord, ProductMaster, ProductSummary, ProductGroup
)
from coupang_insights.services.dates import is_iso_date

GROUP_SORT_KEYS = {
    "product_name": lambda g: g.group_name.lower(),
    "cumulative_sales": lambda g: g.total_cumulative_sales,
    "hq_inventory": lambda g: g.total_hq_inventory,
    "coupang_inventory": lambda g: g.total_coupang_inventory,
}


def latest_date(records: Iterable[SalesRecord]) -> Optional[str]:
    dates = [r.date for r in records if r.date]
    return max(dates) if dates else None


def available_dates(records: Iterable[SalesRecord]) -> List[str]:
    """Well-formed dates with any sales across all products, ascending."""
    totals: Dict[str, int] = {}
    for r in records:
        if is_iso_date(r.date):
            totals[r.date] = totals.get(r.date, 0) + r.sales_qty
    return sorted(day for day, total in totals.items() if total > 0)


def build_product_summaries(
    records: List[SalesRecord],
    master: Optional[List[ProductMaster]] = None
) -> List[ProductSummary]:
    """
    One summary per barcode.

    Seeded from the master (inventory zeroed, HQ stock copied); sales with no
    master match create an orphan entry. coupang_inventory only counts rows
    dated on the latest date of the whole set: it is a snapshot, not a sum.
    """
    summaries: Dict[str, ProductSummary] = {}

    for m in master or []:
        key = m.barcode.strip() if m.barcode else ""
        if not key:
            continue
        summaries[key] = ProductSummary(
            product_id=key,
            sku_id=m.sku_id,
            product_name=m.sku_name,
            barcode=key,
            image_url=m.image_url,
            hq_inventory=m.hq_inventory or 0,
        )

    valid = [r for r in records or [] if r.date]
    if not valid:
        return list(summaries.values())

    latest = latest_date(valid)

    for r in valid:
        barcode = r.barcode.strip() if r.barcode else "-"
        summary = summaries.get(barcode)
        if summary is None:
            summary = ProductSummary(
                product_id=r.barcode or r.product_id,
                sku_id=r.sku_id or r.product_id,
                product_name=r.product_name,
                barcode=barcode,
            )
            summaries[barcode] = summary

        summary.cumulative_sales += r.sales_qty
        if r.date == latest:
            summary.coupang_inventory += r.inventory_qty
        summary.daily_sales_map[r.date] = summary.daily_sales_map.get(r.date, 0) + r.sales_qty

    return list(summaries.values())


def group_products_by_name(items: List[ProductSummary]) -> List[ProductGroup]:
    """Fold summaries sharing a product name; the first non-empty image wins."""
    groups: Dict[str, ProductGroup] = {}

    for item in items:
        group = groups.get(item.product_name)
        if group is None:
            group = ProductGroup(group_name=item.product_name, image_url=item.image_url)
            groups[item.product_name] = group

        group.items.append(item)
        if not group.image_url and item.image_url:
            group.image_url = item.image_url

        group.total_cumulative_sales += item.cumulative_sales
        group.total_coupang_inventory += item.coupang_inventory
        group.total_hq_inventory += item.hq_inventory

        for day, qty in item.daily_sales_map.items():
            group.daily_sales_map[day] = group.daily_sales_map.get(day, 0) + qty

    return list(groups.values())


def sort_product_groups(
    groups: List[ProductGroup],
    key: str = "cumulative_sales",
    descending: bool = True
) -> List[ProductGroup]:
    """
    Sort groups by a named total, or by one day's sales when `key` is a date.

    Raises:
        ValueError: unknown key
    """
    def day_sales(group: ProductGroup) -> int:
        return group.daily_sales_map.get(key, 0)

    if key in GROUP_SORT_KEYS:
        sort_key = GROUP_SORT_KEYS[key]
    elif is_iso_date(key):
        sort_key = day_sales
    else:
        raise ValueError(f"Unknown sort key: {key}")
    return sorted(groups, key=sort_key, reverse=descending)
