"""
Pydantic Schemas for ingestion, persistence and analytics.

These schemas define the contract between the core and its collaborators:
- Typed records produced by ingestion and persisted by the repository
- Derived projections (summaries, groups, risks) handed to rendering
- Upload responses for the HTTP layer
"""

from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, Field


# A raw spreadsheet cell as produced by an external decoder.
CellValue = Union[str, int, float, date, datetime, None]
Row = Sequence[CellValue]
Grid = Sequence[Row]


# ============== Enums ==============

class DatasetKind(str, Enum):
    """The three sheet shapes the ingestor understands."""
    SALES = "sales"
    MASTER = "master"
    INBOUND = "inbound"


class RiskStatus(str, Enum):
    """7-day stock-out exposure."""
    SAFE = "Safe"
    WARNING = "Warning"
    DANGER = "Danger"


# ============== Records ==============

class SalesRecord(BaseModel):
    """
    One marketplace sales row.
    inventory_qty is the marketplace-side stock on `date`.
    """
    product_id: str
    sku_id: str
    product_name: str
    barcode: str
    date: str  # YYYY-MM-DD
    sales_qty: int = Field(default=0, ge=0)
    inventory_qty: int = Field(default=0, ge=0)


class ProductMaster(BaseModel):
    """Product-master entry. The trimmed barcode is the join key."""
    barcode: str = Field(..., min_length=1)
    sku_name: str
    sku_id: str = ""
    category: Optional[str] = None
    cost_price: Optional[float] = None
    image_url: Optional[str] = None
    hq_inventory: Optional[int] = None


class InboundRecord(BaseModel):
    """Scheduled replenishment for a product."""
    barcode: str
    product_name: str
    inbound_qty: int = Field(..., gt=0)


# ============== Ingestion ==============

class IngestResult(BaseModel):
    """
    Output of one ingestion pass.
    A non-empty `errors` list means the sheet was rejected and `records` is empty.
    """
    kind: DatasetKind
    records: List[Union[SalesRecord, ProductMaster, InboundRecord]] = []
    errors: List[str] = []

    @property
    def ok(self) -> bool:
        return not self.errors


class MergeSummary(BaseModel):
    """Outcome of merging a batch into the persisted set."""
    added: int = 0
    updated: int = 0
    total: int = 0


class UploadResponse(BaseModel):
    """Response after a sheet upload."""
    success: bool
    kind: DatasetKind
    rows_processed: int
    added: int = 0
    updated: int = 0
    errors: List[str] = []


# ============== Aggregation ==============

class ProductSummary(BaseModel):
    """Per-barcode rollup of sales joined with master data."""
    product_id: str
    sku_id: str
    product_name: str
    barcode: str
    image_url: Optional[str] = None
    cumulative_sales: int = 0
    coupang_inventory: int = 0
    hq_inventory: int = 0
    daily_sales_map: Dict[str, int] = {}


class ProductGroup(BaseModel):
    """All barcodes sharing one product name."""
    group_name: str
    image_url: Optional[str] = None
    total_cumulative_sales: int = 0
    total_coupang_inventory: int = 0
    total_hq_inventory: int = 0
    daily_sales_map: Dict[str, int] = {}
    items: List[ProductSummary] = []


# ============== Risk Forecast ==============

class InventoryRiskItem(BaseModel):
    """Per-barcode drill-down of an inventory risk row."""
    product_name: str
    barcode: str
    image_url: Optional[str] = None
    current_inventory: int
    inbound_qty: int = 0
    avg_7_days: float
    prev_day_sales: int
    weighted_daily_avg: float
    expected_demand_7_days: float
    expected_balance_7_days: float
    status: RiskStatus


class InventoryRisk(BaseModel):
    """
    Projected 7-day stock position for one product group.
    Derived on every analytics pass, never persisted.
    """
    product_name: str
    image_url: Optional[str] = None
    current_inventory: int
    inbound_qty: int
    avg_7_days: float
    prev_day_sales: int
    weighted_daily_avg: float
    expected_demand_7_days: float
    expected_balance_7_days: float
    status: RiskStatus
    items: List[InventoryRiskItem] = []


# ============== Dashboard ==============

class WeeklyStats(BaseModel):
    """Friday-to-Thursday week over week comparison."""
    this_week_label: str = "-"
    last_week_label: str = "-"
    this_week_start: Optional[date] = None
    this_week_end: Optional[date] = None
    last_week_start: Optional[date] = None
    last_week_end: Optional[date] = None
    this_week_sales: int = 0
    last_week_sales: int = 0
    growth_rate: float = 0.0


class DashboardStats(BaseModel):
    """Headline numbers for the dashboard cards."""
    total_sales: int = 0
    total_revenue: int = 0
    rising_items_count: int = 0
    falling_items_count: int = 0
    stock_warning_count: int = 0
    prev_day_sales: int = 0
    prev_day_inventory: int = 0
    this_week_sales: int = 0
    last_week_sales: int = 0
    this_week_label: str = "-"
    last_week_label: str = "-"
    growth_rate: float = 0.0


class DailyTrend(BaseModel):
    """Sales on one date."""
    date: str
    sales: int
    revenue: int
