# Schemas module
from coupang_insights.schemas.schemas import (
    CellValue, Row, Grid,
    DatasetKind, RiskStatus,
    SalesRecord, ProductMaster, InboundRecord,
    IngestResult, MergeSummary, UploadResponse,
    ProductSummary, ProductGroup,
    InventoryRisk, InventoryRiskItem,
    WeeklyStats, DashboardStats, DailyTrend
)

__all__ = [
    "CellValue", "Row", "Grid",
    "DatasetKind", "RiskStatus",
    "SalesRecord", "ProductMaster", "InboundRecord",
    "IngestResult", "MergeSummary", "UploadResponse",
    "ProductSummary", "ProductGroup",
    "InventoryRisk", "InventoryRiskItem",
    "WeeklyStats", "DashboardStats", "DailyTrend"
]
