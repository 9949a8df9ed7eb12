import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, UploadFile, File, HTTPException, Query

from coupang_insights.models import SessionLocal, SQLAlchemyKeyValueStore
from coupang_insights.schemas import (
    DatasetKind, RiskStatus, UploadResponse,
    DashboardStats, DailyTrend, InventoryRisk, ProductGroup
)
from coupang_insights.services import AnalyticsService, RecordRepository, SheetIngestService, load_grid

logger = logging.getLogger(__name__)

router = APIRouter()

_repository: Optional[RecordRepository] = None


def get_repository() -> RecordRepository:
    """One repository per process, so every request shares the merge lock."""
    global _repository
    if _repository is None:
        _repository = RecordRepository(SQLAlchemyKeyValueStore(SessionLocal))
    return _repository


def get_analytics(repository: RecordRepository = Depends(get_repository)) -> AnalyticsService:
    return AnalyticsService(repository)


async def _process_upload(
    file: UploadFile,
    kind: DatasetKind,
    repository: RecordRepository
) -> UploadResponse:
    try:
        content = await file.read()
        grid = load_grid(content, file.filename)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Could not decode {file.filename}")
        raise HTTPException(status_code=400, detail=f"Could not read file: {str(e)}")

    result = SheetIngestService().ingest(grid, kind)
    if not result.ok:
        logger.warning(f"Rejected {kind.value} upload {file.filename}: {result.errors}")
        return UploadResponse(success=False, kind=kind, rows_processed=0, errors=result.errors)

    if kind == DatasetKind.SALES:
        summary = repository.merge_sales(result.records)
    elif kind == DatasetKind.MASTER:
        summary = repository.merge_master(result.records)
    else:
        summary = repository.replace_inbound(result.records)

    return UploadResponse(
        success=True,
        kind=kind,
        rows_processed=len(result.records),
        added=summary.added,
        updated=summary.updated,
    )


# ============== Health ==============

@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}


# ============== Uploads ==============

@router.post("/upload-sales", response_model=UploadResponse)
async def upload_sales(
    file: UploadFile = File(...),
    repository: RecordRepository = Depends(get_repository)
):
    """
    Upload a marketplace sales export (.xlsx, .xls or .csv).

    Rows sharing (product, date) inside the file are summed; dates already
    stored are overwritten, not added to.
    """
    return await _process_upload(file, DatasetKind.SALES, repository)


@router.post("/upload-master", response_model=UploadResponse)
async def upload_master(
    file: UploadFile = File(...),
    repository: RecordRepository = Depends(get_repository)
):
    """Upload the product master. Known barcodes get the new column values."""
    return await _process_upload(file, DatasetKind.MASTER, repository)


@router.post("/upload-inbound", response_model=UploadResponse)
async def upload_inbound(
    file: UploadFile = File(...),
    repository: RecordRepository = Depends(get_repository)
):
    """Upload the inbound schedule. Replaces the stored schedule."""
    return await _process_upload(file, DatasetKind.INBOUND, repository)


# ============== Analytics ==============

@router.get("/dashboard", response_model=DashboardStats)
async def dashboard(analytics: AnalyticsService = Depends(get_analytics)):
    return analytics.dashboard_stats()


@router.get("/products", response_model=List[ProductGroup])
async def list_products(
    sort_by: str = Query("cumulative_sales", description="Total name or a YYYY-MM-DD date"),
    descending: bool = True,
    analytics: AnalyticsService = Depends(get_analytics)
):
    """Products grouped by name, joined with the master by barcode."""
    try:
        return analytics.product_groups(sort_by, descending)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/inventory-risks", response_model=List[InventoryRisk])
async def inventory_risks(
    status: Optional[RiskStatus] = None,
    analytics: AnalyticsService = Depends(get_analytics)
):
    """7-day depletion risk per product, most urgent first."""
    return analytics.inventory_risks(status)


@router.get("/daily-trend", response_model=List[DailyTrend])
async def daily_trend(analytics: AnalyticsService = Depends(get_analytics)):
    return analytics.daily_trend()


@router.get("/dates", response_model=List[str])
async def list_dates(analytics: AnalyticsService = Depends(get_analytics)):
    return analytics.dates()


# ============== Clearing ==============

@router.delete("/sales")
async def clear_sales(repository: RecordRepository = Depends(get_repository)):
    repository.clear_sales()
    return {"success": True, "message": "Sales records cleared"}


@router.delete("/master")
async def clear_master(repository: RecordRepository = Depends(get_repository)):
    repository.clear_master()
    return {"success": True, "message": "Product master cleared"}


@router.delete("/inbound")
async def clear_inbound(repository: RecordRepository = Depends(get_repository)):
    repository.clear_inbound()
    return {"success": True, "message": "Inbound schedule cleared"}
