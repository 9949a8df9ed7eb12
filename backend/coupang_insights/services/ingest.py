import logging
import re
from typing import Callable, Dict, List, Optional

from coupang_insights.config.settings import settings
from coupang_insights.schemas import (
    DatasetKind, Grid, Row, IngestResult,
    SalesRecord, ProductMaster, InboundRecord
)
from coupang_insights.services.cells import (
    cell_at, cell_number, cell_quantity, cell_text, is_blank, row_is_empty
)
from coupang_insights.services.columns import ColumnMapping, MissingColumnsError, detect_columns
from coupang_insights.services.dates import normalize_date, today_iso

logger = logging.getLogger(__name__)

# Summary rows exported below the data
TOTAL_ROW = re.compile(r"합계|소계|Total|Sum", re.IGNORECASE)

EMPTY_SHEET_ERROR = "The file is empty or has no header row."


class SheetIngestService:
    """
    Turns decoded sheet grids into typed records.

    Every entry point follows the same shape: detect the header and columns,
    then walk the data rows below the header. Missing required columns
    reject the whole sheet with an advisory error; bad cells never do.
    """

    def __init__(self, today: Optional[str] = None):
        # Fallback date for unparseable date cells
        self.today = today or today_iso()

    def ingest(self, grid: Grid, kind: DatasetKind) -> IngestResult:
        handlers: Dict[DatasetKind, Callable[[Grid], IngestResult]] = {
            DatasetKind.SALES: self.ingest_sales,
            DatasetKind.MASTER: self.ingest_master,
            DatasetKind.INBOUND: self.ingest_inbound,
        }
        return handlers[kind](grid)

    def _detect(self, grid: Grid, kind: DatasetKind) -> ColumnMapping:
        if len(grid) < 2:
            raise MissingColumnsError(EMPTY_SHEET_ERROR)
        return detect_columns(grid, kind)

    # ============== Sales ==============

    def ingest_sales(self, grid: Grid) -> IngestResult:
        """
        Parse a marketplace sales export.

        Header is searched in the first rows. Rows without a name, and
        total/subtotal rows, are skipped.
        """
        try:
            mapping = self._detect(grid, DatasetKind.SALES)
        except MissingColumnsError as e:
            return IngestResult(kind=DatasetKind.SALES, errors=[str(e)])

        records: List[SalesRecord] = []
        for row in grid[mapping.header_row + 1:]:
            if row_is_empty(row):
                continue
            record = self._sales_row(row, mapping)
            if record is not None:
                records.append(record)

        logger.info(f"Parsed {len(records)} sales rows (header at row {mapping.header_row})")
        return IngestResult(kind=DatasetKind.SALES, records=records)

    def _sales_row(self, row: Row, mapping: ColumnMapping) -> Optional[SalesRecord]:
        name_role = "product_name" if mapping.has("product_name") else "barcode"
        name = cell_at(row, mapping.index(name_role))
        if is_blank(name):
            return None

        name_text = cell_text(name)
        if TOTAL_ROW.search(cell_text(cell_at(row, 0))) or TOTAL_ROW.search(name_text):
            return None

        # Date column, else column A
        date_idx = mapping.index("date") if mapping.has("date") else 0
        date_str = normalize_date(cell_at(row, date_idx), self.today)

        # Barcode: header match, else the legacy positional column
        barcode = "-"
        barcode_cell = cell_at(row, mapping.index("barcode"))
        fallback_cell = cell_at(row, settings.SALES_BARCODE_FALLBACK_COLUMN)
        if not is_blank(barcode_cell):
            barcode = cell_text(barcode_cell)
        elif not is_blank(fallback_cell):
            barcode = cell_text(fallback_cell)

        product_id = (
            cell_text(cell_at(row, mapping.index("product_id")))
            if mapping.has("product_id") else name_text
        )
        sku_id = (
            cell_text(cell_at(row, mapping.index("sku_id")))
            if mapping.has("sku_id") else product_id
        )

        return SalesRecord(
            product_id=product_id,
            sku_id=sku_id,
            product_name=name_text,
            barcode=barcode,
            date=date_str,
            sales_qty=cell_quantity(cell_at(row, mapping.index("sales_qty"))),
            inventory_qty=cell_quantity(cell_at(row, mapping.index("inventory_qty"))),
        )

    # ============== Product Master ==============

    def ingest_master(self, grid: Grid) -> IngestResult:
        """
        Parse a product-master sheet (header on the first row).
        Rows without a barcode are dropped.
        """
        try:
            mapping = self._detect(grid, DatasetKind.MASTER)
        except MissingColumnsError as e:
            return IngestResult(kind=DatasetKind.MASTER, errors=[str(e)])

        products: List[ProductMaster] = []
        for row in grid[1:]:
            if row_is_empty(row):
                continue

            barcode = cell_text(cell_at(row, mapping.index("barcode")))
            if not barcode:
                barcode = cell_text(cell_at(row, settings.MASTER_BARCODE_FALLBACK_COLUMN))
            if not barcode or barcode == "-" or TOTAL_ROW.search(barcode):
                continue

            name = cell_text(cell_at(row, mapping.index("sku_name")))
            sku_id = cell_text(cell_at(row, mapping.index("sku_id")))

            # Only resolved columns are set, so merges overwrite just those fields
            fields = {
                "barcode": barcode,
                "sku_name": name or sku_id or "Unknown",
                "sku_id": sku_id,
            }
            if mapping.has("category"):
                fields["category"] = cell_text(cell_at(row, mapping.index("category")))
            if mapping.has("cost_price"):
                fields["cost_price"] = cell_number(cell_at(row, mapping.index("cost_price")))
            if mapping.has("image_url"):
                fields["image_url"] = cell_text(cell_at(row, mapping.index("image_url"))) or None
            if mapping.has("hq_inventory"):
                fields["hq_inventory"] = cell_quantity(cell_at(row, mapping.index("hq_inventory")))

            products.append(ProductMaster(**fields))

        logger.info(f"Parsed {len(products)} product master rows")
        return IngestResult(kind=DatasetKind.MASTER, records=products)

    # ============== Inbound Schedule ==============

    def ingest_inbound(self, grid: Grid) -> IngestResult:
        """
        Parse an inbound/supply schedule (header on the first row).
        Rows without a barcode or with a non-positive quantity are dropped.
        """
        try:
            mapping = self._detect(grid, DatasetKind.INBOUND)
        except MissingColumnsError as e:
            return IngestResult(kind=DatasetKind.INBOUND, errors=[str(e)])

        records: List[InboundRecord] = []
        for row in grid[1:]:
            if row_is_empty(row):
                continue

            barcode = cell_text(cell_at(row, mapping.index("barcode")))
            if not barcode or barcode == "-" or TOTAL_ROW.search(barcode):
                continue

            name = (
                cell_text(cell_at(row, mapping.index("product_name")))
                if mapping.has("product_name") else "Unknown"
            )
            qty = cell_quantity(cell_at(row, mapping.index("inbound_qty")))
            if qty > 0:
                records.append(InboundRecord(barcode=barcode, product_name=name, inbound_qty=qty))

        logger.info(f"Parsed {len(records)} inbound rows")
        return IngestResult(kind=DatasetKind.INBOUND, records=records)
