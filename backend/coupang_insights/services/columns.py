"""
Header-row and column-role detection for loosely structured sheets.

Column roles are resolved from a static table of keyword rules. Each role has
one or more tiers of decreasing specificity: tiers are tried in order, the
first tier with any match wins, and within a tier the leftmost column wins.
A rule may carry an exclusion pattern so that e.g. a 'return qty' or
'stock qty' column is never picked as the sales quantity.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern, Sequence

from coupang_insights.config.settings import settings
from coupang_insights.schemas import DatasetKind, Grid
from coupang_insights.services.cells import cell_text, row_is_empty

logger = logging.getLogger(__name__)


class MissingColumnsError(ValueError):
    """Required semantic columns could not be located in the header."""


@dataclass(frozen=True)
class ColumnRule:
    kind: DatasetKind
    role: str
    tier: int
    pattern: Pattern
    exclude: Optional[Pattern] = None
    compact: bool = False  # match against the header with whitespace removed


def _rx(pattern: str) -> Pattern:
    return re.compile(pattern, re.IGNORECASE)


_S, _M, _I = DatasetKind.SALES, DatasetKind.MASTER, DatasetKind.INBOUND

# Returns, inbound receipts, stock and purchase orders are never sales
NOT_SALES = _rx(r"반품|입고|재고|발주")
# '바코드' contains '코드' and 'barcode' contains 'code'
BARCODE_HEADER = _rx(r"바코드|barcode")

COLUMN_RULES: List[ColumnRule] = [
    # --- Sales ---
    ColumnRule(_S, "date", 1, _rx(r"날짜|Date|일자|주문일자|결제일자|주문일|접수일|판매일")),
    ColumnRule(_S, "barcode", 1, _rx(r"바코드|Barcode")),
    ColumnRule(_S, "barcode", 2, _rx(r"상품코드|ItemCode")),
    ColumnRule(_S, "barcode", 3, _rx(r"업체상품코드|VendorItemCode|SKU")),
    ColumnRule(_S, "product_name", 1, _rx(r"상품명|옵션명|Product|SKU|Item|제품명|품목")),
    ColumnRule(_S, "sales_qty", 1, _rx(r"출고수량|출고량|출고|결제수량|판매량|판매수량"), NOT_SALES),
    ColumnRule(_S, "sales_qty", 2, _rx(r"주문수량|결제\s*수량|Sales|Quantity"), NOT_SALES),
    ColumnRule(_S, "sales_qty", 3, _rx(r"수량|Qty|개수|판매"), NOT_SALES),
    ColumnRule(_S, "inventory_qty", 1, _rx(r"재고|Inventory|Stock")),
    ColumnRule(_S, "product_id", 1, _rx(r"옵션ID|등록상품ID|ID")),
    ColumnRule(_S, "sku_id", 1, _rx(r"업체상품코드|SKU\s*ID|SKU")),
    # --- Product master ---
    ColumnRule(_M, "barcode", 1, _rx(r"바코드|barcode|ean|upc"), compact=True),
    ColumnRule(_M, "sku_name", 1, _rx(r"상품명|skuname|name|제품명"), compact=True),
    # Barcode headers excluded: the bare keywords would match 바코드/barcode first
    ColumnRule(_M, "sku_id", 1, _rx(r"skuid|sku|code|코드"), BARCODE_HEADER, compact=True),
    ColumnRule(_M, "category", 1, _rx(r"카테고리|Category")),
    ColumnRule(_M, "cost_price", 1, _rx(r"원가|Cost")),
    ColumnRule(_M, "image_url", 1, _rx(r"이미지|image|img|url"), compact=True),
    ColumnRule(_M, "hq_inventory", 1, _rx(r"본사재고|hq|warehouse|창고"), compact=True),
    # --- Inbound schedule ---
    ColumnRule(_I, "barcode", 1, _rx(r"바코드|barcode"), compact=True),
    ColumnRule(_I, "product_name", 1, _rx(r"상품명|name|product"), compact=True),
    ColumnRule(_I, "inbound_qty", 1, _rx(r"확정|confirmed"), compact=True),
    ColumnRule(_I, "inbound_qty", 2, _rx(r"공급|입고|supply|inbound"), compact=True),
    ColumnRule(_I, "inbound_qty", 3, _rx(r"수량|qty"), compact=True),
]

# Header-row search (sales only)
HEADER_DATE_HINT = _rx(r"날짜|date|일자|주문일자|결제일자|주문일")
HEADER_PRODUCT_HINT = _rx(r"상품명|옵션명|product|sku|item|제품명|품목|바코드|barcode")


@dataclass
class ColumnMapping:
    """Where each semantic role lives in a sheet."""
    kind: DatasetKind
    header_row: int
    headers: List[str]
    columns: Dict[str, Optional[int]] = field(default_factory=dict)

    def index(self, role: str) -> Optional[int]:
        return self.columns.get(role)

    def has(self, role: str) -> bool:
        return self.columns.get(role) is not None


def _compact(text: str) -> str:
    return re.sub(r"\s+", "", text).lower()


def _first_match(headers: Sequence[str], rule: ColumnRule) -> Optional[int]:
    for idx, header in enumerate(headers):
        if not header:
            continue
        text = _compact(header) if rule.compact else header
        if rule.exclude is not None and rule.exclude.search(text):
            continue
        if rule.pattern.search(text):
            return idx
    return None


def resolve_role(headers: Sequence[str], kind: DatasetKind, role: str) -> Optional[int]:
    """Evaluate a role's tiers in order; the first tier with a hit wins."""
    rules = sorted(
        (r for r in COLUMN_RULES if r.kind == kind and r.role == role),
        key=lambda r: r.tier
    )
    for rule in rules:
        idx = _first_match(headers, rule)
        if idx is not None:
            return idx
    return None


def roles_for(kind: DatasetKind) -> List[str]:
    seen: List[str] = []
    for rule in COLUMN_RULES:
        if rule.kind == kind and rule.role not in seen:
            seen.append(rule.role)
    return seen


def find_header_row(grid: Grid, max_rows: Optional[int] = None) -> int:
    """
    Index of the first row (within the scan window) mentioning both a date
    and a product identifier. Falls back to row 0.
    """
    max_rows = max_rows or settings.HEADER_SCAN_ROWS
    for i, row in enumerate(grid[:max_rows]):
        if row_is_empty(row):
            continue
        row_str = " ".join(cell_text(c) for c in row).lower()
        if HEADER_DATE_HINT.search(row_str) and HEADER_PRODUCT_HINT.search(row_str):
            return i
    return 0


def _check_required(mapping: ColumnMapping) -> None:
    if mapping.kind == DatasetKind.SALES:
        no_product = not mapping.has("product_name") and not mapping.has("barcode")
        no_measures = not mapping.has("date") and not mapping.has("sales_qty")
        if no_product or no_measures:
            raise MissingColumnsError(
                "Required columns (date, product name/barcode, sales quantity) "
                "not found. Check the header row."
            )
    elif not mapping.has("barcode"):
        raise MissingColumnsError(
            f"Barcode column not found (headers: {', '.join(h for h in mapping.headers if h)})"
        )


def detect_columns(grid: Grid, kind: DatasetKind) -> ColumnMapping:
    """
    Locate the header row and map every role of `kind` to a column index.

    Raises:
        MissingColumnsError: required roles are unresolved
    """
    header_row = find_header_row(grid) if kind == DatasetKind.SALES else 0
    headers = [cell_text(h) for h in (grid[header_row] or [])] if grid else []

    mapping = ColumnMapping(kind=kind, header_row=header_row, headers=headers)
    for role in roles_for(kind):
        mapping.columns[role] = resolve_role(headers, kind, role)

    logger.debug(f"[{kind.value}] header row {header_row}, columns: {mapping.columns}")

    _check_required(mapping)
    return mapping
