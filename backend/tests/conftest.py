from datetime import datetime
from io import BytesIO

import pytest
from openpyxl import Workbook

from coupang_insights.models import InMemoryKeyValueStore
from coupang_insights.schemas import SalesRecord
from coupang_insights.services import RecordRepository, SheetIngestService

TODAY = "2026-02-01"


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(store):
    return RecordRepository(store)


@pytest.fixture
def ingest():
    return SheetIngestService(today=TODAY)


@pytest.fixture
def sales_grid():
    """A marketplace export with a title block above the header and a total row."""
    return [
        ["쿠팡 판매 리포트", None, None, None, None, None],
        [None, None, None, None, None, None],
        ["날짜", "옵션ID", "상품명", "바코드", "판매수량", "재고수량"],
        [20260129, "OPT-1", "Green Tea", "8801", 3, 40],
        [20260129, "OPT-1", "Green Tea", "8801", 2, 0],
        [20260130, "OPT-1", "Green Tea", "8801", 4, 30],
        [20260130, "OPT-2", "Barley Tea", "8802", "1,200", 7],
        ["합계", None, "합계", None, 1209, 77],
    ]


@pytest.fixture
def master_grid():
    return [
        ["바코드", "상품명", "SKU ID", "원가", "이미지", "본사재고"],
        ["8801", "Green Tea", "SKU-1", "1,200원", "http://img/1.png", 15],
        ["8802", "Barley Tea", "SKU-2", 900, None, 4],
        [None, "No Barcode", "SKU-3", 100, None, 1],
    ]


@pytest.fixture
def inbound_grid():
    return [
        ["바코드", "상품명", "입고 예정 수량", "확정 수량"],
        ["8801", "Green Tea", 50, 20],
        ["8802", "Barley Tea", 10, 0],
        ["-", "Ghost", 10, 10],
    ]


@pytest.fixture
def make_sales():
    """Factory for SalesRecord with id-derived defaults."""
    def factory(product_id="A", date="2026-01-01", sales_qty=0, inventory_qty=0,
                name=None, barcode=None):
        return SalesRecord(
            product_id=product_id,
            sku_id=product_id,
            product_name=name or product_id,
            barcode=barcode or product_id,
            date=date,
            sales_qty=sales_qty,
            inventory_qty=inventory_qty,
        )
    return factory


@pytest.fixture
def sales_xlsx():
    """The same export saved as a workbook: real date cells, a barcode column with a gap."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["쿠팡 판매 리포트"])
    sheet.append(["날짜", "옵션ID", "상품명", "바코드", "판매수량", "재고수량"])
    sheet.append([datetime(2026, 1, 29), "OPT-1", "Green Tea", 8801, 3, 40])
    sheet.append([datetime(2026, 1, 30), "OPT-2", "Barley Tea", None, 2, 5])
    sheet.append([datetime(2026, 1, 30), "OPT-1", "Green Tea", 8801, 4, 30])

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
