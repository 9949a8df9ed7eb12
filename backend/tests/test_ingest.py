from coupang_insights.schemas import DatasetKind, SalesRecord
from coupang_insights.services.ingest import EMPTY_SHEET_ERROR

TODAY = "2026-02-01"


def test_sales_rows_are_typed(ingest, sales_grid):
    result = ingest.ingest(sales_grid, DatasetKind.SALES)

    assert result.ok
    assert len(result.records) == 4
    first = result.records[0]
    assert isinstance(first, SalesRecord)
    assert first.product_id == "OPT-1"
    assert first.sku_id == "OPT-1"
    assert first.product_name == "Green Tea"
    assert first.barcode == "8801"
    assert first.date == "2026-01-29"
    assert first.sales_qty == 3
    assert first.inventory_qty == 40


def test_sales_total_row_is_skipped(ingest, sales_grid):
    result = ingest.ingest_sales(sales_grid)
    assert all(r.product_name != "합계" for r in result.records)


def test_sales_lenient_quantities(ingest, sales_grid):
    result = ingest.ingest_sales(sales_grid)
    barley = [r for r in result.records if r.product_id == "OPT-2"][0]
    assert barley.sales_qty == 1200


def test_sales_bad_cells_never_reject_rows(ingest):
    grid = [
        ["날짜", "상품명", "판매수량", "재고"],
        ["미정", "Green Tea", "n/a", -4],
        [20260130, "", 3, 1],
    ]
    result = ingest.ingest_sales(grid)

    assert result.ok
    assert len(result.records) == 1
    record = result.records[0]
    assert record.date == TODAY
    assert record.sales_qty == 0
    assert record.inventory_qty == 0


def test_sales_without_identifier_columns_fall_back(ingest):
    grid = [
        ["날짜", "상품명", "판매수량"],
        [20260130, "Green Tea", 3],
    ]
    record = ingest.ingest_sales(grid).records[0]
    assert record.product_id == "Green Tea"
    assert record.sku_id == "Green Tea"
    assert record.barcode == "-"


def test_sales_barcode_positional_fallback(ingest):
    header = ["날짜", "상품명", "판매수량", "a", "b", "c", "d", "e", "f"]
    row = [20260130, "Green Tea", 3, None, None, None, None, None, 8809]
    record = ingest.ingest_sales([header, row]).records[0]
    assert record.barcode == "8809"


def test_sales_missing_columns_is_an_advisory_error(ingest):
    result = ingest.ingest_sales([["foo", "bar"], [1, 2]])
    assert not result.ok
    assert result.records == []
    assert len(result.errors) == 1


def test_empty_sheet(ingest):
    result = ingest.ingest([["날짜", "상품명"]], DatasetKind.SALES)
    assert result.errors == [EMPTY_SHEET_ERROR]


def test_master_rows(ingest, master_grid):
    result = ingest.ingest(master_grid, DatasetKind.MASTER)

    assert result.ok
    assert [p.barcode for p in result.records] == ["8801", "8802"]
    green = result.records[0]
    assert green.sku_name == "Green Tea"
    assert green.sku_id == "SKU-1"
    assert green.cost_price == 1200.0
    assert green.image_url == "http://img/1.png"
    assert green.hq_inventory == 15
    assert result.records[1].image_url is None


def test_master_only_sets_resolved_fields(ingest):
    grid = [["바코드", "상품명"], ["8801", "Green Tea"]]
    product = ingest.ingest_master(grid).records[0]
    assert product.model_fields_set == {"barcode", "sku_name", "sku_id"}


def test_master_name_falls_back_to_sku_id(ingest):
    grid = [["바코드", "상품명", "SKU"], ["8801", None, "SKU-1"], ["8802", None, None]]
    products = ingest.ingest_master(grid).records
    assert products[0].sku_name == "SKU-1"
    assert products[1].sku_name == "Unknown"


def test_master_without_barcode_column(ingest):
    result = ingest.ingest_master([["상품명"], ["Green Tea"]])
    assert not result.ok


def test_inbound_rows(ingest, inbound_grid):
    result = ingest.ingest(inbound_grid, DatasetKind.INBOUND)

    assert result.ok
    assert len(result.records) == 1
    record = result.records[0]
    assert record.barcode == "8801"
    assert record.product_name == "Green Tea"
    assert record.inbound_qty == 20


def test_inbound_without_name_column(ingest):
    grid = [["바코드", "수량"], ["8801", 5]]
    record = ingest.ingest_inbound(grid).records[0]
    assert record.product_name == "Unknown"
    assert record.inbound_qty == 5


def test_inbound_total_row_is_skipped(ingest):
    grid = [["바코드", "상품명", "수량"], ["8801", "Green Tea", 5], ["합계", None, 5]]
    records = ingest.ingest_inbound(grid).records
    assert [r.barcode for r in records] == ["8801"]
