import pytest
from fastapi.testclient import TestClient

from coupang_insights.api.routes import get_repository
from coupang_insights.main import app

SALES_CSV = (
    "날짜,옵션ID,상품명,바코드,판매수량,재고수량\n"
    "20260129,OPT-1,Green Tea,8801,3,40\n"
    "20260129,OPT-1,Green Tea,8801,2,0\n"
    "20260130,OPT-1,Green Tea,8801,4,30\n"
).encode("utf-8")

MASTER_CSV = (
    "바코드,상품명,SKU ID,이미지,본사재고\n"
    "8801,Green Tea 500ml,SKU-1,http://img/1.png,15\n"
).encode("utf-8")

INBOUND_CSV = (
    "바코드,상품명,확정수량\n"
    "8801,Green Tea 500ml,12\n"
).encode("utf-8")


@pytest.fixture
def client(repository):
    app.dependency_overrides[get_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()


def upload(client, path, filename, content):
    return client.post(f"/api/{path}", files={"file": (filename, content, "text/csv")})


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_upload_sales(client):
    response = upload(client, "upload-sales", "sales.csv", SALES_CSV)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["kind"] == "sales"
    assert body["rows_processed"] == 3
    assert body["added"] == 2
    assert body["updated"] == 0


def test_sales_reupload_overwrites(client):
    upload(client, "upload-sales", "sales.csv", SALES_CSV)
    body = upload(client, "upload-sales", "sales.csv", SALES_CSV).json()

    assert body["added"] == 0
    assert body["updated"] == 2
    trend = client.get("/api/daily-trend").json()
    assert [t["sales"] for t in trend] == [5, 4]


def test_cp949_csv(client):
    response = upload(client, "upload-sales", "sales.csv", SALES_CSV.decode("utf-8").encode("cp949"))
    assert response.json()["success"] is True


def test_structural_error_is_not_an_http_error(client):
    response = upload(client, "upload-sales", "sales.csv", b"foo,bar\n1,2\n")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["rows_processed"] == 0
    assert len(body["errors"]) == 1


def test_unsupported_extension(client):
    response = upload(client, "upload-sales", "sales.txt", SALES_CSV)
    assert response.status_code == 400


def test_dashboard_and_dates(client):
    upload(client, "upload-sales", "sales.csv", SALES_CSV)

    stats = client.get("/api/dashboard").json()
    assert stats["prev_day_sales"] == 4
    assert stats["total_revenue"] == 40000
    assert stats["this_week_label"] == "1/30~2/5"
    assert stats["last_week_sales"] == 5

    assert client.get("/api/dates").json() == ["2026-01-29", "2026-01-30"]


def test_products_join_master(client):
    upload(client, "upload-sales", "sales.csv", SALES_CSV)
    master = upload(client, "upload-master", "master.csv", MASTER_CSV).json()
    assert master["added"] == 1

    groups = client.get("/api/products").json()
    assert len(groups) == 1
    group = groups[0]
    assert group["group_name"] == "Green Tea 500ml"
    assert group["total_cumulative_sales"] == 9
    assert group["total_coupang_inventory"] == 30
    assert group["total_hq_inventory"] == 15
    assert group["image_url"] == "http://img/1.png"


def test_products_bad_sort_key(client):
    response = client.get("/api/products", params={"sort_by": "price"})
    assert response.status_code == 400


def test_inventory_risks_with_inbound(client):
    upload(client, "upload-sales", "sales.csv", SALES_CSV)
    upload(client, "upload-master", "master.csv", MASTER_CSV)
    inbound = upload(client, "upload-inbound", "inbound.csv", INBOUND_CSV).json()
    assert inbound["rows_processed"] == 1

    risks = client.get("/api/inventory-risks").json()
    assert len(risks) == 1
    risk = risks[0]
    assert risk["inbound_qty"] == 12
    assert risk["current_inventory"] == 30
    assert risk["status"] in ("Safe", "Warning", "Danger")

    danger = client.get("/api/inventory-risks", params={"status": "Danger"}).json()
    assert danger == []


def test_clear_endpoints(client):
    upload(client, "upload-sales", "sales.csv", SALES_CSV)
    upload(client, "upload-master", "master.csv", MASTER_CSV)

    assert client.delete("/api/sales").json()["success"] is True
    assert client.delete("/api/master").status_code == 200
    assert client.delete("/api/inbound").status_code == 200
    assert client.get("/api/products").json() == []
    assert client.get("/api/dashboard").json()["total_sales"] == 0


def test_upload_sales_workbook(client, sales_xlsx):
    response = client.post(
        "/api/upload-sales",
        files={"file": (
            "sales.xlsx", sales_xlsx,
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )},
    )

    body = response.json()
    assert body["success"] is True
    assert body["rows_processed"] == 3
    assert body["added"] == 3
    assert client.get("/api/dates").json() == ["2026-01-29", "2026-01-30"]
    assert client.get("/api/dashboard").json()["prev_day_inventory"] == 35
