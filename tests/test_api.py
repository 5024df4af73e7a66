"""HTTP surface: envelopes, filters and the manual crawl trigger."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import seed
from realprice.api import transactions as transactions_api
from realprice.core.errors import RealPriceStoreError
from realprice.core.settings import Settings
from realprice.main import create_app


@pytest.fixture
def client(engine, session_factory):
    seed(session_factory)
    app = create_app(Settings(CSV_ARCHIVE_DIR="/tmp/lvr-archive"), engine)
    with TestClient(app) as c:
        yield c


def test_health(client) -> None:
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_index_lists_endpoints(client) -> None:
    body = client.get("/").json()

    assert "GET /api/transactions" in body["endpoints"]


def test_transactions_envelope(client) -> None:
    resp = client.get("/api/transactions", params={"district": "西屯", "sortBy": "total_price", "sortOrder": "asc"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["count"] == 2
    assert [r["total_price"] for r in body["data"]] == [8_000_000, 12_000_000]
    assert body["data"][0]["unit_price"] == 661158
    assert body["data"][0]["building_area"] == pytest.approx(10.0)


def test_transactions_camel_case_filters(client) -> None:
    resp = client.get(
        "/api/transactions",
        params={"minPrice": 4_000_000, "startDate": "2025-01-01", "endDate": "2025-12-31", "projectName": "青雲"},
    )

    assert resp.json()["count"] == 1


def test_transactions_rejects_malformed_date(client) -> None:
    resp = client.get("/api/transactions", params={"startDate": "2025/01/01"})

    assert resp.status_code == 422


def test_statistics_envelope(client) -> None:
    body = client.get("/api/statistics").json()

    assert body["success"] is True
    assert body["data"]["total_count"] == 4


def test_trend_districts_heatmap(client) -> None:
    trend = client.get("/api/trend", params={"district": "北屯"}).json()
    districts = client.get("/api/districts").json()
    heatmap = client.get("/api/heatmap").json()

    assert [p["month"] for p in trend["data"]] == ["2024-11"]
    assert districts["data"][0]["district"] == "臺中市西屯區"
    assert len(heatmap["data"]["districts"]) == 2


def test_manual_crawl_runs_the_crawler(client, monkeypatch) -> None:
    seen = {}

    def fake_crawl(season, roc_year, quarter, *, engine, archive_dir):
        seen.update(season=season, roc_year=roc_year, quarter=quarter, archive_dir=archive_dir)
        return 42

    monkeypatch.setattr(transactions_api, "crawl_all_cities", fake_crawl)

    resp = client.post("/api/crawl", json={"season": "113S4"})

    assert resp.status_code == 200
    assert resp.json()["data"] == {"inserted": 42}
    assert seen == {"season": "113S4", "roc_year": None, "quarter": None, "archive_dir": "/tmp/lvr-archive"}


def test_manual_crawl_without_body(client, monkeypatch) -> None:
    monkeypatch.setattr(transactions_api, "crawl_all_cities", lambda *a, **kw: 0)

    resp = client.post("/api/crawl")

    assert resp.status_code == 200
    assert resp.json()["message"] == "inserted 0 rows"


def test_manual_crawl_failure_is_500(client, monkeypatch) -> None:
    def broken(*args, **kwargs):
        raise RealPriceStoreError("schema initialization failed")

    monkeypatch.setattr(transactions_api, "crawl_all_cities", broken)

    resp = client.post("/api/crawl", json={})

    assert resp.status_code == 500
    assert "schema initialization failed" in resp.json()["detail"]
