from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

import app.services.reports as reports

URL = "/api/admin/dashboard"
RANGE = {"dateFrom": "2024-05-01T00:00:00+06:00", "dateTo": "2024-05-03T23:59:00+06:00"}


@pytest.fixture()
def shop(factory):
    dresses = factory.category("Dresses")
    skirts = factory.category("Skirts")
    factory.category("Empty")
    aida = factory.seller("Aida", rates=[25])
    bakyt = factory.seller("Bakyt")
    factory.seller("Gone", status="INACTIVE")
    ivan = factory.courier("Ivan")
    dress = factory.product(aida, name="Dress", category=dresses)
    skirt = factory.product(bakyt, name="Skirt", category=skirts)
    factory.product(bakyt, name="Old skirt", category=skirts, status="INACTIVE")

    # Fechas en UTC; Bishkek es UTC+6
    factory.order([(dress, 2, 1000)], updated_at=datetime(2024, 5, 1, 4, 0), courier=ivan)
    factory.order([(dress, 1, 1250), (skirt, 1, 700)], updated_at=datetime(2024, 5, 2, 4, 0))
    factory.order([(skirt, 2, 700)], status="CANCELED", updated_at=datetime(2024, 5, 2, 5, 0))
    factory.order([(skirt, 1, 700)], status="CREATED", updated_at=datetime(2024, 5, 3, 4, 0))
    # fuera del rango
    factory.order([(dress, 5, 1000)], updated_at=datetime(2024, 6, 1, 4, 0))


def _get(client, **params):
    response = client.get(URL, query_string=params)
    assert response.status_code == 200
    return response.get_json()


def test_overview_counts_and_revenue(client, shop):
    overview = _get(client, **RANGE)["overview"]

    assert overview["totalProducts"] == 3
    assert overview["activeProducts"] == 2
    assert overview["totalCategories"] == 3
    assert overview["totalOrders"] == 4
    assert overview["pendingOrders"] == 1
    assert overview["totalUsers"] == 4
    assert overview["totalSellers"] == 2
    assert overview["totalCouriers"] == 1
    # entregados: 2000 + 1250 (Aida 25%) + 700 (Bakyt 0%)
    assert overview["totalRevenue"] == 3950.0
    assert overview["netRevenue"] == 650.0


def test_net_revenue_matches_seller_debts_report(client, shop):
    overview = _get(client, **RANGE)["overview"]
    debts = client.get("/api/admin/seller-debts", query_string=RANGE).get_json()["summary"]

    assert overview["netRevenue"] == debts["totalAdminProfit"]
    assert overview["totalRevenue"] == debts["totalRevenue"]


def test_start_end_date_aliases(client, shop):
    aliased = _get(client, startDate=RANGE["dateFrom"], endDate=RANGE["dateTo"])

    assert aliased["overview"] == _get(client, **RANGE)["overview"]


def test_without_range_everything_delivered_counts(client, shop):
    data = _get(client)

    assert data["overview"]["totalRevenue"] == 8950.0
    assert data["overview"]["netRevenue"] == 1650.0
    assert data["charts"]["revenueTimeline"] == []
    assert data["charts"]["dailyOrders"] == []


def test_revenue_timeline_by_day(client, shop):
    charts = _get(client, **RANGE)["charts"]

    assert charts["revenueTimeline"] == [
        {"label": "01.05", "revenue": 2000.0, "canceledRevenue": 0.0, "orders": 1},
        {"label": "02.05", "revenue": 1950.0, "canceledRevenue": 1400.0, "orders": 2},
        {"label": "03.05", "revenue": 0.0, "canceledRevenue": 0.0, "orders": 1},
    ]
    assert charts["dailyOrders"] == [
        {"date": "01.05", "orders": 1, "revenue": 2000.0},
        {"date": "02.05", "orders": 2, "revenue": 1950.0},
        {"date": "03.05", "orders": 1, "revenue": 0.0},
    ]


def test_status_products_and_categories_charts(client, shop):
    charts = _get(client, **RANGE)["charts"]

    statuses = {row["status"]: row for row in charts["orderStatus"]}
    assert statuses["DELIVERED"] == {"status": "DELIVERED", "count": 2, "revenue": 3950.0}
    assert statuses["CANCELED"]["revenue"] == 1400.0
    assert statuses["CREATED"]["count"] == 1

    assert charts["topProducts"][0] == {"name": "Skirt", "sold": 4, "revenue": 2800.0}
    assert charts["topProducts"][1] == {"name": "Dress", "sold": 3, "revenue": 3250.0}

    assert [c["name"] for c in charts["categories"]] == ["Dresses", "Skirts"]
    assert charts["categories"][1] == {"name": "Skirts", "products": 2, "orders": 3, "revenue": 2800.0}


def test_recent_orders(client, shop):
    recent = _get(client, **RANGE)["recentOrders"]

    assert len(recent) == 4
    assert recent[0]["status"] == "CREATED"
    assert recent[0]["totalPrice"] == 700.0
    assert recent[-1]["courierName"] == "Ivan"
    assert recent[-1]["orderNumber"].startswith("ORD-")


def test_revenue_section_fails_in_isolation(client, shop, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("timeout"))

    monkeypatch.setattr(reports, "fetch_order_lines", broken)

    data = _get(client, **RANGE)

    assert data["overview"]["totalRevenue"] == 0.0
    assert data["overview"]["netRevenue"] == 0.0
    assert data["charts"]["revenueTimeline"] == []
    assert data["overview"]["totalProducts"] == 3
    assert data["overview"]["totalOrders"] == 4
    assert len(data["recentOrders"]) == 4
