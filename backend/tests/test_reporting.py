"""
Reporting tests.

The first half exercises the pure reductions with plain namespaces; the rest
goes through the dashboard and report endpoints.
"""

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from cosmo_admin.services import reporting_service as rs

MANAGER_EMAIL = "olena@romanova.test"


def _item(price, quantity, discount=0, salon_price_usd=None, exchange_rate=None, product_id=None, name="Serum"):
    return SimpleNamespace(
        price=price,
        quantity=quantity,
        discount=discount,
        salon_price_usd=salon_price_usd,
        exchange_rate=exchange_rate,
        product_id=product_id,
        product_name=name,
    )


def _order(items, total, *, email=None, customer_id="c1", customer_name="Iryna", when=None):
    return SimpleNamespace(
        items=items,
        total_amount=total,
        managed_by_user_email=email,
        customer_id=customer_id,
        customer_name=customer_name,
        date=when or datetime(2026, 3, 10, 12, 0),
    )


class TestReductions:

    def test_item_profit_uses_discount_and_cost_snapshot(self):
        item = _item(100, 2, discount=10, salon_price_usd=2, exchange_rate=40)
        assert rs.item_revenue(item) == pytest.approx(180)
        assert rs.item_cost(item) == pytest.approx(80)
        assert rs.item_profit(item) == pytest.approx(20)

    def test_missing_snapshot_costs_nothing(self):
        item = _item(50, 1)
        assert rs.item_cost(item) == 0
        assert rs.item_profit(item) == pytest.approx(50)

    def test_gross_profit_sums_orders(self):
        orders = [
            _order([_item(100, 2, 10, 2, 40), _item(50, 1)], 230),
            _order([_item(10, 3)], 30),
        ]
        assert rs.total_revenue(orders) == 260
        assert rs.gross_profit(orders) == pytest.approx(100)

    @pytest.mark.parametrize(
        "current, previous, expected",
        [(150, 100, 50.0), (50, 100, -50.0), (10, 0, 100.0), (0, 0, 0.0)],
    )
    def test_percentage_change(self, current, previous, expected):
        assert rs.percentage_change(current, previous) == pytest.approx(expected)

    def test_manager_breakdown(self):
        orders = [
            _order([_item(100, 1)], 100, email="a@x.test"),
            _order([_item(300, 1)], 300, email="b@x.test"),
            _order([_item(50, 1)], 50, email="a@x.test"),
            _order([_item(5, 1)], 5),
        ]
        rows = rs.manager_breakdown(orders, {"a@x.test": "Anna"})
        assert [r["email"] for r in rows] == ["b@x.test", "a@x.test", "unassigned"]
        anna = rows[1]
        assert anna["name"] == "Anna"
        assert anna["totalOrders"] == 2
        assert anna["totalSales"] == 150
        assert rows[0]["name"] == "b@x.test"

    def test_top_products_groups_by_id_then_name(self):
        orders = [
            _order([_item(10, 1, product_id="p1", name="Serum"), _item(5, 2, name="Sample")], 20),
            _order([_item(10, 3, product_id="p1", name="Serum v2")], 30),
        ]
        rows = rs.top_products(orders, 10, {"p1": "BDR"})
        assert rows[0]["productId"] == "p1"
        assert rows[0]["totalQuantity"] == 4
        assert rows[0]["totalRevenue"] == pytest.approx(40)
        assert rows[0]["group"] == "BDR"
        assert rows[1]["productName"] == "Sample"
        assert rows[1]["group"] == "Інші"
        assert len(rs.top_products(orders, 1)) == 1

    def test_top_customers(self):
        orders = [
            _order([], 100, customer_id="c1", customer_name="Iryna"),
            _order([], 300, customer_id="c2", customer_name="Oksana"),
            _order([], 250, customer_id="c1", customer_name="Iryna"),
        ]
        rows = rs.top_customers(orders, 5)
        assert [(r["customerName"], r["totalSpent"], r["orderCount"]) for r in rows] == [
            ("Iryna", 350, 2),
            ("Oksana", 300, 1),
        ]

    def test_daily_totals_fills_every_day(self):
        days = [date(2026, 3, 9), date(2026, 3, 10), date(2026, 3, 11)]
        orders = [_order([_item(40, 1)], 40), _order([_item(1, 1)], 1, when=datetime(2026, 4, 1))]
        rows = rs.daily_totals(orders, days)
        assert rows == [(days[0], 0.0, 0.0), (days[1], 40.0, 40.0), (days[2], 0.0, 0.0)]


@pytest.fixture
def report_data(client, admin_headers, create_customer, create_order):
    customer = create_customer()
    create_order(
        customer["id"],
        totalAmount=230,
        date="2026-03-10T12:00:00Z",
        items=[
            {"productName": "Serum", "quantity": 2, "price": 100, "discount": 10,
             "salonPriceUsd": 2, "exchangeRate": 40},
            {"productName": "Cream", "quantity": 1, "price": 50},
        ],
    )
    create_order(customer["id"], totalAmount=999, date="2026-04-02T09:00:00Z", items=[])
    for payload in (
        {"name": "Courier", "amount": 30, "date": "2026-03-11"},
        {"name": "Rent", "amount": 500, "date": "2026-04-01"},
    ):
        assert client.post("/api/expenses", json=payload, headers=admin_headers).status_code == 201
    return customer


class TestReportEndpoint:

    def test_net_profit_subtracts_expenses_in_range(self, client, admin_headers, report_data):
        resp = client.get("/api/reports?startDate=2026-03-01&endDate=2026-03-31", headers=admin_headers)
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["totalRevenue"] == 230
        assert body["grossProfit"] == pytest.approx(70)
        assert body["totalExpenses"] == 30
        assert body["totalProfit"] == pytest.approx(40)
        assert body["totalOrders"] == 1
        assert len(body["salesByDay"]) == 31
        march_10 = next(d for d in body["salesByDay"] if d["date"] == "2026-03-10")
        assert march_10["totalSales"] == 230
        assert [e["name"] for e in body["expenses"]] == ["Courier"]
        assert body["topCustomers"][0]["customerName"] == "Iryna Koval"
        assert body["revenueByGroup"] == [{"group": "Інші", "revenue": pytest.approx(230)}]

    def test_revenue_by_group_uses_catalog(self, client, admin_headers, create_product, create_customer, create_order):
        product = create_product(group="BDR")
        customer = create_customer()
        create_order(
            customer["id"],
            totalAmount=150,
            date="2026-05-05T10:00:00Z",
            items=[{"productId": product["id"], "productName": product["name"], "quantity": 1, "price": 150}],
        )
        body = client.get("/api/reports?startDate=2026-05-01&endDate=2026-05-31", headers=admin_headers).get_json()
        assert body["revenueByGroup"] == [{"group": "BDR", "revenue": pytest.approx(150)}]
        # cost snapshot came from the catalog: 2.5 USD at 40
        assert body["grossProfit"] == pytest.approx(50)
        assert body["topProducts"][0]["group"] == "BDR"

    def test_status_filter(self, client, admin_headers, report_data):
        body = client.get(
            "/api/reports?startDate=2026-03-01&endDate=2026-03-31&status=Shipped", headers=admin_headers
        ).get_json()
        assert body["totalOrders"] == 0
        assert body["totalExpenses"] == 30

    @pytest.mark.parametrize(
        "query",
        [
            "startDate=2026-03-01",
            "startDate=03/01/2026&endDate=2026-03-31",
            "startDate=2026-04-01&endDate=2026-03-01",
            "startDate=2026-03-01&endDate=2026-03-31&status=Lost",
            "startDate=%20%20&endDate=2026-03-31",
            "startDate=2026-03-01&endDate=%20",
            "startDate=9999-12-31&endDate=9999-12-31",
            "startDate=2000-01-01&endDate=2026-03-31",
        ],
    )
    def test_invalid_queries(self, client, admin_headers, query):
        assert client.get(f"/api/reports?{query}", headers=admin_headers).status_code == 400

    def test_widest_allowed_range(self, client, admin_headers):
        resp = client.get("/api/reports?startDate=2020-01-01&endDate=2029-12-31", headers=admin_headers)
        assert resp.status_code == 200

    def test_admin_only(self, client, manager_headers):
        assert client.get("/api/reports?startDate=2026-03-01&endDate=2026-03-31", headers=manager_headers).status_code == 403


class TestDashboards:

    def test_dashboard_stats(self, client, admin_headers, manager_headers, create_customer, create_order):
        customer = create_customer()
        create_order(customer["id"], totalAmount=100, items=[{"productName": "Serum", "quantity": 1, "price": 100}])
        create_order(
            customer["id"],
            totalAmount=300,
            items=[{"productName": "Mask", "quantity": 1, "price": 300}],
            headers=manager_headers,
        )

        body = client.get("/api/dashboardStats", headers=admin_headers).get_json()
        assert body["totalRevenue"] == 400
        assert body["totalOrders"] == 2
        assert body["totalCustomers"] == 1
        assert body["totalManagers"] == 1
        report = body["managerReport"]
        assert [r["email"] for r in report] == [MANAGER_EMAIL, "owner@romanova.test"]
        assert report[0]["name"] == "Olena Manager"
        assert report[0]["totalProfit"] == pytest.approx(300)

    def test_dashboard_stats_invalid_period(self, client, admin_headers):
        assert client.get("/api/dashboardStats?period=-3", headers=admin_headers).status_code == 400

    @pytest.mark.parametrize("path", ["/api/dashboardStats", "/api/dashboard", "/api/managerDashboard"])
    def test_period_is_capped(self, client, admin_headers, path):
        resp = client.get(f"{path}?period=100000", headers=admin_headers)
        assert resp.status_code == 400
        assert "period" in resp.get_json()["error"]

    def test_manager_dashboard_is_scoped_to_caller(self, client, manager_headers, create_customer, create_order):
        customer = create_customer()
        create_order(customer["id"], totalAmount=500)
        create_order(customer["id"], totalAmount=120, headers=manager_headers)

        body = client.get("/api/managerDashboard", headers=manager_headers).get_json()
        assert body["kpis"]["totalSales"] == {"value": 120, "change": 100.0}
        assert body["kpis"]["totalOrders"]["value"] == 1
        assert [o["totalAmount"] for o in body["recentOrders"]] == [120]

    def test_admin_dashboard_chart(self, client, admin_headers, create_customer, create_order):
        customer = create_customer()
        create_order(customer["id"], totalAmount=80)

        body = client.get("/api/dashboard?period=7", headers=admin_headers).get_json()
        assert len(body["chartData"]) == 8
        assert sum(d["sales"] for d in body["chartData"]) == 80
        assert body["kpis"]["orders"]["value"] == 1
        assert body["kpis"]["customers"]["value"] == 1
        assert len(body["recentOrders"]) == 1
