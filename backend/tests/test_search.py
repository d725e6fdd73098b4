"""
Global search tests: orders, customers and products in one result list.
"""

import pytest
from sqlalchemy import text

from cosmo_admin.extensions import db


def _search(client, headers, query):
    resp = client.get(f"/api/search?{query}", headers=headers)
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()["results"]


class TestGlobalSearch:

    def test_finds_every_kind(self, client, admin_headers, create_product, create_customer, create_order):
        customer = create_customer(name="Rosa Melnyk", email="rosa@example.test")
        order = create_order(customer["id"], totalAmount=250)
        product = create_product(name="Rose Serum", group="LA")
        create_product(name="Night Cream", group="BDR")

        results = _search(client, admin_headers, "query=ros")
        assert [r["type"] for r in results] == ["order", "customer", "product"]
        assert results[0]["id"] == order["id"]
        assert results[0]["url"] == f"/invoice/{order['id']}"
        assert results[1]["title"] == "Rosa Melnyk"
        assert results[1]["description"] == "rosa@example.test"
        assert results[2]["id"] == product["id"]
        assert results[2]["url"] == f"/products/{product['id']}"

    def test_order_matches_by_id_prefix(self, client, admin_headers, create_customer, create_order):
        customer = create_customer(name="Iryna Koval")
        order = create_order(customer["id"])

        results = _search(client, admin_headers, f"query={order['id'][:8]}&type=order")
        assert [r["id"] for r in results] == [order["id"]]

    def test_type_and_group_filters(self, client, admin_headers, create_product, create_customer):
        create_customer(name="Serum Lover", email="lover@example.test")
        create_product(name="Serum A", group="BDR")
        la = create_product(name="Serum B", group="LA")

        results = _search(client, admin_headers, "query=serum&type=product&group=LA")
        assert [r["id"] for r in results] == [la["id"]]

    def test_result_caps(self, client, admin_headers, create_product, create_customer):
        for i in range(7):
            create_customer(name=f"Mira {i}", email=f"mira{i}@example.test")
        for i in range(12):
            create_product(name=f"Mira Balm {i:02d}", group="W")

        results = _search(client, admin_headers, "query=mira")
        assert len(results) == 10
        assert [r["type"] for r in results].count("customer") == 5

        results = _search(client, admin_headers, "query=mira&type=product")
        assert len(results) == 10

    def test_any_role_can_search(self, client, manager_headers, create_customer):
        create_customer(name="Oksana Bilyk", email="oksana@example.test")
        results = _search(client, manager_headers, "query=oksana")
        assert [r["title"] for r in results] == ["Oksana Bilyk"]

    def test_failing_product_table_is_skipped(self, client, admin_headers, create_product):
        create_product(name="Rose Serum", group="BDR")
        create_product(name="Rose Toner", group="LA")
        db.session.execute(text("ALTER TABLE products_la RENAME TO products_la_offline"))
        db.session.commit()
        try:
            results = _search(client, admin_headers, "query=rose")
            assert [r["title"] for r in results] == ["Rose Serum"]
        finally:
            db.session.rollback()
            db.session.execute(text("ALTER TABLE products_la_offline RENAME TO products_la"))
            db.session.commit()

    @pytest.mark.parametrize("query", ["", "query=", "query=%20%20", "query=x&type=invoice", "query=x&group=Nope"])
    def test_invalid_queries(self, client, admin_headers, query):
        assert client.get(f"/api/search?{query}", headers=admin_headers).status_code == 400
