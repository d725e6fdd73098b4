"""
Warehouse tests: stock listing across groups and quantity updates.
"""

import pytest


class TestWarehouse:

    def test_list_spans_groups(self, client, admin_headers, create_product):
        create_product(name="Serum", group="BDR", quantity=3)
        create_product(name="Toner", group="ГП", quantity=0)

        body = client.get("/api/warehouse", headers=admin_headers).get_json()
        assert body["totalCount"] == 2
        assert {p["group"] for p in body["data"]} == {"BDR", "ГП"}
        assert set(body["data"][0]) == {"id", "group", "name", "quantity", "created_at"}

        body = client.get("/api/warehouse?search=ton", headers=admin_headers).get_json()
        assert [p["name"] for p in body["data"]] == ["Toner"]

    def test_set_quantity(self, client, admin_headers, create_product):
        product = create_product(group="АР")
        resp = client.put(f"/api/warehouse/{product['id']}", json={"quantity": 12}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.get_json()["quantity"] == 12
        assert resp.get_json()["group"] == "АР"

        stock = client.get(f"/api/warehouse/{product['id']}", headers=admin_headers).get_json()
        assert stock["quantity"] == 12

    @pytest.mark.parametrize("payload", [{"quantity": -1}, {"quantity": "5"}, {"quantity": 1.5}, {}])
    def test_rejects_bad_quantity(self, client, admin_headers, create_product, payload):
        product = create_product()
        resp = client.put(f"/api/warehouse/{product['id']}", json=payload, headers=admin_headers)
        assert resp.status_code == 400

    def test_unknown_product(self, client, admin_headers):
        resp = client.put("/api/warehouse/missing", json={"quantity": 1}, headers=admin_headers)
        assert resp.status_code == 404
