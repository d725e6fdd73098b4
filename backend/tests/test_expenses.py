"""
Expense tests (admin-only resource).
"""

import pytest


@pytest.fixture
def create_expense(client, admin_headers):
    def _create(**fields):
        payload = {"name": "Rent", "amount": 1000, "date": "2026-03-01"}
        payload.update(fields)
        resp = client.post("/api/expenses", json=payload, headers=admin_headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()
    return _create


class TestExpenses:

    def test_create_records_author(self, create_expense):
        expense = create_expense(notes="March")
        assert expense["amount"] == 1000
        assert expense["date"] == "2026-03-01"
        assert expense["created_by_user_email"] == "owner@romanova.test"

    @pytest.mark.parametrize(
        "payload",
        [
            {"amount": 10, "date": "2026-03-01"},
            {"name": "Rent", "date": "2026-03-01"},
            {"name": "Rent", "amount": 10},
            {"name": "Rent", "amount": 0, "date": "2026-03-01"},
            {"name": "Rent", "amount": -5, "date": "2026-03-01"},
            {"name": "Rent", "amount": 10, "date": "yesterday"},
        ],
    )
    def test_validation(self, client, admin_headers, payload):
        assert client.post("/api/expenses", json=payload, headers=admin_headers).status_code == 400

    def test_list_newest_first_with_search(self, client, admin_headers, create_expense):
        create_expense(name="Rent", date="2026-01-01")
        create_expense(name="Courier", date="2026-03-01", notes="Nova Poshta")
        create_expense(name="Ads", date="2026-02-01")

        body = client.get("/api/expenses", headers=admin_headers).get_json()
        assert [e["name"] for e in body["data"]] == ["Courier", "Ads", "Rent"]
        assert body["totalCount"] == 3

        body = client.get("/api/expenses?search=poshta", headers=admin_headers).get_json()
        assert [e["name"] for e in body["data"]] == ["Courier"]

    def test_update_and_delete(self, client, admin_headers, create_expense):
        expense = create_expense()
        resp = client.put(f"/api/expenses/{expense['id']}", json={"amount": 1200, "notes": None}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.get_json()["amount"] == 1200

        assert client.delete(f"/api/expenses/{expense['id']}", headers=admin_headers).status_code == 204
        assert client.get(f"/api/expenses/{expense['id']}", headers=admin_headers).status_code == 404

    def test_update_rejects_non_positive_amount(self, client, admin_headers, create_expense):
        expense = create_expense()
        resp = client.put(f"/api/expenses/{expense['id']}", json={"amount": 0}, headers=admin_headers)
        assert resp.status_code == 400

    @pytest.mark.parametrize("amount", ["inf", "NaN", "-Infinity"])
    def test_rejects_non_finite_amount_strings(self, client, admin_headers, amount):
        resp = client.post(
            "/api/expenses", json={"name": "Rent", "amount": amount, "date": "2026-03-01"}, headers=admin_headers
        )
        assert resp.status_code == 400
        assert client.get("/api/expenses", headers=admin_headers).get_json()["totalCount"] == 0

    @pytest.mark.parametrize("literal", ["Infinity", "NaN"])
    def test_rejects_non_finite_json_literals(self, client, admin_headers, literal):
        resp = client.post(
            "/api/expenses",
            data=f'{{"name": "Rent", "amount": {literal}, "date": "2026-03-01"}}',
            content_type="application/json",
            headers=admin_headers,
        )
        assert resp.status_code == 400
