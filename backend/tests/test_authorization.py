"""
Authorization tests.

Verifies:
- Unauthenticated requests return 401
- Bad, expired and email-less tokens return 401
- Unknown emails are authenticated but not authorized (403)
- Manager role is denied admin-only operations (403)
- Manager role can work with orders and customers
"""

import pytest


# =============================================================================
# UNAUTHENTICATED ACCESS: 401
# =============================================================================


class TestUnauthenticatedAccess:
    """All protected endpoints return 401 without a token."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/products"),
            ("POST", "/api/products"),
            ("DELETE", "/api/products"),
            ("GET", "/api/orders"),
            ("POST", "/api/orders"),
            ("GET", "/api/customers"),
            ("GET", "/api/expenses"),
            ("GET", "/api/managedUsers"),
            ("GET", "/api/warehouse"),
            ("GET", "/api/admins"),
            ("GET", "/api/dashboardStats"),
            ("GET", "/api/managerDashboard"),
            ("GET", "/api/reports"),
            ("GET", "/api/users/me"),
            ("POST", "/api/exchangeRates"),
            ("GET", "/api/notifications"),
            ("POST", "/api/notifications/mark-read"),
            ("GET", "/api/search?query=x"),
        ],
    )
    def test_requires_auth(self, client, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"
        assert resp.get_json()["error"] == "Missing or invalid authorization token"

    def test_non_bearer_scheme_rejected(self, client):
        resp = client.get("/api/products", headers={"Authorization": "Basic abc"})
        assert resp.status_code == 401


class TestTokenVerification:

    def test_wrong_signature(self, client, auth_headers):
        headers = auth_headers("owner@romanova.test", secret="another-secret-that-is-long-enough-for-hs256")
        resp = client.get("/api/products", headers=headers)
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "Token is invalid or has expired"

    def test_expired_token(self, client, auth_headers):
        resp = client.get("/api/products", headers=auth_headers("owner@romanova.test", expires_in=-60))
        assert resp.status_code == 401

    def test_garbage_token(self, client):
        resp = client.get("/api/products", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    def test_unknown_email_is_forbidden(self, client, auth_headers):
        resp = client.get("/api/products", headers=auth_headers("stranger@example.test"))
        assert resp.status_code == 403
        assert resp.get_json()["error"] == "User is not authorized"

    def test_email_is_case_insensitive(self, client, auth_headers):
        resp = client.get("/api/users/me", headers=auth_headers("OWNER@Romanova.TEST"))
        assert resp.status_code == 200
        assert resp.get_json()["email"] == "owner@romanova.test"


# =============================================================================
# MANAGER DENIED ADMIN OPERATIONS: 403
# =============================================================================


class TestManagerDeniedAdminOperations:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("POST", "/api/products"),
            ("PUT", "/api/products/some-id"),
            ("DELETE", "/api/products/some-id"),
            ("DELETE", "/api/products"),
            ("POST", "/api/products/import"),
            ("POST", "/api/exchangeRates"),
            ("GET", "/api/expenses"),
            ("POST", "/api/expenses"),
            ("GET", "/api/warehouse"),
            ("PUT", "/api/warehouse/some-id"),
            ("GET", "/api/managedUsers"),
            ("POST", "/api/managedUsers"),
            ("GET", "/api/admins"),
            ("POST", "/api/admins"),
            ("GET", "/api/dashboardStats"),
            ("GET", "/api/dashboard"),
            ("GET", "/api/reports?startDate=2026-01-01&endDate=2026-01-31"),
        ],
    )
    def test_forbidden(self, client, manager_headers, method, path):
        resp = getattr(client, method.lower())(path, headers=manager_headers, json={})
        assert resp.status_code == 403, f"{method} {path} returned {resp.status_code}"

    def test_cannot_create_product(self, client, manager_headers):
        resp = client.post(
            "/api/products",
            json={"name": "Serum", "group": "BDR", "retailPrice": 10},
            headers=manager_headers,
        )
        assert resp.status_code == 403


class TestManagerAllowed:

    def test_can_create_order(self, client, manager_headers, create_customer):
        customer = create_customer()
        resp = client.post(
            "/api/orders",
            json={"customerId": customer["id"], "totalAmount": 50, "items": []},
            headers=manager_headers,
        )
        assert resp.status_code == 201
        assert resp.get_json()["managedByUserEmail"] == "olena@romanova.test"

    def test_can_read_products_and_customers(self, client, manager_headers):
        assert client.get("/api/products", headers=manager_headers).status_code == 200
        assert client.get("/api/customers", headers=manager_headers).status_code == 200

    def test_can_open_own_dashboard(self, client, manager_headers):
        assert client.get("/api/managerDashboard", headers=manager_headers).status_code == 200


class TestCurrentUser:

    def test_admin_from_config(self, client, admin_headers):
        body = client.get("/api/users/me", headers=admin_headers).get_json()
        assert body == {"email": "owner@romanova.test", "name": "Owner", "role": "admin"}

    def test_manager_name_falls_back_to_record(self, client, manager_headers):
        body = client.get("/api/users/me", headers=manager_headers).get_json()
        assert body["role"] == "manager"
        assert body["name"] == "Olena Manager"


class TestHttpSurface:

    def test_preflight_returns_204(self, client):
        resp = client.open("/api/products", method="OPTIONS")
        assert resp.status_code == 204
        assert resp.data == b""
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    def test_cors_headers_on_errors(self, client):
        resp = client.get("/api/products")
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert "Authorization" in resp.headers["Access-Control-Allow-Headers"]

    def test_method_not_allowed(self, client, admin_headers):
        resp = client.patch("/api/orders", headers=admin_headers)
        assert resp.status_code == 405

    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.get_json()["checks"]["database"]["status"] == "healthy"
