"""
Pytest fixtures for cosmo-admin backend tests.

Provides an in-memory database, bearer tokens minted with PyJWT, admin and
manager request headers, and small factories for catalog/customer/order data.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from cosmo_admin import create_app
from cosmo_admin.extensions import db
from cosmo_admin.models import ManagedUser

JWT_SECRET = "test-signing-secret-with-enough-bytes-for-hs256"
ADMIN_EMAIL = "owner@romanova.test"
MANAGER_EMAIL = "olena@romanova.test"
MANAGER_NAME = "Olena Manager"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'AUTH_JWT_SECRET': JWT_SECRET,
        'AUTH_JWT_ALGORITHMS': ['HS256'],
        'AUTH_JWKS_URL': None,
        'AUTH_AUDIENCE': None,
        'AUTH_ISSUER': None,
        'ADMIN_EMAILS': [ADMIN_EMAIL],
        'CORS_ALLOWED_ORIGINS': ['*'],
        'DEFAULT_PAGE_SIZE': 20,
        'MAX_PAGE_SIZE': 100,
        'PDF_FONT_PATH': None,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def make_token():
    def _make(email, *, name=None, expires_in=3600, secret=JWT_SECRET):
        now = datetime.now(timezone.utc)
        claims = {"email": email, "iat": now, "exp": now + timedelta(seconds=expires_in)}
        if name:
            claims["name"] = name
        return jwt.encode(claims, secret, algorithm="HS256")
    return _make


@pytest.fixture
def auth_headers(make_token):
    def _headers(email, **kwargs):
        return {"Authorization": f"Bearer {make_token(email, **kwargs)}"}
    return _headers


@pytest.fixture
def admin_headers(auth_headers):
    return auth_headers(ADMIN_EMAIL, name="Owner")


@pytest.fixture
def manager(db_session):
    user = ManagedUser(name=MANAGER_NAME, email=MANAGER_EMAIL, added_by_admin_email=ADMIN_EMAIL)
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def manager_headers(manager, auth_headers):
    return auth_headers(MANAGER_EMAIL)


@pytest.fixture
def create_product(client, admin_headers):
    def _create(name="Hydrating Serum", group="BDR", **fields):
        payload = {"name": name, "group": group, "retailPrice": 100.0, "salonPrice": 2.5, "exchangeRate": 40.0}
        payload.update(fields)
        resp = client.post("/api/products", json=payload, headers=admin_headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()
    return _create


@pytest.fixture
def create_customer(client, admin_headers):
    def _create(name="Iryna Koval", email="iryna@example.test", **fields):
        payload = {"name": name, "email": email}
        payload.update(fields)
        resp = client.post("/api/customers", json=payload, headers=admin_headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()
    return _create


@pytest.fixture
def create_order(client, admin_headers):
    def _create(customer_id, items=None, headers=None, **fields):
        payload = {"customerId": customer_id, "totalAmount": 100.0, "items": items or []}
        payload.update(fields)
        resp = client.post("/api/orders", json=payload, headers=headers or admin_headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()
    return _create
