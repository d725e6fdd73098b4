"""
Notification tests: NEW_ORDER fan-out to admins, listing, mark-read scoping.
"""

from datetime import datetime, timedelta

import pytest

from cosmo_admin.extensions import db
from cosmo_admin.models import Admin, Notification

ADMIN_EMAIL = "owner@romanova.test"
SECOND_ADMIN = "second@romanova.test"


@pytest.fixture
def second_admin(db_session):
    db_session.add(Admin(email=SECOND_ADMIN, added_by=ADMIN_EMAIL))
    db_session.commit()
    return SECOND_ADMIN


def _notify(email, message, *, created_at, is_read=False):
    n = Notification(
        user_email=email, type="NEW_ORDER", message=message, link="/invoice/x",
        is_read=is_read, created_at=created_at,
    )
    db.session.add(n)
    db.session.commit()
    return n.id


class TestNewOrderNotifications:

    def test_manager_order_notifies_every_admin(
        self, client, admin_headers, manager_headers, auth_headers, second_admin, create_customer, create_order
    ):
        customer = create_customer(name="Iryna Koval")
        order = create_order(customer["id"], totalAmount=1500, headers=manager_headers)

        for headers in (admin_headers, auth_headers(SECOND_ADMIN)):
            resp = client.get("/api/notifications", headers=headers)
            assert resp.status_code == 200
            body = resp.get_json()
            assert len(body) == 1
            assert body[0]["type"] == "NEW_ORDER"
            assert body[0]["link"] == f"/invoice/{order['id']}"
            assert body[0]["is_read"] is False
            assert "Iryna Koval" in body[0]["message"]
            assert "olena@romanova.test" in body[0]["message"]

        assert client.get("/api/notifications", headers=manager_headers).get_json() == []

    def test_creator_is_not_notified(self, client, admin_headers, second_admin, create_customer, create_order):
        customer = create_customer()
        create_order(customer["id"])

        assert client.get("/api/notifications", headers=admin_headers).get_json() == []
        assert db.session.query(Notification).filter_by(user_email=SECOND_ADMIN).count() == 1

    def test_failed_order_creates_no_notifications(self, client, manager_headers):
        resp = client.post("/api/orders", json={"customerId": "missing", "totalAmount": 10}, headers=manager_headers)
        assert resp.status_code == 400
        assert db.session.query(Notification).count() == 0


class TestListAndMarkRead:

    def test_latest_fifteen_newest_first(self, client, admin_headers):
        start = datetime(2026, 3, 1, 9, 0)
        for i in range(20):
            _notify(ADMIN_EMAIL, f"n{i:02d}", created_at=start + timedelta(minutes=i))
        _notify("someone@else.test", "other", created_at=start)

        body = client.get("/api/notifications", headers=admin_headers).get_json()
        assert [n["message"] for n in body] == [f"n{i:02d}" for i in range(19, 4, -1)]

    def test_mark_read_only_touches_own_rows(self, client, admin_headers, manager_headers):
        now = datetime(2026, 3, 1, 9, 0)
        mine = _notify(ADMIN_EMAIL, "mine", created_at=now)
        theirs = _notify("olena@romanova.test", "theirs", created_at=now)

        resp = client.post("/api/notifications/mark-read", json={"ids": [mine, theirs]}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.get_json()["updatedCount"] == 1

        assert db.session.get(Notification, mine).is_read is True
        assert db.session.get(Notification, theirs).is_read is False

    @pytest.mark.parametrize("payload", [{}, {"ids": []}, {"ids": "abc"}, {"ids": [1]}])
    def test_mark_read_requires_id_list(self, client, admin_headers, payload):
        resp = client.post("/api/notifications/mark-read", json=payload, headers=admin_headers)
        assert resp.status_code == 400

    def test_requires_auth(self, client):
        assert client.get("/api/notifications").status_code == 401
