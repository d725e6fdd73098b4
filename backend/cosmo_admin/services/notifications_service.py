# backend/cosmo_admin/services/notifications_service.py
"""
Notifications Service

Admins are notified when someone else creates an order. Notifications are
added to the caller's session and committed with the write that caused them.
"""
from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..errors import ValidationError
from ..models import Admin, Notification, NOTIFICATION_NEW_ORDER

LIST_LIMIT = 15


def _admin_emails() -> set[str]:
    emails = set(current_app.config.get("ADMIN_EMAILS", []))
    emails.update(email for (email,) in db.session.query(Admin.email).all())
    return emails


def notify_new_order(order, *, created_by: str) -> int:
    """Queue a NEW_ORDER notification for every admin except the creator."""
    recipients = sorted(_admin_emails() - {created_by})
    message = f"New order #{order.id[:8]} for {order.customer_name} ({order.total_amount:,.2f}) by {created_by}"
    for email in recipients:
        db.session.add(Notification(
            user_email=email,
            type=NOTIFICATION_NEW_ORDER,
            message=message,
            link=f"/invoice/{order.id}",
        ))
    return len(recipients)


def list_notifications(email: str) -> list[dict]:
    """The caller's latest notifications, newest first."""
    rows = (
        db.session.query(Notification)
        .filter(Notification.user_email == email)
        .order_by(Notification.created_at.desc(), Notification.id.asc())
        .limit(LIST_LIMIT)
        .all()
    )
    return [n.to_dict() for n in rows]


def mark_read(ids, *, email: str) -> dict:
    """Only the caller's own notifications are touched; other ids are ignored."""
    if not isinstance(ids, list) or not ids:
        raise ValidationError("Notification IDs must be a non-empty array.")
    if not all(isinstance(i, str) and i for i in ids):
        raise ValidationError("Notification IDs must be non-empty strings")

    updated = (
        db.session.query(Notification)
        .filter(Notification.id.in_(ids), Notification.user_email == email)
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.session.commit()
    return {"message": "Notifications marked as read.", "updatedCount": updated}
