from __future__ import annotations

from sqlalchemy import false

from ..extensions import db
from ..time_utils import to_utc_z
from .common import new_id

NOTIFICATION_NEW_ORDER = "NEW_ORDER"


class Notification(db.Model):
    """
    In-app notification for one user (by email).

    link is a client route the notification opens (e.g. the order's invoice).
    """
    __tablename__ = "notifications"
    __table_args__ = (
        db.Index("ix_notifications_user_email_created_at", "user_email", "created_at"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_email = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(32), nullable=False)
    message = db.Column(db.String(500), nullable=False)
    link = db.Column(db.String(255), nullable=True)
    is_read = db.Column(db.Boolean, nullable=False, default=False, server_default=false())
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_email": self.user_email,
            "type": self.type,
            "message": self.message,
            "link": self.link,
            "is_read": self.is_read,
            "created_at": to_utc_z(self.created_at),
        }
