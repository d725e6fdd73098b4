from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z
from .common import new_id


class Admin(db.Model):
    """Email with full privileges."""
    __tablename__ = "admins"
    __table_args__ = (
        db.UniqueConstraint("email", name="uq_admins_email"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    email = db.Column(db.String(255), nullable=False)
    added_by = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "added_by": self.added_by,
            "created_at": to_utc_z(self.created_at),
        }


class ManagedUser(db.Model):
    """
    Manager account: may work with orders and customers but not the catalog,
    warehouse, expenses or other users.
    """
    __tablename__ = "managed_users"
    __table_args__ = (
        db.UniqueConstraint("email", name="uq_managed_users_email"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    # Always stored lowercased
    email = db.Column(db.String(255), nullable=False)
    notes = db.Column(db.Text, nullable=True)
    added_by_admin_email = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "notes": self.notes,
            "dateAdded": to_utc_z(self.created_at),
            "added_by_admin_email": self.added_by_admin_email,
        }
