from __future__ import annotations

from ..extensions import db
from ..time_utils import to_iso_date, to_utc_z
from .common import new_id


class Expense(db.Model):
    """Operating expense; only used by profit-and-loss reporting."""
    __tablename__ = "expenses"
    __table_args__ = (
        db.Index("ix_expenses_date", "date"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    amount = db.Column(db.Float, nullable=False)
    date = db.Column(db.Date, nullable=False)
    notes = db.Column(db.Text, nullable=True)
    created_by_user_email = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "amount": self.amount,
            "date": to_iso_date(self.date),
            "notes": self.notes,
            "created_at": to_utc_z(self.created_at),
            "created_by_user_email": self.created_by_user_email,
        }
