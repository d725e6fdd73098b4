from __future__ import annotations

from ..extensions import db
from ..time_utils import to_iso_date, to_utc_z
from .common import new_id


class Customer(db.Model):
    """
    Customer master data.

    Address is stored flat and exposed to clients as a nested object.
    Deleting a customer that still has orders is blocked by the orders FK.
    """
    __tablename__ = "customers"
    __table_args__ = (
        db.UniqueConstraint("email", name="uq_customers_email"),
        db.Index("ix_customers_name", "name"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(64), nullable=True)

    address_street = db.Column(db.String(255), nullable=True)
    address_city = db.Column(db.String(128), nullable=True)
    address_state = db.Column(db.String(128), nullable=True)
    address_zip = db.Column(db.String(32), nullable=True)
    address_country = db.Column(db.String(128), nullable=True)

    join_date = db.Column(db.Date, nullable=False, server_default=db.func.current_date())
    instagram_handle = db.Column(db.String(128), nullable=True)
    viber_number = db.Column(db.String(64), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone or "",
            "address": {
                "street": self.address_street or "",
                "city": self.address_city or "",
                "state": self.address_state or "",
                "zip": self.address_zip or "",
                "country": self.address_country or "",
            },
            "joinDate": to_iso_date(self.join_date),
            "instagramHandle": self.instagram_handle,
            "viberNumber": self.viber_number,
            "notes": self.notes,
            "created_at": to_utc_z(self.created_at),
        }
