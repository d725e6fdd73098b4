from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z
from .common import new_id


ORDER_STATUSES = (
    "Ordered",
    "Shipped",
    "Received",
    "Calculation",
    "AwaitingApproval",
    "PaidByClient",
    "WrittenOff",
    "ReadyForPickup",
)

DEFAULT_ORDER_STATUS = "Ordered"


class Order(db.Model):
    """
    Customer order with its line items.

    managed_by_user_email attributes the order to the admin or manager who owns
    it; dashboards group by it.
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.Index("ix_orders_date", "date"),
        db.Index("ix_orders_customer_id", "customer_id"),
        db.Index("ix_orders_managed_by", "managed_by_user_email"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    customer_id = db.Column(db.String(36), db.ForeignKey("customers.id"), nullable=False)

    date = db.Column(db.DateTime(timezone=True), nullable=False)
    status = db.Column(db.String(32), nullable=False, default=DEFAULT_ORDER_STATUS)
    total_amount = db.Column(db.Float, nullable=False)
    notes = db.Column(db.Text, nullable=True)
    managed_by_user_email = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    customer = db.relationship("Customer", lazy="joined")
    items = db.relationship(
        "OrderItem",
        back_populates="order",
        order_by="OrderItem.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def customer_name(self) -> str:
        return self.customer.name if self.customer is not None else "Unknown Customer"

    def to_summary_dict(self) -> dict:
        return {
            "id": self.id,
            "customerName": self.customer_name,
            "totalAmount": self.total_amount,
            "status": self.status,
            "date": to_utc_z(self.date),
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "customerName": self.customer_name,
            "date": to_utc_z(self.date),
            "status": self.status,
            "totalAmount": self.total_amount,
            "notes": self.notes,
            "managedByUserEmail": self.managed_by_user_email,
            "created_at": to_utc_z(self.created_at),
            "items": [item.to_dict() for item in self.items],
        }


class OrderItem(db.Model):
    """
    One line of an order.

    product_id may point into any of the per-group product tables, so it is not
    a foreign key. Name, price and the salon price / exchange rate snapshot are
    copied at order time so historical profit does not drift with the catalog.
    """
    __tablename__ = "order_items"
    __table_args__ = (
        db.Index("ix_order_items_order_id", "order_id"),
        db.Index("ix_order_items_product_id", "product_id"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    order_id = db.Column(db.String(36), db.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)

    product_id = db.Column(db.String(36), nullable=True)
    product_name = db.Column(db.String(255), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Float, nullable=False)
    discount = db.Column(db.Float, nullable=False, default=0)

    salon_price_usd = db.Column(db.Float, nullable=True)
    exchange_rate = db.Column(db.Float, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    order = db.relationship("Order", back_populates="items")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_id": self.order_id,
            "productId": self.product_id or "",
            "productName": self.product_name,
            "quantity": self.quantity,
            "price": self.price,
            "discount": self.discount or 0,
            "salonPriceUsd": self.salon_price_usd,
            "exchangeRate": self.exchange_rate,
            "created_at": to_utc_z(self.created_at),
        }
