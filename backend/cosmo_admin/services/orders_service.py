# backend/cosmo_admin/services/orders_service.py
"""
Orders Service

An order and its items are written in one transaction: create, item-set
replacement on update, and delete either fully apply or fully roll back.

Items reference products in any group table, so product ids are resolved with
the locator when a cost snapshot (salonPriceUsd / exchangeRate) is missing.
"""
from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..errors import NotFoundError, PersistenceError, ValidationError
from ..models import Customer, Order, OrderItem, ORDER_STATUSES, DEFAULT_ORDER_STATUS
from ..models.common import new_id
from ..time_utils import utcnow
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_order,
    enforce_rules_order_item,
)
from .notifications_service import notify_new_order
from .product_locator import locate_product

ORDER_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({"customerId", "date", "status", "totalAmount", "notes", "managedByUserEmail"}),
    required_on_create=frozenset({"customerId", "totalAmount"}),
    aliases={
        "customerId": "customer_id",
        "totalAmount": "total_amount",
        "managedByUserEmail": "managed_by_user_email",
    },
    # customerName is derived, clients echo it back
    ignored_fields=frozenset({"id", "created_at", "customerName"}),
)

ORDER_ITEM_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({
        "productId", "productName", "quantity", "price", "discount", "salonPriceUsd", "exchangeRate",
    }),
    required_on_create=frozenset({"productName", "quantity", "price"}),
    aliases={
        "productId": "product_id",
        "productName": "product_name",
        "salonPriceUsd": "salon_price_usd",
        "exchangeRate": "exchange_rate",
    },
    ignored_fields=frozenset({"id", "created_at", "order_id"}),
)

CREATE_FAILED_MESSAGE = "Order was not created: failed to save order items"
UPDATE_FAILED_MESSAGE = "Order was not updated: failed to save order items"
DELETE_FAILED_MESSAGE = "Order was not deleted"


def _split_items(payload) -> tuple[dict, list | None]:
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    fields = dict(payload)
    items = fields.pop("items", None)
    if items is not None and not isinstance(items, list):
        raise ValidationError("items must be a list")
    return fields, items


def _build_items(raw_items: list) -> list[OrderItem]:
    """Validate item payloads and fill in missing cost snapshots from the catalog."""
    built = []
    for position, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise ValidationError(f"Item {position + 1} is not an object")
        patch = validate_payload(model=OrderItem, payload=raw, policy=ORDER_ITEM_POLICY, partial=False)
        if patch.get("discount") is None:
            patch["discount"] = 0
        enforce_rules_order_item(patch)

        if patch.get("product_id") and (
            patch.get("salon_price_usd") is None or patch.get("exchange_rate") is None
        ):
            located = locate_product(patch["product_id"])
            if located is not None:
                if patch.get("salon_price_usd") is None:
                    patch["salon_price_usd"] = located.row.salon_price
                if patch.get("exchange_rate") is None:
                    patch["exchange_rate"] = located.row.exchange_rate

        built.append(OrderItem(position=position, **patch))
    return built


def _require_customer(customer_id: str) -> Customer:
    customer = db.session.get(Customer, customer_id)
    if customer is None:
        raise ValidationError("Customer not found")
    return customer


def _commit_or_fail(message: str) -> None:
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("%s: %s", message, e)
        raise PersistenceError(message, details=str(getattr(e, "orig", e))) from e


def list_orders(*, customer_id: str | None = None) -> list[dict]:
    q = db.session.query(Order)
    if customer_id:
        q = q.filter(Order.customer_id == customer_id)
    orders = q.order_by(Order.date.desc(), Order.created_at.desc()).all()
    return [o.to_dict() for o in orders]


def get_order_model(order_id: str) -> Order:
    order = db.session.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return order


def get_order(order_id: str) -> dict:
    return get_order_model(order_id).to_dict()


def create_order(payload: dict, *, caller_email: str) -> dict:
    fields, raw_items = _split_items(payload)

    patch = validate_payload(model=Order, payload=fields, policy=ORDER_POLICY, partial=False)
    if patch.get("status") is None:
        patch["status"] = DEFAULT_ORDER_STATUS
    enforce_rules_order(patch, ORDER_STATUSES)
    if patch.get("date") is None:
        patch["date"] = utcnow()
    if not patch.get("managed_by_user_email"):
        patch["managed_by_user_email"] = caller_email
    else:
        patch["managed_by_user_email"] = patch["managed_by_user_email"].lower()

    customer = _require_customer(patch["customer_id"])
    items = _build_items(raw_items or [])

    order = Order(id=new_id(), **patch)
    order.customer = customer
    order.items = items
    notify_new_order(order, created_by=caller_email)
    db.session.add(order)
    _commit_or_fail(CREATE_FAILED_MESSAGE)
    return order.to_dict()


def update_order(order_id: str, payload: dict) -> dict:
    fields, raw_items = _split_items(payload)
    order = get_order_model(order_id)

    patch = validate_payload(model=Order, payload=fields, policy=ORDER_POLICY, partial=True)
    for key in ("customer_id", "total_amount", "status", "date"):
        if key in patch and patch[key] is None:
            raise ValidationError(f"{key} cannot be null")
    enforce_rules_order(patch, ORDER_STATUSES)
    if patch.get("managed_by_user_email"):
        patch["managed_by_user_email"] = patch["managed_by_user_email"].lower()
    if "customer_id" in patch and patch["customer_id"] != order.customer_id:
        _require_customer(patch["customer_id"])

    new_items = _build_items(raw_items) if raw_items is not None else None

    for k, v in patch.items():
        setattr(order, k, v)
    if new_items is not None:
        # delete-orphan removes the previous rows in the same flush
        order.items = new_items

    _commit_or_fail(UPDATE_FAILED_MESSAGE)
    return order.to_dict()


def delete_order(order_id: str) -> None:
    order = get_order_model(order_id)
    db.session.delete(order)
    _commit_or_fail(DELETE_FAILED_MESSAGE)
