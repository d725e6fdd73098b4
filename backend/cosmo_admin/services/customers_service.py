# backend/cosmo_admin/services/customers_service.py
"""
Customers Service

Clients send and receive the address as a nested object; it is flattened onto
address_* columns here.

List sort modes:
- default: newest first
- vip: customers with orders, by total spent (desc)
- inactive: no orders at all, or none in the last INACTIVE_AFTER_DAYS days;
  longest-idle first
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError, is_foreign_key_violation, is_unique_violation
from ..models import Customer, Order
from ..time_utils import days_ago
from ..validation import ModelValidationPolicy, validate_payload, enforce_email

INACTIVE_AFTER_DAYS = 90

SORT_MODES = ("default", "vip", "inactive")

ADDRESS_KEYS = {
    "street": "addressStreet",
    "city": "addressCity",
    "state": "addressState",
    "zip": "addressZip",
    "country": "addressCountry",
}

CUSTOMER_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({
        "name", "email", "phone", "joinDate", "instagramHandle", "viberNumber", "notes",
        *ADDRESS_KEYS.values(),
    }),
    required_on_create=frozenset({"name", "email"}),
    aliases={
        "joinDate": "join_date",
        "instagramHandle": "instagram_handle",
        "viberNumber": "viber_number",
        "addressStreet": "address_street",
        "addressCity": "address_city",
        "addressState": "address_state",
        "addressZip": "address_zip",
        "addressCountry": "address_country",
    },
)

DUPLICATE_EMAIL_MESSAGE = "A customer with this email already exists"
HAS_ORDERS_MESSAGE = "Customer cannot be deleted because they have existing orders"


def _flatten_address(payload) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    fields = dict(payload)
    address = fields.pop("address", None)
    if address is None:
        return fields
    if not isinstance(address, dict):
        raise ValidationError("address must be an object")
    for key, value in address.items():
        if key not in ADDRESS_KEYS:
            raise ValidationError(f"Field not allowed: address.{key}")
        fields[ADDRESS_KEYS[key]] = value
    return fields


def _commit_customer() -> None:
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if is_unique_violation(e):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from e
        raise


def _customer_metrics() -> dict[str, tuple[float, datetime]]:
    """customer_id -> (total spent, last order date)."""
    rows = (
        db.session.query(Order.customer_id, func.sum(Order.total_amount), func.max(Order.date))
        .group_by(Order.customer_id)
        .all()
    )
    return {cid: (float(total or 0), last) for cid, total, last in rows}


def _page(ids: list[str], page: int, page_size: int) -> list[Customer]:
    start = (page - 1) * page_size
    page_ids = ids[start:start + page_size]
    if not page_ids:
        return []
    by_id = {c.id: c for c in db.session.query(Customer).filter(Customer.id.in_(page_ids)).all()}
    return [by_id[i] for i in page_ids if i in by_id]


def list_customers(*, search: str | None = None, sort: str = "default", page: int = 1, page_size: int = 20) -> dict:
    if sort not in SORT_MODES:
        raise ValidationError(f"Invalid sort. Must be one of: {', '.join(SORT_MODES)}")

    q = db.session.query(Customer)
    term = (search or "").strip()
    if term:
        like = f"%{term}%"
        q = q.filter(or_(Customer.name.ilike(like), Customer.email.ilike(like), Customer.phone.ilike(like)))

    if sort == "default":
        total = q.count()
        customers = (
            q.order_by(Customer.created_at.desc(), Customer.id.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
    else:
        metrics = _customer_metrics()
        candidate_ids = [r[0] for r in q.with_entities(Customer.id).all()]
        if sort == "vip":
            ranked = sorted(
                (cid for cid in candidate_ids if cid in metrics),
                key=lambda cid: (-metrics[cid][0], cid),
            )
        else:
            cutoff = days_ago(INACTIVE_AFTER_DAYS)
            inactive = [cid for cid in candidate_ids if cid not in metrics or metrics[cid][1] < cutoff]
            # Never-ordered customers sort first
            ranked = sorted(
                inactive,
                key=lambda cid: (cid in metrics, metrics[cid][1] if cid in metrics else datetime.min, cid),
            )
        total = len(ranked)
        customers = _page(ranked, page, page_size)

    return {
        "data": [c.to_dict() for c in customers],
        "totalCount": total,
        "currentPage": page,
        "pageSize": page_size,
    }


def get_customer_model(customer_id: str) -> Customer:
    customer = db.session.get(Customer, customer_id)
    if customer is None:
        raise NotFoundError("Customer not found")
    return customer


def get_customer(customer_id: str) -> dict:
    return get_customer_model(customer_id).to_dict()


def create_customer(payload: dict) -> dict:
    patch = validate_payload(model=Customer, payload=_flatten_address(payload), policy=CUSTOMER_POLICY, partial=False)
    enforce_email(patch)

    customer = Customer(**patch)
    db.session.add(customer)
    _commit_customer()
    return customer.to_dict()


def update_customer(customer_id: str, payload: dict) -> dict:
    customer = get_customer_model(customer_id)
    patch = validate_payload(model=Customer, payload=_flatten_address(payload), policy=CUSTOMER_POLICY, partial=True)
    enforce_email(patch)
    if "join_date" in patch and patch["join_date"] is None:
        raise ValidationError("joinDate cannot be null")

    for k, v in patch.items():
        setattr(customer, k, v)
    _commit_customer()
    return customer.to_dict()


def delete_customer(customer_id: str) -> None:
    customer = get_customer_model(customer_id)
    db.session.delete(customer)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if is_foreign_key_violation(e):
            raise ConflictError(HAS_ORDERS_MESSAGE) from e
        raise
