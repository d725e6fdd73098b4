# backend/cosmo_admin/services/search_service.py
"""
Global Search

Keyword search across orders, customers and every product group table. Each
source is capped on its own and the combined list is cut to RESULT_LIMIT.
A product table that fails to answer is skipped and logged.
"""
from __future__ import annotations

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..errors import ValidationError
from ..models import Customer, Order, PRODUCT_GROUP_TABLES, product_model_for
from .product_locator import iter_group_models

ORDER_LIMIT = 5
CUSTOMER_LIMIT = 5
RESULT_LIMIT = 10

SEARCH_TYPES = ("order", "customer", "product")


def _order_hits(like: str) -> list[dict]:
    orders = (
        db.session.query(Order)
        .join(Customer, Order.customer_id == Customer.id)
        .filter(or_(Order.id.ilike(like), Customer.name.ilike(like)))
        .order_by(Order.date.desc(), Order.created_at.desc())
        .limit(ORDER_LIMIT)
        .all()
    )
    return [
        {
            "type": "order",
            "id": o.id,
            "title": f"Order #{o.id[:8]}",
            "description": f"{o.customer_name} | {o.total_amount:,.2f} | {o.status}",
            "url": f"/invoice/{o.id}",
        }
        for o in orders
    ]


def _customer_hits(like: str) -> list[dict]:
    customers = (
        db.session.query(Customer)
        .filter(or_(Customer.name.ilike(like), Customer.email.ilike(like)))
        .order_by(Customer.name.asc(), Customer.id.asc())
        .limit(CUSTOMER_LIMIT)
        .all()
    )
    return [
        {
            "type": "customer",
            "id": c.id,
            "title": c.name,
            "description": c.email,
            "url": f"/customers/{c.id}",
        }
        for c in customers
    ]


def _product_hits(like: str, group: str | None) -> list[dict]:
    hits = []
    for group_name, model in iter_group_models(group):
        if len(hits) >= RESULT_LIMIT:
            break
        try:
            rows = (
                db.session.query(model)
                .filter(model.name.ilike(like))
                .order_by(model.name.asc(), model.id.asc())
                .limit(RESULT_LIMIT - len(hits))
                .all()
            )
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.warning(
                "Global search skipped table %s: %s", PRODUCT_GROUP_TABLES[group_name], e
            )
            continue
        hits.extend(
            {
                "type": "product",
                "id": p.id,
                "title": p.name,
                "description": f"Group {group_name} | {p.price:,.2f} | {p.quantity or 0} in stock",
                "url": f"/products/{p.id}",
            }
            for p in rows
        )
    return hits


def search(query: str | None, *, type_: str | None = None, group: str | None = None) -> dict:
    """
    Returns {query, results}. Orders come first, then customers, then products.

    type_ restricts the sources; group restricts the product tables scanned.
    Matching is a substring ilike, so on SQLite only ASCII letters fold case.
    """
    term = (query or "").strip()
    if not term:
        raise ValidationError("Search query is required")
    if type_ is not None and type_ not in SEARCH_TYPES:
        raise ValidationError(f"type must be one of: {', '.join(SEARCH_TYPES)}")
    if group is not None and product_model_for(group) is None:
        raise ValidationError(f"Invalid product group: {group}")

    like = f"%{term}%"
    results = []
    if type_ in (None, "order"):
        results.extend(_order_hits(like))
    if type_ in (None, "customer"):
        results.extend(_customer_hits(like))
    if type_ in (None, "product"):
        results.extend(_product_hits(like, group))
    return {"query": term, "results": results[:RESULT_LIMIT]}
