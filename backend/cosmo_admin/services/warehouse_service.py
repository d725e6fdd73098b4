# backend/cosmo_admin/services/warehouse_service.py
"""
Warehouse Service: stock quantities across every product group.

Only quantity is writable here; prices belong to the products endpoints.
"""
from __future__ import annotations

from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..errors import NotFoundError, ValidationError
from ..models import PRODUCT_GROUP_TABLES
from .product_locator import iter_group_models, locate_product


def list_stock(*, search: str | None = None, page: int = 1, page_size: int = 20) -> dict:
    """
    Newest products first across all groups.

    search is an ilike on name; on SQLite only ASCII letters match regardless of case.
    """
    term = (search or "").strip()
    rows = []
    for group, model in iter_group_models():
        q = db.session.query(model)
        if term:
            q = q.filter(model.name.ilike(f"%{term}%"))
        try:
            rows.extend(q.all())
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.warning("Stock listing skipped table %s: %s", PRODUCT_GROUP_TABLES[group], e)

    rows.sort(key=lambda p: (p.created_at or datetime.min, p.id), reverse=True)
    start = (page - 1) * page_size
    return {
        "data": [p.to_stock_dict() for p in rows[start:start + page_size]],
        "totalCount": len(rows),
        "currentPage": page,
        "pageSize": page_size,
    }


def get_stock(product_id: str) -> dict:
    located = locate_product(product_id)
    if located is None:
        raise NotFoundError("Product not found")
    return located.row.to_stock_dict()


def set_quantity(product_id: str, payload) -> dict:
    quantity = payload.get("quantity") if isinstance(payload, dict) else None
    if isinstance(quantity, float) and quantity.is_integer():
        quantity = int(quantity)
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
        raise ValidationError("Quantity must be a non-negative integer")

    located = locate_product(product_id)
    if located is None:
        raise NotFoundError("Product not found")

    located.row.quantity = quantity
    db.session.commit()
    return located.row.to_dict()
