# backend/cosmo_admin/routes/products.py
"""
Product routes across the eighteen per-group tables.

SECURITY: All routes require authentication.
- Reads are open to admins and managers
- Writes, bulk delete and import are admin-only
"""
from flask import Blueprint, request

from ..decorators import require_auth, require_role
from ..services import products_service
from .pagination import page_args

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
def list_products():
    """
    Query params:
    - search: str (optional) - case-insensitive substring of the name
    - group: str (optional) - restrict to one product group
    - page: int (optional, default 1)
    - pageSize: int (optional, default 20, max 100)
    """
    page, page_size = page_args()
    return products_service.list_products(
        search=request.args.get("search"),
        group=request.args.get("group") or None,
        page=page,
        page_size=page_size,
    )


@products_bp.get("/<product_id>")
@require_auth
def get_product(product_id: str):
    return products_service.get_product(product_id)


@products_bp.post("")
@require_auth
@require_role("admin")
def create_product():
    payload = request.get_json(silent=True) or {}
    return products_service.create_product(payload), 201


@products_bp.put("/<product_id>")
@require_auth
@require_role("admin")
def update_product(product_id: str):
    payload = request.get_json(silent=True) or {}
    return products_service.update_product(product_id, payload)


@products_bp.delete("/<product_id>")
@require_auth
@require_role("admin")
def delete_product(product_id: str):
    """409 if any order item still references the product."""
    products_service.delete_product(product_id)
    return "", 204


@products_bp.delete("")
@require_auth
@require_role("admin")
def bulk_delete_products():
    """
    Body: {"ids": [...]}

    200 when at least one product was deleted, 409 when none were and some
    were blocked by order references or failed.
    """
    payload = request.get_json(silent=True) or {}
    result = products_service.bulk_delete_products(payload.get("ids") if isinstance(payload, dict) else None)
    status = 409 if result.deleted == 0 and (result.conflicts or result.errors) else 200
    return result.to_dict(), status


@products_bp.post("/import")
@require_auth
@require_role("admin")
def import_products():
    """Body: JSON array of {name, group, retailPrice, salonPrice, exchangeRate}."""
    payload = request.get_json(silent=True)
    return products_service.import_products(payload)
