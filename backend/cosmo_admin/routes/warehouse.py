# backend/cosmo_admin/routes/warehouse.py
"""
Warehouse routes: stock quantities only. Admin-only.
"""
from flask import Blueprint, request

from ..decorators import require_auth, require_role
from ..services import warehouse_service
from .pagination import page_args

warehouse_bp = Blueprint("warehouse", __name__, url_prefix="/api/warehouse")


@warehouse_bp.get("")
@require_auth
@require_role("admin")
def list_stock():
    page, page_size = page_args()
    return warehouse_service.list_stock(search=request.args.get("search"), page=page, page_size=page_size)


@warehouse_bp.get("/<product_id>")
@require_auth
@require_role("admin")
def get_stock(product_id: str):
    return warehouse_service.get_stock(product_id)


@warehouse_bp.put("/<product_id>")
@require_auth
@require_role("admin")
def set_quantity(product_id: str):
    """Body: {"quantity": non-negative integer}."""
    return warehouse_service.set_quantity(product_id, request.get_json(silent=True))
