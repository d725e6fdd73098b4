# backend/cosmo_admin/routes/customers.py
from flask import Blueprint, request

from ..decorators import require_auth
from ..services import customers_service
from .pagination import page_args

customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
@require_auth
def list_customers():
    """
    Query params:
    - search: matches name, email or phone
    - sort: default | vip | inactive
    - page, pageSize
    """
    page, page_size = page_args()
    return customers_service.list_customers(
        search=request.args.get("search"),
        sort=request.args.get("sort") or "default",
        page=page,
        page_size=page_size,
    )


@customers_bp.get("/<customer_id>")
@require_auth
def get_customer(customer_id: str):
    return customers_service.get_customer(customer_id)


@customers_bp.post("")
@require_auth
def create_customer():
    payload = request.get_json(silent=True) or {}
    return customers_service.create_customer(payload), 201


@customers_bp.put("/<customer_id>")
@require_auth
def update_customer(customer_id: str):
    payload = request.get_json(silent=True) or {}
    return customers_service.update_customer(customer_id, payload)


@customers_bp.delete("/<customer_id>")
@require_auth
def delete_customer(customer_id: str):
    """409 while the customer still has orders."""
    customers_service.delete_customer(customer_id)
    return "", 204
