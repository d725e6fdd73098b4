# backend/cosmo_admin/routes/orders.py
"""
Order routes, including printable documents.

SECURITY: All routes require authentication; admins and managers alike.
"""
from io import BytesIO

from flask import Blueprint, g, request, send_file

from ..decorators import require_auth
from ..services import document_service, orders_service

orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


@orders_bp.get("")
@require_auth
def list_orders():
    """Newest first. Query params: customerId (optional)."""
    return orders_service.list_orders(customer_id=request.args.get("customerId") or None)


@orders_bp.get("/<order_id>")
@require_auth
def get_order(order_id: str):
    return orders_service.get_order(order_id)


@orders_bp.post("")
@require_auth
def create_order():
    """
    Create an order with its items in one transaction.

    managedByUserEmail defaults to the caller.
    """
    payload = request.get_json(silent=True) or {}
    return orders_service.create_order(payload, caller_email=g.current_user.email), 201


@orders_bp.put("/<order_id>")
@require_auth
def update_order(order_id: str):
    """When "items" is present the whole item set is replaced."""
    payload = request.get_json(silent=True) or {}
    return orders_service.update_order(order_id, payload)


@orders_bp.delete("/<order_id>")
@require_auth
def delete_order(order_id: str):
    orders_service.delete_order(order_id)
    return "", 204


def _pdf_response(content: bytes, filename: str):
    return send_file(
        BytesIO(content),
        mimetype="application/pdf",
        as_attachment=request.args.get("download") == "1",
        download_name=filename,
    )


@orders_bp.get("/<order_id>/invoice.pdf")
@require_auth
def order_invoice(order_id: str):
    order = orders_service.get_order_model(order_id)
    return _pdf_response(document_service.render_invoice(order), f"invoice-{order.id[:8]}.pdf")


@orders_bp.get("/<order_id>/bill-of-lading.pdf")
@require_auth
def order_bill_of_lading(order_id: str):
    order = orders_service.get_order_model(order_id)
    return _pdf_response(document_service.render_bill_of_lading(order), f"bill-of-lading-{order.id[:8]}.pdf")
