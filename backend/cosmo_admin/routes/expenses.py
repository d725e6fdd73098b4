# backend/cosmo_admin/routes/expenses.py
"""
Expense routes. Admin-only.
"""
from flask import Blueprint, g, request

from ..decorators import require_auth, require_role
from ..services import expenses_service
from .pagination import page_args

expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


@expenses_bp.get("")
@require_auth
@require_role("admin")
def list_expenses():
    page, page_size = page_args()
    return expenses_service.list_expenses(search=request.args.get("search"), page=page, page_size=page_size)


@expenses_bp.get("/<expense_id>")
@require_auth
@require_role("admin")
def get_expense(expense_id: str):
    return expenses_service.get_expense(expense_id)


@expenses_bp.post("")
@require_auth
@require_role("admin")
def create_expense():
    payload = request.get_json(silent=True) or {}
    return expenses_service.create_expense(payload, caller_email=g.current_user.email), 201


@expenses_bp.put("/<expense_id>")
@require_auth
@require_role("admin")
def update_expense(expense_id: str):
    payload = request.get_json(silent=True) or {}
    return expenses_service.update_expense(expense_id, payload)


@expenses_bp.delete("/<expense_id>")
@require_auth
@require_role("admin")
def delete_expense(expense_id: str):
    expenses_service.delete_expense(expense_id)
    return "", 204
