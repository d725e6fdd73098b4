# backend/cosmo_admin/routes/managed_users.py
"""
Manager account routes.

Any authenticated caller may look a manager up by email; everything else is
admin-only.
"""
from flask import Blueprint, g, jsonify, request

from ..decorators import require_auth, require_role
from ..errors import AuthorizationError
from ..services import managed_users_service

managed_users_bp = Blueprint("managed_users", __name__, url_prefix="/api/managedUsers")


@managed_users_bp.get("")
@require_auth
def list_managed_users():
    """
    ?email=... returns the matching manager or null.
    Without it, lists all managers (admin only).
    """
    email = request.args.get("email")
    if email is not None:
        found = managed_users_service.find_by_email(email)
        return jsonify(found)

    if not g.current_user.is_admin:
        raise AuthorizationError("Forbidden: insufficient role")
    return managed_users_service.list_managed_users()


@managed_users_bp.get("/<user_id>")
@require_auth
@require_role("admin")
def get_managed_user(user_id: str):
    return managed_users_service.get_managed_user(user_id)


@managed_users_bp.post("")
@require_auth
@require_role("admin")
def create_managed_user():
    payload = request.get_json(silent=True) or {}
    return managed_users_service.create_managed_user(payload, caller_email=g.current_user.email), 201


@managed_users_bp.put("/<user_id>")
@require_auth
@require_role("admin")
def update_managed_user(user_id: str):
    payload = request.get_json(silent=True) or {}
    return managed_users_service.update_managed_user(user_id, payload)


@managed_users_bp.delete("/<user_id>")
@require_auth
@require_role("admin")
def delete_managed_user(user_id: str):
    managed_users_service.delete_managed_user(user_id)
    return "", 204
