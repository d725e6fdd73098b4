# backend/cosmo_admin/routes/admins.py
from flask import Blueprint, g, request

from ..decorators import require_auth, require_role
from ..services import admins_service

admins_bp = Blueprint("admins", __name__, url_prefix="/api/admins")


@admins_bp.get("")
@require_auth
@require_role("admin")
def list_admins():
    return admins_service.list_admins()


@admins_bp.post("")
@require_auth
@require_role("admin")
def add_admin():
    payload = request.get_json(silent=True) or {}
    return admins_service.add_admin(payload.get("email"), added_by=g.current_user.email), 201


@admins_bp.delete("")
@require_auth
@require_role("admin")
def remove_admin():
    """Body (or ?email=): the admin email to remove. Callers cannot remove themselves."""
    payload = request.get_json(silent=True) or {}
    email = payload.get("email") or request.args.get("email")
    admins_service.remove_admin(email, caller_email=g.current_user.email)
    return "", 204
