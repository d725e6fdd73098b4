# backend/cosmo_admin/routes/notifications.py
from flask import Blueprint, g, request

from ..decorators import require_auth
from ..services import notifications_service

notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notifications_bp.get("")
@require_auth
def list_notifications():
    """The caller's 15 most recent notifications."""
    return notifications_service.list_notifications(g.current_user.email)


@notifications_bp.post("/mark-read")
@require_auth
def mark_read():
    """Body: {"ids": [...]}."""
    payload = request.get_json(silent=True) or {}
    ids = payload.get("ids") if isinstance(payload, dict) else None
    return notifications_service.mark_read(ids, email=g.current_user.email)
