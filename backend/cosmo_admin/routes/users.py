# backend/cosmo_admin/routes/users.py
from flask import Blueprint, g

from ..decorators import require_auth

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("/me")
@require_auth
def me():
    """The caller's email, display name and resolved role."""
    return g.current_user.to_dict()
