# backend/cosmo_admin/services/admins_service.py
"""
Admins Service

Admins configured through ADMIN_EMAILS are listed alongside the table rows but
cannot be removed through the API.
"""
from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError, is_unique_violation
from ..models import Admin
from ..validation import EMAIL_RE


def _normalize_email(raw) -> str:
    if not isinstance(raw, str) or not EMAIL_RE.fullmatch(raw.strip()):
        raise ValidationError("A valid email is required")
    return raw.strip().lower()


def list_admins() -> list[dict]:
    rows = db.session.query(Admin).order_by(Admin.email.asc()).all()
    admins = [a.to_dict() for a in rows]
    listed = {a["email"] for a in admins}
    for email in current_app.config.get("ADMIN_EMAILS", []):
        if email not in listed:
            admins.append({"id": None, "email": email, "added_by": None, "created_at": None})
    return admins


def add_admin(email, *, added_by: str | None) -> dict:
    email = _normalize_email(email)
    admin = Admin(email=email, added_by=added_by)
    db.session.add(admin)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if is_unique_violation(e):
            raise ConflictError("This email is already an admin") from e
        raise
    return admin.to_dict()


def remove_admin(email, *, caller_email: str | None) -> None:
    email = _normalize_email(email)
    if caller_email and email == caller_email.lower():
        raise ValidationError("You cannot remove yourself")

    admin = db.session.query(Admin).filter(Admin.email == email).one_or_none()
    if admin is None:
        if email in current_app.config.get("ADMIN_EMAILS", []):
            raise ValidationError("Configured admins cannot be removed through the API")
        raise NotFoundError("Admin not found")

    db.session.delete(admin)
    db.session.commit()
