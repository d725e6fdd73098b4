# backend/cosmo_admin/services/managed_users_service.py
from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError, is_unique_violation
from ..models import ManagedUser
from ..validation import ModelValidationPolicy, validate_payload, enforce_email

MANAGED_USER_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({"name", "email", "notes"}),
    required_on_create=frozenset({"name", "email"}),
    ignored_fields=frozenset({"id", "created_at", "dateAdded", "added_by_admin_email"}),
)

DUPLICATE_MESSAGE = "A manager with this email already exists"


def _commit() -> None:
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if is_unique_violation(e):
            raise ConflictError(DUPLICATE_MESSAGE) from e
        raise


def list_managed_users() -> list[dict]:
    rows = db.session.query(ManagedUser).order_by(ManagedUser.created_at.desc(), ManagedUser.name.asc()).all()
    return [u.to_dict() for u in rows]


def find_by_email(email: str) -> dict | None:
    """Exact (case-insensitive) lookup; None when there is no such manager."""
    user = (
        db.session.query(ManagedUser)
        .filter(ManagedUser.email == email.strip().lower())
        .one_or_none()
    )
    return user.to_dict() if user else None


def get_managed_user_model(user_id: str) -> ManagedUser:
    user = db.session.get(ManagedUser, user_id)
    if user is None:
        raise NotFoundError("Managed user not found")
    return user


def get_managed_user(user_id: str) -> dict:
    return get_managed_user_model(user_id).to_dict()


def create_managed_user(payload: dict, *, caller_email: str) -> dict:
    patch = validate_payload(model=ManagedUser, payload=payload, policy=MANAGED_USER_POLICY, partial=False)
    enforce_email(patch)

    user = ManagedUser(added_by_admin_email=caller_email, **patch)
    db.session.add(user)
    _commit()
    return user.to_dict()


def update_managed_user(user_id: str, payload: dict) -> dict:
    user = get_managed_user_model(user_id)
    patch = validate_payload(model=ManagedUser, payload=payload, policy=MANAGED_USER_POLICY, partial=True)
    enforce_email(patch)
    if not patch:
        raise ValidationError("No fields to update")

    for k, v in patch.items():
        setattr(user, k, v)
    _commit()
    return user.to_dict()


def delete_managed_user(user_id: str) -> None:
    user = get_managed_user_model(user_id)
    db.session.delete(user)
    db.session.commit()
