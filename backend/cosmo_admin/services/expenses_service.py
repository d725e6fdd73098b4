# backend/cosmo_admin/services/expenses_service.py
from __future__ import annotations

from sqlalchemy import or_

from ..extensions import db
from ..errors import NotFoundError, ValidationError
from ..models import Expense
from ..validation import ModelValidationPolicy, validate_payload, enforce_rules_expense

EXPENSE_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({"name", "amount", "date", "notes"}),
    required_on_create=frozenset({"name", "amount", "date"}),
    ignored_fields=frozenset({"id", "created_at", "created_by_user_email"}),
)


def list_expenses(*, search: str | None = None, page: int = 1, page_size: int = 20) -> dict:
    """Newest expense date first; search matches name or notes."""
    q = db.session.query(Expense)
    term = (search or "").strip()
    if term:
        like = f"%{term}%"
        q = q.filter(or_(Expense.name.ilike(like), Expense.notes.ilike(like)))

    total = q.count()
    rows = (
        q.order_by(Expense.date.desc(), Expense.created_at.desc(), Expense.id.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return {
        "data": [e.to_dict() for e in rows],
        "totalCount": total,
        "currentPage": page,
        "pageSize": page_size,
    }


def get_expense_model(expense_id: str) -> Expense:
    expense = db.session.get(Expense, expense_id)
    if expense is None:
        raise NotFoundError("Expense not found")
    return expense


def get_expense(expense_id: str) -> dict:
    return get_expense_model(expense_id).to_dict()


def create_expense(payload: dict, *, caller_email: str) -> dict:
    patch = validate_payload(model=Expense, payload=payload, policy=EXPENSE_POLICY, partial=False)
    enforce_rules_expense(patch)

    expense = Expense(created_by_user_email=caller_email, **patch)
    db.session.add(expense)
    db.session.commit()
    return expense.to_dict()


def update_expense(expense_id: str, payload: dict) -> dict:
    expense = get_expense_model(expense_id)
    patch = validate_payload(model=Expense, payload=payload, policy=EXPENSE_POLICY, partial=True)
    if "date" in patch and patch["date"] is None:
        raise ValidationError("date cannot be null")
    enforce_rules_expense(patch)

    for k, v in patch.items():
        setattr(expense, k, v)
    db.session.commit()
    return expense.to_dict()


def delete_expense(expense_id: str) -> None:
    expense = get_expense_model(expense_id)
    db.session.delete(expense)
    db.session.commit()
