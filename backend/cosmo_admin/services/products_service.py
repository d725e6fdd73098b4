# backend/cosmo_admin/services/products_service.py
"""
Products Service across the per-group tables.

Every product lives in exactly one of the eighteen group tables. Reads by id go
through the product locator; listings fan out over the tables, merge in memory
and paginate (the whole filtered set is materialized, which is fine at the
catalog's size but will not scale indefinitely).

Fan-outs (listing, bulk delete) are settled per table: one table failing is
logged and does not fail the others.
"""
from __future__ import annotations

from dataclasses import dataclass

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError, is_foreign_key_violation
from ..models import OrderItem, PRODUCT_GROUP_TABLES, product_model_for
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_product,
    positive_finite_number,
)
from .product_locator import iter_group_models, locate_product

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({"name", "retailPrice", "salonPrice", "exchangeRate", "quantity"}),
    required_on_create=frozenset({"name", "retailPrice"}),
    aliases={"retailPrice": "price", "salonPrice": "salon_price", "exchangeRate": "exchange_rate"},
)

# Import never touches stock levels of existing products
IMPORT_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({"name", "retailPrice", "salonPrice", "exchangeRate"}),
    required_on_create=frozenset({"name", "retailPrice"}),
    aliases=PRODUCT_POLICY.aliases,
)

PRODUCT_CONFLICT_MESSAGE = "Product is referenced by existing orders and cannot be deleted"


@dataclass
class BulkDeleteResult:
    deleted: int = 0
    conflicts: int = 0
    errors: int = 0

    @property
    def message(self) -> str:
        if self.deleted == 0 and (self.conflicts or self.errors):
            return "No products were deleted: they are referenced by orders or an error occurred"
        if self.conflicts or self.errors:
            return (
                f"Deleted {self.deleted} product(s); {self.conflicts} referenced by orders, "
                f"{self.errors} failed"
            )
        return f"Deleted {self.deleted} product(s)"

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "totalDeletedCount": self.deleted,
            "conflictCount": self.conflicts,
            "errorCount": self.errors,
        }


def _require_model(group):
    model = product_model_for(group)
    if model is None:
        raise ValidationError(f"Invalid product group: {group}")
    return model


def _split_group(payload: dict) -> tuple[str | None, dict]:
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    fields = dict(payload)
    group = fields.pop("group", None)
    return group, fields


def list_products(
    *,
    search: str | None = None,
    group: str | None = None,
    page: int = 1,
    page_size: int = 20,
) -> dict:
    """
    Cross-table listing, sorted by name (case-insensitive, then id).

    search is a substring ilike on name. PostgreSQL folds case for any script;
    SQLite folds only ASCII, so Cyrillic terms match case-sensitively there.

    Returns {data, totalCount, currentPage, pageSize}.
    """
    if group is not None:
        _require_model(group)

    term = (search or "").strip()
    rows = []
    for group_name, model in iter_group_models(group):
        q = db.session.query(model)
        if term:
            q = q.filter(model.name.ilike(f"%{term}%"))
        try:
            rows.extend(q.all())
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.warning(
                "Product search skipped table %s: %s", PRODUCT_GROUP_TABLES[group_name], e
            )

    rows.sort(key=lambda p: ((p.name or "").casefold(), p.id))
    start = (page - 1) * page_size
    return {
        "data": [p.to_dict() for p in rows[start:start + page_size]],
        "totalCount": len(rows),
        "currentPage": page,
        "pageSize": page_size,
    }


def get_product(product_id: str) -> dict:
    located = locate_product(product_id)
    if located is None:
        raise NotFoundError("Product not found")
    return located.row.to_dict()


def create_product(payload: dict) -> dict:
    group, fields = _split_group(payload)
    if not group:
        raise ValidationError("Missing required fields: group")
    model = _require_model(group)

    patch = validate_payload(model=model, payload=fields, policy=PRODUCT_POLICY, partial=False)
    enforce_rules_product(patch)
    if patch.get("quantity") is None:
        patch["quantity"] = 0

    product = model(**patch)
    db.session.add(product)
    db.session.commit()
    return product.to_dict()


def update_product(product_id: str, payload: dict) -> dict:
    group, fields = _split_group(payload)

    located = locate_product(product_id)
    if located is None:
        raise NotFoundError("Product not found")
    if group is not None and group != located.group:
        raise ValidationError("Changing a product's group is not supported")

    patch = validate_payload(model=type(located.row), payload=fields, policy=PRODUCT_POLICY, partial=True)
    enforce_rules_product(patch)
    if "quantity" in patch and patch["quantity"] is None:
        patch["quantity"] = 0

    for k, v in patch.items():
        setattr(located.row, k, v)
    db.session.commit()
    return located.row.to_dict()


def _referenced_product_ids(ids) -> set[str]:
    if not ids:
        return set()
    rows = (
        db.session.query(OrderItem.product_id)
        .filter(OrderItem.product_id.in_(list(ids)))
        .distinct()
        .all()
    )
    return {r[0] for r in rows}


def delete_product(product_id: str) -> None:
    located = locate_product(product_id)
    if located is None:
        raise NotFoundError("Product not found")
    if _referenced_product_ids([product_id]):
        raise ConflictError(PRODUCT_CONFLICT_MESSAGE)

    db.session.delete(located.row)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if is_foreign_key_violation(e):
            raise ConflictError(PRODUCT_CONFLICT_MESSAGE, details=str(e.orig)) from e
        raise


def bulk_delete_products(ids) -> BulkDeleteResult:
    """
    Delete the given ids from whichever tables hold them.

    Each table is handled in its own transaction. Ids still referenced by order
    items are left in place and counted as conflicts.
    """
    if not isinstance(ids, list) or not ids:
        raise ValidationError("An array of product IDs is required")
    if not all(isinstance(i, str) and i for i in ids):
        raise ValidationError("Product IDs must be non-empty strings")

    wanted = set(ids)
    referenced = _referenced_product_ids(wanted)
    result = BulkDeleteResult()

    for group, model in iter_group_models():
        table_name = PRODUCT_GROUP_TABLES[group]
        deletable: set[str] = set()
        try:
            present = {
                r[0] for r in db.session.query(model.id).filter(model.id.in_(wanted)).all()
            }
            if not present:
                continue

            blocked = present & referenced
            deletable = present - referenced
            result.conflicts += len(blocked)
            if not deletable:
                continue

            deleted = (
                db.session.query(model)
                .filter(model.id.in_(deletable))
                .delete(synchronize_session=False)
            )
            db.session.commit()
            result.deleted += deleted
        except IntegrityError as e:
            db.session.rollback()
            if is_foreign_key_violation(e):
                result.conflicts += len(deletable)
                current_app.logger.warning("Bulk delete blocked by references in %s: %s", table_name, e.orig)
            else:
                result.errors += 1
                current_app.logger.error("Bulk delete failed for %s: %s", table_name, e.orig)
        except SQLAlchemyError as e:
            db.session.rollback()
            result.errors += 1
            current_app.logger.error("Bulk delete failed for %s: %s", table_name, e)

    return result


def import_products(items) -> dict:
    """
    Upsert products by name within each group.

    Existing products get new prices; their stock quantity is preserved. New
    products start with quantity 0. Invalid groups are reported but do not stop
    the rest of the import.
    """
    if not isinstance(items, list) or not items:
        raise ValidationError("No products to import")

    errors: list[str] = []
    processed = 0

    for index, item in enumerate(items):
        if not isinstance(item, dict):
            errors.append(f"Row {index + 1}: invalid product")
            continue
        group, fields = _split_group(item)
        model = product_model_for(group)
        if model is None:
            errors.append(f"Row {index + 1}: invalid product group '{group}'")
            continue
        try:
            patch = validate_payload(model=model, payload=fields, policy=IMPORT_POLICY, partial=False)
            enforce_rules_product(patch)
        except ValidationError as e:
            errors.append(f"Row {index + 1}: {e.message}")
            continue

        existing = db.session.query(model).filter(model.name == patch["name"]).first()
        if existing is None:
            db.session.add(model(quantity=0, **patch))
        else:
            for k, v in patch.items():
                setattr(existing, k, v)
        # Later rows with the same name in the same file update the earlier one
        db.session.flush()
        processed += 1

    db.session.commit()

    if errors:
        raise ValidationError(
            f"Import partially failed. Processed: {processed}.",
            details="; ".join(errors),
        )
    return {"message": f"Successfully processed {processed} products.", "processedCount": processed}


def update_exchange_rates(payload: dict) -> dict:
    """Set exchange_rate on every product of one group, or of all groups."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    new_rate = positive_finite_number(
        payload.get("newRate"),
        message="Invalid exchange rate provided. Must be a positive number.",
    )

    group = payload.get("group") or None
    if group is not None:
        _require_model(group)

    updated = 0
    for _, model in iter_group_models(group):
        updated += (
            db.session.query(model)
            .update({model.exchange_rate: new_rate}, synchronize_session=False)
        )
    db.session.commit()
    return {"message": "Exchange rates updated successfully.", "updatedCount": updated}


def list_low_stock(threshold: int) -> list[dict]:
    rows = []
    for _, model in iter_group_models():
        rows.extend(db.session.query(model).filter(model.quantity <= threshold).all())
    rows.sort(key=lambda p: (p.quantity, (p.name or "").casefold()))
    return [p.to_stock_dict() for p in rows]
