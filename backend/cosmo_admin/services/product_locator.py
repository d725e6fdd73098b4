# Overview: Finds which per-group product table holds a given product id.

from __future__ import annotations

from typing import Iterator, NamedTuple

from ..extensions import db
from ..models import PRODUCT_GROUP_TABLES, PRODUCT_MODELS


class LocatedProduct(NamedTuple):
    row: object
    table_name: str
    group: str


def iter_group_models(group: str | None = None) -> Iterator[tuple[str, type]]:
    """(group, model) pairs in scan order, or just the one group when given."""
    for name, model in PRODUCT_MODELS.items():
        if group is None or name == group:
            yield name, model


def locate_product(product_id: str) -> LocatedProduct | None:
    """
    Scan the group tables in mapping order and return the first hit.

    One primary-key lookup per table; stops at the first table that has the id.
    Database errors propagate to the caller.
    """
    if not product_id:
        return None
    for group, model in iter_group_models():
        row = db.session.get(model, product_id)
        if row is not None:
            return LocatedProduct(row=row, table_name=PRODUCT_GROUP_TABLES[group], group=group)
    return None
