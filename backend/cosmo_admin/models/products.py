from __future__ import annotations

from sqlalchemy.orm import declared_attr

from ..extensions import db
from ..time_utils import to_utc_z
from .common import new_id


# Product group -> physical table. Insertion order is the scan order used by the
# product locator and the listing fan-out.
PRODUCT_GROUP_TABLES: dict[str, str] = {
    "BDR": "products_bdr",
    "LA": "products_la",
    "АГ": "products_ag",
    "АБ": "products_ab_cyr",
    "АР": "products_ar_cyr",
    "без сокращений": "products_bez_sokr",
    "АФ": "products_af",
    "ДС": "products_ds",
    "м8": "products_m8",
    "JDA": "products_jda",
    "Faith": "products_faith",
    "AB": "products_ab_lat",
    "ГФ": "products_gf",
    "ЕС": "products_es",
    "ГП": "products_gp",
    "СД": "products_sd",
    "ATA": "products_ata",
    "W": "products_w",
}


class ProductRecord:
    """
    Columns shared by every per-group product table.

    A product's group is not stored on the row; it is implied by the table the
    row lives in and is therefore immutable after creation.
    """
    group: str

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)

    # Retail price in local currency
    price = db.Column(db.Float, nullable=False, default=0)
    # Salon (wholesale) cost in USD and the rate used to convert it
    salon_price = db.Column(db.Float, nullable=True)
    exchange_rate = db.Column(db.Float, nullable=True)

    # Warehouse stock
    quantity = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    @declared_attr.directive
    def __table_args__(cls):
        return (db.Index(f"ix_{cls.__tablename__}_name", "name"),)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "group": self.group,
            "name": self.name,
            "retailPrice": self.price,
            "salonPrice": self.salon_price if self.salon_price is not None else 0,
            "exchangeRate": self.exchange_rate if self.exchange_rate is not None else 0,
            "quantity": self.quantity if self.quantity is not None else 0,
            "created_at": to_utc_z(self.created_at),
        }

    def to_stock_dict(self) -> dict:
        return {
            "id": self.id,
            "group": self.group,
            "name": self.name,
            "quantity": self.quantity if self.quantity is not None else 0,
            "created_at": to_utc_z(self.created_at),
        }


def _class_name(table_name: str) -> str:
    suffix = table_name.removeprefix("products_")
    return "Product" + "".join(part.capitalize() for part in suffix.split("_"))


def _build_product_model(group: str, table_name: str) -> type:
    return type(
        _class_name(table_name),
        (ProductRecord, db.Model),
        {"__tablename__": table_name, "group": group},
    )


PRODUCT_MODELS: dict[str, type] = {
    group: _build_product_model(group, table_name)
    for group, table_name in PRODUCT_GROUP_TABLES.items()
}


def product_model_for(group: str | None):
    """Model class for a group name, or None for an unknown group."""
    if group is None:
        return None
    return PRODUCT_MODELS.get(group)
