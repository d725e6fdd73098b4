# backend/cosmo_admin/routes/exchange_rates.py
from flask import Blueprint, request

from ..decorators import require_auth, require_role
from ..services import products_service

exchange_rates_bp = Blueprint("exchange_rates", __name__, url_prefix="/api/exchangeRates")


@exchange_rates_bp.post("")
@require_auth
@require_role("admin")
def update_exchange_rates():
    """Body: {"newRate": number > 0, "group": optional group name}."""
    payload = request.get_json(silent=True) or {}
    return products_service.update_exchange_rates(payload)
