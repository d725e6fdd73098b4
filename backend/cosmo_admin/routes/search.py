# backend/cosmo_admin/routes/search.py
from flask import Blueprint, request

from ..decorators import require_auth
from ..services import search_service

search_bp = Blueprint("search", __name__, url_prefix="/api/search")


@search_bp.get("")
@require_auth
def global_search():
    """
    Query params:
    - query: required search term
    - type: order | customer | product (optional)
    - group: product group to scan (optional)
    """
    return search_service.search(
        request.args.get("query"),
        type_=request.args.get("type") or None,
        group=request.args.get("group") or None,
    )
