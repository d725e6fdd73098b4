# backend/cosmo_admin/routes/dashboard.py
"""
Dashboard and report routes.

- /api/dashboardStats, /api/dashboard, /api/reports: admin-only
- /api/managerDashboard: any role, scoped to the caller's own orders
"""
from flask import Blueprint, g, request

from ..decorators import require_auth, require_role
from ..services import reporting_service
from ..validation import parse_positive_int

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api")


@dashboard_bp.get("/dashboardStats")
@require_auth
@require_role("admin")
def dashboard_stats():
    """?period=N limits totals to the last N days; all time when omitted."""
    raw = request.args.get("period")
    period = parse_positive_int(raw, name="period", default=0) if raw else None
    return reporting_service.dashboard_stats(reporting_service.check_period(period))


@dashboard_bp.get("/managerDashboard")
@require_auth
def manager_dashboard():
    period = parse_positive_int(
        request.args.get("period"), name="period", default=reporting_service.DEFAULT_DASHBOARD_PERIOD_DAYS
    )
    return reporting_service.manager_dashboard(g.current_user.email, reporting_service.check_period(period))


@dashboard_bp.get("/dashboard")
@require_auth
@require_role("admin")
def admin_dashboard():
    period = parse_positive_int(
        request.args.get("period"), name="period", default=reporting_service.DEFAULT_DASHBOARD_PERIOD_DAYS
    )
    return reporting_service.admin_dashboard(reporting_service.check_period(period))


@dashboard_bp.get("/reports")
@require_auth
@require_role("admin")
def report():
    """Query params: startDate, endDate (YYYY-MM-DD, inclusive), status (optional)."""
    start, end = reporting_service.parse_report_range(request.args.get("startDate"), request.args.get("endDate"))
    return reporting_service.build_report(start, end, status=request.args.get("status") or None)
