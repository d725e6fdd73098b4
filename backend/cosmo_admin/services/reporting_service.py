# Overview: Dashboard and report aggregation over orders, items and expenses.

"""
Reporting service.

The reductions at the top of this module are pure functions over model
instances (or anything with the same attributes), so they can be unit tested
without a database. The functions below them fetch rows and assemble the
response bodies for the dashboard and report endpoints.

Money is in local currency. An item's cost is its salon price (USD) times the
exchange rate captured on the item when the order was written.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Iterable

from sqlalchemy import func

from ..extensions import db
from ..errors import ValidationError
from ..models import Admin, Customer, Expense, ManagedUser, Order, ORDER_STATUSES
from ..time_utils import date_range, days_ago, parse_iso_date, to_iso_date, utcnow
from .product_locator import iter_group_models

UNASSIGNED = "unassigned"
OTHER_GROUP = "Інші"
REPORT_TOP_N = 10
DASHBOARD_TOP_N = 5
RECENT_ORDERS_LIMIT = 5
DEFAULT_DASHBOARD_PERIOD_DAYS = 30
# Longest report range or dashboard period
MAX_RANGE_DAYS = 3660


# ---------------------------------------------------------------------------
# Pure reductions
# ---------------------------------------------------------------------------

def _discounted_unit_price(item) -> float:
    return (item.price or 0) * (1 - (item.discount or 0) / 100)


def item_revenue(item) -> float:
    return _discounted_unit_price(item) * (item.quantity or 0)


def item_cost(item) -> float:
    """Unit cost in local currency; a missing snapshot counts as 0."""
    return (item.salon_price_usd or 0) * (item.exchange_rate or 0)


def item_profit(item) -> float:
    return (_discounted_unit_price(item) - item_cost(item)) * (item.quantity or 0)


def order_profit(order) -> float:
    return sum(item_profit(i) for i in order.items)


def total_revenue(orders: Iterable) -> float:
    return sum(o.total_amount or 0 for o in orders)


def gross_profit(orders: Iterable) -> float:
    return sum(order_profit(o) for o in orders)


def percentage_change(current: float, previous: float) -> float:
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def manager_breakdown(orders: Iterable, names: dict[str, str]) -> list[dict]:
    """
    Per-manager orders, sales and profit, most profitable first.

    names maps email -> display name; unknown emails are shown as-is.
    """
    stats: dict[str, dict] = {}
    for order in orders:
        email = order.managed_by_user_email or UNASSIGNED
        row = stats.get(email)
        if row is None:
            row = stats[email] = {
                "name": names.get(email, email),
                "email": email,
                "totalOrders": 0,
                "totalSales": 0.0,
                "totalProfit": 0.0,
            }
        row["totalOrders"] += 1
        row["totalSales"] += order.total_amount or 0
        row["totalProfit"] += order_profit(order)
    return sorted(stats.values(), key=lambda r: r["totalProfit"], reverse=True)


def top_products(orders: Iterable, limit: int, groups: dict[str, str] | None = None) -> list[dict]:
    """
    Products ranked by revenue. Items are keyed by product id (by name when
    the item has no product id). When groups is given, each entry carries the
    product's group.
    """
    products: dict[str, dict] = {}
    for order in orders:
        for item in order.items:
            key = item.product_id or f"name:{item.product_name}"
            row = products.get(key)
            if row is None:
                row = products[key] = {
                    "productId": item.product_id or "",
                    "productName": item.product_name,
                    "totalQuantity": 0,
                    "totalRevenue": 0.0,
                }
                if groups is not None:
                    row["group"] = groups.get(item.product_id or "", OTHER_GROUP)
            row["totalQuantity"] += item.quantity or 0
            row["totalRevenue"] += item_revenue(item)
    ranked = sorted(products.values(), key=lambda r: r["totalRevenue"], reverse=True)
    return ranked[:limit]


def top_customers(orders: Iterable, limit: int) -> list[dict]:
    customers: dict[str, dict] = {}
    for order in orders:
        row = customers.get(order.customer_id)
        if row is None:
            row = customers[order.customer_id] = {
                "customerId": order.customer_id,
                "customerName": order.customer_name,
                "totalSpent": 0.0,
                "orderCount": 0,
            }
        row["totalSpent"] += order.total_amount or 0
        row["orderCount"] += 1
    ranked = sorted(customers.values(), key=lambda r: r["totalSpent"], reverse=True)
    return ranked[:limit]


def revenue_by_group(orders: Iterable, groups: dict[str, str]) -> list[dict]:
    totals: dict[str, float] = defaultdict(float)
    for order in orders:
        for item in order.items:
            totals[groups.get(item.product_id or "", OTHER_GROUP)] += item_revenue(item)
    return sorted(
        ({"group": g, "revenue": r} for g, r in totals.items()),
        key=lambda r: r["revenue"],
        reverse=True,
    )


def daily_totals(orders: Iterable, days: list[date]) -> list[tuple[date, float, float]]:
    """(day, sales, profit) for every day given; orders outside them are ignored."""
    sales: dict[date, float] = {d: 0.0 for d in days}
    profit: dict[date, float] = {d: 0.0 for d in days}
    for order in orders:
        day = order.date.date()
        if day in sales:
            sales[day] += order.total_amount or 0
            profit[day] += order_profit(order)
    return [(d, sales[d], profit[d]) for d in days]


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def _orders_between(
    start: datetime | None,
    end: datetime | None,
    *,
    manager_email: str | None = None,
    status: str | None = None,
) -> list[Order]:
    """Orders with start <= date < end (either bound optional)."""
    q = db.session.query(Order)
    if start is not None:
        q = q.filter(Order.date >= start)
    if end is not None:
        q = q.filter(Order.date < end)
    if manager_email is not None:
        q = q.filter(Order.managed_by_user_email == manager_email)
    if status is not None:
        q = q.filter(Order.status == status)
    return q.order_by(Order.date.asc()).all()


def _expenses_between(start: date | None, end: date | None) -> list[Expense]:
    q = db.session.query(Expense)
    if start is not None:
        q = q.filter(Expense.date >= start)
    if end is not None:
        q = q.filter(Expense.date <= end)
    return q.order_by(Expense.date.desc(), Expense.created_at.desc()).all()


def _recent_orders(manager_email: str | None = None) -> list[dict]:
    q = db.session.query(Order)
    if manager_email is not None:
        q = q.filter(Order.managed_by_user_email == manager_email)
    rows = q.order_by(Order.date.desc()).limit(RECENT_ORDERS_LIMIT).all()
    return [o.to_summary_dict() for o in rows]


def _user_names() -> dict[str, str]:
    names = {a.email: a.email for a in db.session.query(Admin).all()}
    for manager in db.session.query(ManagedUser).all():
        names[manager.email] = manager.name
    return names


def _product_groups(product_ids: set[str]) -> dict[str, str]:
    """product id -> group, for the ids that still exist in the catalog."""
    groups: dict[str, str] = {}
    if not product_ids:
        return groups
    for group, model in iter_group_models():
        for (pid,) in db.session.query(model.id).filter(model.id.in_(product_ids)).all():
            groups.setdefault(pid, group)
    return groups


def _periods(period_days: int, now: datetime) -> tuple[datetime, datetime, datetime]:
    """(previous start, current start, now): two back-to-back windows of equal length."""
    current_start = now - timedelta(days=period_days)
    previous_start = current_start - timedelta(days=period_days)
    return previous_start, current_start, now


def _kpi(current: float, previous: float) -> dict:
    return {"value": current, "change": percentage_change(current, previous)}


def _top_product_summary(rows: list[dict]) -> list[dict]:
    return [{"productName": r["productName"], "totalRevenue": r["totalRevenue"]} for r in rows]


def dashboard_stats(period_days: int | None = None) -> dict:
    """Admin overview; all time unless a period (in days) is given."""
    since = days_ago(period_days) if period_days else None
    orders = _orders_between(since, None)
    expenses = _expenses_between(since.date() if since else None, None)

    gross = gross_profit(orders)
    spent = sum(e.amount for e in expenses)
    return {
        "totalRevenue": total_revenue(orders),
        "grossProfit": gross,
        "totalProfit": gross,
        "totalExpenses": spent,
        "netProfit": gross - spent,
        "totalOrders": len(orders),
        "totalCustomers": db.session.query(func.count(Customer.id)).scalar() or 0,
        "totalManagers": db.session.query(func.count(ManagedUser.id)).scalar() or 0,
        "managerReport": manager_breakdown(orders, _user_names()),
        "topProducts": top_products(orders, DASHBOARD_TOP_N),
        "topCustomers": top_customers(orders, DASHBOARD_TOP_N),
    }


def manager_dashboard(email: str, period_days: int = DEFAULT_DASHBOARD_PERIOD_DAYS) -> dict:
    """The caller's own orders only."""
    previous_start, current_start, now = _periods(period_days, utcnow())
    current = _orders_between(current_start, None, manager_email=email)
    previous = _orders_between(previous_start, current_start, manager_email=email)

    return {
        "kpis": {
            "totalSales": _kpi(total_revenue(current), total_revenue(previous)),
            "totalOrders": _kpi(len(current), len(previous)),
        },
        "recentOrders": _recent_orders(email),
        "topProducts": _top_product_summary(top_products(current, DASHBOARD_TOP_N)),
    }


def _new_customers(start: datetime, end: datetime | None) -> int:
    q = db.session.query(func.count(Customer.id)).filter(Customer.created_at >= start)
    if end is not None:
        q = q.filter(Customer.created_at < end)
    return q.scalar() or 0


def admin_dashboard(period_days: int = DEFAULT_DASHBOARD_PERIOD_DAYS) -> dict:
    previous_start, current_start, now = _periods(period_days, utcnow())
    current = _orders_between(current_start, None)
    previous = _orders_between(previous_start, current_start)

    chart = [
        {"date": to_iso_date(day), "sales": sales, "profit": profit}
        for day, sales, profit in daily_totals(current, date_range(current_start.date(), now.date()))
    ]

    return {
        "kpis": {
            "revenue": _kpi(total_revenue(current), total_revenue(previous)),
            "profit": _kpi(gross_profit(current), gross_profit(previous)),
            "orders": _kpi(len(current), len(previous)),
            "customers": _kpi(_new_customers(current_start, None), _new_customers(previous_start, current_start)),
        },
        "chartData": chart,
        "recentOrders": _recent_orders(),
        "topProducts": _top_product_summary(top_products(current, DASHBOARD_TOP_N)),
    }


def check_period(period_days: int | None) -> int | None:
    if period_days is not None and period_days > MAX_RANGE_DAYS:
        raise ValidationError(f"period must be at most {MAX_RANGE_DAYS} days")
    return period_days


def parse_report_range(start_raw: str | None, end_raw: str | None) -> tuple[date, date]:
    try:
        start = parse_iso_date(start_raw)
        end = parse_iso_date(end_raw)
    except ValueError:
        raise ValidationError("Dates must be in YYYY-MM-DD format")
    if start is None or end is None:
        raise ValidationError("Start and end dates are required")
    if start > end:
        raise ValidationError("startDate must not be after endDate")
    # The query bound is the day after end
    if end == date.max:
        raise ValidationError("endDate is out of range")
    if (end - start).days >= MAX_RANGE_DAYS:
        raise ValidationError(f"Report range must be at most {MAX_RANGE_DAYS} days")
    return start, end


def build_report(start: date, end: date, *, status: str | None = None) -> dict:
    """
    Profit-and-loss report for whole days start..end (inclusive).

    totalProfit is net of the expenses dated inside the range.
    """
    if status is not None and status not in ORDER_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(ORDER_STATUSES)}")

    orders = _orders_between(
        datetime.combine(start, time.min),
        datetime.combine(end + timedelta(days=1), time.min),
        status=status,
    )
    expenses = _expenses_between(start, end)
    groups = _product_groups({i.product_id for o in orders for i in o.items if i.product_id})

    gross = gross_profit(orders)
    spent = sum(e.amount for e in expenses)
    return {
        "totalRevenue": total_revenue(orders),
        "grossProfit": gross,
        "totalExpenses": spent,
        "totalProfit": gross - spent,
        "totalOrders": len(orders),
        "salesByDay": [
            {"date": to_iso_date(day), "totalSales": sales, "totalProfit": profit}
            for day, sales, profit in daily_totals(orders, date_range(start, end))
        ],
        "topProducts": top_products(orders, REPORT_TOP_N, groups),
        "topCustomers": top_customers(orders, REPORT_TOP_N),
        "revenueByGroup": revenue_by_group(orders, groups),
        "expenses": [e.to_dict() for e in expenses],
    }
