"""Profit and margin analytics over persisted quotations and catalog costs.

Everything here is recomputed from scratch on each call. Revenue for a quotation
is its tax-inclusive grand total; cost comes from each line's own cost price or,
failing that, the catalog item's current cost price.
"""

import calendar
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from quotedesk.app.core.policy import LOW_MARGIN_THRESHOLDS
from quotedesk.app.core.settings import get_settings
from quotedesk.app.core.time import ensure_utc
from quotedesk.app.models.client import Client
from quotedesk.app.models.item import Item
from quotedesk.app.models.quotation import Quotation
from quotedesk.app.services.pricing import TWO_PLACES, ZERO, line_value, to_decimal

HUNDRED = Decimal("100")


def _margin(profit: Decimal, revenue: Decimal) -> Decimal:
    return profit / revenue * HUNDRED if revenue > 0 else ZERO


def _money(value: Decimal) -> str:
    return str(Decimal(value).quantize(TWO_PLACES))


def _index_items(items: Iterable[Item]) -> Dict:
    return {item.id: item for item in items}


def effective_cost_price(line, catalog_item: Optional[Item]) -> Optional[Decimal]:
    """The line's own positive cost price, else the catalog item's, else None."""
    own = line_value(line, "cost_price")
    if own is not None and to_decimal(own) > 0:
        return to_decimal(own)
    if catalog_item is not None and catalog_item.cost_price is not None and to_decimal(catalog_item.cost_price) > 0:
        return to_decimal(catalog_item.cost_price)
    return None


def calculate_quotation_profit(quotation: Quotation, items) -> dict:
    catalog = items if isinstance(items, dict) else _index_items(items)
    total_cost = ZERO
    has_complete_cost_data = True
    for line in quotation.line_items or []:
        cost_price = effective_cost_price(line, catalog.get(line_value(line, "item_id")))
        if cost_price is None:
            has_complete_cost_data = False
            continue
        total_cost += cost_price * to_decimal(line_value(line, "quantity"))

    revenue = to_decimal(quotation.total)
    gross_profit = revenue - total_cost
    return {
        "quotation": quotation,
        "revenue": revenue,
        "cost": total_cost,
        "gross_profit": gross_profit,
        "profit_margin": _margin(gross_profit, revenue),
        "has_complete_cost_data": has_complete_cost_data,
    }


def _accepted(quotations: Iterable[Quotation]) -> List[Quotation]:
    return [q for q in quotations if q.status == "accepted"]


def calculate_overall_profit_metrics(quotations: Iterable[Quotation], items) -> dict:
    catalog = _index_items(items)
    revenue = ZERO
    cost = ZERO
    count = 0
    for quotation in _accepted(quotations):
        profit = calculate_quotation_profit(quotation, catalog)
        revenue += profit["revenue"]
        cost += profit["cost"]
        count += 1
    gross_profit = revenue - cost
    return {
        "revenue": revenue,
        "cost": cost,
        "gross_profit": gross_profit,
        "profit_margin": _margin(gross_profit, revenue),
        "quotation_count": count,
    }


def calculate_client_profits(quotations: Iterable[Quotation], items, clients: Iterable[Client]) -> List[dict]:
    catalog = _index_items(items)
    client_names = {client.id: client.name for client in clients}
    by_client: Dict[int, dict] = {}
    for quotation in _accepted(quotations):
        profit = calculate_quotation_profit(quotation, catalog)
        entry = by_client.setdefault(
            quotation.client_id,
            {
                "client_id": quotation.client_id,
                "client_name": client_names.get(quotation.client_id) or "Unknown",
                "total_revenue": ZERO,
                "total_cost": ZERO,
                "gross_profit": ZERO,
                "quotation_count": 0,
            },
        )
        entry["total_revenue"] += profit["revenue"]
        entry["total_cost"] += profit["cost"]
        entry["gross_profit"] += profit["gross_profit"]
        entry["quotation_count"] += 1

    for entry in by_client.values():
        entry["profit_margin"] = _margin(entry["gross_profit"], entry["total_revenue"])
    return sorted(by_client.values(), key=lambda entry: entry["gross_profit"], reverse=True)


def calculate_category_profits(quotations: Iterable[Quotation], items) -> List[dict]:
    catalog = _index_items(items)
    by_category: Dict[str, dict] = {}
    for quotation in _accepted(quotations):
        for line in quotation.line_items or []:
            catalog_item = catalog.get(line_value(line, "item_id"))
            category = (catalog_item.category if catalog_item is not None else None) or "Uncategorized"
            quantity = to_decimal(line_value(line, "quantity"))
            revenue = to_decimal(line_value(line, "unit_price")) * quantity
            cost = (effective_cost_price(line, catalog_item) or ZERO) * quantity

            entry = by_category.setdefault(
                category,
                {"category": category, "revenue": ZERO, "cost": ZERO, "gross_profit": ZERO, "item_count": 0},
            )
            entry["revenue"] += revenue
            entry["cost"] += cost
            entry["gross_profit"] += revenue - cost
            entry["item_count"] += 1

    for entry in by_category.values():
        entry["profit_margin"] = _margin(entry["gross_profit"], entry["revenue"])
    return sorted(by_category.values(), key=lambda entry: entry["gross_profit"], reverse=True)


def _last_n_months(today: date, n: int = 6) -> List[Tuple[int, int]]:
    # returns list from oldest to newest
    year = today.year
    month = today.month
    months = []
    for _ in range(n):
        months.append((year, month))
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    return list(reversed(months))


def calculate_monthly_profits(
    quotations: Iterable[Quotation],
    items,
    months: int = 6,
    today: date | None = None,
) -> List[dict]:
    as_of_date = today or datetime.now(timezone.utc).date()
    catalog = _index_items(items)
    month_keys = _last_n_months(as_of_date, months)
    month_map = {key: {"revenue": ZERO, "cost": ZERO} for key in month_keys}

    for quotation in _accepted(quotations):
        created = ensure_utc(quotation.created_at)
        key = (created.year, created.month)
        if key not in month_map:
            continue
        profit = calculate_quotation_profit(quotation, catalog)
        month_map[key]["revenue"] += profit["revenue"]
        month_map[key]["cost"] += profit["cost"]

    trend = []
    for year, month in month_keys:
        revenue = month_map[(year, month)]["revenue"]
        cost = month_map[(year, month)]["cost"]
        gross_profit = revenue - cost
        trend.append(
            {
                "year": year,
                "month": month,
                "label": calendar.month_abbr[month],
                "revenue": revenue,
                "cost": cost,
                "gross_profit": gross_profit,
                "profit_margin": _margin(gross_profit, revenue),
            }
        )
    return trend


def find_low_margin_quotations(
    quotations: Iterable[Quotation],
    items,
    thresholds: Optional[Dict[str, Decimal]] = None,
) -> List[dict]:
    """Accepted or sent quotations under the low-margin bands, worst first.

    Quotations with incomplete cost data are left out entirely.
    """
    bands = thresholds or LOW_MARGIN_THRESHOLDS
    catalog = _index_items(items)
    alerts = []
    for quotation in quotations:
        if quotation.status not in ("accepted", "sent"):
            continue
        profit = calculate_quotation_profit(quotation, catalog)
        if not profit["has_complete_cost_data"]:
            continue

        margin = profit["profit_margin"]
        if margin < bands["critical"]:
            severity = "critical"
        elif margin < bands["warning"]:
            severity = "warning"
        elif margin < bands["low"]:
            severity = "low"
        else:
            continue
        alerts.append(
            {
                "quotation": quotation,
                "revenue": profit["revenue"],
                "profit_margin": margin,
                "severity": severity,
            }
        )
    return sorted(alerts, key=lambda alert: alert["profit_margin"])


def get_profit_report(db: Session, *, months: int = 6, today: date | None = None) -> dict:
    as_of_date = today or datetime.now(timezone.utc).date()
    quotations = db.query(Quotation).all()
    items = db.query(Item).all()
    clients = db.query(Client).all()

    overall = calculate_overall_profit_metrics(quotations, items)
    return {
        "as_of": as_of_date.isoformat(),
        "currency": get_settings().currency,
        "overall": {
            "revenue": _money(overall["revenue"]),
            "cost": _money(overall["cost"]),
            "gross_profit": _money(overall["gross_profit"]),
            "profit_margin": _money(overall["profit_margin"]),
            "quotation_count": overall["quotation_count"],
        },
        "by_client": [
            {
                "client_id": entry["client_id"],
                "client_name": entry["client_name"],
                "total_revenue": _money(entry["total_revenue"]),
                "total_cost": _money(entry["total_cost"]),
                "gross_profit": _money(entry["gross_profit"]),
                "profit_margin": _money(entry["profit_margin"]),
                "quotation_count": entry["quotation_count"],
            }
            for entry in calculate_client_profits(quotations, items, clients)
        ],
        "by_category": [
            {
                "category": entry["category"],
                "revenue": _money(entry["revenue"]),
                "cost": _money(entry["cost"]),
                "gross_profit": _money(entry["gross_profit"]),
                "profit_margin": _money(entry["profit_margin"]),
                "item_count": entry["item_count"],
            }
            for entry in calculate_category_profits(quotations, items)
        ],
        "monthly_trend": [
            {
                "year": entry["year"],
                "month": entry["month"],
                "label": entry["label"],
                "revenue": _money(entry["revenue"]),
                "cost": _money(entry["cost"]),
                "gross_profit": _money(entry["gross_profit"]),
                "profit_margin": _money(entry["profit_margin"]),
            }
            for entry in calculate_monthly_profits(quotations, items, months=months, today=as_of_date)
        ],
        "low_margin_alerts": [
            {
                "quotation_id": alert["quotation"].id,
                "quotation_number": alert["quotation"].quotation_number,
                "project_title": alert["quotation"].project_title,
                "status": alert["quotation"].status,
                "revenue": _money(alert["revenue"]),
                "profit_margin": _money(alert["profit_margin"]),
                "severity": alert["severity"],
            }
            for alert in find_low_margin_quotations(quotations, items)
        ],
    }


def get_dashboard_summary(db: Session, *, today: date | None = None) -> dict:
    as_of_date = today or datetime.now(timezone.utc).date()
    quotations = db.query(Quotation).all()
    status_counts = {status: 0 for status in ("draft", "sent", "accepted", "rejected")}
    accepted_revenue = ZERO
    pipeline_value = ZERO
    for quotation in quotations:
        status_counts[quotation.status] = status_counts.get(quotation.status, 0) + 1
        if quotation.status == "accepted":
            accepted_revenue += to_decimal(quotation.total)
        elif quotation.status == "sent":
            pipeline_value += to_decimal(quotation.total)

    return {
        "as_of": as_of_date.isoformat(),
        "currency": get_settings().currency,
        "quotation_count": len(quotations),
        "status_counts": status_counts,
        "client_count": db.query(Client).count(),
        "item_count": db.query(Item).count(),
        "accepted_revenue": _money(accepted_revenue),
        "pipeline_value": _money(pipeline_value),
    }
