"""
Aggregations behind the dashboard, inventory and technician reports.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from autoshop.services.money import ZERO, to_money

OUT_OF_STOCK = "out_of_stock"
LOW_STOCK = "low_stock"
IN_STOCK = "in_stock"


def stock_status(stock_count: int, reorder_level: int) -> str:
    if stock_count <= 0:
        return OUT_OF_STOCK
    if stock_count <= reorder_level:
        return LOW_STOCK
    return IN_STOCK


def needs_reorder(component) -> bool:
    """Low or out of stock."""
    return stock_status(component.stock_count, component.reorder_level) != IN_STOCK


def inventory_summary(components: Iterable) -> dict:
    """Counts per stock status and the total value of stock on hand."""
    summary = {
        "total_components": 0,
        OUT_OF_STOCK: 0,
        LOW_STOCK: 0,
        IN_STOCK: 0,
        "total_stock_value": ZERO,
    }
    for component in components:
        summary["total_components"] += 1
        summary[stock_status(component.stock_count, component.reorder_level)] += 1
        summary["total_stock_value"] += to_money(component.price) * component.stock_count
    summary["total_stock_value"] = to_money(summary["total_stock_value"])
    return summary


@dataclass(frozen=True)
class UsageStats:
    total_quantity: int
    total_cost: Decimal
    months: int
    average_quantity_per_month: Decimal
    average_cost_per_month: Decimal


def _months_spanned(first: datetime, last: datetime) -> int:
    return (last.year - first.year) * 12 + (last.month - first.month) + 1


def usage_stats(usages: Iterable) -> UsageStats:
    """Usage totals for a component.

    ``usages`` are ``(used_at, quantity, cost)`` tuples. Averages are per
    calendar month between the first and last use, both inclusive.
    """
    rows = [u for u in usages if u[0] is not None]
    total_quantity = sum(int(q) for _, q, _ in rows)
    total_cost = to_money(sum((to_money(c) for _, _, c in rows), ZERO))
    if not rows:
        return UsageStats(0, ZERO, 0, ZERO, ZERO)

    dates = sorted(used_at for used_at, _, _ in rows)
    months = _months_spanned(dates[0], dates[-1])
    return UsageStats(
        total_quantity=total_quantity,
        total_cost=total_cost,
        months=months,
        average_quantity_per_month=to_money(Decimal(total_quantity) / months),
        average_cost_per_month=to_money(total_cost / months),
    )


def technician_summary(records: Iterable) -> dict:
    """Revenue and earnings totals over a technician's service records."""
    records = list(records)
    return {
        "service_count": len(records),
        "total_revenue": float(to_money(sum((to_money(r.total_cost or 0) for r in records), ZERO))),
        "total_earnings": float(
            to_money(sum((to_money(r.technician_earnings or 0) for r in records), ZERO))
        ),
        "unique_customers": len({r.customer_id for r in records if r.customer_id is not None}),
        "unique_vehicles": len({r.vehicle_id for r in records if r.vehicle_id is not None}),
    }
