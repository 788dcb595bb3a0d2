"""
Service cost aggregation.

Each line is rounded to two places before it is summed, and the sum is
rounded again. Labor is added on top of the parts cost.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from autoshop.exceptions import ValidationError
from autoshop.services.earnings import technician_earnings
from autoshop.services.money import ZERO, to_money


@dataclass(frozen=True)
class CostBreakdown:
    """Derived totals for a single service."""
    parts_cost: Decimal
    labor_cost: Decimal
    total_cost: Decimal
    technician_earnings: Decimal = ZERO

    def as_dict(self) -> dict:
        return {
            "parts_cost": float(self.parts_cost),
            "labor_cost": float(self.labor_cost),
            "total_cost": float(self.total_cost),
            "technician_earnings": float(self.technician_earnings),
        }


def line_cost(quantity, unit_price) -> Decimal:
    """Cost of one line: quantity x unit price, rounded."""
    if quantity is None or int(quantity) < 1:
        raise ValidationError("Quantity must be at least 1")
    price = to_money(unit_price)
    if price < 0:
        raise ValidationError("Unit price cannot be negative")
    return to_money(Decimal(int(quantity)) * price)


def parts_cost(line_items: Iterable) -> Decimal:
    """Sum of rounded line costs.

    ``line_items`` may be any objects exposing ``quantity`` and ``unit_price``.
    """
    total = ZERO
    for item in line_items:
        total += line_cost(item.quantity, item.unit_price)
    return to_money(total)


def validate_labor_cost(labor_cost) -> Decimal:
    if labor_cost is None:
        raise ValidationError("Labor cost is required")
    labor = to_money(labor_cost)
    if labor < 0:
        raise ValidationError("Labor cost cannot be negative")
    return labor


def total_cost(line_items: Iterable, labor_cost) -> Decimal:
    """Parts cost plus labor cost, rounded."""
    labor = validate_labor_cost(labor_cost)
    return to_money(parts_cost(line_items) + labor)


def derive_labor_cost(stored_total, line_items: Iterable) -> Decimal:
    """Back-derive labor for records that only persisted a combined total.

    The result is only as good as the line items passed in: if parts were
    repriced after the total was saved, the derived labor absorbs the
    difference. Negative results are floored at zero.
    """
    labor = to_money(stored_total) - parts_cost(line_items)
    return labor if labor > 0 else ZERO


def effective_labor_cost(stored_labor: Optional[float], stored_total, line_items) -> Decimal:
    """Stored labor when present, otherwise the back-derived value."""
    if stored_labor is not None:
        return to_money(stored_labor)
    return derive_labor_cost(stored_total, line_items)


def compute_breakdown(line_items, labor_cost, technician=None, default_percentage=None) -> CostBreakdown:
    """Parts, labor, total and technician earnings for one service."""
    items = list(line_items)
    labor = validate_labor_cost(labor_cost)
    parts = parts_cost(items)
    return CostBreakdown(
        parts_cost=parts,
        labor_cost=labor,
        total_cost=to_money(parts + labor),
        technician_earnings=technician_earnings(
            labor, technician, default_percentage=default_percentage
        ),
    )
