"""
Technician earnings.

Technicians are paid a percentage of the labor cost only. Parts never
contribute to the base.
"""
from decimal import Decimal

from autoshop.exceptions import ValidationError
from autoshop.services.money import ZERO, to_money

DEFAULT_EARNINGS_PERCENTAGE = Decimal("30")


def earnings_percentage(technician, default_percentage=None) -> Decimal:
    """Percentage configured on the technician, or the default when unset."""
    value = getattr(technician, "earnings_percentage", None)
    if value is None:
        value = default_percentage if default_percentage is not None else DEFAULT_EARNINGS_PERCENTAGE
    percentage = Decimal(str(value))
    if percentage < 0 or percentage > 100:
        raise ValidationError("Earnings percentage must be between 0 and 100")
    return percentage


def technician_earnings(labor_cost, technician=None, default_percentage=None) -> Decimal:
    """Technician share of ``labor_cost``.

    Zero when nobody is assigned or there is no positive labor cost.
    """
    if technician is None or labor_cost is None:
        return ZERO
    labor = to_money(labor_cost)
    if labor <= 0:
        return ZERO
    percentage = earnings_percentage(technician, default_percentage)
    return to_money(labor * percentage / Decimal("100"))
