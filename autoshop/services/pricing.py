"""
Unit price resolution for service line items.

A line starts at the catalog default price of the component it references.
Only an explicit edit of the price marks it as custom; later changes to the
catalog price never rewrite a stored line.
"""
import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from autoshop.exceptions import ValidationError
from autoshop.services.money import to_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogEntry:
    """Snapshot of a catalog component's identity and current default price."""
    id: int
    price: Decimal

    @classmethod
    def from_component(cls, component) -> "CatalogEntry":
        return cls(id=component.id, price=to_money(component.price))


@dataclass(frozen=True)
class LineItem:
    component_id: Optional[int]
    quantity: int
    unit_price: Decimal
    is_custom_price: bool = False
    id: Optional[int] = None


def _check_quantity(quantity) -> int:
    if quantity is None or int(quantity) < 1:
        raise ValidationError("Quantity must be at least 1")
    return int(quantity)


def add_line_item(entry: CatalogEntry, quantity: int = 1) -> LineItem:
    """New line at the catalog default price."""
    return LineItem(
        component_id=entry.id,
        quantity=_check_quantity(quantity),
        unit_price=entry.price,
        is_custom_price=False,
    )


def select_component(line: LineItem, entry: CatalogEntry) -> LineItem:
    """Point ``line`` at ``entry``.

    Re-selecting the same component keeps the line as it is, custom price
    included. Any other component brings its default price along.
    """
    if line.component_id is not None and line.component_id == entry.id:
        return line
    return replace(line, component_id=entry.id, unit_price=entry.price, is_custom_price=False)


def edit_unit_price(line: LineItem, price) -> LineItem:
    """Store a user-entered price verbatim and flag the line as custom."""
    value = to_money(price)
    if value < 0:
        raise ValidationError("Unit price cannot be negative")
    return replace(line, unit_price=value, is_custom_price=True)


def reset_unit_price(line: LineItem, entry: CatalogEntry) -> LineItem:
    """Restore the catalog default price."""
    return replace(line, component_id=entry.id, unit_price=entry.price, is_custom_price=False)


def has_price_drift(line: LineItem, entry: CatalogEntry) -> bool:
    """True when a non-custom line no longer matches the catalog price."""
    if line.is_custom_price or line.component_id != entry.id:
        return False
    return to_money(line.unit_price) != entry.price


def apply_line_item_change(
    existing: Optional[LineItem],
    entry: CatalogEntry,
    quantity: int,
    unit_price=None,
    reset: bool = False,
) -> LineItem:
    """Resolve the stored state of a line after a create or update request.

    ``unit_price`` is the price the user typed, if any. ``reset`` wins over
    a typed price.
    """
    if existing is None:
        line = add_line_item(entry, quantity)
    else:
        line = select_component(replace(existing, quantity=_check_quantity(quantity)), entry)

    if reset:
        return reset_unit_price(line, entry)
    if unit_price is not None and to_money(unit_price) != line.unit_price:
        logger.info(f"💲 Custom price {unit_price} for component {entry.id} (default {entry.price})")
        return edit_unit_price(line, unit_price)
    return line
