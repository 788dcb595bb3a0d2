import unittest
from decimal import Decimal

from autoshop.exceptions import ValidationError
from autoshop.services import pricing
from autoshop.services.pricing import CatalogEntry, LineItem


class TestPricing(unittest.TestCase):

    def setUp(self):
        self.filter = CatalogEntry(id=1, price=Decimal("40.00"))
        self.pads = CatalogEntry(id=2, price=Decimal("75.00"))

    def test_new_line_uses_catalog_price(self):
        """A new line starts at the catalog default and is not custom"""
        line = pricing.add_line_item(self.filter, quantity=2)
        self.assertEqual(line.unit_price, Decimal("40.00"))
        self.assertEqual(line.quantity, 2)
        self.assertFalse(line.is_custom_price)

    def test_quantity_must_be_positive(self):
        with self.assertRaises(ValidationError):
            pricing.add_line_item(self.filter, quantity=0)

    def test_reselecting_same_component_keeps_custom_price(self):
        line = pricing.edit_unit_price(pricing.add_line_item(self.filter), "35")
        again = pricing.select_component(line, self.filter)
        self.assertEqual(again.unit_price, Decimal("35.00"))
        self.assertTrue(again.is_custom_price)

    def test_switching_component_brings_new_default(self):
        line = pricing.edit_unit_price(pricing.add_line_item(self.filter), "35")
        switched = pricing.select_component(line, self.pads)
        self.assertEqual(switched.component_id, 2)
        self.assertEqual(switched.unit_price, Decimal("75.00"))
        self.assertFalse(switched.is_custom_price)

    def test_edit_rejects_negative_price(self):
        with self.assertRaises(ValidationError):
            pricing.edit_unit_price(pricing.add_line_item(self.filter), -1)

    def test_edit_to_zero_is_allowed(self):
        line = pricing.edit_unit_price(pricing.add_line_item(self.filter), 0)
        self.assertEqual(line.unit_price, Decimal("0.00"))
        self.assertTrue(line.is_custom_price)

    def test_reset_restores_default(self):
        """Custom 60 on a 75 component resets to 75"""
        line = pricing.edit_unit_price(pricing.add_line_item(self.pads), 60)
        reset = pricing.reset_unit_price(line, self.pads)
        self.assertEqual(reset.unit_price, Decimal("75.00"))
        self.assertFalse(reset.is_custom_price)

    def test_catalog_change_does_not_rewrite_line(self):
        line = pricing.add_line_item(self.filter)
        repriced = CatalogEntry(id=1, price=Decimal("45.00"))
        kept = pricing.apply_line_item_change(line, repriced, quantity=1)
        self.assertEqual(kept.unit_price, Decimal("40.00"))
        self.assertTrue(pricing.has_price_drift(kept, repriced))

    def test_custom_line_never_reports_drift(self):
        line = LineItem(component_id=1, quantity=1, unit_price=Decimal("10.00"), is_custom_price=True)
        self.assertFalse(pricing.has_price_drift(line, self.filter))

    def test_apply_change_with_typed_price(self):
        line = pricing.apply_line_item_change(None, self.filter, quantity=1, unit_price=38.5)
        self.assertEqual(line.unit_price, Decimal("38.50"))
        self.assertTrue(line.is_custom_price)

    def test_apply_change_with_default_price_is_not_custom(self):
        line = pricing.apply_line_item_change(None, self.filter, quantity=1, unit_price=40)
        self.assertFalse(line.is_custom_price)

    def test_reset_wins_over_typed_price(self):
        existing = pricing.edit_unit_price(pricing.add_line_item(self.pads), 60)
        line = pricing.apply_line_item_change(existing, self.pads, quantity=1, unit_price=50, reset=True)
        self.assertEqual(line.unit_price, Decimal("75.00"))
        self.assertFalse(line.is_custom_price)


if __name__ == "__main__":
    unittest.main()
