import itertools
import unittest
from decimal import Decimal
from types import SimpleNamespace

from autoshop.exceptions import ValidationError
from autoshop.services import costs
from autoshop.services.money import to_money


def line(quantity, unit_price):
    return SimpleNamespace(quantity=quantity, unit_price=unit_price)


class TestCosts(unittest.TestCase):

    def test_parts_and_total(self):
        """2 x 40 + 1 x 50 with 100 labor"""
        items = [line(2, 40.00), line(1, 50.00)]
        self.assertEqual(costs.parts_cost(items), Decimal("130.00"))
        self.assertEqual(costs.total_cost(items, 100), Decimal("230.00"))

    def test_line_order_does_not_change_totals(self):
        items = [line(3, "19.99"), line(1, "0.005"), line(2, 40.00), line(7, "1.115")]
        parts = costs.parts_cost(items)
        total = costs.total_cost(items, "87.50")
        for ordering in itertools.permutations(items):
            self.assertEqual(costs.parts_cost(list(ordering)), parts)
            self.assertEqual(costs.total_cost(list(ordering), "87.50"), total)

    def test_no_lines_total_is_labor(self):
        self.assertEqual(costs.total_cost([], "55.5"), Decimal("55.50"))

    def test_each_line_is_rounded_before_summing(self):
        items = [line(1, "0.005"), line(1, "0.005")]
        self.assertEqual(costs.parts_cost(items), Decimal("0.02"))

    def test_negative_labor_rejected(self):
        with self.assertRaises(ValidationError):
            costs.total_cost([], -1)

    def test_missing_labor_rejected(self):
        with self.assertRaises(ValidationError):
            costs.compute_breakdown([], None)

    def test_negative_unit_price_rejected(self):
        with self.assertRaises(ValidationError):
            costs.parts_cost([line(1, -5)])

    def test_non_numeric_amount_rejected(self):
        with self.assertRaises(ValidationError):
            to_money("abc")
        with self.assertRaises(ValidationError):
            to_money(float("nan"))

    def test_half_up_rounding(self):
        self.assertEqual(to_money("2.675"), Decimal("2.68"))

    def test_derived_labor(self):
        items = [line(2, 40.00)]
        self.assertEqual(costs.derive_labor_cost(150, items), Decimal("70.00"))
        self.assertEqual(costs.derive_labor_cost(50, items), Decimal("0.00"))

    def test_stored_labor_wins_over_derivation(self):
        self.assertEqual(costs.effective_labor_cost(20.0, 500, []), Decimal("20.00"))
        self.assertEqual(costs.effective_labor_cost(None, 500, [line(1, 100)]), Decimal("400.00"))

    def test_breakdown_with_technician(self):
        technician = SimpleNamespace(earnings_percentage=25)
        breakdown = costs.compute_breakdown([line(1, 80)], 200, technician)
        self.assertEqual(breakdown.parts_cost, Decimal("80.00"))
        self.assertEqual(breakdown.total_cost, Decimal("280.00"))
        self.assertEqual(breakdown.technician_earnings, Decimal("50.00"))
        self.assertEqual(breakdown.as_dict()["total_cost"], 280.0)


if __name__ == "__main__":
    unittest.main()
