import unittest
from decimal import Decimal
from types import SimpleNamespace

from autoshop.exceptions import ValidationError
from autoshop.services.earnings import earnings_percentage, technician_earnings


class TestTechnicianEarnings(unittest.TestCase):

    def test_percentage_of_labor(self):
        """25% of 200 labor is 50"""
        technician = SimpleNamespace(earnings_percentage=25)
        self.assertEqual(technician_earnings(200, technician), Decimal("50.00"))

    def test_default_percentage_when_unset(self):
        """Unset percentage falls back to 30%"""
        technician = SimpleNamespace(earnings_percentage=None)
        self.assertEqual(technician_earnings(100, technician), Decimal("30.00"))

    def test_configured_default(self):
        technician = SimpleNamespace(earnings_percentage=None)
        self.assertEqual(technician_earnings(100, technician, default_percentage=40), Decimal("40.00"))

    def test_no_technician_earns_nothing(self):
        self.assertEqual(technician_earnings(100, None), Decimal("0.00"))

    def test_zero_labor_earns_nothing(self):
        technician = SimpleNamespace(earnings_percentage=50)
        self.assertEqual(technician_earnings(0, technician), Decimal("0.00"))

    def test_percentage_out_of_range(self):
        with self.assertRaises(ValidationError):
            earnings_percentage(SimpleNamespace(earnings_percentage=120))
        with self.assertRaises(ValidationError):
            earnings_percentage(SimpleNamespace(earnings_percentage=-1))

    def test_rounding(self):
        technician = SimpleNamespace(earnings_percentage=33)
        self.assertEqual(technician_earnings("10.05", technician), Decimal("3.32"))


if __name__ == "__main__":
    unittest.main()
