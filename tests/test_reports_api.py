import unittest

from tests.base import ApiTestCase


class TestReportsApi(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.vehicle = self.make_vehicle()
        self.technician = self.make_technician(earnings_percentage=25)
        self.filter = self.make_component(name="Oil filter", price=40, stock_count=2)
        self.oil = self.make_component(name="Engine oil", price=20, stock_count=100)

    def test_dashboard(self):
        self.make_record(self.vehicle, status="in_progress")
        self.make_record(self.vehicle, status="completed")
        self.make_upcoming(self.vehicle)

        stats = self.get("/reports/dashboard").json()
        self.assertEqual(stats["customers"], 1)
        self.assertEqual(stats["vehicles"], 1)
        self.assertEqual(stats["technicians"], 1)
        self.assertEqual(stats["active_services"], 1)
        self.assertEqual(stats["upcoming_services"], 1)
        self.assertEqual(stats["low_stock_alerts"], 1)

    def test_inventory(self):
        report = self.get("/reports/inventory").json()
        self.assertEqual(report["total_components"], 2)
        self.assertEqual(report["low_stock"], 1)
        self.assertEqual(report["in_stock"], 1)
        self.assertEqual(report["total_stock_value"], 2080.0)
        self.assertEqual([c["name"] for c in report["reorder"]], ["Oil filter"])

    def test_component_usage(self):
        self.make_record(
            self.vehicle,
            service_date="2025-01-10T10:00:00",
            line_items=[{"component_id": self.oil["id"], "quantity": 4}],
        )
        self.make_record(
            self.vehicle,
            service_date="2025-02-20T10:00:00",
            line_items=[{"component_id": self.oil["id"], "quantity": 2, "unit_price": 25}],
        )

        report = self.get(f"/reports/components/{self.oil['id']}/usage").json()
        self.assertEqual(report["total_quantity"], 6)
        self.assertEqual(report["total_cost"], 130.0)
        self.assertEqual(report["months"], 2)
        self.assertEqual(report["average_quantity_per_month"], 3.0)
        self.assertEqual(len(report["usage_history"]), 2)

        self.assertEqual(self.get("/reports/components/999/usage").status_code, 404)

    def test_technician_report(self):
        self.make_record(self.vehicle, labor_cost=200, technician_id=self.technician["id"])
        self.make_record(
            self.vehicle,
            labor_cost=100,
            technician_id=self.technician["id"],
            line_items=[{"component_id": self.filter["id"]}],
        )

        report = self.get(f"/reports/technicians/{self.technician['id']}").json()
        self.assertEqual(report["service_count"], 2)
        self.assertEqual(report["total_revenue"], 340.0)
        self.assertEqual(report["total_earnings"], 75.0)
        self.assertEqual(report["unique_vehicles"], 1)


if __name__ == "__main__":
    unittest.main()
