import unittest

from tests.base import ApiTestCase


class TestSystemEndpoints(ApiTestCase):

    def test_health_check(self):
        """Test health check endpoint"""
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    def test_root(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("version", response.json())


class TestCompanies(ApiTestCase):

    def test_company_crud(self):
        company = self.created("/companies/", {"name": "Oto Servis Ltd.", "phone": "0212 555 00 00"})
        response = self.put(f"/companies/{company['id']}", {"address": "İstanbul"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["address"], "İstanbul")
        self.assertEqual(len(self.get("/companies/").json()), 1)

        self.assertEqual(self.delete(f"/companies/{company['id']}").status_code, 204)
        self.assertEqual(self.get(f"/companies/{company['id']}").status_code, 404)


class TestCustomersAndVehicles(ApiTestCase):

    def test_customer_crud(self):
        """Test customer create, search, update and delete"""
        company = self.created("/companies/", {"name": "Filo A.Ş."})
        customer = self.make_customer(name="Ali Veli", company_id=company["id"])
        self.make_customer(name="Zeynep Kaya")

        response = self.get("/customers/", params={"search": "ali"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([c["name"] for c in response.json()], ["Ali Veli"])

        response = self.put(f"/customers/{customer['id']}", {"phone": "0555 111 22 33"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["phone"], "0555 111 22 33")
        self.assertEqual(response.json()["company_id"], company["id"])

        self.assertEqual(self.delete(f"/customers/{customer['id']}").status_code, 204)
        self.assertEqual(self.get(f"/customers/{customer['id']}").status_code, 404)

    def test_invalid_email_rejected(self):
        response = self.post("/customers/", {"name": "X", "email": "not-an-email"})
        self.assertEqual(response.status_code, 422)

    def test_vehicle_plate_normalized_and_unique(self):
        customer = self.make_customer()
        vehicle = self.make_vehicle(customer["id"], plate_no=" 34  abc 123 ")
        self.assertEqual(vehicle["plate_no"], "34 ABC 123")

        response = self.post(
            "/vehicles/",
            {"customer_id": customer["id"], "plate_no": "34 abc 123", "brand": "Renault", "model": "Clio"},
        )
        self.assertEqual(response.status_code, 400)

        response = self.get(f"/customers/{customer['id']}/vehicles")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 1)

    def test_vehicle_requires_existing_customer(self):
        response = self.post("/vehicles/", {"customer_id": 999, "plate_no": "06 A 1", "brand": "x", "model": "y"})
        self.assertEqual(response.status_code, 400)

    def test_unknown_company_rejected(self):
        self.assertEqual(self.post("/customers/", {"name": "Ali", "company_id": 999}).status_code, 400)
        customer = self.make_customer()
        response = self.put(f"/customers/{customer['id']}", {"company_id": 999})
        self.assertEqual(response.status_code, 400)
        self.assertIsNone(self.get(f"/customers/{customer['id']}").json()["company_id"])

        response = self.post(
            "/vehicles/",
            {"customer_id": customer["id"], "plate_no": "06 A 1", "brand": "x", "model": "y", "company_id": 999},
        )
        self.assertEqual(response.status_code, 400)
        vehicle = self.make_vehicle(customer["id"])
        self.assertEqual(self.put(f"/vehicles/{vehicle['id']}", {"company_id": 999}).status_code, 400)

    def test_null_required_fields_ignored_on_update(self):
        customer = self.make_customer(name="Ali Veli")
        response = self.put(f"/customers/{customer['id']}", {"name": None, "phone": "0555"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Ali Veli")

        vehicle = self.make_vehicle(customer["id"])
        response = self.put(f"/vehicles/{vehicle['id']}", {"plate_no": None, "brand": None, "model": "Linea"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["plate_no"], "34 ABC 123")
        self.assertEqual(response.json()["brand"], "Fiat")
        self.assertEqual(response.json()["model"], "Linea")

        company = self.created("/companies/", {"name": "Filo A.S."})
        response = self.put(f"/companies/{company['id']}", {"name": None})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Filo A.S.")


class TestTechnicians(ApiTestCase):

    def test_specializations(self):
        engine = self.created("/specializations/", {"name": "Engine"})
        brakes = self.created("/specializations/", {"name": "Brakes"})
        self.assertEqual(self.post("/specializations/", {"name": "Engine"}).status_code, 400)

        technician = self.make_technician(specialization_ids=[engine["id"], brakes["id"]])
        self.assertEqual([s["name"] for s in technician["specializations"]], ["Brakes", "Engine"])

        response = self.put(f"/technicians/{technician['id']}", {"specialization_ids": [engine["id"]]})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([s["name"] for s in response.json()["specializations"]], ["Engine"])

    def test_unknown_specialization_rejected(self):
        response = self.post("/technicians/", {"name": "Can", "specialization_ids": [42]})
        self.assertEqual(response.status_code, 400)

    def test_earnings_percentage_bounds(self):
        response = self.post("/technicians/", {"name": "Can", "earnings_percentage": 150})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(self.make_technician()["earnings_percentage"], 30.0)

    def test_null_name_keeps_existing_name(self):
        technician = self.make_technician(name="Mehmet Usta")
        response = self.put(f"/technicians/{technician['id']}", {"name": None, "phone": "0533"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Mehmet Usta")

        specialization = self.created("/specializations/", {"name": "Engine"})
        response = self.put(f"/specializations/{specialization['id']}", {"name": None})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Engine")

    def test_unknown_company_rejected(self):
        self.assertEqual(self.post("/technicians/", {"name": "Can", "company_id": 999}).status_code, 400)
        technician = self.make_technician()
        response = self.put(f"/technicians/{technician['id']}", {"company_id": 999})
        self.assertEqual(response.status_code, 400)
        self.assertIsNone(self.get(f"/technicians/{technician['id']}").json()["company_id"])


class TestComponents(ApiTestCase):

    def test_price_history(self):
        """Test initial price and price changes are logged"""
        component = self.make_component(price=40)
        response = self.put(
            f"/components/{component['id']}", {"price": 45, "price_change_reason": "inflation"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["price"], 45.0)

        # Same price again adds nothing
        self.put(f"/components/{component['id']}", {"price": 45})

        history = self.get(f"/components/{component['id']}/price-history").json()
        self.assertEqual(len(history), 2)
        self.assertEqual(history[0]["reason"], "initial_price")
        self.assertEqual((history[1]["old_price"], history[1]["new_price"]), (40.0, 45.0))
        self.assertEqual(history[1]["reason"], "inflation")

    def test_stock_filter(self):
        self.make_component(name="Bulb", stock_count=0)
        self.make_component(name="Filter", stock_count=3)
        self.make_component(name="Oil", stock_count=50)

        names = lambda stock: [c["name"] for c in self.get("/components/", params={"stock": stock}).json()]
        self.assertEqual(names("out"), ["Bulb"])
        self.assertEqual(names("low"), ["Filter"])
        self.assertEqual(names("in"), ["Oil"])
        self.assertEqual(self.get("/components/", params={"stock": "plenty"}).status_code, 400)

        oil = [c for c in self.get("/components/").json() if c["name"] == "Oil"][0]
        self.assertEqual(oil["stock_status"], "in_stock")

    def test_part_number_unique_per_company(self):
        self.make_component(part_number="OF-1")
        response = self.post("/components/", {"name": "Other", "price": 1, "part_number": "OF-1"})
        self.assertEqual(response.status_code, 400)

    def test_negative_price_rejected(self):
        self.assertEqual(self.post("/components/", {"name": "Bad", "price": -1}).status_code, 422)

    def test_unknown_company_rejected(self):
        response = self.post("/components/", {"name": "Pad", "price": 10, "company_id": 999})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.get("/components/").json(), [])

        component = self.make_component()
        response = self.put(f"/components/{component['id']}", {"company_id": 999, "price": 50})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.get(f"/components/{component['id']}").json()["price"], 40.0)
        self.assertEqual(len(self.get(f"/components/{component['id']}/price-history").json()), 1)

    def test_component_in_use_cannot_be_deleted(self):
        component = self.make_component()
        vehicle = self.make_vehicle()
        self.make_record(vehicle, line_items=[{"component_id": component["id"]}])
        self.assertEqual(self.delete(f"/components/{component['id']}").status_code, 400)

        unused = self.make_component(name="Unused")
        self.assertEqual(self.delete(f"/components/{unused['id']}").status_code, 204)


if __name__ == "__main__":
    unittest.main()
