"""
Shared fixture for API tests: the app runs against a throwaway SQLite file.
"""
import asyncio
import os
import tempfile
import unittest

from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import autoshop.models  # noqa: F401
from autoshop.database import Base, get_db
from autoshop.main import app

API = "/api/v1"


def _enforce_foreign_keys(dbapi_connection, connection_record):
    # SQLite leaves foreign keys off unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        fd, self.db_path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        self.engine = create_async_engine(f"sqlite+aiosqlite:///{self.db_path}", poolclass=NullPool)
        event.listen(self.engine.sync_engine, "connect", _enforce_foreign_keys)
        self.session_factory = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)
        asyncio.run(self._create_tables())

        async def override_get_db():
            async with self.session_factory() as session:
                yield session

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        asyncio.run(self.engine.dispose())
        os.remove(self.db_path)

    async def _create_tables(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    # Request helpers

    def get(self, path, **kwargs):
        return self.client.get(f"{API}{path}", **kwargs)

    def post(self, path, payload=None, **kwargs):
        return self.client.post(f"{API}{path}", json=payload, **kwargs)

    def put(self, path, payload, **kwargs):
        return self.client.put(f"{API}{path}", json=payload, **kwargs)

    def patch(self, path, payload, **kwargs):
        return self.client.patch(f"{API}{path}", json=payload, **kwargs)

    def delete(self, path, **kwargs):
        return self.client.delete(f"{API}{path}", **kwargs)

    def created(self, path, payload):
        response = self.post(path, payload)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    # Fixtures

    def make_customer(self, name="Ayşe Yılmaz", **fields):
        return self.created("/customers/", {"name": name, "phone": "0532 000 00 00", **fields})

    def make_vehicle(self, customer_id=None, plate_no="34 ABC 123", **fields):
        if customer_id is None:
            customer_id = self.make_customer()["id"]
        payload = {"customer_id": customer_id, "plate_no": plate_no, "brand": "Fiat", "model": "Egea"}
        payload.update(fields)
        return self.created("/vehicles/", payload)

    def make_component(self, name="Oil filter", price=40.0, **fields):
        return self.created("/components/", {"name": name, "price": price, "stock_count": 10, **fields})

    def make_technician(self, name="Mehmet Usta", earnings_percentage=30.0, **fields):
        return self.created(
            "/technicians/", {"name": name, "earnings_percentage": earnings_percentage, **fields}
        )

    def make_record(self, vehicle, labor_cost=0.0, line_items=None, **fields):
        payload = {
            "description": "Periodic maintenance",
            "service_date": "2025-05-01T09:00:00",
            "vehicle_id": vehicle["id"],
            "customer_id": vehicle["customer_id"],
            "labor_cost": labor_cost,
            "line_items": line_items or [],
        }
        payload.update(fields)
        return self.created("/service-records/", payload)["service_record"]

    def make_upcoming(self, vehicle, planned_date="2025-06-02T10:00:00", **fields):
        payload = {
            "vehicle_id": vehicle["id"],
            "planned_date": planned_date,
            "service_type": "Oil change",
        }
        payload.update(fields)
        return self.created("/upcoming-services/", payload)
