"""
Pydantic schemas for reports.
"""
from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional
from autoshop.schemas.service import ServiceRecord


class DashboardStats(BaseModel):
    companies: int
    customers: int
    vehicles: int
    technicians: int
    active_services: int
    upcoming_services: int
    low_stock_alerts: int


class InventoryReport(BaseModel):
    total_components: int
    out_of_stock: int
    low_stock: int
    in_stock: int
    total_stock_value: float
    reorder: List[dict] = []


class ComponentUsage(BaseModel):
    service_record_id: int
    service_date: Optional[datetime] = None
    quantity: int
    unit_price: float
    cost: float


class ComponentUsageReport(BaseModel):
    component_id: int
    name: str
    total_quantity: int
    total_cost: float
    months: int
    average_quantity_per_month: float
    average_cost_per_month: float
    usage_history: List[ComponentUsage]


class ServiceReportLine(BaseModel):
    line_item_id: int
    component_id: int
    component_name: Optional[str] = None
    quantity: int
    unit_price: float
    cost: float
    is_custom_price: bool
    catalog_price: Optional[float] = None
    price_drift: bool = False


class ServiceReport(BaseModel):
    service_record: ServiceRecord
    lines: List[ServiceReportLine]


class TechnicianReport(BaseModel):
    technician_id: int
    name: str
    earnings_percentage: float
    service_count: int
    total_revenue: float
    total_earnings: float
    unique_customers: int
    unique_vehicles: int
