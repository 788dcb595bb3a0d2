"""
Pydantic schemas for request/response validation.
"""
from autoshop.schemas.company import CompanyBase, CompanyCreate, CompanyUpdate, Company
from autoshop.schemas.customer import CustomerBase, CustomerCreate, CustomerUpdate, Customer
from autoshop.schemas.vehicle import VehicleBase, VehicleCreate, VehicleUpdate, Vehicle
from autoshop.schemas.technician import (
    SpecializationCreate, SpecializationUpdate, Specialization,
    TechnicianBase, TechnicianCreate, TechnicianUpdate, Technician,
)
from autoshop.schemas.component import ComponentBase, ComponentCreate, ComponentUpdate, Component, PriceHistory
from autoshop.schemas.service import (
    ServiceRecordBase, ServiceRecordCreate, ServiceRecordUpdate, ServiceRecord,
    LineItemIn, LineItem, CostRequest, CostBreakdown,
)
from autoshop.schemas.upcoming_service import (
    UpcomingServiceBase, UpcomingServiceCreate, UpcomingServiceUpdate, UpcomingService,
    StatusChange, RescheduleRequest,
)

__all__ = [
    "CompanyBase", "CompanyCreate", "CompanyUpdate", "Company",
    "CustomerBase", "CustomerCreate", "CustomerUpdate", "Customer",
    "VehicleBase", "VehicleCreate", "VehicleUpdate", "Vehicle",
    "SpecializationCreate", "SpecializationUpdate", "Specialization",
    "TechnicianBase", "TechnicianCreate", "TechnicianUpdate", "Technician",
    "ComponentBase", "ComponentCreate", "ComponentUpdate", "Component", "PriceHistory",
    "ServiceRecordBase", "ServiceRecordCreate", "ServiceRecordUpdate", "ServiceRecord",
    "LineItemIn", "LineItem", "CostRequest", "CostBreakdown",
    "UpcomingServiceBase", "UpcomingServiceCreate", "UpcomingServiceUpdate", "UpcomingService",
    "StatusChange", "RescheduleRequest",
]
