"""
SQLAlchemy database models.
"""
from autoshop.models.company import Company
from autoshop.models.customer import Customer
from autoshop.models.vehicle import Vehicle
from autoshop.models.technician import Specialization, Technician, technician_specializations
from autoshop.models.component import Component, PriceChangeReason, PriceHistory
from autoshop.models.service import ServiceComponent, ServiceRecord, ServiceStatus
from autoshop.models.upcoming_service import UpcomingService, UpcomingStatus

__all__ = [
    "Company", "Customer", "Vehicle",
    "Specialization", "Technician", "technician_specializations",
    "Component", "PriceChangeReason", "PriceHistory",
    "ServiceComponent", "ServiceRecord", "ServiceStatus",
    "UpcomingService", "UpcomingStatus",
]
