"""
Pydantic schemas for UpcomingService.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date, datetime
from typing import List, Optional
from autoshop.models.upcoming_service import UpcomingStatus
from autoshop.schemas.service import ServiceRecord, as_naive_utc
from autoshop.schemas.vehicle import VehicleSummary


class UpcomingServiceBase(BaseModel):
    """Base upcoming service schema with common fields."""
    vehicle_id: int
    company_id: Optional[int] = None
    planned_date: datetime
    duration: Optional[int] = Field(default=None, ge=1)
    service_type: str = Field(min_length=1)
    next_km: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None

    check_planned_date = field_validator("planned_date")(as_naive_utc)


class UpcomingServiceCreate(UpcomingServiceBase):
    """Schema for creating an upcoming service. New services start scheduled."""
    pass


class UpcomingServiceUpdate(BaseModel):
    """Schema for editing an upcoming service. Status changes go through PATCH."""
    vehicle_id: Optional[int] = None
    planned_date: Optional[datetime] = None
    duration: Optional[int] = Field(default=None, ge=1)
    service_type: Optional[str] = Field(default=None, min_length=1)
    next_km: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None

    check_planned_date = field_validator("planned_date")(as_naive_utc)


class StatusChange(BaseModel):
    """Status transition request.

    ``from_status`` is optional; when given it must match the stored status.
    """
    status: UpcomingStatus
    from_status: Optional[UpcomingStatus] = None


class RescheduleRequest(BaseModel):
    """New slot for a cancelled or missed service."""
    planned_date: datetime
    duration: Optional[int] = Field(default=None, ge=1)
    service_type: Optional[str] = Field(default=None, min_length=1)
    notes: Optional[str] = None

    check_planned_date = field_validator("planned_date")(as_naive_utc)


class UpcomingService(BaseModel):
    """Schema for upcoming service responses."""
    id: int
    vehicle_id: int
    company_id: Optional[int] = None
    service_record_id: Optional[int] = None
    planned_date: datetime
    duration: int
    service_type: str
    next_km: Optional[int] = None
    notes: Optional[str] = None
    status: UpcomingStatus
    vehicle: Optional[VehicleSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class StatusChangeResult(BaseModel):
    """Result of a status transition; ``service_record`` is set on arrival."""
    upcoming_service: UpcomingService
    service_record: Optional[ServiceRecord] = None


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_count: int
    has_next: bool
    has_prev: bool


class UpcomingServicePage(BaseModel):
    data: List[UpcomingService]
    pagination: Pagination


class PlannerDay(BaseModel):
    day: date
    services: List[UpcomingService]


class WeeklyPlan(BaseModel):
    week_start: date
    week_end: date
    days: List[PlannerDay]
