"""
Pydantic schemas for service records, their line items and cost breakdowns.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date, datetime, timezone
from typing import List, Optional
from autoshop.models.service import ServiceStatus
from autoshop.models.upcoming_service import UpcomingStatus


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Datetimes are stored as naive UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class LineItemIn(BaseModel):
    """A line item as submitted by the client.

    ``unit_price`` is only sent when the user typed a price; leaving it out
    applies the catalog default. ``reset_price`` restores the default.
    """
    id: Optional[int] = None
    component_id: int
    quantity: int = Field(default=1, ge=1)
    unit_price: Optional[float] = None
    reset_price: bool = False


class LineItemUpdate(BaseModel):
    """Schema for updating a single line item."""
    component_id: Optional[int] = None
    quantity: Optional[int] = Field(default=None, ge=1)
    unit_price: Optional[float] = None
    reset_price: bool = False


class LineItem(BaseModel):
    """Schema for line item responses."""
    id: int
    component_id: int
    quantity: int
    unit_price: float
    cost: float
    is_custom_price: bool

    model_config = ConfigDict(from_attributes=True)


class NextServicePlan(BaseModel):
    """Next visit to schedule when a record is completed."""
    planned_date: Optional[date] = None
    service_type: Optional[str] = None
    next_km: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class ServiceRecordBase(BaseModel):
    """Base service record schema with common fields."""
    description: str = Field(min_length=1)
    service_date: datetime
    status: ServiceStatus = ServiceStatus.PENDING
    vehicle_id: int
    customer_id: int
    technician_id: Optional[int] = None
    company_id: Optional[int] = None
    current_km: Optional[int] = Field(default=None, ge=0)

    check_service_date = field_validator("service_date")(as_naive_utc)


class ServiceRecordCreate(ServiceRecordBase):
    """Schema for creating a service record."""
    labor_cost: float
    line_items: List[LineItemIn] = []
    next_service: Optional[NextServicePlan] = None


class ServiceRecordUpdate(BaseModel):
    """Schema for updating a service record.

    When ``line_items`` is sent it replaces the record's lines: lines with
    an ``id`` are updated, lines without one are added, missing lines are
    removed.
    """
    description: Optional[str] = Field(default=None, min_length=1)
    service_date: Optional[datetime] = None
    status: Optional[ServiceStatus] = None
    vehicle_id: Optional[int] = None
    customer_id: Optional[int] = None
    technician_id: Optional[int] = None
    company_id: Optional[int] = None
    current_km: Optional[int] = Field(default=None, ge=0)
    labor_cost: Optional[float] = None
    line_items: Optional[List[LineItemIn]] = None
    next_service: Optional[NextServicePlan] = None

    check_service_date = field_validator("service_date")(as_naive_utc)


class ServiceRecord(ServiceRecordBase):
    """Schema for service record responses."""
    id: int
    total_cost: float
    parts_cost: float
    labor_cost: float
    technician_earnings: Optional[float] = None
    completed_date: Optional[datetime] = None
    line_items: List[LineItem] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UpcomingServiceRef(BaseModel):
    id: int
    planned_date: datetime
    service_type: str
    status: UpcomingStatus

    model_config = ConfigDict(from_attributes=True)


class ServiceRecordSaved(BaseModel):
    """Service record plus the upcoming service spawned on completion, if any."""
    service_record: ServiceRecord
    next_upcoming_service: Optional[UpcomingServiceRef] = None


class CostLineIn(BaseModel):
    quantity: int = Field(ge=1)
    unit_price: float
    component_id: Optional[int] = None


class CostRequest(BaseModel):
    """Input for a standalone cost calculation."""
    line_items: List[CostLineIn] = []
    labor_cost: float
    technician_id: Optional[int] = None


class CostBreakdown(BaseModel):
    parts_cost: float
    labor_cost: float
    total_cost: float
    technician_earnings: float
