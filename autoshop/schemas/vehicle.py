"""
Pydantic schemas for Vehicle.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional


def normalize_plate(value: Optional[str]) -> Optional[str]:
    """Collapse whitespace and upper-case a plate number."""
    if value is None:
        return value
    plate = " ".join(value.split()).upper()
    if not plate:
        raise ValueError("Plate number is required")
    return plate


class VehicleBase(BaseModel):
    """Base vehicle schema with common fields."""
    customer_id: int
    plate_no: str
    brand: str
    model: str
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    vin: Optional[str] = None
    company_id: Optional[int] = None

    check_plate_no = field_validator("plate_no")(normalize_plate)


class VehicleCreate(VehicleBase):
    """Schema for creating a vehicle."""
    pass


class VehicleUpdate(BaseModel):
    """Schema for updating a vehicle."""
    customer_id: Optional[int] = None
    plate_no: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    vin: Optional[str] = None
    company_id: Optional[int] = None

    check_plate_no = field_validator("plate_no")(normalize_plate)


class VehicleSummary(BaseModel):
    """Compact vehicle info embedded in other responses."""
    id: int
    plate_no: str
    brand: str
    model: str
    customer_id: int

    model_config = ConfigDict(from_attributes=True)


class Vehicle(VehicleBase):
    """Schema for vehicle responses."""
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
