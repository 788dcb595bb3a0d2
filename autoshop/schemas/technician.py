"""
Pydantic schemas for Technician and Specialization.
"""
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List, Optional


class SpecializationBase(BaseModel):
    """Base specialization schema with common fields."""
    name: str = Field(min_length=1)
    description: Optional[str] = None


class SpecializationCreate(SpecializationBase):
    """Schema for creating a specialization."""
    pass


class SpecializationUpdate(BaseModel):
    """Schema for updating a specialization."""
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None


class Specialization(SpecializationBase):
    """Schema for specialization responses."""
    id: int

    model_config = ConfigDict(from_attributes=True)


class TechnicianBase(BaseModel):
    """Base technician schema with common fields."""
    name: str = Field(min_length=1)
    phone: Optional[str] = None
    hire_date: Optional[datetime] = None
    active: bool = True
    earnings_percentage: float = Field(default=30.0, ge=0, le=100)
    company_id: Optional[int] = None


class TechnicianCreate(TechnicianBase):
    """Schema for creating a technician."""
    specialization_ids: List[int] = []


class TechnicianUpdate(BaseModel):
    """Schema for updating a technician."""
    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    hire_date: Optional[datetime] = None
    active: Optional[bool] = None
    earnings_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    company_id: Optional[int] = None
    specialization_ids: Optional[List[int]] = None


class Technician(TechnicianBase):
    """Schema for technician responses."""
    id: int
    specializations: List[Specialization] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
