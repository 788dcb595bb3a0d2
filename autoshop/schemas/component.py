"""
Pydantic schemas for inventory components and their price history.
"""
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional
from autoshop.models.component import PriceChangeReason


class ComponentBase(BaseModel):
    """Base component schema with common fields."""
    name: str = Field(min_length=1)
    part_number: Optional[str] = None
    price: float = Field(ge=0)
    stock_count: int = Field(default=0, ge=0)
    reorder_level: int = Field(default=5, ge=0)
    company_id: Optional[int] = None


class ComponentCreate(ComponentBase):
    """Schema for creating a component."""
    pass


class ComponentUpdate(BaseModel):
    """Schema for updating a component."""
    name: Optional[str] = Field(default=None, min_length=1)
    part_number: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    stock_count: Optional[int] = Field(default=None, ge=0)
    reorder_level: Optional[int] = Field(default=None, ge=0)
    company_id: Optional[int] = None
    price_change_reason: Optional[PriceChangeReason] = None


class Component(ComponentBase):
    """Schema for component responses."""
    id: int
    stock_status: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PriceHistory(BaseModel):
    """Schema for price history responses."""
    id: int
    component_id: int
    old_price: float
    new_price: float
    reason: Optional[PriceChangeReason] = None
    changed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
