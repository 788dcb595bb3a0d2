"""
Service record and service line item models for database.
"""
from sqlalchemy import Boolean, Column, Integer, String, Float, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from autoshop.database import Base
import enum


class ServiceStatus(str, enum.Enum):
    """Service status enumeration."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ServiceRecord(Base):
    """Service record database model."""

    __tablename__ = "service_records"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False)
    technician_id = Column(Integer, ForeignKey("technicians.id", ondelete="SET NULL"), nullable=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    description = Column(String, nullable=False)
    status = Column(SQLEnum(ServiceStatus), default=ServiceStatus.PENDING, nullable=False)
    total_cost = Column(Float, default=0.0, nullable=False)
    # NULL on rows that only stored a combined total; labor is derived for those
    labor_cost = Column(Float, nullable=True)
    technician_earnings = Column(Float, nullable=True)
    current_km = Column(Integer, nullable=True)
    service_date = Column(DateTime, nullable=False)
    completed_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    vehicle = relationship("Vehicle", back_populates="service_records")
    customer = relationship("Customer")
    technician = relationship("Technician", back_populates="service_records")
    line_items = relationship(
        "ServiceComponent",
        back_populates="service_record",
        cascade="all, delete-orphan",
        order_by="ServiceComponent.id",
        lazy="selectin",
    )


class ServiceComponent(Base):
    """A component used on a service record, priced at the time of use."""

    __tablename__ = "service_components"

    id = Column(Integer, primary_key=True, index=True)
    service_record_id = Column(
        Integer, ForeignKey("service_records.id", ondelete="CASCADE"), nullable=False
    )
    component_id = Column(Integer, ForeignKey("components.id", ondelete="RESTRICT"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Float, nullable=False)
    cost = Column(Float, nullable=False)
    is_custom_price = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    service_record = relationship("ServiceRecord", back_populates="line_items")
    component = relationship("Component", lazy="selectin")
