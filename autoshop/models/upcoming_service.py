"""
Upcoming (scheduled) service model for database.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from autoshop.database import Base
import enum


class UpcomingStatus(str, enum.Enum):
    """Upcoming service status enumeration."""
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    CUSTOMER_ARRIVED = "customer_arrived"
    NO_SHOW = "no_show"


class UpcomingService(Base):
    """A planned future visit for a vehicle."""

    __tablename__ = "upcoming_services"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    service_record_id = Column(
        Integer, ForeignKey("service_records.id", ondelete="SET NULL"), nullable=True
    )
    planned_date = Column(DateTime, nullable=False, index=True)
    duration = Column(Integer, default=60, nullable=False)
    service_type = Column(String, nullable=False)
    next_km = Column(Integer, nullable=True)
    notes = Column(String, nullable=True)
    status = Column(SQLEnum(UpcomingStatus), default=UpcomingStatus.SCHEDULED, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    vehicle = relationship("Vehicle", back_populates="upcoming_services", lazy="selectin")
