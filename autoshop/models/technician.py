"""
Technician and specialization models for database.
"""
from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from autoshop.database import Base


technician_specializations = Table(
    "technician_specializations",
    Base.metadata,
    Column("technician_id", Integer, ForeignKey("technicians.id", ondelete="CASCADE"), primary_key=True),
    Column("specialization_id", Integer, ForeignKey("specializations.id", ondelete="CASCADE"), primary_key=True),
)


class Specialization(Base):
    """Specialization catalog entry (brakes, electrics, ...)."""

    __tablename__ = "specializations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Technician(Base):
    """Technician database model."""

    __tablename__ = "technicians"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    name = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=True)
    hire_date = Column(DateTime, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    earnings_percentage = Column(Float, default=30.0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    specializations = relationship(
        "Specialization",
        secondary=technician_specializations,
        lazy="selectin",
        order_by="Specialization.name",
    )
    service_records = relationship("ServiceRecord", back_populates="technician", passive_deletes=True)
