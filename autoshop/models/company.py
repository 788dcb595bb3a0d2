"""
Company model for database.
"""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from autoshop.database import Base


class Company(Base):
    """Company (shop) database model."""

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
