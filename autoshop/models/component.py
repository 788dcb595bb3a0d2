"""
Inventory component and price history models for database.
"""
from sqlalchemy import (
    Column, Integer, String, Float, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from autoshop.database import Base
from autoshop.services import reports
import enum


class PriceChangeReason(str, enum.Enum):
    """Why a component's catalog price changed."""
    INFLATION = "inflation"
    MARKET_PRICE = "market_price"
    SUPPLIER_CHANGE = "supplier_change"
    DISCOUNT = "discount"
    EXCHANGE_RATE = "exchange_rate"
    PRICE_ADJUSTMENT = "price_adjustment"
    INITIAL_PRICE = "initial_price"
    OTHER = "other"


class Component(Base):
    """Catalog component (spare part) kept in stock."""

    __tablename__ = "components"
    __table_args__ = (
        UniqueConstraint("company_id", "part_number", name="uq_component_company_part_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    name = Column(String, nullable=False, index=True)
    part_number = Column(String, nullable=True, index=True)
    price = Column(Float, nullable=False)
    stock_count = Column(Integer, default=0, nullable=False)
    reorder_level = Column(Integer, default=5, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    price_history = relationship(
        "PriceHistory",
        back_populates="component",
        order_by="PriceHistory.id",
        cascade="save-update, merge",
        passive_deletes=True,
    )

    @property
    def stock_status(self) -> str:
        return reports.stock_status(self.stock_count or 0, self.reorder_level or 0)


class PriceHistory(Base):
    """Append-only log of catalog price changes."""

    __tablename__ = "price_history"

    id = Column(Integer, primary_key=True, index=True)
    component_id = Column(Integer, ForeignKey("components.id", ondelete="CASCADE"), nullable=False)
    old_price = Column(Float, nullable=False)
    new_price = Column(Float, nullable=False)
    reason = Column(SQLEnum(PriceChangeReason), nullable=True)
    changed_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    component = relationship("Component", back_populates="price_history")
