"""
Customer routes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from typing import List, Optional

from autoshop.database import get_db
from autoshop.models.company import Company
from autoshop.models.customer import Customer
from autoshop.models.vehicle import Vehicle
from autoshop.routers.lookups import ensure_exists
from autoshop.schemas.customer import Customer as CustomerSchema, CustomerCreate, CustomerUpdate
from autoshop.schemas.vehicle import Vehicle as VehicleSchema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("/", response_model=List[CustomerSchema])
async def get_customers(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Get all customers with pagination and optional name/phone/email search.
    """
    query = select(Customer).order_by(Customer.name)
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(Customer.name.ilike(pattern), Customer.phone.ilike(pattern), Customer.email.ilike(pattern))
        )
    result = await db.execute(query.offset(skip).limit(limit))
    customers = result.scalars().all()
    return customers


@router.get("/{customer_id}", response_model=CustomerSchema)
async def get_customer(
    customer_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Get a specific customer by ID.
    """
    result = await db.execute(select(Customer).where(Customer.id == customer_id))
    customer = result.scalar_one_or_none()

    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found"
        )

    return customer


@router.get("/{customer_id}/vehicles", response_model=List[VehicleSchema])
async def get_customer_vehicles(
    customer_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Get the vehicles owned by a customer.
    """
    result = await db.execute(select(Customer.id).where(Customer.id == customer_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found"
        )

    result = await db.execute(
        select(Vehicle).where(Vehicle.customer_id == customer_id).order_by(Vehicle.plate_no)
    )
    return result.scalars().all()


@router.post("/", response_model=CustomerSchema, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer: CustomerCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new customer.
    """
    await ensure_exists(db, Company, customer.company_id, "Company")

    db_customer = Customer(**customer.model_dump())
    db.add(db_customer)
    await db.commit()
    await db.refresh(db_customer)

    logger.info(f"✅ Customer {db_customer.id} created")
    return db_customer


@router.put("/{customer_id}", response_model=CustomerSchema)
async def update_customer(
    customer_id: int,
    customer_update: CustomerUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update a customer.
    """
    result = await db.execute(select(Customer).where(Customer.id == customer_id))
    db_customer = result.scalar_one_or_none()

    if not db_customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found"
        )

    # Update only provided fields
    update_data = customer_update.model_dump(exclude_unset=True)
    await ensure_exists(db, Company, update_data.get("company_id"), "Company")

    for field, value in update_data.items():
        if value is None and field == "name":
            continue
        setattr(db_customer, field, value)

    await db.commit()
    await db.refresh(db_customer)

    return db_customer


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a customer.
    """
    result = await db.execute(select(Customer).where(Customer.id == customer_id))
    db_customer = result.scalar_one_or_none()

    if not db_customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found"
        )

    await db.delete(db_customer)
    await db.commit()

    logger.info(f"🗑️ Customer {customer_id} deleted")
    return None
