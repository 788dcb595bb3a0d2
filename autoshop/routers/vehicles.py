"""
Vehicle routes.
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
from autoshop.schemas.vehicle import Vehicle as VehicleSchema, VehicleCreate, VehicleUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


async def _ensure_customer(db: AsyncSession, customer_id: int) -> None:
    result = await db.execute(select(Customer.id).where(Customer.id == customer_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Customer does not exist"
        )


async def _ensure_plate_free(db: AsyncSession, plate_no: str, vehicle_id: Optional[int] = None) -> None:
    query = select(Vehicle.id).where(Vehicle.plate_no == plate_no)
    if vehicle_id is not None:
        query = query.where(Vehicle.id != vehicle_id)
    result = await db.execute(query)
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="License plate already registered"
        )


@router.get("/", response_model=List[VehicleSchema])
async def get_vehicles(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    customer_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Get all vehicles with pagination, optionally filtered by owner or plate/brand/model.
    """
    query = select(Vehicle).order_by(Vehicle.plate_no)
    if customer_id is not None:
        query = query.where(Vehicle.customer_id == customer_id)
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(Vehicle.plate_no.ilike(pattern), Vehicle.brand.ilike(pattern), Vehicle.model.ilike(pattern))
        )
    result = await db.execute(query.offset(skip).limit(limit))
    vehicles = result.scalars().all()
    return vehicles


@router.get("/{vehicle_id}", response_model=VehicleSchema)
async def get_vehicle(
    vehicle_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Get a specific vehicle by ID.
    """
    result = await db.execute(select(Vehicle).where(Vehicle.id == vehicle_id))
    vehicle = result.scalar_one_or_none()

    if not vehicle:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vehicle not found"
        )

    return vehicle


@router.post("/", response_model=VehicleSchema, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle: VehicleCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new vehicle.
    """
    await _ensure_customer(db, vehicle.customer_id)
    await ensure_exists(db, Company, vehicle.company_id, "Company")
    await _ensure_plate_free(db, vehicle.plate_no)

    db_vehicle = Vehicle(**vehicle.model_dump())
    db.add(db_vehicle)
    await db.commit()
    await db.refresh(db_vehicle)

    logger.info(f"✅ Vehicle {db_vehicle.plate_no} registered for customer {db_vehicle.customer_id}")
    return db_vehicle


@router.put("/{vehicle_id}", response_model=VehicleSchema)
async def update_vehicle(
    vehicle_id: int,
    vehicle_update: VehicleUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update a vehicle.
    """
    result = await db.execute(select(Vehicle).where(Vehicle.id == vehicle_id))
    db_vehicle = result.scalar_one_or_none()

    if not db_vehicle:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vehicle not found"
        )

    # Update only provided fields
    update_data = vehicle_update.model_dump(exclude_unset=True)
    if update_data.get("customer_id") is not None:
        await _ensure_customer(db, update_data["customer_id"])
    await ensure_exists(db, Company, update_data.get("company_id"), "Company")
    if update_data.get("plate_no"):
        await _ensure_plate_free(db, update_data["plate_no"], vehicle_id)

    for field, value in update_data.items():
        if value is None and field in ("customer_id", "plate_no", "brand", "model"):
            continue
        setattr(db_vehicle, field, value)

    await db.commit()
    await db.refresh(db_vehicle)

    return db_vehicle


@router.delete("/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vehicle(
    vehicle_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a vehicle.
    """
    result = await db.execute(select(Vehicle).where(Vehicle.id == vehicle_id))
    db_vehicle = result.scalar_one_or_none()

    if not db_vehicle:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vehicle not found"
        )

    await db.delete(db_vehicle)
    await db.commit()

    logger.info(f"🗑️ Vehicle {vehicle_id} deleted")
    return None
