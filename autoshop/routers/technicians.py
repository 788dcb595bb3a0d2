"""
Technician routes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional

from autoshop.database import get_db
from autoshop.models.company import Company
from autoshop.models.technician import Specialization, Technician
from autoshop.routers.lookups import ensure_exists
from autoshop.schemas.technician import Technician as TechnicianSchema, TechnicianCreate, TechnicianUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/technicians", tags=["technicians"])


async def _load_specializations(db: AsyncSession, specialization_ids: List[int]) -> List[Specialization]:
    if not specialization_ids:
        return []
    wanted = set(specialization_ids)
    result = await db.execute(select(Specialization).where(Specialization.id.in_(wanted)))
    specializations = list(result.scalars().all())
    missing = wanted - {s.id for s in specializations}
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown specialization ids: {sorted(missing)}"
        )
    return specializations


async def _get_technician(db: AsyncSession, technician_id: int) -> Technician:
    result = await db.execute(
        select(Technician)
        .where(Technician.id == technician_id)
        .execution_options(populate_existing=True)
    )
    technician = result.scalar_one_or_none()
    if not technician:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Technician not found"
        )
    return technician


@router.get("/", response_model=List[TechnicianSchema])
async def get_technicians(
    skip: int = 0,
    limit: int = 100,
    active: Optional[bool] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Get all technicians with pagination, optionally only active or inactive ones.
    """
    query = select(Technician).order_by(Technician.name)
    if active is not None:
        query = query.where(Technician.active == active)
    result = await db.execute(query.offset(skip).limit(limit))
    return result.scalars().all()


@router.get("/{technician_id}", response_model=TechnicianSchema)
async def get_technician(
    technician_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Get a specific technician by ID.
    """
    return await _get_technician(db, technician_id)


@router.post("/", response_model=TechnicianSchema, status_code=status.HTTP_201_CREATED)
async def create_technician(
    technician: TechnicianCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new technician.
    """
    await ensure_exists(db, Company, technician.company_id, "Company")

    data = technician.model_dump(exclude={"specialization_ids"})
    db_technician = Technician(**data)
    db_technician.specializations = await _load_specializations(db, technician.specialization_ids)
    db.add(db_technician)
    await db.commit()

    logger.info(f"✅ Technician {db_technician.id} created ({db_technician.earnings_percentage}% of labor)")
    return await _get_technician(db, db_technician.id)


@router.put("/{technician_id}", response_model=TechnicianSchema)
async def update_technician(
    technician_id: int,
    technician_update: TechnicianUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update a technician. Sending ``specialization_ids`` replaces the set.
    """
    db_technician = await _get_technician(db, technician_id)

    update_data = technician_update.model_dump(exclude_unset=True)
    specialization_ids = update_data.pop("specialization_ids", None)
    await ensure_exists(db, Company, update_data.get("company_id"), "Company")
    if specialization_ids is not None:
        db_technician.specializations = await _load_specializations(db, specialization_ids)

    for field, value in update_data.items():
        if field in ("name", "active", "earnings_percentage") and value is None:
            continue
        setattr(db_technician, field, value)

    await db.commit()

    return await _get_technician(db, technician_id)


@router.delete("/{technician_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_technician(
    technician_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a technician. Their service records stay, unassigned.
    """
    db_technician = await _get_technician(db, technician_id)

    await db.delete(db_technician)
    await db.commit()

    return None
