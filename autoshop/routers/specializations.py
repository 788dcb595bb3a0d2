"""
Specialization catalog routes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional

from autoshop.database import get_db
from autoshop.models.technician import Specialization
from autoshop.schemas.technician import (
    Specialization as SpecializationSchema, SpecializationCreate, SpecializationUpdate
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/specializations", tags=["specializations"])


async def _ensure_name_free(db: AsyncSession, name: str, specialization_id: Optional[int] = None) -> None:
    query = select(Specialization.id).where(Specialization.name == name)
    if specialization_id is not None:
        query = query.where(Specialization.id != specialization_id)
    result = await db.execute(query)
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Specialization already exists"
        )


@router.get("/", response_model=List[SpecializationSchema])
async def get_specializations(db: AsyncSession = Depends(get_db)):
    """
    Get all specializations ordered by name.
    """
    result = await db.execute(select(Specialization).order_by(Specialization.name))
    return result.scalars().all()


@router.post("/", response_model=SpecializationSchema, status_code=status.HTTP_201_CREATED)
async def create_specialization(
    specialization: SpecializationCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new specialization.
    """
    await _ensure_name_free(db, specialization.name)

    db_specialization = Specialization(**specialization.model_dump())
    db.add(db_specialization)
    await db.commit()
    await db.refresh(db_specialization)

    return db_specialization


@router.put("/{specialization_id}", response_model=SpecializationSchema)
async def update_specialization(
    specialization_id: int,
    specialization_update: SpecializationUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update a specialization.
    """
    db_specialization = await db.get(Specialization, specialization_id)
    if not db_specialization:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Specialization not found"
        )

    update_data = specialization_update.model_dump(exclude_unset=True)
    if update_data.get("name"):
        await _ensure_name_free(db, update_data["name"], specialization_id)
    for field, value in update_data.items():
        if value is None and field == "name":
            continue
        setattr(db_specialization, field, value)

    await db.commit()
    await db.refresh(db_specialization)

    return db_specialization


@router.delete("/{specialization_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_specialization(
    specialization_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a specialization. Technicians simply lose it.
    """
    db_specialization = await db.get(Specialization, specialization_id)
    if not db_specialization:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Specialization not found"
        )

    await db.delete(db_specialization)
    await db.commit()

    return None
