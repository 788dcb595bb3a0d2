"""
Company routes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List

from autoshop.database import get_db
from autoshop.models.company import Company
from autoshop.schemas.company import Company as CompanySchema, CompanyCreate, CompanyUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("/", response_model=List[CompanySchema])
async def get_companies(
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
):
    """
    Get all companies with pagination.
    """
    result = await db.execute(select(Company).order_by(Company.id).offset(skip).limit(limit))
    return result.scalars().all()


@router.get("/{company_id}", response_model=CompanySchema)
async def get_company(
    company_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Get a specific company by ID.
    """
    company = await db.get(Company, company_id)
    if not company:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Company not found"
        )
    return company


@router.post("/", response_model=CompanySchema, status_code=status.HTTP_201_CREATED)
async def create_company(
    company: CompanyCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new company.
    """
    db_company = Company(**company.model_dump())
    db.add(db_company)
    await db.commit()
    await db.refresh(db_company)

    logger.info(f"✅ Company {db_company.id} created")
    return db_company


@router.put("/{company_id}", response_model=CompanySchema)
async def update_company(
    company_id: int,
    company_update: CompanyUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update a company.
    """
    db_company = await db.get(Company, company_id)
    if not db_company:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Company not found"
        )

    for field, value in company_update.model_dump(exclude_unset=True).items():
        if value is None and field == "name":
            continue
        setattr(db_company, field, value)

    await db.commit()
    await db.refresh(db_company)

    return db_company


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_company(
    company_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a company. Customers, vehicles and parts it owned are kept, unassigned.
    """
    db_company = await db.get(Company, company_id)
    if not db_company:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Company not found"
        )

    await db.delete(db_company)
    await db.commit()

    logger.info(f"🗑️ Company {company_id} deleted")
    return None
