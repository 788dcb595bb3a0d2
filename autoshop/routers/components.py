"""
Inventory component routes, including the append-only price history.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from typing import List, Optional

from autoshop.database import get_db
from autoshop.models.company import Company
from autoshop.models.component import Component, PriceChangeReason, PriceHistory
from autoshop.models.service import ServiceComponent
from autoshop.routers.lookups import ensure_exists
from autoshop.schemas.component import (
    Component as ComponentSchema, ComponentCreate, ComponentUpdate, PriceHistory as PriceHistorySchema
)
from autoshop.services.money import to_money

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/components", tags=["components"])

STOCK_FILTERS = ("low", "out", "in")


async def _get_component(db: AsyncSession, component_id: int) -> Component:
    component = await db.get(Component, component_id)
    if not component:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Component not found"
        )
    return component


async def _ensure_part_number_free(
    db: AsyncSession, company_id: Optional[int], part_number: str, component_id: Optional[int] = None
) -> None:
    same_company = (
        Component.company_id == company_id if company_id is not None else Component.company_id.is_(None)
    )
    query = select(Component.id).where(Component.part_number == part_number, same_company)
    if component_id is not None:
        query = query.where(Component.id != component_id)
    result = await db.execute(query)
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Part number already exists for this company"
        )


@router.get("/", response_model=List[ComponentSchema])
async def get_components(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    stock: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Get all components. ``stock`` filters by ``low`` (in stock but at or
    below reorder level), ``out`` (none left) or ``in`` (above reorder level).
    """
    query = select(Component).order_by(Component.name)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Component.name.ilike(pattern), Component.part_number.ilike(pattern)))
    if stock is not None:
        if stock not in STOCK_FILTERS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"stock must be one of {', '.join(STOCK_FILTERS)}"
            )
        if stock == "low":
            query = query.where(Component.stock_count > 0, Component.stock_count <= Component.reorder_level)
        elif stock == "out":
            query = query.where(Component.stock_count <= 0)
        else:
            query = query.where(Component.stock_count > Component.reorder_level)

    result = await db.execute(query.offset(skip).limit(limit))
    return result.scalars().all()


@router.get("/{component_id}", response_model=ComponentSchema)
async def get_component(
    component_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Get a specific component by ID.
    """
    return await _get_component(db, component_id)


@router.get("/{component_id}/price-history", response_model=List[PriceHistorySchema])
async def get_price_history(
    component_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Price changes for a component, oldest first.
    """
    await _get_component(db, component_id)
    result = await db.execute(
        select(PriceHistory).where(PriceHistory.component_id == component_id).order_by(PriceHistory.id)
    )
    return result.scalars().all()


@router.post("/", response_model=ComponentSchema, status_code=status.HTTP_201_CREATED)
async def create_component(
    component: ComponentCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new component and record its initial price.
    """
    await ensure_exists(db, Company, component.company_id, "Company")
    if component.part_number:
        await _ensure_part_number_free(db, component.company_id, component.part_number)

    data = component.model_dump()
    data["price"] = float(to_money(data["price"]))
    db_component = Component(**data)
    db.add(db_component)
    await db.flush()

    db.add(PriceHistory(
        component_id=db_component.id,
        old_price=0.0,
        new_price=db_component.price,
        reason=PriceChangeReason.INITIAL_PRICE,
    ))
    await db.commit()
    await db.refresh(db_component)

    logger.info(f"✅ Component {db_component.id} '{db_component.name}' created at {db_component.price}")
    return db_component


@router.put("/{component_id}", response_model=ComponentSchema)
async def update_component(
    component_id: int,
    component_update: ComponentUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update a component. A price change appends a price history entry;
    service lines already priced keep their stored price.
    """
    db_component = await _get_component(db, component_id)

    update_data = component_update.model_dump(exclude_unset=True)
    reason = update_data.pop("price_change_reason", None)
    await ensure_exists(db, Company, update_data.get("company_id"), "Company")

    part_number = update_data.get("part_number", db_component.part_number)
    company_id = update_data.get("company_id", db_component.company_id)
    if part_number and ("part_number" in update_data or "company_id" in update_data):
        await _ensure_part_number_free(db, company_id, part_number, component_id)

    new_price = update_data.pop("price", None)
    if new_price is not None:
        new_price = to_money(new_price)
        old_price = to_money(db_component.price)
        if new_price != old_price:
            db.add(PriceHistory(
                component_id=component_id,
                old_price=float(old_price),
                new_price=float(new_price),
                reason=reason,
            ))
            db_component.price = float(new_price)
            logger.info(
                f"💲 Component {component_id} price {old_price} → {new_price}"
                f" ({reason.value if reason else 'no reason'})"
            )

    for field, value in update_data.items():
        if value is None and field in ("name", "stock_count", "reorder_level"):
            continue
        setattr(db_component, field, value)

    await db.commit()
    await db.refresh(db_component)

    return db_component


@router.delete("/{component_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_component(
    component_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a component that no service record uses.
    """
    db_component = await _get_component(db, component_id)

    result = await db.execute(
        select(ServiceComponent.id).where(ServiceComponent.component_id == component_id).limit(1)
    )
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Component is used by service records"
        )

    await db.delete(db_component)
    await db.commit()

    return None
