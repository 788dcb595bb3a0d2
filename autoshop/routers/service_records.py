"""
Service record routes.

Totals, labor cost and technician earnings are always computed here from
the submitted line items; clients never send a total.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional
from datetime import datetime

from autoshop.config import get_settings
from autoshop.database import get_db
from autoshop.models.company import Company
from autoshop.models.component import Component
from autoshop.models.customer import Customer
from autoshop.models.service import ServiceComponent, ServiceRecord, ServiceStatus
from autoshop.models.technician import Technician
from autoshop.models.upcoming_service import UpcomingService, UpcomingStatus
from autoshop.models.vehicle import Vehicle
from autoshop.routers.lookups import ensure_exists
from autoshop.schemas.service import (
    CostBreakdown,
    CostRequest,
    LineItem as LineItemSchema,
    LineItemIn,
    LineItemUpdate,
    ServiceRecord as ServiceRecordSchema,
    ServiceRecordCreate,
    ServiceRecordSaved,
    ServiceRecordUpdate,
    UpcomingServiceRef,
)
from autoshop.services import costs, pricing, scheduling
from autoshop.services.pricing import CatalogEntry

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(prefix="/service-records", tags=["service-records"])


def record_response(record: ServiceRecord) -> ServiceRecordSchema:
    """Serialize a record, deriving labor for rows that never stored it."""
    lines = list(record.line_items)
    return ServiceRecordSchema(
        id=record.id,
        description=record.description,
        service_date=record.service_date,
        status=record.status,
        vehicle_id=record.vehicle_id,
        customer_id=record.customer_id,
        technician_id=record.technician_id,
        company_id=record.company_id,
        current_km=record.current_km,
        total_cost=record.total_cost,
        parts_cost=float(costs.parts_cost(lines)),
        labor_cost=float(costs.effective_labor_cost(record.labor_cost, record.total_cost, lines)),
        technician_earnings=record.technician_earnings,
        completed_date=record.completed_date,
        line_items=[LineItemSchema.model_validate(line) for line in lines],
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


async def get_record_or_404(db: AsyncSession, record_id: int) -> ServiceRecord:
    result = await db.execute(
        select(ServiceRecord)
        .where(ServiceRecord.id == record_id)
        .execution_options(populate_existing=True)
    )
    record = result.scalar_one_or_none()
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service record not found"
        )
    return record


async def _get_catalog_component(db: AsyncSession, component_id: int) -> Component:
    component = await db.get(Component, component_id)
    if not component:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Component {component_id} does not exist"
        )
    return component


async def _get_technician(db: AsyncSession, technician_id: Optional[int]) -> Optional[Technician]:
    if technician_id is None:
        return None
    technician = await db.get(Technician, technician_id)
    if not technician:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Technician does not exist"
        )
    return technician


def _snapshot(line: ServiceComponent) -> pricing.LineItem:
    return pricing.LineItem(
        id=line.id,
        component_id=line.component_id,
        quantity=line.quantity,
        unit_price=costs.to_money(line.unit_price),
        is_custom_price=bool(line.is_custom_price),
    )


def _store(line: ServiceComponent, resolved: pricing.LineItem) -> None:
    line.component_id = resolved.component_id
    line.quantity = resolved.quantity
    line.unit_price = float(resolved.unit_price)
    line.cost = float(costs.line_cost(resolved.quantity, resolved.unit_price))
    line.is_custom_price = resolved.is_custom_price


async def _add_line(db: AsyncSession, record: ServiceRecord, item) -> ServiceComponent:
    component = await _get_catalog_component(db, item.component_id)
    resolved = pricing.apply_line_item_change(
        None, CatalogEntry.from_component(component), item.quantity, item.unit_price, item.reset_price
    )
    line = ServiceComponent(component=component)
    _store(line, resolved)
    record.line_items.append(line)
    return line


async def _change_line(db: AsyncSession, line: ServiceComponent, component_id, quantity, unit_price, reset) -> None:
    component = await _get_catalog_component(db, component_id)
    resolved = pricing.apply_line_item_change(
        _snapshot(line), CatalogEntry.from_component(component), quantity, unit_price, reset
    )
    if resolved.component_id != line.component_id:
        line.component = component
    _store(line, resolved)


async def _replace_line_items(db: AsyncSession, record: ServiceRecord, items: List[LineItemIn]) -> None:
    """Make the record's lines match ``items``: update by id, add new, drop the rest."""
    existing = {line.id: line for line in record.line_items}
    kept = set()
    for item in items:
        if item.id is None:
            await _add_line(db, record, item)
            continue
        line = existing.get(item.id)
        if line is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Line item {item.id} does not belong to this service record"
            )
        await _change_line(db, line, item.component_id, item.quantity, item.unit_price, item.reset_price)
        kept.add(item.id)

    for line_id, line in existing.items():
        if line_id not in kept:
            record.line_items.remove(line)


async def _recalculate(db: AsyncSession, record: ServiceRecord, labor_cost) -> costs.CostBreakdown:
    technician = await _get_technician(db, record.technician_id)
    breakdown = costs.compute_breakdown(
        record.line_items,
        labor_cost,
        technician,
        default_percentage=settings.default_earnings_percentage,
    )
    record.labor_cost = float(breakdown.labor_cost)
    record.total_cost = float(breakdown.total_cost)
    record.technician_earnings = float(breakdown.technician_earnings) if technician else None
    return breakdown


def build_next_upcoming(record: ServiceRecord, plan: scheduling.NextServicePlan) -> UpcomingService:
    return UpcomingService(
        vehicle_id=record.vehicle_id,
        company_id=record.company_id,
        planned_date=plan.planned_date,
        duration=settings.default_service_duration,
        service_type=plan.service_type,
        next_km=plan.next_km,
        notes=plan.notes,
        status=UpcomingStatus.SCHEDULED,
    )


async def _commit(db: AsyncSession, action: str) -> None:
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"❌ Failed to {action}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action}"
        )


async def _saved(db: AsyncSession, record_id: int, upcoming: Optional[UpcomingService]) -> ServiceRecordSaved:
    record = await get_record_or_404(db, record_id)
    next_ref = None
    if upcoming is not None:
        await db.refresh(upcoming)
        next_ref = UpcomingServiceRef.model_validate(upcoming)
    return ServiceRecordSaved(service_record=record_response(record), next_upcoming_service=next_ref)


@router.get("/", response_model=List[ServiceRecordSchema])
async def get_service_records(
    skip: int = 0,
    limit: int = 100,
    status_filter: Optional[ServiceStatus] = Query(None, alias="status"),
    vehicle_id: Optional[int] = None,
    customer_id: Optional[int] = None,
    technician_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Get service records, newest first, with optional filters.
    """
    query = select(ServiceRecord).order_by(ServiceRecord.service_date.desc(), ServiceRecord.id.desc())

    if status_filter:
        query = query.where(ServiceRecord.status == status_filter)
    if vehicle_id is not None:
        query = query.where(ServiceRecord.vehicle_id == vehicle_id)
    if customer_id is not None:
        query = query.where(ServiceRecord.customer_id == customer_id)
    if technician_id is not None:
        query = query.where(ServiceRecord.technician_id == technician_id)

    result = await db.execute(query.offset(skip).limit(limit))
    return [record_response(record) for record in result.scalars().all()]


@router.post("/calculate", response_model=CostBreakdown)
async def calculate_cost(
    request: CostRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Compute parts cost, total cost and technician earnings without saving anything.
    """
    technician = await _get_technician(db, request.technician_id)
    breakdown = costs.compute_breakdown(
        request.line_items,
        request.labor_cost,
        technician,
        default_percentage=settings.default_earnings_percentage,
    )
    return CostBreakdown(**breakdown.as_dict())


@router.get("/{record_id}", response_model=ServiceRecordSchema)
async def get_service_record(
    record_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Get a specific service record by ID.
    """
    return record_response(await get_record_or_404(db, record_id))


@router.post("/", response_model=ServiceRecordSaved, status_code=status.HTTP_201_CREATED)
async def create_service_record(
    service_record: ServiceRecordCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new service record with its line items.

    A record created as completed with ``next_service`` data also schedules
    the next visit.
    """
    costs.validate_labor_cost(service_record.labor_cost)
    plan = scheduling.plan_next_service(
        service_record.status,
        None,
        service_record.next_service.model_dump() if service_record.next_service else None,
    )
    await ensure_exists(db, Vehicle, service_record.vehicle_id, "Vehicle")
    await ensure_exists(db, Customer, service_record.customer_id, "Customer")
    await ensure_exists(db, Company, service_record.company_id, "Company")
    await _get_technician(db, service_record.technician_id)

    data = service_record.model_dump(exclude={"line_items", "next_service", "labor_cost"})
    db_record = ServiceRecord(**data, total_cost=0.0)
    db_record.line_items = []
    if db_record.status == ServiceStatus.COMPLETED:
        db_record.completed_date = datetime.utcnow()

    for item in service_record.line_items:
        await _add_line(db, db_record, item)
    await _recalculate(db, db_record, service_record.labor_cost)
    db.add(db_record)

    upcoming = None
    if plan is not None:
        await db.flush()
        upcoming = build_next_upcoming(db_record, plan)
        db.add(upcoming)

    await _commit(db, "create service record")
    logger.info(
        f"✅ Service record {db_record.id} created: total {db_record.total_cost}"
        f" (labor {db_record.labor_cost})"
    )
    if upcoming is not None:
        logger.info(f"📅 Next service {upcoming.id} scheduled for vehicle {upcoming.vehicle_id}")

    return await _saved(db, db_record.id, upcoming)


@router.put("/{record_id}", response_model=ServiceRecordSaved)
async def update_service_record(
    record_id: int,
    service_update: ServiceRecordUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update a service record.

    Moving the record to ``completed`` with ``next_service`` data schedules
    the next visit in the same transaction. Without that data nothing is
    scheduled.
    """
    db_record = await get_record_or_404(db, record_id)

    update_data = service_update.model_dump(
        exclude_unset=True, exclude={"line_items", "next_service", "labor_cost"}
    )
    previous_status = ServiceStatus(db_record.status)
    new_status = update_data.pop("status", None) or previous_status

    scheduling.service_record_transition(previous_status, new_status)
    plan = scheduling.plan_next_service(
        new_status,
        previous_status,
        service_update.next_service.model_dump() if service_update.next_service else None,
    )
    if service_update.labor_cost is not None:
        costs.validate_labor_cost(service_update.labor_cost)

    # Must run before any setattr below; later queries autoflush
    await ensure_exists(db, Vehicle, update_data.get("vehicle_id"), "Vehicle")
    await ensure_exists(db, Customer, update_data.get("customer_id"), "Customer")
    await ensure_exists(db, Company, update_data.get("company_id"), "Company")
    await _get_technician(db, update_data.get("technician_id"))

    # Labor is fixed before lines change so a derived value is not skewed by new parts
    labor_cost = service_update.labor_cost
    if labor_cost is None:
        labor_cost = costs.effective_labor_cost(
            db_record.labor_cost, db_record.total_cost, db_record.line_items
        )

    for field, value in update_data.items():
        if value is None and field in ("description", "service_date", "vehicle_id", "customer_id"):
            continue
        setattr(db_record, field, value)

    if new_status != previous_status:
        db_record.status = new_status
        if new_status == ServiceStatus.COMPLETED:
            db_record.completed_date = datetime.utcnow()
        elif previous_status == ServiceStatus.COMPLETED:
            db_record.completed_date = None
        logger.info(f"🔄 Service record {record_id}: {previous_status.value} → {new_status.value}")

    if service_update.line_items is not None:
        await _replace_line_items(db, db_record, service_update.line_items)
    await _recalculate(db, db_record, labor_cost)

    upcoming = None
    if plan is not None:
        upcoming = build_next_upcoming(db_record, plan)
        db.add(upcoming)

    await _commit(db, "update service record")
    if upcoming is not None:
        logger.info(f"📅 Next service {upcoming.id} scheduled for vehicle {upcoming.vehicle_id}")

    return await _saved(db, record_id, upcoming)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service_record(
    record_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a service record and its line items.
    """
    db_record = await get_record_or_404(db, record_id)

    await db.delete(db_record)
    await db.commit()

    logger.info(f"🗑️ Service record {record_id} deleted")
    return None


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------

def _find_line(record: ServiceRecord, line_id: int) -> ServiceComponent:
    for line in record.line_items:
        if line.id == line_id:
            return line
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Line item not found"
    )


@router.post("/{record_id}/line-items", response_model=ServiceRecordSchema, status_code=status.HTTP_201_CREATED)
async def add_line_item(
    record_id: int,
    item: LineItemIn,
    db: AsyncSession = Depends(get_db),
):
    """
    Add a component to a service record at its catalog price (or a typed price).
    """
    db_record = await get_record_or_404(db, record_id)
    labor_cost = costs.effective_labor_cost(db_record.labor_cost, db_record.total_cost, db_record.line_items)

    await _add_line(db, db_record, item)
    await _recalculate(db, db_record, labor_cost)
    await _commit(db, "add line item")

    return record_response(await get_record_or_404(db, record_id))


@router.put("/{record_id}/line-items/{line_id}", response_model=ServiceRecordSchema)
async def update_line_item(
    record_id: int,
    line_id: int,
    item: LineItemUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Change a line's component, quantity or price.
    """
    db_record = await get_record_or_404(db, record_id)
    line = _find_line(db_record, line_id)
    labor_cost = costs.effective_labor_cost(db_record.labor_cost, db_record.total_cost, db_record.line_items)

    await _change_line(
        db,
        line,
        item.component_id if item.component_id is not None else line.component_id,
        item.quantity if item.quantity is not None else line.quantity,
        item.unit_price,
        item.reset_price,
    )
    await _recalculate(db, db_record, labor_cost)
    await _commit(db, "update line item")

    return record_response(await get_record_or_404(db, record_id))


@router.post("/{record_id}/line-items/{line_id}/reset-price", response_model=ServiceRecordSchema)
async def reset_line_item_price(
    record_id: int,
    line_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Restore a line's unit price to the component's current catalog price.
    """
    db_record = await get_record_or_404(db, record_id)
    line = _find_line(db_record, line_id)
    labor_cost = costs.effective_labor_cost(db_record.labor_cost, db_record.total_cost, db_record.line_items)

    component = await _get_catalog_component(db, line.component_id)
    _store(line, pricing.reset_unit_price(_snapshot(line), CatalogEntry.from_component(component)))
    await _recalculate(db, db_record, labor_cost)
    await _commit(db, "reset line item price")

    return record_response(await get_record_or_404(db, record_id))


@router.delete("/{record_id}/line-items/{line_id}", response_model=ServiceRecordSchema)
async def delete_line_item(
    record_id: int,
    line_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Remove a line from a service record.
    """
    db_record = await get_record_or_404(db, record_id)
    line = _find_line(db_record, line_id)
    labor_cost = costs.effective_labor_cost(db_record.labor_cost, db_record.total_cost, db_record.line_items)

    db_record.line_items.remove(line)
    await _recalculate(db, db_record, labor_cost)
    await _commit(db, "delete line item")

    return record_response(await get_record_or_404(db, record_id))
