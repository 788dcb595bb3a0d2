"""
Upcoming service routes: the appointment list, weekly planner and status workflow.
"""
import logging
import math
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select, or_
from typing import Optional
from datetime import date, datetime

from autoshop.config import get_settings
from autoshop.database import get_db
from autoshop.models.company import Company
from autoshop.models.service import ServiceRecord, ServiceStatus
from autoshop.models.upcoming_service import UpcomingService, UpcomingStatus
from autoshop.models.vehicle import Vehicle
from autoshop.routers.lookups import ensure_exists
from autoshop.routers.service_records import get_record_or_404, record_response
from autoshop.schemas.upcoming_service import (
    Pagination,
    PlannerDay,
    RescheduleRequest,
    StatusChange,
    StatusChangeResult,
    UpcomingService as UpcomingServiceSchema,
    UpcomingServiceCreate,
    UpcomingServicePage,
    UpcomingServiceUpdate,
    WeeklyPlan,
)
from autoshop.services import scheduling

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(prefix="/upcoming-services", tags=["upcoming-services"])


async def get_upcoming_or_404(db: AsyncSession, upcoming_id: int) -> UpcomingService:
    result = await db.execute(
        select(UpcomingService)
        .where(UpcomingService.id == upcoming_id)
        .execution_options(populate_existing=True)
    )
    upcoming = result.scalar_one_or_none()
    if not upcoming:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Upcoming service not found"
        )
    return upcoming


async def _get_vehicle(db: AsyncSession, vehicle_id: int) -> Vehicle:
    vehicle = await db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Vehicle does not exist"
        )
    return vehicle


def build_arrival_record(upcoming: UpcomingService, vehicle: Vehicle) -> ServiceRecord:
    """Service record opened when the customer shows up for an appointment."""
    return ServiceRecord(
        vehicle_id=vehicle.id,
        customer_id=vehicle.customer_id,
        company_id=upcoming.company_id if upcoming.company_id is not None else vehicle.company_id,
        description=upcoming.service_type,
        status=ServiceStatus.IN_PROGRESS,
        service_date=datetime.utcnow(),
        current_km=upcoming.next_km,
        total_cost=0.0,
        labor_cost=0.0,
    )


@router.get("/", response_model=UpcomingServicePage)
async def get_upcoming_services(
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1),
    status_filter: Optional[UpcomingStatus] = Query(None, alias="status"),
    search: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    date_filter: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Get upcoming services, soonest first.

    ``date_filter`` accepts ``today``, ``this_week`` or ``this_month`` and
    takes precedence over ``start_date``/``end_date``.
    """
    page_size = min(page_size or settings.default_page_size, settings.max_page_size)

    query = select(UpcomingService)
    if status_filter:
        query = query.where(UpcomingService.status == status_filter)
    if search:
        pattern = f"%{search}%"
        query = query.join(Vehicle, UpcomingService.vehicle_id == Vehicle.id).where(
            or_(
                Vehicle.plate_no.ilike(pattern),
                Vehicle.brand.ilike(pattern),
                Vehicle.model.ilike(pattern),
                UpcomingService.service_type.ilike(pattern),
            )
        )

    if date_filter:
        start_date, end_date = scheduling.preset_range(date_filter, date.today())
    if start_date:
        lower, _ = scheduling.day_bounds(start_date, start_date)
        query = query.where(UpcomingService.planned_date >= lower)
    if end_date:
        _, upper = scheduling.day_bounds(end_date, end_date)
        query = query.where(UpcomingService.planned_date < upper)

    count_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total_count = count_result.scalar_one()
    total_pages = math.ceil(total_count / page_size) if total_count else 0

    result = await db.execute(
        query.order_by(UpcomingService.planned_date, UpcomingService.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    services = result.scalars().all()

    return UpcomingServicePage(
        data=[UpcomingServiceSchema.model_validate(s) for s in services],
        pagination=Pagination(
            current_page=page,
            total_pages=total_pages,
            total_count=total_count,
            has_next=page < total_pages,
            has_prev=page > 1,
        ),
    )


@router.get("/week", response_model=WeeklyPlan)
async def get_weekly_plan(
    day: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Services planned in the Monday to Sunday week containing ``day`` (default today).
    """
    week_start, week_end = scheduling.week_range(day or date.today())
    lower, upper = scheduling.day_bounds(week_start, week_end)

    result = await db.execute(
        select(UpcomingService)
        .where(UpcomingService.planned_date >= lower, UpcomingService.planned_date < upper)
        .order_by(UpcomingService.planned_date)
    )
    buckets = scheduling.bucket_by_day(result.scalars().all(), week_start)

    return WeeklyPlan(
        week_start=week_start,
        week_end=week_end,
        days=[
            PlannerDay(day=bucket_day, services=[UpcomingServiceSchema.model_validate(s) for s in services])
            for bucket_day, services in buckets
        ],
    )


@router.get("/{upcoming_id}", response_model=UpcomingServiceSchema)
async def get_upcoming_service(
    upcoming_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Get a specific upcoming service by ID.
    """
    return await get_upcoming_or_404(db, upcoming_id)


@router.post("/", response_model=UpcomingServiceSchema, status_code=status.HTTP_201_CREATED)
async def create_upcoming_service(
    upcoming: UpcomingServiceCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Schedule a new service. It starts in the ``scheduled`` status.
    """
    vehicle = await _get_vehicle(db, upcoming.vehicle_id)
    await ensure_exists(db, Company, upcoming.company_id, "Company")

    data = upcoming.model_dump()
    if data["duration"] is None:
        data["duration"] = settings.default_service_duration
    if data["company_id"] is None:
        data["company_id"] = vehicle.company_id

    db_upcoming = UpcomingService(**data, status=UpcomingStatus.SCHEDULED)
    db.add(db_upcoming)
    await db.commit()

    logger.info(f"📅 Service {db_upcoming.id} scheduled for vehicle {vehicle.plate_no} at {db_upcoming.planned_date}")
    return await get_upcoming_or_404(db, db_upcoming.id)


@router.put("/{upcoming_id}", response_model=UpcomingServiceSchema)
async def update_upcoming_service(
    upcoming_id: int,
    upcoming_update: UpcomingServiceUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Edit an upcoming service's details. Status changes go through PATCH.
    """
    db_upcoming = await get_upcoming_or_404(db, upcoming_id)

    update_data = upcoming_update.model_dump(exclude_unset=True)
    if update_data.get("vehicle_id") is not None:
        await _get_vehicle(db, update_data["vehicle_id"])

    for field, value in update_data.items():
        if value is None and field in ("vehicle_id", "planned_date", "duration", "service_type"):
            continue
        setattr(db_upcoming, field, value)

    await db.commit()
    return await get_upcoming_or_404(db, upcoming_id)


@router.patch("/{upcoming_id}", response_model=StatusChangeResult)
async def change_upcoming_status(
    upcoming_id: int,
    change: StatusChange,
    db: AsyncSession = Depends(get_db),
):
    """
    Move an upcoming service to a new status.

    Marking the customer as arrived opens a new in-progress service record
    and links it; both changes are saved together or not at all.
    """
    db_upcoming = await get_upcoming_or_404(db, upcoming_id)
    outcome = scheduling.transition(db_upcoming.status, change.status, change.from_status)

    db_record = None
    try:
        if outcome.spawns_service_record:
            vehicle = await _get_vehicle(db, db_upcoming.vehicle_id)
            db_record = build_arrival_record(db_upcoming, vehicle)
            db.add(db_record)
            await db.flush()
            db_upcoming.service_record_id = db_record.id
        db_upcoming.status = outcome.new_status
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"❌ Status change for upcoming service {upcoming_id} failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update upcoming service status"
        )

    logger.info(
        f"🔄 Upcoming service {upcoming_id}: {outcome.previous_status.value} → {outcome.new_status.value}"
    )
    record_out = None
    if db_record is not None:
        logger.info(f"🔧 Service record {db_record.id} opened for upcoming service {upcoming_id}")
        record_out = record_response(await get_record_or_404(db, db_record.id))

    return StatusChangeResult(
        upcoming_service=UpcomingServiceSchema.model_validate(await get_upcoming_or_404(db, upcoming_id)),
        service_record=record_out,
    )


@router.post("/{upcoming_id}/reschedule", response_model=UpcomingServiceSchema)
async def reschedule_upcoming_service(
    upcoming_id: int,
    request: RescheduleRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Put a cancelled or missed service back on the calendar.
    """
    db_upcoming = await get_upcoming_or_404(db, upcoming_id)
    previous = UpcomingStatus(db_upcoming.status)
    db_upcoming.status = scheduling.reschedule(previous)

    db_upcoming.planned_date = request.planned_date
    if request.duration is not None:
        db_upcoming.duration = request.duration
    if request.service_type is not None:
        db_upcoming.service_type = request.service_type
    if request.notes is not None:
        db_upcoming.notes = request.notes

    await db.commit()
    logger.info(f"📅 Upcoming service {upcoming_id} rescheduled ({previous.value}) to {request.planned_date}")
    return await get_upcoming_or_404(db, upcoming_id)


@router.delete("/{upcoming_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_upcoming_service(
    upcoming_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete an upcoming service.
    """
    db_upcoming = await get_upcoming_or_404(db, upcoming_id)

    await db.delete(db_upcoming)
    await db.commit()

    logger.info(f"🗑️ Upcoming service {upcoming_id} deleted")
    return None
