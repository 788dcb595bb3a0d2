"""
Report routes: dashboard counters, inventory status, component usage,
per-service detail and technician totals.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select

from autoshop.database import get_db
from autoshop.models.company import Company
from autoshop.models.component import Component
from autoshop.models.customer import Customer
from autoshop.models.service import ServiceComponent, ServiceRecord
from autoshop.models.technician import Technician
from autoshop.models.upcoming_service import UpcomingService
from autoshop.models.vehicle import Vehicle
from autoshop.routers.service_records import get_record_or_404, record_response
from autoshop.schemas.report import (
    ComponentUsage,
    ComponentUsageReport,
    DashboardStats,
    InventoryReport,
    ServiceReport,
    ServiceReportLine,
    TechnicianReport,
)
from autoshop.services import pricing, reports, scheduling
from autoshop.services.pricing import CatalogEntry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


async def _count(db: AsyncSession, query) -> int:
    result = await db.execute(select(func.count()).select_from(query.subquery()))
    return result.scalar_one()


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard(db: AsyncSession = Depends(get_db)):
    """
    Headline counters for the dashboard.
    """
    components = (await db.execute(select(Component))).scalars().all()

    return DashboardStats(
        companies=await _count(db, select(Company.id)),
        customers=await _count(db, select(Customer.id)),
        vehicles=await _count(db, select(Vehicle.id)),
        technicians=await _count(db, select(Technician.id).where(Technician.active.is_(True))),
        active_services=await _count(
            db, select(ServiceRecord.id).where(ServiceRecord.status.in_(list(scheduling.ACTIVE_SERVICE)))
        ),
        upcoming_services=await _count(
            db, select(UpcomingService.id).where(UpcomingService.status.in_(list(scheduling.OPEN_UPCOMING)))
        ),
        low_stock_alerts=sum(1 for c in components if reports.needs_reorder(c)),
    )


@router.get("/inventory", response_model=InventoryReport)
async def get_inventory_report(db: AsyncSession = Depends(get_db)):
    """
    Stock status counts, stock value and the components that need reordering.
    """
    result = await db.execute(select(Component).order_by(Component.stock_count, Component.name))
    components = result.scalars().all()
    summary = reports.inventory_summary(components)

    return InventoryReport(
        total_components=summary["total_components"],
        out_of_stock=summary[reports.OUT_OF_STOCK],
        low_stock=summary[reports.LOW_STOCK],
        in_stock=summary[reports.IN_STOCK],
        total_stock_value=float(summary["total_stock_value"]),
        reorder=[
            {
                "id": c.id,
                "name": c.name,
                "part_number": c.part_number,
                "stock_count": c.stock_count,
                "reorder_level": c.reorder_level,
                "stock_status": c.stock_status,
            }
            for c in components
            if reports.needs_reorder(c)
        ],
    )


@router.get("/components/{component_id}/usage", response_model=ComponentUsageReport)
async def get_component_usage(component_id: int, db: AsyncSession = Depends(get_db)):
    """
    How often a component was used, with monthly averages.
    """
    component = await db.get(Component, component_id)
    if not component:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Component not found"
        )

    result = await db.execute(
        select(ServiceComponent, ServiceRecord.service_date)
        .join(ServiceRecord, ServiceComponent.service_record_id == ServiceRecord.id)
        .where(ServiceComponent.component_id == component_id)
        .order_by(ServiceRecord.service_date)
    )
    rows = result.all()
    stats = reports.usage_stats((service_date, line.quantity, line.cost) for line, service_date in rows)

    return ComponentUsageReport(
        component_id=component.id,
        name=component.name,
        total_quantity=stats.total_quantity,
        total_cost=float(stats.total_cost),
        months=stats.months,
        average_quantity_per_month=float(stats.average_quantity_per_month),
        average_cost_per_month=float(stats.average_cost_per_month),
        usage_history=[
            ComponentUsage(
                service_record_id=line.service_record_id,
                service_date=service_date,
                quantity=line.quantity,
                unit_price=line.unit_price,
                cost=line.cost,
            )
            for line, service_date in rows
        ],
    )


@router.get("/service-records/{record_id}", response_model=ServiceReport)
async def get_service_report(record_id: int, db: AsyncSession = Depends(get_db)):
    """
    A service record with each line compared against the current catalog price.
    """
    record = await get_record_or_404(db, record_id)

    lines = []
    for line in record.line_items:
        component = line.component
        stored = pricing.LineItem(
            id=line.id,
            component_id=line.component_id,
            quantity=line.quantity,
            unit_price=line.unit_price,
            is_custom_price=bool(line.is_custom_price),
        )
        entry = CatalogEntry.from_component(component) if component is not None else None
        lines.append(
            ServiceReportLine(
                line_item_id=line.id,
                component_id=line.component_id,
                component_name=component.name if component is not None else None,
                quantity=line.quantity,
                unit_price=line.unit_price,
                cost=line.cost,
                is_custom_price=bool(line.is_custom_price),
                catalog_price=float(entry.price) if entry else None,
                price_drift=pricing.has_price_drift(stored, entry) if entry else False,
            )
        )

    return ServiceReport(service_record=record_response(record), lines=lines)


@router.get("/technicians/{technician_id}", response_model=TechnicianReport)
async def get_technician_report(technician_id: int, db: AsyncSession = Depends(get_db)):
    """
    Revenue and earnings over every service a technician worked on.
    """
    technician = await db.get(Technician, technician_id)
    if not technician:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Technician not found"
        )

    result = await db.execute(select(ServiceRecord).where(ServiceRecord.technician_id == technician_id))
    summary = reports.technician_summary(result.scalars().all())

    return TechnicianReport(
        technician_id=technician.id,
        name=technician.name,
        earnings_percentage=technician.earnings_percentage,
        **summary,
    )
