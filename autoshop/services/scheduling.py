"""
Status machines for upcoming services and service records, plus the
calendar helpers used by the weekly planner and list filters.

Upcoming service lifecycle::

    scheduled -> confirmed -> customer_arrived
    scheduled | confirmed -> cancelled | no_show
    cancelled | no_show -> scheduled            (reschedule only)

Arrival is the only transition with a side effect: it spawns a new
service record. Completing a service record may in turn spawn a new
upcoming service when next-service data is supplied.
"""
import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from autoshop.exceptions import InvalidTransitionError, ValidationError
from autoshop.models.service import ServiceStatus
from autoshop.models.upcoming_service import UpcomingStatus

logger = logging.getLogger(__name__)

UPCOMING_TRANSITIONS = {
    UpcomingStatus.SCHEDULED: {
        UpcomingStatus.CONFIRMED,
        UpcomingStatus.CUSTOMER_ARRIVED,
        UpcomingStatus.CANCELLED,
        UpcomingStatus.NO_SHOW,
    },
    UpcomingStatus.CONFIRMED: {
        UpcomingStatus.CUSTOMER_ARRIVED,
        UpcomingStatus.CANCELLED,
        UpcomingStatus.NO_SHOW,
    },
    UpcomingStatus.CANCELLED: set(),
    UpcomingStatus.NO_SHOW: set(),
    UpcomingStatus.CUSTOMER_ARRIVED: set(),
}

RESCHEDULABLE = {UpcomingStatus.CANCELLED, UpcomingStatus.NO_SHOW}

# Statuses that still occupy a slot in the calendar
OPEN_UPCOMING = {UpcomingStatus.SCHEDULED, UpcomingStatus.CONFIRMED}

SERVICE_TRANSITIONS = {
    ServiceStatus.PENDING: {
        ServiceStatus.IN_PROGRESS,
        ServiceStatus.COMPLETED,
        ServiceStatus.CANCELLED,
    },
    ServiceStatus.IN_PROGRESS: {
        ServiceStatus.PENDING,
        ServiceStatus.COMPLETED,
        ServiceStatus.CANCELLED,
    },
    # Reopening a completed job puts it back in progress
    ServiceStatus.COMPLETED: {ServiceStatus.IN_PROGRESS, ServiceStatus.CANCELLED},
    ServiceStatus.CANCELLED: set(),
}

ACTIVE_SERVICE = {ServiceStatus.PENDING, ServiceStatus.IN_PROGRESS}


@dataclass(frozen=True)
class Transition:
    """Outcome of an accepted upcoming-service status change."""
    previous_status: UpcomingStatus
    new_status: UpcomingStatus
    spawns_service_record: bool = False


@dataclass(frozen=True)
class NextServicePlan:
    """Data for the upcoming service spawned when a record is completed."""
    planned_date: datetime
    service_type: str
    next_km: Optional[int] = None
    notes: str = ""


def transition(current, target, expected_from=None) -> Transition:
    """Validate an upcoming-service status change.

    ``expected_from`` is the status the caller believes the record is in;
    a mismatch means the caller acted on stale data and is rejected.
    """
    current = UpcomingStatus(current)
    target = UpcomingStatus(target)

    if expected_from is not None and UpcomingStatus(expected_from) != current:
        raise InvalidTransitionError(
            current,
            target,
            f"Expected status '{UpcomingStatus(expected_from).value}' but service is '{current.value}'",
        )

    if target == UpcomingStatus.SCHEDULED and current in RESCHEDULABLE:
        raise InvalidTransitionError(
            current, target, "Use reschedule to move a cancelled or missed service back to scheduled"
        )

    if target not in UPCOMING_TRANSITIONS[current]:
        logger.warning(f"⚠️ Rejected upcoming service transition {current.value} → {target.value}")
        raise InvalidTransitionError(current, target)

    return Transition(
        previous_status=current,
        new_status=target,
        spawns_service_record=target == UpcomingStatus.CUSTOMER_ARRIVED,
    )


def reschedule(current) -> UpcomingStatus:
    """Status after a reschedule; only cancelled or missed services qualify."""
    current = UpcomingStatus(current)
    if current not in RESCHEDULABLE:
        raise InvalidTransitionError(
            current, UpcomingStatus.SCHEDULED, f"Cannot reschedule a service that is '{current.value}'"
        )
    return UpcomingStatus.SCHEDULED


def service_record_transition(current, target) -> ServiceStatus:
    """Validate a service-record status change. Same status is a no-op."""
    current = ServiceStatus(current)
    target = ServiceStatus(target)
    if current == target:
        return target
    if target not in SERVICE_TRANSITIONS[current]:
        logger.warning(f"⚠️ Rejected service record transition {current.value} → {target.value}")
        raise InvalidTransitionError(current, target)
    return target


def plan_next_service(new_status, previous_status, next_service) -> Optional[NextServicePlan]:
    """Decide whether completing a record spawns an upcoming service.

    ``next_service`` is a mapping with ``planned_date``,
    ``service_type`` and optionally ``next_km`` and ``notes``. Nothing is
    spawned when the record is not newly completed or when no next-service
    data was supplied. Supplied data missing a planned date or service type
    is rejected.
    """
    if ServiceStatus(new_status) != ServiceStatus.COMPLETED:
        return None
    if previous_status is not None and ServiceStatus(previous_status) == ServiceStatus.COMPLETED:
        return None
    if next_service is None:
        return None

    data = dict(next_service)
    planned = data.get("planned_date")
    service_type = (data.get("service_type") or "").strip()
    if not planned:
        raise ValidationError("Next service plan requires a planned date")
    if not service_type:
        raise ValidationError("Next service plan requires a service type")

    if isinstance(planned, datetime):
        planned_date = planned
    elif isinstance(planned, date):
        planned_date = datetime(planned.year, planned.month, planned.day)
    else:
        try:
            planned_date = datetime.fromisoformat(str(planned))
        except ValueError:
            raise ValidationError(f"Invalid planned date: {planned!r}")

    return NextServicePlan(
        planned_date=planned_date,
        service_type=service_type,
        next_km=data.get("next_km"),
        notes=data.get("notes") or "",
    )


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------

def week_range(day: date) -> tuple[date, date]:
    """Monday and Sunday of the week containing ``day``."""
    if isinstance(day, datetime):
        day = day.date()
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def bucket_by_day(services: Iterable, week_start: date) -> list[tuple[date, list]]:
    """Group services into seven day buckets starting at ``week_start``.

    Services outside the week are ignored. Each bucket is ordered by
    planned time.
    """
    days = [week_start + timedelta(days=offset) for offset in range(7)]
    buckets = {day: [] for day in days}
    for service in services:
        planned = service.planned_date
        key = planned.date() if isinstance(planned, datetime) else planned
        if key in buckets:
            buckets[key].append(service)
    return [(day, sorted(buckets[day], key=lambda s: s.planned_date)) for day in days]


def preset_range(preset: str, today: date) -> tuple[date, date]:
    """Inclusive date range for the ``today``/``this_week``/``this_month`` filters."""
    if preset == "today":
        return today, today
    if preset == "this_week":
        return week_range(today)
    if preset == "this_month":
        last_day = calendar.monthrange(today.year, today.month)[1]
        return today.replace(day=1), today.replace(day=last_day)
    raise ValidationError(f"Unknown date filter: {preset}")


def day_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    """Datetime bounds covering whole days ``start``..``end`` (end exclusive)."""
    return (
        datetime(start.year, start.month, start.day),
        datetime(end.year, end.month, end.day) + timedelta(days=1),
    )
