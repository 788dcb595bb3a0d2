import unittest
from datetime import date, datetime
from types import SimpleNamespace

from autoshop.exceptions import InvalidTransitionError, ValidationError
from autoshop.models.service import ServiceStatus
from autoshop.models.upcoming_service import UpcomingStatus
from autoshop.services import scheduling


class TestUpcomingTransitions(unittest.TestCase):

    def test_scheduled_to_confirmed(self):
        outcome = scheduling.transition(UpcomingStatus.SCHEDULED, UpcomingStatus.CONFIRMED)
        self.assertEqual(outcome.new_status, UpcomingStatus.CONFIRMED)
        self.assertFalse(outcome.spawns_service_record)

    def test_arrival_spawns_service_record(self):
        for current in (UpcomingStatus.SCHEDULED, UpcomingStatus.CONFIRMED):
            outcome = scheduling.transition(current, "customer_arrived")
            self.assertTrue(outcome.spawns_service_record)

    def test_cancelled_to_arrived_rejected(self):
        with self.assertRaises(InvalidTransitionError) as ctx:
            scheduling.transition(UpcomingStatus.CANCELLED, UpcomingStatus.CUSTOMER_ARRIVED)
        self.assertEqual(ctx.exception.current, "cancelled")
        self.assertEqual(ctx.exception.target, "customer_arrived")

    def test_arrived_is_terminal(self):
        for target in UpcomingStatus:
            with self.assertRaises(InvalidTransitionError):
                scheduling.transition(UpcomingStatus.CUSTOMER_ARRIVED, target)

    def test_stale_from_status_rejected(self):
        with self.assertRaises(InvalidTransitionError):
            scheduling.transition(
                UpcomingStatus.CONFIRMED, UpcomingStatus.CANCELLED, expected_from=UpcomingStatus.SCHEDULED
            )

    def test_back_to_scheduled_needs_reschedule(self):
        with self.assertRaises(InvalidTransitionError):
            scheduling.transition(UpcomingStatus.NO_SHOW, UpcomingStatus.SCHEDULED)
        self.assertEqual(scheduling.reschedule(UpcomingStatus.NO_SHOW), UpcomingStatus.SCHEDULED)
        self.assertEqual(scheduling.reschedule("cancelled"), UpcomingStatus.SCHEDULED)

    def test_reschedule_open_service_rejected(self):
        with self.assertRaises(InvalidTransitionError):
            scheduling.reschedule(UpcomingStatus.CONFIRMED)


class TestServiceRecordTransitions(unittest.TestCase):

    def test_same_status_is_allowed(self):
        self.assertEqual(
            scheduling.service_record_transition(ServiceStatus.CANCELLED, ServiceStatus.CANCELLED),
            ServiceStatus.CANCELLED,
        )

    def test_reopen_completed(self):
        self.assertEqual(
            scheduling.service_record_transition("completed", "in_progress"), ServiceStatus.IN_PROGRESS
        )

    def test_cancelled_is_terminal(self):
        with self.assertRaises(InvalidTransitionError):
            scheduling.service_record_transition(ServiceStatus.CANCELLED, ServiceStatus.PENDING)


class TestNextServicePlan(unittest.TestCase):

    def test_completion_with_plan(self):
        plan = scheduling.plan_next_service(
            ServiceStatus.COMPLETED,
            ServiceStatus.IN_PROGRESS,
            {"planned_date": date(2025, 6, 1), "service_type": "Genel Bakım", "next_km": 60000},
        )
        self.assertEqual(plan.planned_date, datetime(2025, 6, 1))
        self.assertEqual(plan.service_type, "Genel Bakım")
        self.assertEqual(plan.next_km, 60000)
        self.assertEqual(plan.notes, "")

    def test_iso_string_date(self):
        plan = scheduling.plan_next_service(
            "completed", "pending", {"planned_date": "2025-06-01", "service_type": "Oil"}
        )
        self.assertEqual(plan.planned_date, datetime(2025, 6, 1))

    def test_missing_service_type_rejected(self):
        with self.assertRaises(ValidationError):
            scheduling.plan_next_service("completed", "pending", {"planned_date": "2025-06-01"})

    def test_missing_date_rejected(self):
        with self.assertRaises(ValidationError):
            scheduling.plan_next_service("completed", "pending", {"service_type": "Oil"})

    def test_no_plan_data_skips_spawn(self):
        self.assertIsNone(scheduling.plan_next_service("completed", "pending", None))

    def test_not_completed_skips_spawn(self):
        data = {"planned_date": "2025-06-01", "service_type": "Oil"}
        self.assertIsNone(scheduling.plan_next_service("in_progress", "pending", data))

    def test_already_completed_skips_spawn(self):
        data = {"planned_date": "2025-06-01", "service_type": "Oil"}
        self.assertIsNone(scheduling.plan_next_service("completed", "completed", data))


class TestCalendar(unittest.TestCase):

    def test_week_range_starts_monday(self):
        start, end = scheduling.week_range(date(2025, 6, 4))
        self.assertEqual(start, date(2025, 6, 2))
        self.assertEqual(end, date(2025, 6, 8))

    def test_bucket_by_day(self):
        services = [
            SimpleNamespace(id=1, planned_date=datetime(2025, 6, 3, 15, 0)),
            SimpleNamespace(id=2, planned_date=datetime(2025, 6, 3, 9, 0)),
            SimpleNamespace(id=3, planned_date=datetime(2025, 6, 8, 12, 0)),
            SimpleNamespace(id=4, planned_date=datetime(2025, 6, 9, 12, 0)),
        ]
        buckets = scheduling.bucket_by_day(services, date(2025, 6, 2))
        self.assertEqual(len(buckets), 7)
        self.assertEqual([s.id for s in buckets[1][1]], [2, 1])
        self.assertEqual([s.id for s in buckets[6][1]], [3])
        self.assertEqual(sum(len(day_services) for _, day_services in buckets), 3)

    def test_preset_ranges(self):
        today = date(2025, 2, 12)
        self.assertEqual(scheduling.preset_range("today", today), (today, today))
        self.assertEqual(scheduling.preset_range("this_week", today), (date(2025, 2, 10), date(2025, 2, 16)))
        self.assertEqual(scheduling.preset_range("this_month", today), (date(2025, 2, 1), date(2025, 2, 28)))

    def test_unknown_preset(self):
        with self.assertRaises(ValidationError):
            scheduling.preset_range("next_year", date(2025, 1, 1))

    def test_day_bounds_end_is_exclusive(self):
        lower, upper = scheduling.day_bounds(date(2025, 6, 1), date(2025, 6, 30))
        self.assertEqual(lower, datetime(2025, 6, 1))
        self.assertEqual(upper, datetime(2025, 7, 1))


if __name__ == "__main__":
    unittest.main()
