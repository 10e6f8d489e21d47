"""
Tests for scheduling/availability.py

Tests request validation, the pure pipeline and the orchestrator against an
in-memory repository.
"""

import unittest
from datetime import date, datetime
from unittest.mock import MagicMock, patch

import pytz

from shelter_scheduling.shelter_scheduling.scheduling.availability import (
	DEFAULT_DURATION_MINUTES,
	AvailabilityRequest,
	compute_available_slots,
	get_available_time_slots,
)
from shelter_scheduling.shelter_scheduling.scheduling.constraints import (
	ExceptionKind,
	ExistingAppointment,
	ResourceException,
	ResourceProfile,
	ScheduleException,
	VolunteerSchedule,
	WorkScheduleEntry,
)
from shelter_scheduling.shelter_scheduling.scheduling.eligibility import NO_SUITABLE_VOLUNTEERS
from shelter_scheduling.shelter_scheduling.scheduling.errors import InvalidArgument
from shelter_scheduling.shelter_scheduling.scheduling.repository import AvailabilityRepository
from shelter_scheduling.shelter_scheduling.scheduling.slots import AvailableTimeSlot
from shelter_scheduling.shelter_scheduling.scheduling.time_utils import DEFAULT_TIMEZONE, Weekday

MONDAY = date(2026, 1, 19)
TZ = pytz.timezone("America/New_York")


def working(volunteer_id, start, end, exceptions=()):
	return VolunteerSchedule.build(volunteer_id, [WorkScheduleEntry(Weekday.MONDAY, start, end)], exceptions)


def visit(start_hour, end_hour, status="confirmed", volunteer_id=None, resource_id=None):
	return ExistingAppointment(
		start=datetime(2026, 1, 19, start_hour, 0),
		end=datetime(2026, 1, 19, end_hour, 0),
		status=status,
		volunteer_id=volunteer_id,
		resource_id=resource_id,
	)


class InMemoryRepository(AvailabilityRepository):
	"""Repository backed by plain dicts; records the appointment queries."""

	def __init__(self, schedules=None, resources=None, appointments=()):
		self.schedules = schedules or {}
		self.resources = resources or {}
		self.appointments = list(appointments)
		self.appointment_queries = []

	def get_volunteer_schedule(self, volunteer_id, organization):
		return self.schedules.get(volunteer_id)

	def get_resource_profile(self, resource_id):
		return self.resources.get(resource_id)

	def get_active_appointments(self, organization, day_start, day_end, volunteer_id=None, resource_id=None):
		self.appointment_queries.append((volunteer_id, resource_id))
		return [
			appointment for appointment in self.appointments
			if appointment.is_active
			and (volunteer_id is None or appointment.volunteer_id == volunteer_id)
			and (resource_id is None or appointment.resource_id == resource_id)
		]


class TestAvailabilityRequest(unittest.TestCase):
	"""Tests for AvailabilityRequest.from_payload."""

	def test_defaults(self):
		request = AvailabilityRequest.from_payload(["TM-1"], "2026-01-19")
		self.assertEqual(request.volunteer_ids, ("TM-1",))
		self.assertEqual(request.target_date, MONDAY)
		self.assertIsNone(request.resource_id)
		self.assertEqual(request.duration_minutes, DEFAULT_DURATION_MINUTES)
		self.assertEqual(request.timezone, DEFAULT_TIMEZONE)

	def test_explicit_values(self):
		request = AvailabilityRequest.from_payload(
			["TM-1", "TM-2"], "2026-01-19", resource_id="48213", duration_minutes="45", timezone="Europe/Madrid"
		)
		self.assertEqual(request.resource_id, "48213")
		self.assertEqual(request.duration_minutes, 45)
		self.assertEqual(request.timezone, "Europe/Madrid")

	def test_configured_defaults(self):
		request = AvailabilityRequest.from_payload(
			["TM-1"], "2026-01-19", default_duration=30, default_timezone="UTC"
		)
		self.assertEqual(request.duration_minutes, 30)
		self.assertEqual(request.timezone, "UTC")

	def test_volunteer_ids_required(self):
		for value in (None, [], "TM-1", ["TM-1", ""], ["  "]):
			with self.subTest(value=value):
				with self.assertRaises(InvalidArgument):
					AvailabilityRequest.from_payload(value, "2026-01-19")

	def test_invalid_date(self):
		with self.assertRaises(InvalidArgument):
			AvailabilityRequest.from_payload(["TM-1"], "not-a-date")
		with self.assertRaises(InvalidArgument):
			AvailabilityRequest.from_payload(["TM-1"], None)

	def test_invalid_duration(self):
		for value in (0, -15, 1441, "abc", 30.5, True):
			with self.subTest(value=value):
				with self.assertRaises(InvalidArgument):
					AvailabilityRequest.from_payload(["TM-1"], "2026-01-19", duration_minutes=value)

	def test_unknown_timezone(self):
		with self.assertRaises(InvalidArgument):
			AvailabilityRequest.from_payload(["TM-1"], "2026-01-19", timezone="Nowhere/Special")


class TestComputeAvailableSlots(unittest.TestCase):
	"""Tests for the pure pipeline."""

	def compute(self, volunteer_ids, schedules, duration=60, **kwargs):
		return compute_available_slots(volunteer_ids, schedules, MONDAY, duration, TZ, **kwargs)

	def test_single_volunteer_full_shift(self):
		slots = self.compute(["A"], {"A": working("A", 540, 1020)})
		self.assertEqual(slots, [AvailableTimeSlot(540, 1020)])
		self.assertEqual(slots[0].duration_minutes, 480)

	def test_appointment_splits_shift(self):
		slots = self.compute(
			["A"],
			{"A": working("A", 540, 1020)},
			volunteer_appointments={"A": [visit(12, 13, volunteer_id="A")]},
		)
		self.assertEqual([(slot.start, slot.end) for slot in slots], [("09:00", "12:00"), ("13:00", "17:00")])

	def test_union_of_two_volunteers(self):
		slots = self.compute(["A", "B"], {"A": working("A", 540, 720), "B": working("B", 780, 1020)})
		self.assertEqual([(slot.start, slot.end) for slot in slots], [("09:00", "12:00"), ("13:00", "17:00")])

	def test_overlapping_volunteers_merge(self):
		slots = self.compute(["A", "B"], {"A": working("A", 540, 720), "B": working("B", 660, 900)})
		self.assertEqual(slots, [AvailableTimeSlot(540, 900)])

	def test_one_busy_volunteer_leaves_the_other(self):
		slots = self.compute(
			["A", "B"],
			{"A": working("A", 540, 1020), "B": working("B", 540, 1020)},
			volunteer_appointments={"A": [visit(12, 13, volunteer_id="A")]},
		)
		self.assertEqual(slots, [AvailableTimeSlot(540, 1020)])

	def test_duration_longer_than_any_run(self):
		self.assertEqual(self.compute(["A"], {"A": working("A", 540, 600)}, duration=61), [])

	def test_unavailable_exception(self):
		schedule = working("A", 540, 1020, [ScheduleException(MONDAY, ExceptionKind.UNAVAILABLE)])
		self.assertEqual(self.compute(["A"], {"A": schedule}), [])

	def test_modified_exception(self):
		schedule = working("A", 540, 1020, [ScheduleException(MONDAY, ExceptionKind.MODIFIED, 1080, 1200)])
		self.assertEqual(self.compute(["A"], {"A": schedule}), [AvailableTimeSlot(1080, 1200)])

	def test_no_schedule_for_the_day(self):
		schedule = VolunteerSchedule.build("A", [WorkScheduleEntry(Weekday.TUESDAY, 540, 1020)])
		self.assertEqual(self.compute(["A"], {"A": schedule}), [])

	def test_missing_volunteer(self):
		self.assertEqual(self.compute(["A"], {}), [])

	def test_pet_exception_blocks_all_volunteers(self):
		pet = ResourceProfile("48213", exceptions=(ResourceException(Weekday.MONDAY, 600, 660, "Feeding"),))
		slots = self.compute(
			["A", "B"],
			{"A": working("A", 540, 1020), "B": working("B", 540, 1020)},
			resource=pet,
		)
		self.assertEqual(slots, [AvailableTimeSlot(540, 600), AvailableTimeSlot(660, 1020)])

	def test_pet_appointment_blocks_all_volunteers(self):
		slots = self.compute(
			["A", "B"],
			{"A": working("A", 540, 1020), "B": working("B", 540, 1020)},
			resource_appointments=[visit(14, 15, volunteer_id="C", resource_id="48213")],
		)
		self.assertEqual(slots, [AvailableTimeSlot(540, 840), AvailableTimeSlot(900, 1020)])

	def test_inactive_appointments_do_not_block(self):
		slots = self.compute(
			["A"],
			{"A": working("A", 540, 1020)},
			volunteer_appointments={"A": [visit(12, 13, status="cancelled", volunteer_id="A")]},
		)
		self.assertEqual(slots, [AvailableTimeSlot(540, 1020)])


@patch("shelter_scheduling.shelter_scheduling.scheduling.availability.frappe.logger")
class TestGetAvailableTimeSlots(unittest.TestCase):
	"""Tests for the orchestrator."""

	def request(self, volunteer_ids, **kwargs):
		return AvailabilityRequest.from_payload(volunteer_ids, "2026-01-19", **kwargs)

	def test_basic_day(self, mock_logger):
		repository = InMemoryRepository(schedules={"A": working("A", 540, 1020)})
		result = get_available_time_slots(self.request(["A"]), "ORG-1", repository)

		self.assertEqual(result.as_dict(), {
			"success": True,
			"slots": [{"start": "09:00", "end": "17:00", "duration_minutes": 480}],
			"date": "2026-01-19",
			"total_eligible_volunteers": 1,
			"volunteers_resolved": 1,
			"note": None,
		})

	def test_existing_visits_are_fetched_per_volunteer(self, mock_logger):
		repository = InMemoryRepository(
			schedules={"A": working("A", 540, 1020)},
			appointments=[visit(12, 13, volunteer_id="A"), visit(14, 15, volunteer_id="Z")],
		)
		result = get_available_time_slots(self.request(["A"]), "ORG-1", repository)

		self.assertEqual([(slot.start, slot.end) for slot in result.slots], [("09:00", "12:00"), ("13:00", "17:00")])
		self.assertEqual(repository.appointment_queries, [("A", None)])

	def test_allow_list_excludes_everyone(self, mock_logger):
		repository = InMemoryRepository(
			schedules={"A": working("A", 540, 1020)},
			resources={"48213": ResourceProfile("48213", assigned_volunteers=("Z",))},
		)
		result = get_available_time_slots(self.request(["A"], resource_id="48213"), "ORG-1", repository)

		self.assertEqual(result.slots, [])
		self.assertEqual(result.total_eligible_volunteers, 0)
		self.assertEqual(result.volunteers_resolved, 0)
		self.assertEqual(result.note, NO_SUITABLE_VOLUNTEERS)
		self.assertEqual(repository.appointment_queries, [])

	def test_allow_list_narrows_volunteers(self, mock_logger):
		repository = InMemoryRepository(
			schedules={"A": working("A", 540, 720), "B": working("B", 780, 1020)},
			resources={"48213": ResourceProfile("48213", assigned_volunteers=("B",))},
		)
		result = get_available_time_slots(self.request(["A", "B"], resource_id="48213"), "ORG-1", repository)

		self.assertEqual(result.slots, [AvailableTimeSlot(780, 1020)])
		self.assertEqual(result.total_eligible_volunteers, 1)
		self.assertEqual(repository.appointment_queries, [("B", None), (None, "48213")])

	def test_unknown_pet_has_no_restrictions(self, mock_logger):
		repository = InMemoryRepository(schedules={"A": working("A", 540, 1020)})
		result = get_available_time_slots(self.request(["A"], resource_id="00000"), "ORG-1", repository)

		self.assertEqual(result.slots, [AvailableTimeSlot(540, 1020)])
		self.assertIsNone(result.note)

	def test_pet_visit_blocks_the_pet(self, mock_logger):
		repository = InMemoryRepository(
			schedules={"A": working("A", 540, 1020)},
			resources={"48213": ResourceProfile("48213")},
			appointments=[visit(10, 11, volunteer_id="Z", resource_id="48213")],
		)
		result = get_available_time_slots(self.request(["A"], resource_id="48213"), "ORG-1", repository)

		self.assertEqual(result.slots, [AvailableTimeSlot(540, 600), AvailableTimeSlot(660, 1020)])

	def test_missing_volunteer_is_logged_and_counted(self, mock_logger):
		logger = MagicMock()
		mock_logger.return_value = logger
		repository = InMemoryRepository(schedules={"A": working("A", 540, 720)})

		result = get_available_time_slots(self.request(["A", "GHOST"]), "ORG-1", repository)

		self.assertEqual(result.total_eligible_volunteers, 2)
		self.assertEqual(result.volunteers_resolved, 1)
		self.assertEqual(result.slots, [AvailableTimeSlot(540, 720)])
		logger.warning.assert_called_once_with("Volunteer GHOST not found")

	def test_no_volunteer_resolved(self, mock_logger):
		result = get_available_time_slots(self.request(["GHOST"]), "ORG-1", InMemoryRepository())

		self.assertEqual(result.slots, [])
		self.assertEqual(result.total_eligible_volunteers, 1)
		self.assertEqual(result.volunteers_resolved, 0)


if __name__ == "__main__":
	unittest.main()
