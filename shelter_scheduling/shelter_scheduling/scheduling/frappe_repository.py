"""
Frappe Availability Repository

Reads constraint sources from the shelter doctypes:
- Volunteer Schedule (Work Schedule Entry, Schedule Exception)
- Shelter Pet (Pet Assigned Volunteer, Pet Exception)
- Adoption Visit
"""

from datetime import datetime
from typing import Any, List, Optional

import frappe
import pytz
from frappe.utils import get_datetime, get_system_timezone

from .constraints import (
	ACTIVE_APPOINTMENT_STATUSES,
	ExistingAppointment,
	ResourceProfile,
	ScheduleException,
	VolunteerSchedule,
	validate_pet_exception_rows,
	validate_work_schedule_rows,
)
from .errors import DependencyError, InvalidArgument
from .repository import AvailabilityRepository


class FrappeAvailabilityRepository(AvailabilityRepository):
	"""Repository backed by the Frappe ORM."""

	def __init__(self, system_timezone: Optional[str] = None):
		self._system_timezone = system_timezone

	@property
	def system_tz(self) -> pytz.tzinfo.BaseTzInfo:
		return pytz.timezone(self._system_timezone or get_system_timezone() or "UTC")

	def get_volunteer_schedule(
		self,
		volunteer_id: str,
		organization: str
	) -> Optional[VolunteerSchedule]:
		try:
			name = frappe.db.get_value(
				"Volunteer Schedule",
				{"volunteer": volunteer_id, "organization": organization},
				"name"
			)
			if not name:
				return None
			doc = frappe.get_doc("Volunteer Schedule", name)
		except frappe.DoesNotExistError:
			return None
		except Exception as e:
			raise DependencyError(f"Error reading schedule of volunteer {volunteer_id}: {str(e)}") from e

		try:
			entries = validate_work_schedule_rows(doc.get("work_schedule") or [])
			exceptions = [
				ScheduleException.from_record(row)
				for row in (doc.get("schedule_exceptions") or [])
			]
		except InvalidArgument as e:
			raise InvalidArgument(f"Volunteer {volunteer_id}: {e}")

		schedule = VolunteerSchedule.build(volunteer_id, entries, exceptions)

		if schedule.duplicate_dates:
			frappe.logger("shelter_scheduling").warning(
				f"Volunteer {volunteer_id} has more than one exception on "
				f"{', '.join(str(d) for d in schedule.duplicate_dates)}; using the first one"
			)

		return schedule

	def get_resource_profile(self, resource_id: str) -> Optional[ResourceProfile]:
		try:
			if not frappe.db.exists("Shelter Pet", resource_id):
				return None
			doc = frappe.get_doc("Shelter Pet", resource_id)
		except frappe.DoesNotExistError:
			return None
		except Exception as e:
			raise DependencyError(f"Error reading pet {resource_id}: {str(e)}") from e

		assigned = tuple(dict.fromkeys(
			row.get("volunteer")
			for row in (doc.get("assigned_volunteers") or [])
			if row.get("volunteer")
		))

		try:
			exceptions = validate_pet_exception_rows(doc.get("pet_exceptions") or [])
		except InvalidArgument as e:
			raise InvalidArgument(f"Pet {resource_id}: {e}")

		return ResourceProfile(
			resource_id=str(resource_id),
			assigned_volunteers=assigned,
			exceptions=tuple(exceptions),
		)

	def get_active_appointments(
		self,
		organization: str,
		day_start: datetime,
		day_end: datetime,
		volunteer_id: Optional[str] = None,
		resource_id: Optional[str] = None
	) -> List[ExistingAppointment]:
		"""
		Overlap condition: start < day_end AND end > day_start.
		"""
		filters = {
			"organization": organization,
			"status": ["in", sorted(ACTIVE_APPOINTMENT_STATUSES)],
			"start_datetime": ["<", self._to_db_datetime(day_end)],
			"end_datetime": [">", self._to_db_datetime(day_start)],
		}
		if volunteer_id:
			filters["volunteer"] = volunteer_id
		if resource_id:
			filters["pet"] = resource_id

		try:
			rows = frappe.get_all(
				"Adoption Visit",
				filters=filters,
				fields=["name", "volunteer", "pet", "start_datetime", "end_datetime", "status"],
				order_by="start_datetime asc"
			)
		except Exception as e:
			raise DependencyError(f"Error reading adoption visits: {str(e)}") from e

		appointments = []
		for row in rows:
			if not row.get("start_datetime") or not row.get("end_datetime"):
				continue
			appointments.append(ExistingAppointment(
				start=self._from_db_datetime(row.get("start_datetime")),
				end=self._from_db_datetime(row.get("end_datetime")),
				status=row.get("status"),
				volunteer_id=row.get("volunteer"),
				resource_id=row.get("pet"),
			))

		return appointments

	def _to_db_datetime(self, value: datetime) -> datetime:
		"""Aware datetime -> naive datetime in the site timezone (as stored)."""
		if value.tzinfo is None:
			return value
		return value.astimezone(self.system_tz).replace(tzinfo=None)

	def _from_db_datetime(self, value: Any) -> datetime:
		"""Stored naive datetime (site timezone) -> aware datetime."""
		value = get_datetime(value)
		if value.tzinfo is None:
			return self.system_tz.localize(value)
		return value
