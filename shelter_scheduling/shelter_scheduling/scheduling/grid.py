"""
Availability Grid

Builds the per-minute busy-count array for one calendar day.

Each eligible volunteer adds at most 1 to a minute (their own busy mask).
Pet exceptions and pet-scoped appointments block the minute for everyone at
once by adding the full eligible-volunteer count.
"""

from datetime import date
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import pytz

from .constraints import ExceptionKind, ExistingAppointment, ResourceProfile, VolunteerSchedule
from .time_utils import MINUTES_PER_DAY, Weekday, day_of_week, minute_of_day


def appointment_minutes(
	appointment: ExistingAppointment,
	target_date: date,
	tz: pytz.tzinfo.BaseTzInfo
) -> Tuple[int, int]:
	"""
	Half-open [start, end) minute range an appointment covers on target_date.

	Start is clamped to [0, 1439] and end to [0, 1440]. An appointment that
	starts after the target day (in tz) covers nothing.
	"""
	start = minute_of_day(appointment.start, target_date, tz)
	if start >= MINUTES_PER_DAY:
		return 0, 0

	end = minute_of_day(appointment.end, target_date, tz)
	return max(0, min(MINUTES_PER_DAY - 1, start)), max(0, min(MINUTES_PER_DAY, end))


def volunteer_busy_mask(
	schedule: Optional[VolunteerSchedule],
	target_date: date,
	appointments: Iterable[ExistingAppointment] = (),
	tz: Optional[pytz.tzinfo.BaseTzInfo] = None
) -> List[bool]:
	"""
	Computes the minutes a volunteer is blocked on target_date.

	Algorithm:
		1. Recurring entries for the weekday
		2. Exception for the exact date (at most one)
		3. Resolution, first match wins:
			- unavailable, or no entries and no exception: whole day busy
			- modified with both times: busy outside [start, end)
			- otherwise: busy where no entry covers the minute
		4. Active appointments of the volunteer on that day
		5. Exception blocking again, for minutes not covered yet

	A volunteer without a record (schedule is None) is busy all day.

	Returns:
		list[bool]: 1440 flags, True = busy
	"""
	if schedule is None:
		return [True] * MINUTES_PER_DAY

	weekday = day_of_week(target_date)
	entries = schedule.entries_for(weekday)
	exception = schedule.exception_for(target_date)

	if (exception is not None and exception.kind == ExceptionKind.UNAVAILABLE) or (not entries and exception is None):
		return [True] * MINUTES_PER_DAY

	if exception is not None and exception.has_window:
		mask = [
			minute < exception.start_minute or minute >= exception.end_minute
			for minute in range(MINUTES_PER_DAY)
		]
	else:
		mask = [True] * MINUTES_PER_DAY
		for entry in entries:
			for minute in range(entry.start_minute, entry.end_minute):
				mask[minute] = False

	tz = tz or pytz.UTC
	for appointment in appointments:
		if not appointment.is_active:
			continue
		start, end = appointment_minutes(appointment, target_date, tz)
		for minute in range(start, end):
			mask[minute] = True

	if exception is not None:
		for minute in range(MINUTES_PER_DAY):
			if not mask[minute] and exception.blocks(minute):
				mask[minute] = True

	return mask


class BusyGrid:
	"""
	Shared busy-count array for one day.

	counts[m] >= volunteer_count means nobody can be free at minute m.
	"""

	def __init__(self, volunteer_count: int):
		self.volunteer_count = volunteer_count
		self.counts = [0] * MINUTES_PER_DAY

	def add_volunteer_mask(self, mask: Sequence[bool]) -> None:
		for minute, busy in enumerate(mask):
			if busy:
				self.counts[minute] += 1

	def block_for_everyone(self, start: int, end: int) -> None:
		"""Adds the full volunteer count to every minute in [start, end)."""
		for minute in range(max(0, start), min(MINUTES_PER_DAY, end)):
			self.counts[minute] += self.volunteer_count

	def apply_resource_exceptions(self, resource: ResourceProfile, weekday: Weekday) -> None:
		for exception in resource.exceptions_for(weekday):
			self.block_for_everyone(exception.start_minute, exception.end_minute)

	def apply_resource_appointments(
		self,
		appointments: Iterable[ExistingAppointment],
		target_date: date,
		tz: pytz.tzinfo.BaseTzInfo
	) -> None:
		for appointment in appointments:
			if not appointment.is_active:
				continue
			start, end = appointment_minutes(appointment, target_date, tz)
			self.block_for_everyone(start, end)

	def is_saturated(self, minute: int) -> bool:
		return self.counts[minute] >= self.volunteer_count


def build_busy_grid(
	volunteer_ids: Sequence[str],
	schedules: Mapping[str, Optional[VolunteerSchedule]],
	target_date: date,
	tz: pytz.tzinfo.BaseTzInfo,
	volunteer_appointments: Optional[Mapping[str, Sequence[ExistingAppointment]]] = None,
	resource: Optional[ResourceProfile] = None,
	resource_appointments: Iterable[ExistingAppointment] = ()
) -> BusyGrid:
	"""
	Builds the busy-count grid for the eligible volunteers.

	Args:
		volunteer_ids: eligible volunteers (their count is the saturation level)
		schedules: volunteer_id -> schedule; missing ids are busy all day
		target_date: day being computed
		tz: target timezone for appointment timestamps
		volunteer_appointments: volunteer_id -> that volunteer's appointments
		resource: pet profile for weekly blackouts
		resource_appointments: appointments of the pet with any volunteer

	Returns:
		BusyGrid
	"""
	volunteer_appointments = volunteer_appointments or {}
	grid = BusyGrid(len(volunteer_ids))

	for volunteer_id in volunteer_ids:
		mask = volunteer_busy_mask(
			schedules.get(volunteer_id),
			target_date,
			volunteer_appointments.get(volunteer_id, ()),
			tz,
		)
		grid.add_volunteer_mask(mask)

	if resource is not None:
		grid.apply_resource_exceptions(resource, day_of_week(target_date))

	grid.apply_resource_appointments(resource_appointments, target_date, tz)

	return grid
