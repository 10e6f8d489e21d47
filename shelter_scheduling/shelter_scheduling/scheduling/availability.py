"""
Availability Service

Computes the windows in which an adoption visit of a given duration can be
booked on one day, considering:
- Volunteer work schedules and schedule exceptions
- Existing adoption visits (per volunteer and per pet)
- Pet allow-lists and weekly pet exceptions
- The target timezone

Pipeline:
	eligibility -> busy grid -> free minutes -> slot grouping
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

import frappe
import pytz

from .constraints import ExistingAppointment, ResourceProfile, VolunteerSchedule
from .eligibility import filter_eligible_volunteers
from .errors import InvalidArgument
from .free_minutes import select_free_minutes
from .grid import build_busy_grid
from .repository import AvailabilityRepository
from .slots import AvailableTimeSlot, group_into_time_slots
from .time_utils import (
	DEFAULT_TIMEZONE,
	MINUTES_PER_DAY,
	day_bounds,
	format_date,
	get_timezone,
	parse_date,
)

DEFAULT_DURATION_MINUTES = 60


@dataclass(frozen=True)
class AvailabilityRequest:
	volunteer_ids: tuple
	target_date: date
	resource_id: Optional[str] = None
	duration_minutes: int = DEFAULT_DURATION_MINUTES
	timezone: str = DEFAULT_TIMEZONE

	@classmethod
	def from_payload(
		cls,
		volunteer_ids: Any,
		target_date: Any,
		resource_id: Any = None,
		duration_minutes: Any = None,
		timezone: Optional[str] = None,
		default_duration: int = DEFAULT_DURATION_MINUTES,
		default_timezone: str = DEFAULT_TIMEZONE
	) -> "AvailabilityRequest":
		"""
		Validates and normalizes a request.

		Raises:
			InvalidArgument: empty volunteer list, missing/invalid date,
				invalid duration or unknown timezone
		"""
		if not volunteer_ids or not isinstance(volunteer_ids, (list, tuple)):
			raise InvalidArgument("volunteerIds is required and must be a non-empty array")

		ids = []
		for volunteer_id in volunteer_ids:
			if volunteer_id is None or not str(volunteer_id).strip():
				raise InvalidArgument("volunteerIds must not contain empty values")
			ids.append(str(volunteer_id).strip())

		parsed_date = parse_date(target_date)

		if duration_minutes in (None, ""):
			duration = default_duration
		elif isinstance(duration_minutes, bool):
			raise InvalidArgument(f"Invalid durationMinutes: {duration_minutes!r}")
		else:
			try:
				duration = int(duration_minutes)
			except (TypeError, ValueError):
				raise InvalidArgument(f"Invalid durationMinutes: {duration_minutes!r}")
			if isinstance(duration_minutes, float) and duration_minutes != duration:
				raise InvalidArgument(f"Invalid durationMinutes: {duration_minutes!r}")

		if duration <= 0 or duration > MINUTES_PER_DAY:
			raise InvalidArgument(f"durationMinutes must be between 1 and {MINUTES_PER_DAY}")

		tz_name = (timezone or default_timezone).strip()
		get_timezone(tz_name)

		resource = str(resource_id).strip() if resource_id not in (None, "") else None

		return cls(
			volunteer_ids=tuple(ids),
			target_date=parsed_date,
			resource_id=resource or None,
			duration_minutes=duration,
			timezone=tz_name,
		)


@dataclass(frozen=True)
class AvailabilityResult:
	slots: List[AvailableTimeSlot]
	date: str
	total_eligible_volunteers: int
	volunteers_resolved: int
	note: Optional[str] = None

	def as_dict(self) -> Dict[str, Any]:
		return {
			"success": True,
			"slots": [slot.as_dict() for slot in self.slots],
			"date": self.date,
			"total_eligible_volunteers": self.total_eligible_volunteers,
			"volunteers_resolved": self.volunteers_resolved,
			"note": self.note,
		}


def compute_available_slots(
	volunteer_ids: Sequence[str],
	schedules: Mapping[str, Optional[VolunteerSchedule]],
	target_date: date,
	duration_minutes: int,
	tz: pytz.tzinfo.BaseTzInfo,
	volunteer_appointments: Optional[Mapping[str, Sequence[ExistingAppointment]]] = None,
	resource: Optional[ResourceProfile] = None,
	resource_appointments: Sequence[ExistingAppointment] = ()
) -> List[AvailableTimeSlot]:
	"""
	Pure availability computation for one day (no I/O).

	Args:
		volunteer_ids: eligible volunteers
		schedules: volunteer_id -> schedule (missing = not found)
		target_date: day to compute
		duration_minutes: minimum slot length
		tz: target timezone
		volunteer_appointments: volunteer_id -> active appointments
		resource: pet profile (weekly exceptions)
		resource_appointments: active appointments of the pet

	Returns:
		list[AvailableTimeSlot]: ordered, non-overlapping
	"""
	grid = build_busy_grid(
		volunteer_ids,
		schedules,
		target_date,
		tz,
		volunteer_appointments=volunteer_appointments,
		resource=resource,
		resource_appointments=resource_appointments,
	)

	eligible_schedules = [schedules.get(volunteer_id) for volunteer_id in volunteer_ids]
	free_minutes = select_free_minutes(grid, eligible_schedules, target_date)

	return group_into_time_slots(free_minutes, duration_minutes)


def get_available_time_slots(
	request: AvailabilityRequest,
	organization: str,
	repository: AvailabilityRepository
) -> AvailabilityResult:
	"""
	Computes the bookable adoption-visit windows for one day.

	Algorithm:
		1. Read the pet profile (if a pet was requested)
		2. Filter volunteers by the pet allow-list; stop early if none remain
		3. Read each eligible volunteer's schedule (missing ones are skipped
		   with a warning and count as busy all day)
		4. Read active appointments for the day: per volunteer and per pet
		5. Run the pure pipeline

	Returns:
		AvailabilityResult

	Raises:
		DependencyError: if a read fails
	"""
	logger = frappe.logger("shelter_scheduling")
	tz = get_timezone(request.timezone)
	date_str = format_date(request.target_date)

	# 1. Pet profile
	resource = None
	if request.resource_id:
		resource = repository.get_resource_profile(request.resource_id)

	# 2. Eligibility
	eligibility = filter_eligible_volunteers(request.volunteer_ids, resource)
	if not eligibility.volunteer_ids:
		return AvailabilityResult(
			slots=[],
			date=date_str,
			total_eligible_volunteers=0,
			volunteers_resolved=0,
			note=eligibility.note,
		)

	# 3. Volunteer schedules
	schedules: Dict[str, Optional[VolunteerSchedule]] = {}
	for volunteer_id in eligibility.volunteer_ids:
		schedule = repository.get_volunteer_schedule(volunteer_id, organization)
		if schedule is None:
			logger.warning(f"Volunteer {volunteer_id} not found")
			continue
		schedules[volunteer_id] = schedule

	# 4. Appointments for the day
	day_start, day_end = day_bounds(request.target_date, tz)

	volunteer_appointments = {
		volunteer_id: repository.get_active_appointments(
			organization, day_start, day_end, volunteer_id=volunteer_id
		)
		for volunteer_id in schedules
	}

	resource_appointments = []
	if request.resource_id:
		resource_appointments = repository.get_active_appointments(
			organization, day_start, day_end, resource_id=request.resource_id
		)

	# 5. Pipeline
	slots = compute_available_slots(
		eligibility.volunteer_ids,
		schedules,
		request.target_date,
		request.duration_minutes,
		tz,
		volunteer_appointments=volunteer_appointments,
		resource=resource,
		resource_appointments=resource_appointments,
	)

	return AvailabilityResult(
		slots=slots,
		date=date_str,
		total_eligible_volunteers=len(eligibility.volunteer_ids),
		volunteers_resolved=len(schedules),
	)
