"""
Constraint Sources

Typed representations of everything that can block a minute:
- Recurring weekly work schedule entries (per volunteer)
- Date-specific schedule exceptions (per volunteer)
- Pet exceptions (weekly blackouts per pet) and pet allow-lists
- Existing appointments (adoption visits)

Records coming from storage are loosely typed (dicts or Frappe rows).
They are validated here, at the data-access boundary, so the grid stages
only ever see well-formed values.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from .errors import InvalidArgument
from .time_utils import Weekday, parse_date, time_to_minutes

ACTIVE_APPOINTMENT_STATUSES = frozenset({
	"confirmed",
	"volunteer-assigned",
	"in-progress",
	"pending-confirmation",
})


class ExceptionKind(str, Enum):
	UNAVAILABLE = "unavailable"
	AVAILABLE = "available"
	MODIFIED = "modified"

	@classmethod
	def parse(cls, value: Any) -> "ExceptionKind":
		if isinstance(value, cls):
			return value
		try:
			return cls(str(value).strip().lower())
		except ValueError:
			raise InvalidArgument(f"Invalid exception type: {value!r}")


def _get(record: Any, key: str, default: Any = None) -> Any:
	"""Reads a field from a dict or a Frappe row object."""
	if isinstance(record, dict):
		return record.get(key, default)
	return getattr(record, key, default)


def _is_blank(value: Any) -> bool:
	"""Unset field. Midnight from a Time column is timedelta(0) and counts as set."""
	return value is None or (isinstance(value, str) and not value.strip())


def _parse_range(record: Any, what: str) -> Tuple[int, int]:
	start_value = _get(record, "start_time")
	end_value = _get(record, "end_time")

	if _is_blank(start_value) or _is_blank(end_value):
		raise InvalidArgument(f"{what}: start_time and end_time are required")

	start = time_to_minutes(start_value)
	end = time_to_minutes(end_value, allow_end_of_day=True)

	if start >= end:
		raise InvalidArgument(f"{what}: start_time must be before end_time")

	return start, end


@dataclass(frozen=True)
class WorkScheduleEntry:
	"""One recurring availability window of a volunteer on one weekday."""

	day: Weekday
	start_minute: int
	end_minute: int

	@classmethod
	def from_record(cls, record: Any) -> "WorkScheduleEntry":
		day = Weekday.parse(_get(record, "day"))
		start, end = _parse_range(record, f"Work schedule ({day.value})")
		return cls(day=day, start_minute=start, end_minute=end)

	def covers(self, minute: int) -> bool:
		return self.start_minute <= minute < self.end_minute


@dataclass(frozen=True)
class ScheduleException:
	"""
	Date-specific override of a volunteer's schedule.

	- unavailable: the whole day is blocked
	- modified: availability is restricted to [start_minute, end_minute)
	- available: no effect beyond the recurring schedule
	"""

	date: date
	kind: ExceptionKind
	start_minute: Optional[int] = None
	end_minute: Optional[int] = None

	@classmethod
	def from_record(cls, record: Any) -> "ScheduleException":
		raw_date = _get(record, "exception_date") or _get(record, "date")
		exception_date = parse_date(raw_date, "exception_date")
		kind = ExceptionKind.parse(_get(record, "exception_type") or _get(record, "type"))

		has_start = not _is_blank(_get(record, "start_time"))
		has_end = not _is_blank(_get(record, "end_time"))

		start = end = None
		if has_start and has_end:
			start, end = _parse_range(record, f"Schedule exception ({exception_date})")
		elif kind == ExceptionKind.MODIFIED and (has_start or has_end):
			raise InvalidArgument(
				f"Schedule exception ({exception_date}): modified hours need both start_time and end_time"
			)

		return cls(date=exception_date, kind=kind, start_minute=start, end_minute=end)

	@property
	def has_window(self) -> bool:
		return (
			self.kind == ExceptionKind.MODIFIED
			and self.start_minute is not None
			and self.end_minute is not None
		)

	def blocks(self, minute: int) -> bool:
		if self.kind == ExceptionKind.UNAVAILABLE:
			return True
		if self.has_window:
			return minute < self.start_minute or minute >= self.end_minute
		return False


@dataclass(frozen=True)
class ResourceException:
	"""Weekly blackout of a pet, independent of any volunteer."""

	day: Weekday
	start_minute: int
	end_minute: int
	reason: str = ""

	@classmethod
	def from_record(cls, record: Any) -> "ResourceException":
		day = Weekday.parse(_get(record, "day"))
		start, end = _parse_range(record, f"Pet exception ({day.value})")
		return cls(day=day, start_minute=start, end_minute=end, reason=_get(record, "reason") or "")


@dataclass(frozen=True)
class ExistingAppointment:
	"""An adoption visit that may conflict with new bookings."""

	start: datetime
	end: datetime
	status: str
	volunteer_id: Optional[str] = None
	resource_id: Optional[str] = None

	@property
	def is_active(self) -> bool:
		return (self.status or "").lower() in ACTIVE_APPOINTMENT_STATUSES


@dataclass(frozen=True)
class VolunteerSchedule:
	"""
	A volunteer's recurring schedule and exceptions.

	Exceptions are keyed by date so there is at most one per date.
	"""

	volunteer_id: str
	entries: Tuple[WorkScheduleEntry, ...] = ()
	exceptions: Mapping[date, ScheduleException] = field(default_factory=lambda: MappingProxyType({}))
	duplicate_dates: Tuple[date, ...] = ()

	@classmethod
	def build(
		cls,
		volunteer_id: str,
		entries: Iterable[WorkScheduleEntry] = (),
		exceptions: Iterable[ScheduleException] = ()
	) -> "VolunteerSchedule":
		"""
		Builds a schedule keeping the first exception seen for each date.
		Later exceptions for the same date are reported in duplicate_dates.
		"""
		by_date = {}
		duplicates = []
		for exception in exceptions:
			if exception.date in by_date:
				duplicates.append(exception.date)
				continue
			by_date[exception.date] = exception

		return cls(
			volunteer_id=volunteer_id,
			entries=tuple(entries),
			exceptions=MappingProxyType(by_date),
			duplicate_dates=tuple(duplicates),
		)

	def entries_for(self, weekday: Weekday) -> List[WorkScheduleEntry]:
		return [entry for entry in self.entries if entry.day == weekday]

	def exception_for(self, target_date: date) -> Optional[ScheduleException]:
		return self.exceptions.get(target_date)

	def is_scheduled(self, minute: int, weekday: Weekday, target_date: date) -> bool:
		"""
		True if the minute is inside the volunteer's working window for the
		day: the modified hours when a modified exception applies, otherwise
		the recurring entries for the weekday.
		"""
		exception = self.exception_for(target_date)
		if exception is not None and exception.has_window:
			return exception.start_minute <= minute < exception.end_minute

		return any(entry.covers(minute) for entry in self.entries_for(weekday))

	def is_exception_blocked(self, minute: int, target_date: date) -> bool:
		exception = self.exception_for(target_date)
		return exception is not None and exception.blocks(minute)


@dataclass(frozen=True)
class ResourceProfile:
	"""A pet's allow-list of volunteers and weekly blackouts."""

	resource_id: str
	assigned_volunteers: Tuple[str, ...] = ()
	exceptions: Tuple[ResourceException, ...] = ()

	@property
	def has_allow_list(self) -> bool:
		return len(self.assigned_volunteers) > 0

	def exceptions_for(self, weekday: Weekday) -> List[ResourceException]:
		return [exception for exception in self.exceptions if exception.day == weekday]


# ===================
# Write-side validation (shared with doctype controllers)
# ===================

def validate_work_schedule_rows(rows: Iterable[Any]) -> List[WorkScheduleEntry]:
	"""
	Parses work schedule rows.

	Raises:
		InvalidArgument: on the first invalid row (message names the row)
	"""
	entries = []
	for idx, row in enumerate(rows or [], 1):
		try:
			entries.append(WorkScheduleEntry.from_record(row))
		except InvalidArgument as e:
			raise InvalidArgument(f"Row {idx}: {e}")
	return entries


def validate_schedule_exception_rows(rows: Iterable[Any]) -> List[ScheduleException]:
	"""
	Parses schedule exception rows and rejects two exceptions on one date.

	Raises:
		InvalidArgument: on the first invalid row or duplicated date
	"""
	exceptions = []
	seen = {}
	for idx, row in enumerate(rows or [], 1):
		try:
			exception = ScheduleException.from_record(row)
		except InvalidArgument as e:
			raise InvalidArgument(f"Row {idx}: {e}")

		if exception.date in seen:
			raise InvalidArgument(
				f"Row {idx}: another exception already exists for {exception.date} (row {seen[exception.date]})"
			)
		seen[exception.date] = idx
		exceptions.append(exception)
	return exceptions


def validate_pet_exception_rows(rows: Iterable[Any]) -> List[ResourceException]:
	"""
	Parses pet exception rows.

	Raises:
		InvalidArgument: on the first invalid row
	"""
	exceptions = []
	for idx, row in enumerate(rows or [], 1):
		try:
			exceptions.append(ResourceException.from_record(row))
		except InvalidArgument as e:
			raise InvalidArgument(f"Row {idx}: {e}")
	return exceptions
