"""
Time Utilities

Conversions between wall-clock values and the minute-of-day domain [0, 1440),
weekday derivation, date parsing (frappe.utils) and timezone conversion
(pytz).
"""

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Tuple, Union

import pytz
from frappe.utils import get_time, getdate

from .errors import InvalidArgument, MalformedTimeError

MINUTES_PER_DAY = 1440

DEFAULT_TIMEZONE = "America/New_York"

_END_OF_DAY = ("24:00", "24:00:00")


class Weekday(str, Enum):
	MONDAY = "monday"
	TUESDAY = "tuesday"
	WEDNESDAY = "wednesday"
	THURSDAY = "thursday"
	FRIDAY = "friday"
	SATURDAY = "saturday"
	SUNDAY = "sunday"

	@classmethod
	def parse(cls, value: Union["Weekday", str]) -> "Weekday":
		"""Accepts "monday", "Monday" or a Weekday."""
		if isinstance(value, cls):
			return value
		try:
			return cls(str(value).strip().lower())
		except ValueError:
			raise InvalidArgument(f"Invalid day of week: {value!r}")


# date.weekday(): Monday == 0
_WEEKDAYS = (
	Weekday.MONDAY,
	Weekday.TUESDAY,
	Weekday.WEDNESDAY,
	Weekday.THURSDAY,
	Weekday.FRIDAY,
	Weekday.SATURDAY,
	Weekday.SUNDAY,
)


def time_to_minutes(
	value: Union[str, time, timedelta],
	allow_end_of_day: bool = False
) -> int:
	"""
	Converts a wall-clock value to minutes since midnight.

	Args:
		value: "HH:MM" / "HH:MM:SS" string, datetime.time, or timedelta
			since midnight (how Frappe returns Time columns)
		allow_end_of_day: accept "24:00" as 1440 (for range end bounds)

	Returns:
		int: minute of day

	Raises:
		MalformedTimeError: if the value cannot be parsed or is out of range
	"""
	if isinstance(value, time):
		return value.hour * 60 + value.minute

	if isinstance(value, timedelta):
		total = int(value.total_seconds()) // 60
		if total == MINUTES_PER_DAY and allow_end_of_day:
			return total
		if total < 0 or total >= MINUTES_PER_DAY:
			raise MalformedTimeError(f"Time out of range: {value}")
		return total

	if not isinstance(value, str):
		raise MalformedTimeError(f"Cannot convert {type(value).__name__} to time")

	value = value.strip()
	if allow_end_of_day and value in _END_OF_DAY:
		return MINUTES_PER_DAY

	# get_time also reads bare numbers ("9") as dates
	if ":" not in value:
		raise MalformedTimeError(f"Invalid time format: {value!r}. Use HH:MM")

	try:
		parsed = get_time(value)
	except Exception:
		raise MalformedTimeError(f"Invalid time: {value!r}. Use HH:MM")

	return parsed.hour * 60 + parsed.minute


def minutes_to_time(minutes: int) -> str:
	"""
	Converts minutes since midnight to a zero-padded "HH:MM" string.
	1440 renders as "24:00" (end of a slot that runs until midnight).
	"""
	if isinstance(minutes, bool) or not isinstance(minutes, int):
		raise MalformedTimeError(f"Minute of day must be an int, got {minutes!r}")
	if minutes < 0 or minutes > MINUTES_PER_DAY:
		raise MalformedTimeError(f"Minute of day out of range: {minutes}")

	return f"{minutes // 60:02d}:{minutes % 60:02d}"


def day_of_week(target_date: date) -> Weekday:
	return _WEEKDAYS[target_date.weekday()]


def format_date(target_date: date) -> str:
	return target_date.strftime("%Y-%m-%d")


def parse_date(
	value: Union[date, datetime, str, None],
	field_name: str = "targetDate"
) -> date:
	"""
	Parses a calendar date.

	Args:
		value: date, datetime (its date part is used) or a date string
			Frappe can parse ("YYYY-MM-DD")
		field_name: name of field for error messages

	Raises:
		InvalidArgument: if missing or unparseable
	"""
	if value is None or value == "":
		raise InvalidArgument(f"{field_name} is required")

	if isinstance(value, datetime):
		return value.date()
	if isinstance(value, date):
		return value

	if not isinstance(value, str) or not value.strip():
		raise InvalidArgument(f"Invalid {field_name}: {value!r}. Use YYYY-MM-DD")

	# getdate reports parse errors through frappe.throw
	try:
		parsed = getdate(value.strip())
	except Exception:
		raise InvalidArgument(f"Invalid {field_name}: {value!r}. Use YYYY-MM-DD")

	if not parsed:
		raise InvalidArgument(f"Invalid {field_name}: {value!r}. Use YYYY-MM-DD")

	return parsed


def get_timezone(name: str) -> pytz.tzinfo.BaseTzInfo:
	"""
	Resolves an IANA timezone name.

	Raises:
		InvalidArgument: if the zone is unknown
	"""
	try:
		return pytz.timezone(name)
	except pytz.UnknownTimeZoneError:
		raise InvalidArgument(f"Unknown timezone: {name!r}")


def day_bounds(target_date: date, tz: pytz.tzinfo.BaseTzInfo) -> Tuple[datetime, datetime]:
	"""
	Returns the aware [start, end) of target_date in tz. On DST transition
	days the window is 23 or 25 hours long.
	"""
	start = tz.localize(datetime.combine(target_date, time.min))
	end = tz.localize(datetime.combine(target_date + timedelta(days=1), time.min))
	return start, end


def minute_of_day(
	timestamp: datetime,
	target_date: date,
	tz: pytz.tzinfo.BaseTzInfo
) -> int:
	"""
	Reads the wall-clock minute of a timestamp in the target timezone,
	relative to target_date.

	Aware timestamps are converted to tz first. Naive timestamps are taken
	as wall clock in tz already. A timestamp that falls on an earlier local
	date clamps to 0, a later one to 1440.
	"""
	if timestamp.tzinfo is not None:
		local = timestamp.astimezone(tz)
	else:
		local = timestamp

	local_date = local.date()
	if local_date < target_date:
		return 0
	if local_date > target_date:
		return MINUTES_PER_DAY

	return local.hour * 60 + local.minute
