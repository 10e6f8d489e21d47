"""
Free-Minute Selector

A minute is free when the shared counter leaves room for somebody AND some
volunteer is individually within their working window and not blocked by
their own exception. The counter alone cannot tell "everyone busy for
different reasons" from "someone free", so the direct check always runs.
"""

from datetime import date
from typing import Iterable, List, Optional

from .constraints import VolunteerSchedule
from .grid import BusyGrid
from .time_utils import MINUTES_PER_DAY, day_of_week


def has_available_volunteer(
	minute: int,
	schedules: Iterable[Optional[VolunteerSchedule]],
	target_date: date
) -> bool:
	weekday = day_of_week(target_date)
	for schedule in schedules:
		if schedule is None:
			continue
		if not schedule.is_scheduled(minute, weekday, target_date):
			continue
		if schedule.is_exception_blocked(minute, target_date):
			continue
		return True
	return False


def select_free_minutes(
	grid: BusyGrid,
	schedules: Iterable[Optional[VolunteerSchedule]],
	target_date: date
) -> List[int]:
	"""
	Returns the free minutes of the day, ascending.

	Args:
		grid: busy-count grid of the eligible volunteers
		schedules: schedules of the eligible volunteers
		target_date: day being computed
	"""
	schedules = list(schedules)
	free_minutes = []

	for minute in range(MINUTES_PER_DAY):
		if grid.is_saturated(minute):
			continue
		if has_available_volunteer(minute, schedules, target_date):
			free_minutes.append(minute)

	return free_minutes
