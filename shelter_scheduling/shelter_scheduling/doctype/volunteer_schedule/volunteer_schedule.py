# Copyright (c) 2026, Shelter Portal Developers and contributors
# For license information, please see license.txt

"""
Volunteer Schedule DocType

Weekly work schedule of a volunteer plus date-specific exceptions:
- unavailable: blocks the whole day
- modified: replaces the day's hours with start_time - end_time
- available: informational, no effect on the recurring schedule
"""

import frappe
from frappe import _
from frappe.model.document import Document
from typing import Dict, List

import pytz

from shelter_scheduling.shelter_scheduling.scheduling.constraints import (
	WorkScheduleEntry,
	validate_schedule_exception_rows,
	validate_work_schedule_rows,
)
from shelter_scheduling.shelter_scheduling.scheduling.errors import InvalidArgument
from shelter_scheduling.shelter_scheduling.scheduling.time_utils import minutes_to_time


class VolunteerSchedule(Document):
	"""
	Volunteer Schedule with validations.

	Validations:
	- volunteer and organization required
	- Each work schedule row: valid day, start_time < end_time
	- Each exception row: valid date and type; modified needs both times
	- At most one exception per date
	- Warn on overlapping work schedule rows (allowed, e.g. split shifts)
	"""

	def validate(self) -> None:
		self._validate_required_fields()
		self._validate_timezone()
		entries = self._validate_work_schedule()
		self._validate_schedule_exceptions()
		self._warn_overlapping_entries(entries)

	def _validate_required_fields(self) -> None:
		if not self.volunteer:
			frappe.throw(_("Volunteer is required"))

		if not self.organization:
			frappe.throw(_("Organization is required"))

	def _validate_timezone(self) -> None:
		if self.timezone and self.timezone not in pytz.all_timezones_set:
			frappe.throw(_(f"Invalid timezone: {self.timezone}"))

	def _validate_work_schedule(self) -> List[WorkScheduleEntry]:
		try:
			return validate_work_schedule_rows(self.work_schedule)
		except InvalidArgument as e:
			frappe.throw(_(f"Work Schedule: {e}"))

	def _validate_schedule_exceptions(self) -> None:
		try:
			validate_schedule_exception_rows(self.schedule_exceptions)
		except InvalidArgument as e:
			frappe.throw(_(f"Schedule Exceptions: {e}"))

	def _warn_overlapping_entries(self, entries: List[WorkScheduleEntry]) -> None:
		"""
		Overlapping rows on one day are harmless (the union is used), but
		usually a typo, so only inform.
		"""
		by_day: Dict[str, List[WorkScheduleEntry]] = {}
		for entry in entries:
			by_day.setdefault(entry.day.value, []).append(entry)

		for day, day_entries in by_day.items():
			day_entries.sort(key=lambda entry: entry.start_minute)
			for current, following in zip(day_entries, day_entries[1:]):
				if current.end_minute > following.start_minute:
					frappe.msgprint(
						_(f"{day.title()}: {minutes_to_time(current.start_minute)}-{minutes_to_time(current.end_minute)} "
						  f"overlaps {minutes_to_time(following.start_minute)}-{minutes_to_time(following.end_minute)}"),
						indicator="orange",
						alert=True
					)
