# Copyright (c) 2026, Shelter Portal Developers and contributors
# For license information, please see license.txt

"""
Adoption Visit DocType

A booked visit of an adopter with a pet, shown by a volunteer. Visits in an
active status block the volunteer and the pet for availability purposes.
"""

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import get_datetime

VISIT_STATUSES = (
	"pending-shelter-setup",
	"pending-confirmation",
	"confirmed",
	"volunteer-assigned",
	"in-progress",
	"completed",
	"adopted",
	"cancelled",
)


class AdoptionVisit(Document):
	"""
	Adoption Visit with validations.

	Validations:
	- organization, start_datetime and end_datetime required
	- start_datetime < end_datetime
	- status is a known value
	"""

	def validate(self) -> None:
		self._validate_required_fields()
		self._validate_datetime_consistency()
		self._validate_status()

	def _validate_required_fields(self) -> None:
		if not self.organization:
			frappe.throw(_("Organization is required"))

		if not self.start_datetime or not self.end_datetime:
			frappe.throw(_("Start and End are required"))

	def _validate_datetime_consistency(self) -> None:
		if get_datetime(self.start_datetime) >= get_datetime(self.end_datetime):
			frappe.throw(_("Start must be before End"))

	def _validate_status(self) -> None:
		if not self.status:
			self.status = "pending-shelter-setup"

		if self.status not in VISIT_STATUSES:
			frappe.throw(_(f"Invalid status: {self.status}"))
