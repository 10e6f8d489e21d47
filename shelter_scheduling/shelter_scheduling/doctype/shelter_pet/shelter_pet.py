# Copyright (c) 2026, Shelter Portal Developers and contributors
# For license information, please see license.txt

"""
Shelter Pet DocType

Scheduling rules of a pet:
- assigned_volunteers: who may show the pet (empty = anyone)
- pet_exceptions: weekly windows when the pet can't be visited
"""

import frappe
from frappe import _
from frappe.model.document import Document

from shelter_scheduling.shelter_scheduling.scheduling.constraints import validate_pet_exception_rows
from shelter_scheduling.shelter_scheduling.scheduling.errors import InvalidArgument


class ShelterPet(Document):
	"""
	Shelter Pet with validations.

	Validations:
	- pet_id and organization required
	- No volunteer assigned twice
	- Each exception row: valid day, start_time < end_time
	"""

	def validate(self) -> None:
		self._validate_required_fields()
		self._validate_assigned_volunteers()
		self._validate_pet_exceptions()

	def _validate_required_fields(self) -> None:
		if not self.pet_id:
			frappe.throw(_("Pet ID is required"))

		if not self.organization:
			frappe.throw(_("Organization is required"))

	def _validate_assigned_volunteers(self) -> None:
		seen = set()
		for idx, row in enumerate(self.assigned_volunteers or [], 1):
			if not row.volunteer:
				frappe.throw(_(f"Row {idx}: Volunteer is required"))
			if row.volunteer in seen:
				frappe.throw(_(f"Row {idx}: {row.volunteer} is already assigned"))
			seen.add(row.volunteer)

	def _validate_pet_exceptions(self) -> None:
		try:
			validate_pet_exception_rows(self.pet_exceptions)
		except InvalidArgument as e:
			frappe.throw(_(f"Pet Exceptions: {e}"))
