# Copyright (c) 2026, Shelter Portal Developers and contributors
# For license information, please see license.txt

"""
Shelter Team Member DocType

Links a user to the organization whose data they can see.
"""

import frappe
from frappe import _
from frappe.model.document import Document


class ShelterTeamMember(Document):
	def validate(self) -> None:
		if not self.user:
			frappe.throw(_("User is required"))

		existing = frappe.db.get_value(
			"Shelter Team Member",
			{"user": self.user, "name": ["!=", self.name or ""]},
			"name"
		)
		if existing:
			frappe.throw(_(f"{self.user} is already a team member ({existing})"))
