# Copyright (c) 2026, Shelter Portal Developers and contributors
# For license information, please see license.txt

from frappe.model.document import Document


class PetException(Document):
	pass
