# Copyright (c) 2026, Shelter Portal Developers and Contributors
# See license.txt

"""
Tests for Shelter Pet DocType
"""

import frappe
from frappe.tests.utils import FrappeTestCase


class TestShelterPet(FrappeTestCase):
	"""Tests for Shelter Pet DocType."""

	def make_pet(self, assigned_volunteers=None, pet_exceptions=None):
		return frappe.get_doc({
			"doctype": "Shelter Pet",
			"pet_id": "TEST-48213",
			"pet_name": "Biscuit",
			"organization": "ORG-TEST",
			"assigned_volunteers": assigned_volunteers or [],
			"pet_exceptions": pet_exceptions or [],
		})

	def test_valid_pet(self):
		pet = self.make_pet(
			assigned_volunteers=[{"volunteer": "TM-TEST-0001"}, {"volunteer": "TM-TEST-0002"}],
			pet_exceptions=[{"day": "monday", "start_time": "10:00:00", "end_time": "11:00:00", "reason": "Feeding"}],
		)
		pet.validate()

	def test_volunteer_assigned_twice(self):
		pet = self.make_pet(assigned_volunteers=[{"volunteer": "TM-TEST-0001"}, {"volunteer": "TM-TEST-0001"}])
		with self.assertRaises(frappe.ValidationError):
			pet.validate()

	def test_exception_start_must_precede_end(self):
		pet = self.make_pet(pet_exceptions=[{"day": "monday", "start_time": "11:00:00", "end_time": "10:00:00"}])
		with self.assertRaises(frappe.ValidationError):
			pet.validate()

	def tearDown(self):
		"""Clean up after tests."""
		frappe.db.rollback()
