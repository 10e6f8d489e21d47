"""
Availability Repository

Defines the read-only data-access interface the availability engine needs.
The Frappe implementation lives in frappe_repository.py.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from .constraints import ExistingAppointment, ResourceProfile, VolunteerSchedule


class AvailabilityRepository(ABC):
	"""
	Base interface for availability data sources.

	Implementations return validated value objects and raise
	DependencyError when the underlying store fails.
	"""

	@abstractmethod
	def get_volunteer_schedule(
		self,
		volunteer_id: str,
		organization: str
	) -> Optional[VolunteerSchedule]:
		"""
		Returns the volunteer's work schedule and exceptions.

		Returns:
			VolunteerSchedule, or None if the volunteer is not found
		"""
		pass

	@abstractmethod
	def get_resource_profile(self, resource_id: str) -> Optional[ResourceProfile]:
		"""
		Returns the pet's allow-list and weekly exceptions.

		Returns:
			ResourceProfile, or None if the pet has no record (no restrictions)
		"""
		pass

	@abstractmethod
	def get_active_appointments(
		self,
		organization: str,
		day_start: datetime,
		day_end: datetime,
		volunteer_id: Optional[str] = None,
		resource_id: Optional[str] = None
	) -> List[ExistingAppointment]:
		"""
		Returns active appointments of the organization overlapping
		[day_start, day_end), optionally narrowed to a volunteer or a pet.
		"""
		pass
