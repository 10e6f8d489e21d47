"""
Eligibility Filter

Narrows the requested volunteers to those allowed to show the pet.
"""

from typing import Iterable, List, NamedTuple, Optional

from .constraints import ResourceProfile

NO_SUITABLE_VOLUNTEERS = "No suitable volunteers available for this pet"


class EligibilityResult(NamedTuple):
	volunteer_ids: List[str]
	note: Optional[str] = None


def filter_eligible_volunteers(
	volunteer_ids: Iterable[str],
	resource: Optional[ResourceProfile] = None
) -> EligibilityResult:
	"""
	Filters volunteers against the pet's allow-list.

	Args:
		volunteer_ids: ids requested by the caller (order is kept)
		resource: pet profile, or None when no pet was requested or the
			pet has no record (no restrictions)

	Returns:
		EligibilityResult: eligible ids, plus a note when the allow-list
		excludes every requested volunteer
	"""
	requested = list(dict.fromkeys(volunteer_ids))

	if resource is None or not resource.has_allow_list:
		return EligibilityResult(requested)

	allowed = set(resource.assigned_volunteers)
	eligible = [volunteer_id for volunteer_id in requested if volunteer_id in allowed]

	if not eligible:
		return EligibilityResult([], NO_SUITABLE_VOLUNTEERS)

	return EligibilityResult(eligible)
