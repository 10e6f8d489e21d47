"""
Availability API Endpoints

Whitelisted functions for the booking screens. Requires a logged-in team
member; results are scoped to the member's organization.
"""

from typing import Any, Dict, Optional

import frappe
from frappe import _
from frappe.utils import cint, get_system_timezone

from shelter_scheduling.shelter_scheduling.scheduling.availability import (
    DEFAULT_DURATION_MINUTES,
    AvailabilityRequest,
    get_available_time_slots as compute_time_slots,
)
from shelter_scheduling.shelter_scheduling.scheduling.errors import (
    DependencyError,
    InvalidArgument,
    NotFound,
    PreconditionFailed,
)
from shelter_scheduling.shelter_scheduling.scheduling.frappe_repository import FrappeAvailabilityRepository
from shelter_scheduling.shelter_scheduling.scheduling.time_utils import DEFAULT_TIMEZONE

from .security import check_rate_limit, get_current_organization
from .validators import parse_volunteer_ids, validate_docname


def get_default_timezone() -> str:
    """
    Organization timezone from site config.

    "system timezone" resolves to the site's timezone.
    """
    tz_name = frappe.conf.get("shelter_scheduling_default_timezone") or DEFAULT_TIMEZONE
    if tz_name == "system timezone":
        tz_name = get_system_timezone()
    return tz_name


def get_default_duration() -> int:
    return cint(frappe.conf.get("shelter_scheduling_default_duration")) or DEFAULT_DURATION_MINUTES


@frappe.whitelist(methods=['GET', 'POST'])
def get_available_time_slots(
    volunteer_ids: Any,
    target_date: str,
    pet_id: Optional[str] = None,
    duration_minutes: Optional[int] = None,
    timezone: Optional[str] = None
) -> Dict[str, Any]:
    """
    Returns the windows in which an adoption visit can be booked.

    Rate limited: shelter_scheduling_rate_limit requests per minute per IP
    (default 30).

    Args:
        volunteer_ids: JSON array of Shelter Team Member ids
        target_date: date (YYYY-MM-DD)
        pet_id: Shelter Pet id (optional)
        duration_minutes: minimum visit length (default 60)
        timezone: IANA timezone (default from site config)

    Returns:
        dict: {
            "success": True,
            "slots": [{"start": "09:00", "end": "12:00", "duration_minutes": 180}, ...],
            "date": "2026-01-19",
            "total_eligible_volunteers": 2,
            "volunteers_resolved": 2,
            "note": None
        }

    Example:
        ```javascript
        frappe.call({
            method: "shelter_scheduling.api.availability.get_available_time_slots",
            args: {
                volunteer_ids: ["TM-0001", "TM-0002"],
                target_date: "2026-01-19",
                pet_id: "48213",
                duration_minutes: 60
            },
            callback: function(r) {
                console.log(r.message.slots);
            }
        });
        ```
    """
    check_rate_limit(
        "get_available_time_slots",
        limit=cint(frappe.conf.get("shelter_scheduling_rate_limit")) or 30,
        seconds=60
    )

    volunteer_ids = parse_volunteer_ids(volunteer_ids)
    if pet_id:
        pet_id = validate_docname(pet_id, "pet_id")
    if timezone == "system timezone":
        timezone = get_system_timezone()

    try:
        request = AvailabilityRequest.from_payload(
            volunteer_ids,
            target_date,
            resource_id=pet_id,
            duration_minutes=duration_minutes,
            timezone=timezone,
            default_duration=get_default_duration(),
            default_timezone=get_default_timezone(),
        )
        organization = get_current_organization()
        result = compute_time_slots(request, organization, FrappeAvailabilityRepository())

    except InvalidArgument as e:
        frappe.throw(_(str(e)), frappe.ValidationError)
    except NotFound as e:
        frappe.throw(_(str(e)), frappe.DoesNotExistError)
    except PreconditionFailed as e:
        frappe.throw(_(str(e)), frappe.PermissionError)
    except DependencyError as e:
        frappe.log_error(f"Error in get_available_time_slots: {str(e)}", "API Error")
        frappe.throw(_("Failed to calculate available time slots"))

    return result.as_dict()
