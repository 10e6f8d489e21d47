"""
Scheduling API Validators

Input sanitization for the availability endpoint. Semantic checks (empty
lists, date parsing, duration range) live in AvailabilityRequest.
"""

import re
from typing import Any, List

import frappe
from frappe import _


def validate_docname(name: str, field_name: str = "name") -> str:
    """
    Validate a document name (ID).

    Ensures the name is not too long and doesn't contain injection patterns.

    Args:
        name: Document name to validate
        field_name: Name of field for error messages

    Returns:
        str: Validated document name

    Raises:
        frappe.ValidationError: If name is invalid
    """
    if not name:
        frappe.throw(_(f"{field_name} is required"), frappe.ValidationError)

    name = str(name).strip()

    # Length check
    if len(name) > 140:
        frappe.throw(_(f"{field_name} is too long"), frappe.ValidationError)

    # Block obvious injection attempts
    dangerous_patterns = [
        r"<script",
        r"javascript:",
        r"onclick",
        r"onerror",
        r"SELECT\s+",
        r"INSERT\s+",
        r"UPDATE\s+",
        r"DELETE\s+",
        r"DROP\s+",
        r"UNION\s+",
        r"--",
        r";",
    ]

    name_lower = name.lower()
    for pattern in dangerous_patterns:
        if re.search(pattern, name_lower, re.IGNORECASE):
            frappe.throw(_(f"Invalid {field_name}"), frappe.ValidationError)

    return name


def parse_volunteer_ids(value: Any) -> List[str]:
    """
    Accept volunteer ids as a list or a JSON-encoded list (form posts).

    Returns:
        list[str]: Sanitized ids; an empty list is returned as-is so the
        request validation reports it

    Raises:
        frappe.ValidationError: If the value is not a list or an id is invalid
    """
    if value in (None, ""):
        return []

    if isinstance(value, str):
        try:
            value = frappe.parse_json(value)
        except ValueError:
            frappe.throw(_("volunteer_ids must be a JSON array"), frappe.ValidationError)

    if not isinstance(value, (list, tuple)):
        frappe.throw(_("volunteer_ids must be a JSON array"), frappe.ValidationError)

    return [validate_docname(volunteer_id, "volunteer_id") for volunteer_id in value]
