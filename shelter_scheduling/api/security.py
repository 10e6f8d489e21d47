"""
Security Utilities for the Scheduling API

Provides rate limiting and resolution of the caller's organization.
"""

import frappe
from frappe import _
from frappe.utils import cint

from shelter_scheduling.shelter_scheduling.scheduling.errors import NotFound, PreconditionFailed


# ===================
# Rate Limiting
# ===================

def check_rate_limit(action: str, limit: int = 30, seconds: int = 60) -> None:
    """
    Check rate limit for an action by IP address.

    Uses Frappe's cache (Redis) to track request counts per IP.

    Args:
        action: Identifier for the action being rate limited
        limit: Maximum number of requests allowed
        seconds: Time window in seconds

    Raises:
        frappe.TooManyRequestsError: If rate limit exceeded
    """
    ip = get_client_ip()
    cache_key = f"rate_limit:shelter_scheduling:{action}:{ip}"

    current = cint(frappe.cache.get_value(cache_key) or 0)

    if current >= limit:
        frappe.log_error(
            title=_("Rate Limit Exceeded"),
            message=f"IP: {ip}, Action: {action}, Limit: {limit}/{seconds}s"
        )
        frappe.throw(
            _("Too many requests. Please wait a moment and try again."),
            frappe.TooManyRequestsError
        )

    frappe.cache.set_value(cache_key, current + 1, expires_in_sec=seconds)


def get_client_ip() -> str:
    """
    Get the real client IP address, handling proxies.

    Returns:
        str: Client IP address
    """
    forwarded_for = frappe.request.headers.get('X-Forwarded-For', '')
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded_for.split(',')[0].strip()

    real_ip = frappe.request.headers.get('X-Real-IP', '')
    if real_ip:
        return real_ip.strip()

    return frappe.request.remote_addr or 'unknown'


# ===================
# Organization Context
# ===================

def get_current_organization(user: str = None) -> str:
    """
    Resolve the organization of the logged-in team member.

    Args:
        user: User id, defaults to the session user

    Returns:
        str: Organization identifier

    Raises:
        NotFound: If the user has no Shelter Team Member record
        PreconditionFailed: If the team member has no organization
    """
    user = user or frappe.session.user

    member = frappe.db.get_value(
        "Shelter Team Member",
        {"user": user},
        ["name", "organization"],
        as_dict=True
    )

    if not member:
        raise NotFound(f"User {user} not found")

    if not member.get("organization"):
        raise PreconditionFailed("User is not associated with an organization")

    return member.get("organization")
