"""
Shelter Scheduling API

Structure:
    api/
    ├── __init__.py              # This file
    ├── availability.py          # Availability endpoint (whitelisted)
    ├── security.py              # Rate limiting, organization context
    └── validators.py            # Input sanitization

Usage:
    frappe.call("shelter_scheduling.api.availability.get_available_time_slots", ...)
"""
