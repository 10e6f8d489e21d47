"""
Scheduling Services Module

This module provides the availability engine for adoption visits:
- Time utilities (time_utils.py)
- Constraint sources (constraints.py)
- Eligibility filter (eligibility.py)
- Busy-count grid and pet blocking (grid.py)
- Free-minute selection (free_minutes.py)
- Slot grouping (slots.py)
- Orchestration (availability.py)
- Data access (repository.py, frappe_repository.py)
"""
