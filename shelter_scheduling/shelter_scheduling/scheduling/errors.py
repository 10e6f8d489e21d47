"""
Scheduling Errors

Exception types raised by the availability engine. The API layer maps them
to Frappe exceptions (see api/availability.py).
"""


class SchedulingError(Exception):
	"""Base class for availability engine errors."""
	pass


class InvalidArgument(SchedulingError):
	"""Missing or malformed required input."""
	pass


class MalformedTimeError(InvalidArgument):
	"""A time-of-day value could not be parsed or is out of range."""
	pass


class NotFound(SchedulingError):
	"""The caller's organization context cannot be resolved."""
	pass


class PreconditionFailed(SchedulingError):
	"""The caller is authenticated but has no organization."""
	pass


class DependencyError(SchedulingError):
	"""An external read failed (storage, network)."""
	pass
