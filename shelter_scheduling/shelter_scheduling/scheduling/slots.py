"""
Slot Grouper

Turns free minutes into bookable windows:
- Consecutive free minutes are merged into maximal runs
- Runs shorter than the requested duration are dropped
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from .time_utils import minutes_to_time


@dataclass(frozen=True)
class AvailableTimeSlot:
	"""A bookable window within one day, [start_minute, end_minute)."""

	start_minute: int
	end_minute: int

	@property
	def duration_minutes(self) -> int:
		return self.end_minute - self.start_minute

	@property
	def start(self) -> str:
		return minutes_to_time(self.start_minute)

	@property
	def end(self) -> str:
		return minutes_to_time(self.end_minute)

	def as_dict(self) -> Dict[str, Any]:
		return {
			"start": self.start,
			"end": self.end,
			"duration_minutes": self.duration_minutes,
		}


def group_into_time_slots(
	free_minutes: Sequence[int],
	duration_minutes: int
) -> List[AvailableTimeSlot]:
	"""
	Groups consecutive free minutes into slots.

	Args:
		free_minutes: free minute indices, ascending
		duration_minutes: minimum length of a slot

	Returns:
		list[AvailableTimeSlot]: one slot per maximal run at least
		duration_minutes long, ordered by start, never overlapping

	Algorithm:
		1. Walk the minutes keeping the current run [run_start, run_end)
		2. On a gap, emit the run if long enough and start a new one
		3. Emit the last run if long enough
	"""
	if not free_minutes:
		return []

	slots = []
	run_start = free_minutes[0]
	run_end = run_start + 1

	for minute in free_minutes[1:]:
		if minute == run_end:
			run_end = minute + 1
			continue

		if run_end - run_start >= duration_minutes:
			slots.append(AvailableTimeSlot(run_start, run_end))
		run_start = minute
		run_end = minute + 1

	if run_end - run_start >= duration_minutes:
		slots.append(AvailableTimeSlot(run_start, run_end))

	return slots
