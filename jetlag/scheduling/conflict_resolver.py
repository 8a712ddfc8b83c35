"""
Conflict resolution for a day's activities.

Enforces two practical constraints on each day:
1. Nothing ends after the daily ceiling (21:30)
2. No two activities overlap

Passes repeat until nothing changes (bounded by the activity count). Sleep
is anchored: overlap resolution moves other activities around it. A sleep
window that runs past midnight blocks the rest of the evening and its
morning tail; activities in the tail start at wake instead. A caffeine
cutoff is only ever moved earlier.

A day the passes cannot settle is repacked: activities are placed into the
free time around sleep in priority order, each as close to its planned
time as possible. Light and melatonin are placed before meals, caffeine,
exercise and naps, and only medium and low priority activities are dropped
when nothing is left.

Records all modifications for transparency/debugging.
"""

import logging
from dataclasses import dataclass

from ..activities import retime
from ..config import DAILY_CEILING, MIN_ACTIVITY_DURATION, MIN_LIGHT_ACTIVITY_DURATION, MINUTES_PER_DAY
from ..time_math import minutes_to_time, time_to_minutes
from ..types import PRIORITY_RANK, Activity, ScheduleAdjustment, TimeWindow

logger = logging.getLogger(__name__)

LIGHT_ACTIVITY_TYPES = {"bright_light", "avoid_light"}
DROPPABLE_PRIORITIES = {"medium", "low"}


@dataclass
class _Slot:
    """An activity laid out on a single day's minute line."""

    activity: Activity
    start: int
    end: int  # Past MINUTES_PER_DAY for windows that wrap midnight
    original_window: str

    @property
    def anchored(self) -> bool:
        return self.activity.type == "sleep"

    @property
    def is_cutoff(self) -> bool:
        """Caffeine markers: moving one later would weaken the advice."""
        return self.activity.type == "caffeine"

    @property
    def wraps(self) -> bool:
        return self.end > MINUTES_PER_DAY

    @property
    def duration(self) -> int:
        return self.end - self.start

    @property
    def min_duration(self) -> int:
        if self.activity.type in LIGHT_ACTIVITY_TYPES:
            return MIN_LIGHT_ACTIVITY_DURATION
        return MIN_ACTIVITY_DURATION

    def intervals(self) -> list[tuple[int, int]]:
        """Occupied minutes on the day line, split at midnight."""
        if self.wraps:
            return [(self.start, MINUTES_PER_DAY), (0, self.end - MINUTES_PER_DAY)]
        return [(self.start, self.end)]


def _to_slot(activity: Activity) -> _Slot:
    start = time_to_minutes(activity.time_window.start)
    end = time_to_minutes(activity.time_window.end)
    if end < start:
        end += MINUTES_PER_DAY
    return _Slot(
        activity=activity,
        start=start,
        end=end,
        original_window=f"{activity.time_window.start}-{activity.time_window.end}",
    )


def _to_activity(slot: _Slot) -> Activity:
    window = TimeWindow(start=minutes_to_time(slot.start), end=minutes_to_time(slot.end))
    if window == slot.activity.time_window:
        return slot.activity
    return retime(slot.activity, window)


def _sort_key(slot: _Slot) -> tuple[int, int]:
    return (slot.start, PRIORITY_RANK[slot.activity.priority])


def _free_gaps(busy: list[tuple[int, int]], ceiling: int) -> list[tuple[int, int]]:
    """Free intervals between midnight and the ceiling."""
    gaps = []
    cursor = 0
    for start, end in sorted(busy):
        if start > cursor:
            gaps.append((cursor, min(start, ceiling)))
        cursor = max(cursor, end)
        if cursor >= ceiling:
            break
    if cursor < ceiling:
        gaps.append((cursor, ceiling))
    return [(start, end) for start, end in gaps if end > start]


class ConflictResolver:
    """
    Make each day's activities fit the ceiling and not overlap.

    One resolver can be reused across the days of a schedule; adjustments
    accumulate across calls.
    """

    def __init__(self, ceiling: str = DAILY_CEILING) -> None:
        self.ceiling = time_to_minutes(ceiling)
        self.adjustments: list[ScheduleAdjustment] = []
        self._pending: list[ScheduleAdjustment] = []

    def resolve_day(self, activities: list[Activity]) -> list[Activity]:
        """
        Resolve one day's activities.

        Args:
            activities: Planned activities (not modified)

        Returns:
            New list, sorted by start time, satisfying the ceiling and
            no-overlap constraints
        """
        self._pending = []
        slots = [_to_slot(activity) for activity in activities]

        if not self._settle(slots):
            self._pending = []
            slots = self._repack(activities)

        self.adjustments.extend(self._pending)

        slots.sort(key=_sort_key)
        return [_to_activity(slot) for slot in slots]

    def _settle(self, slots: list[_Slot]) -> bool:
        """Run passes until nothing changes. False if the bound is reached first."""
        max_passes = len(slots) + 1
        for _ in range(max_passes):
            changed = self._apply_ceiling(slots)
            changed |= self._clear_sleep_tail(slots)
            changed |= self._resolve_overlaps(slots)
            if not changed:
                return True

        logger.debug(
            "Pairwise resolution did not settle after %d passes (%d activities), repacking",
            max_passes,
            len(slots),
        )
        return False

    def _record(self, slot: _Slot, action: str, reason: str) -> None:
        self._pending.append(
            ScheduleAdjustment(
                activity_id=slot.activity.id,
                activity_type=slot.activity.type,
                original_window=slot.original_window,
                action_taken=action,
                reason=reason,
            )
        )

    def _apply_ceiling(self, slots: list[_Slot]) -> bool:
        """Cut activities back to the ceiling, sliding short ones earlier."""
        changed = False
        for slot in slots:
            if slot.end <= self.ceiling:
                continue
            # Overnight sleep ends the next morning
            if slot.anchored and slot.wraps:
                continue

            slot.end = self.ceiling
            if slot.end - slot.start >= slot.min_duration:
                self._record(slot, "shortened", f"Ends after {minutes_to_time(self.ceiling)}")
            else:
                slot.start = self.ceiling - slot.min_duration
                self._record(slot, "moved", f"Ends after {minutes_to_time(self.ceiling)}")
            changed = True
        return changed

    def _clear_sleep_tail(self, slots: list[_Slot]) -> bool:
        """Move activities out of the after-midnight part of overnight sleep."""
        changed = False
        for sleep in slots:
            if not (sleep.anchored and sleep.wraps):
                continue
            wake = sleep.end - MINUTES_PER_DAY
            for slot in slots:
                if slot.anchored or slot.start >= wake:
                    continue
                duration = slot.duration
                slot.start = wake
                slot.end = wake + duration
                self._record(slot, "moved", "During sleep")
                changed = True
        return changed

    def _limit_for(self, slot: _Slot, slots: list[_Slot]) -> int:
        """Latest end a shifted activity may have: the ceiling or the next bedtime."""
        limit = self.ceiling
        for other in slots:
            if other.anchored and other is not slot and other.start >= slot.start:
                limit = min(limit, other.start)
        return limit

    def _resolve_overlaps(self, slots: list[_Slot]) -> bool:
        changed = False
        slots.sort(key=_sort_key)

        for a, b in zip(slots, slots[1:]):
            overlap = a.end - b.start
            if overlap <= 0:
                continue
            changed = True

            # Prefer pushing the later activity back
            if not (b.anchored or b.is_cutoff) and b.end + overlap <= self._limit_for(b, slots):
                b.start += overlap
                b.end += overlap
                self._record(b, "moved", f"Overlaps {a.activity.type}")
                continue

            if a.anchored or b.is_cutoff:
                duration = b.duration
                b.end = a.start
                b.start = max(0, b.end - duration)
                b.end = b.start + duration
                self._record(b, "moved", f"Overlaps {a.activity.type}")
                continue

            if b.start - a.start >= a.min_duration:
                a.end = b.start
                self._record(a, "shortened", f"Overlaps {b.activity.type}")
            else:
                duration = a.duration
                a.start = max(0, b.start - duration)
                a.end = a.start + duration
                self._record(a, "moved", f"Overlaps {b.activity.type}")

        return changed

    def _repack(self, activities: list[Activity]) -> list[_Slot]:
        """
        Place a crowded day's activities into the free time around sleep.

        Sleep stays put. Everything else is placed in priority order (then
        by planned start) at the free position nearest its planned start,
        shortened to its minimum when no gap holds its full length. A
        medium or low priority activity with no room left is dropped.
        """
        slots = [_to_slot(activity) for activity in activities]
        busy: list[tuple[int, int]] = []
        placed: list[_Slot] = []

        for slot in slots:
            if not slot.anchored:
                continue
            if not slot.wraps and slot.end > self.ceiling:
                slot.end = self.ceiling
                self._record(slot, "shortened", f"Ends after {minutes_to_time(self.ceiling)}")
            busy.extend(slot.intervals())
            placed.append(slot)

        movable = sorted(
            (slot for slot in slots if not slot.anchored),
            key=lambda slot: (PRIORITY_RANK[slot.activity.priority], slot.start),
        )
        for slot in movable:
            spot = self._find_spot(slot, busy)
            if spot is None:
                if slot.activity.priority not in DROPPABLE_PRIORITIES:
                    logger.warning("No free time left for %s", slot.activity.id)
                self._record(slot, "removed", "No conflict-free slot before the daily ceiling")
                continue

            start, end = spot
            if (start, end) != (slot.start, slot.end):
                action = "shortened" if end - start < slot.duration else "moved"
                self._record(slot, action, "Day too full for the planned time")
            slot.start, slot.end = start, end
            busy.append((start, end))
            placed.append(slot)

        return placed

    def _find_spot(self, slot: _Slot, busy: list[tuple[int, int]]) -> tuple[int, int] | None:
        """Free (start, end) nearest the planned start; cutoffs prefer earlier."""
        gaps = _free_gaps(busy, self.ceiling)
        planned = slot.start

        for length in (slot.duration, slot.min_duration):
            best = None
            for gap_start, gap_end in gaps:
                if gap_end - gap_start < length:
                    continue
                start = min(max(planned, gap_start), gap_end - length)
                key = (slot.is_cutoff and start > planned, abs(start - planned), start)
                if best is None or key < best[0]:
                    best = (key, start)
            if best is not None:
                return best[1], best[1] + length

        return None
